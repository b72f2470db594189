"""
Dish availability rules.

A dish is "featured" on a single calendar day through ``availableDate`` and
may also recur on weekdays through ``weeklySchedule``. Day boundaries are
local midnights.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple

from pydantic import TypeAdapter, ValidationError

from core.exceptions import BadRequestError
from models.dish import DIETARY_OPTIONS, ScheduleEntry
from core.query_filter import split_csv

INVALID_DAY_MESSAGE = "Le jour de la semaine doit être un nombre entre 0 (dimanche) et 6 (samedi)"
INVALID_SCHEDULE_MESSAGE = "Données de programmation invalides"

_schedule_adapter = TypeAdapter(List[ScheduleEntry])


def local_midnight(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """[today 00:00, tomorrow 00:00) around ``now``."""
    today = local_midnight(now)
    return today, today + timedelta(days=1)


def yesterday_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """[yesterday 00:00, today 00:00) around ``now``."""
    today = local_midnight(now)
    return today - timedelta(days=1), today


def available_today_filter(now: datetime) -> Dict[str, Any]:
    start, end = day_bounds(now)
    return {"availableDate": {"$gte": start, "$lt": end}, "isAvailable": True}


def parse_day_of_week(raw: Any) -> int:
    try:
        day = int(str(raw).strip())
    except (TypeError, ValueError):
        raise BadRequestError(INVALID_DAY_MESSAGE)
    if not 0 <= day <= 6:
        raise BadRequestError(INVALID_DAY_MESSAGE)
    return day


def available_on_weekday_filter(day_of_week: int) -> Dict[str, Any]:
    # both conditions must hold on the same schedule entry
    return {
        "weeklySchedule": {"$elemMatch": {"dayOfWeek": day_of_week, "isAvailable": True}},
        "isAvailable": True,
    }


def validate_weekly_schedule(payload: Any) -> List[Dict[str, Any]]:
    """
    Validate a ``{"schedule": [...]}`` body. The whole batch is rejected if
    one entry is invalid. Entries without a boolean ``isAvailable`` are
    available.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("schedule"), list):
        raise BadRequestError(INVALID_SCHEDULE_MESSAGE)
    for entry in payload["schedule"]:
        if not isinstance(entry, dict):
            raise BadRequestError(INVALID_SCHEDULE_MESSAGE)
    try:
        entries = _schedule_adapter.validate_python(payload["schedule"])
    except ValidationError:
        raise BadRequestError(INVALID_DAY_MESSAGE)
    return [entry.to_document() for entry in entries]


def normalize_dietary_options(values: List[str]):
    """
    ``dietaryOptions`` filter: repeated keys, single value or CSV. Unknown
    options are dropped; nothing left means no filter at all.
    """
    options = []
    for option in split_csv(values):
        if option in DIETARY_OPTIONS and option not in options:
            options.append(option)
    if not options:
        return None
    return {"$in": options}
