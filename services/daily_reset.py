from datetime import datetime
from typing import Optional

from pymongo.errors import PyMongoError

from core.scheduler import DailyJobScheduler, local_now
from services.availability import yesterday_bounds
from utils.logger import get_logger

logger = get_logger("Daily_Reset")

RESET_SUCCESS_MESSAGE = "Réinitialisation quotidienne effectuée avec succès"


def reset_filter(now: datetime) -> dict:
    start, end = yesterday_bounds(now)
    return {"availableDate": {"$gte": start, "$lt": end}, "isAvailable": True}


async def reset_daily_dishes(dishes_collection, now: Optional[datetime] = None) -> dict:
    """
    Mark yesterday's available dishes as unavailable.

    Only the [yesterday 00:00, today 00:00) window is targeted and only
    dishes still available, so a second run modifies nothing. Storage
    errors are reported in the result, never raised.
    """
    now = now or local_now()
    try:
        result = await dishes_collection.update_many(reset_filter(now), {"$set": {"isAvailable": False}})
    except PyMongoError as e:
        logger.exception("Daily dish reset failed")
        return {"success": False, "error": str(e)}

    logger.info(f"Daily dish reset done, {result.modified_count} dishes updated", extra={"modified": result.modified_count})
    return {"success": True, "message": RESET_SUCCESS_MESSAGE, "modifiedCount": result.modified_count}


def build_daily_reset_scheduler(mongo, hour: int = 1, minute: int = 0) -> DailyJobScheduler:
    async def job():
        return await reset_daily_dishes(mongo.dishes_collection)
    return DailyJobScheduler(job, hour=hour, minute=minute, name="daily-dish-reset")
