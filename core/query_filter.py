"""
Shared listing pipeline for restaurants, dishes and users.

A query string such as ``?name=pizz&price[lte]=12&sort=-price&page=2`` is
turned into a ``QueryPlan``: the Mongo filter, the projection, the sort spec
and the pagination bounds. ``run_list_query`` executes the page query and the
total count as two independent reads.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING

from core.exceptions import QueryFilterError
from utils.logger import get_logger

logger = get_logger("Query_Filter")

RESERVED_PARAMS = ("select", "sort", "page", "limit")
COMPARISON_OPERATORS = ("gt", "gte", "lt", "lte", "in")
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
DEFAULT_SORT = [("createdAt", DESCENDING)]

_BRACKET_KEY = re.compile(r"^(?P<field>[^\[\]]+)\[(?P<op>[^\[\]]*)\]$")

Converter = Callable[[str], Any]
# receives every raw value given for the field, returns the filter value or None to skip it
Normalizer = Callable[[List[str]], Optional[Any]]


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.strip())


def split_csv(values: Iterable[str]) -> List[str]:
    out = []
    for value in values:
        out.extend(part.strip() for part in str(value).split(",") if part.strip())
    return out


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


@dataclass
class QueryPlan:
    filter: Dict[str, Any] = field(default_factory=dict)
    projection: Optional[Dict[str, int]] = None
    sort: List[Tuple[str, int]] = field(default_factory=lambda: list(DEFAULT_SORT))
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def pagination(self, total: int) -> Dict[str, Dict[str, int]]:
        pagination = {}
        if self.page * self.limit < total:
            pagination["next"] = {"page": self.page + 1, "limit": self.limit}
        if self.page > 1:
            pagination["prev"] = {"page": self.page - 1, "limit": self.limit}
        return pagination


class QueryFilterTranslator:
    """
    Parameterized over the resource: ``field_types`` coerces string values
    (``price`` -> float, ``restaurant`` -> ObjectId ...), ``normalizers`` own
    multi-value fields entirely, ``extra_reserved`` lists keys consumed
    elsewhere (e.g. geospatial params) and ``hidden_fields`` are never
    projected.
    """

    def __init__(
        self,
        field_types: Optional[Dict[str, Converter]] = None,
        normalizers: Optional[Dict[str, Normalizer]] = None,
        extra_reserved: Iterable[str] = (),
        hidden_fields: Iterable[str] = (),
    ):
        self.field_types = dict(field_types or {})
        self.normalizers = dict(normalizers or {})
        self.reserved = set(RESERVED_PARAMS) | set(extra_reserved)
        self.hidden_fields = tuple(hidden_fields)

    def translate(self, items: Iterable[Tuple[str, str]]) -> QueryPlan:
        grouped: Dict[str, List[str]] = {}
        for key, value in items:
            grouped.setdefault(key, []).append(value)

        return QueryPlan(
            filter=self.build_filter(grouped),
            projection=self.build_projection(grouped.get("select", [None])[-1]),
            sort=self.build_sort(grouped.get("sort", [None])[-1]),
            page=_positive_int(grouped.get("page", [None])[-1], DEFAULT_PAGE),
            limit=_positive_int(grouped.get("limit", [None])[-1], DEFAULT_LIMIT),
        )

    def build_filter(self, grouped: Dict[str, List[str]]) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        normalized_values: Dict[str, List[str]] = {}

        for key, values in grouped.items():
            if key in self.reserved:
                continue
            match = _BRACKET_KEY.match(key)
            name = match.group("field") if match else key

            if name in self.normalizers:
                normalized_values.setdefault(name, []).extend(values)
                continue

            if match:
                op = match.group("op")
                if op not in COMPARISON_OPERATORS:
                    raise QueryFilterError(f"Opérateur de filtre invalide: {key}")
                condition = query.setdefault(name, {})
                if not isinstance(condition, dict) or "$regex" in condition:
                    raise QueryFilterError(f"Filtre invalide pour le champ {name}")
                if op == "in":
                    condition["$in"] = [self._coerce(name, v) for v in split_csv(values)]
                else:
                    condition[f"${op}"] = self._coerce(name, values[-1])
                continue

            if name in query:
                raise QueryFilterError(f"Filtre invalide pour le champ {name}")
            if name == "name":
                query["name"] = {"$regex": re.escape(values[-1]), "$options": "i"}
            elif len(values) > 1:
                query[name] = {"$in": [self._coerce(name, v) for v in values]}
            else:
                query[name] = self._coerce(name, values[0])

        for name, values in normalized_values.items():
            value = self.normalizers[name](values)
            if value is not None:
                query[name] = value
        return query

    def build_projection(self, select: Optional[str]) -> Optional[Dict[str, int]]:
        if select:
            fields = [f for f in split_csv([select]) if f not in self.hidden_fields]
            if fields:
                return {f: 1 for f in fields}
        if self.hidden_fields:
            return {f: 0 for f in self.hidden_fields}
        return None

    def build_sort(self, sort: Optional[str]) -> List[Tuple[str, int]]:
        spec = []
        for part in split_csv([sort]) if sort else []:
            if part.startswith("-"):
                if part[1:]:
                    spec.append((part[1:], DESCENDING))
            else:
                spec.append((part, ASCENDING))
        return spec or list(DEFAULT_SORT)

    def _coerce(self, name: str, raw: str) -> Any:
        converter = self.field_types.get(name)
        if converter is None:
            return raw
        try:
            return converter(raw)
        except (ValueError, TypeError, InvalidId):
            raise QueryFilterError(f"Valeur invalide pour le champ {name}: {raw}")


async def run_list_query(collection, plan: QueryPlan) -> Tuple[list, int]:
    """Fetch one page and the pre-pagination total. Two independent reads."""
    cursor = collection.find(plan.filter, plan.projection).sort(plan.sort).skip(plan.skip).limit(plan.limit)
    docs = await cursor.to_list(length=plan.limit)
    total = await collection.count_documents(plan.filter)
    logger.debug(f"Listed {len(docs)} of {total} from {collection.name}")
    return docs, total
