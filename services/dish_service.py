from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from core.authorization import ensure_restaurant_access
from core.exceptions import NotFoundError
from core.query_filter import QueryFilterTranslator, parse_bool, parse_datetime, run_list_query
from core.scheduler import local_now
from services.availability import (
    available_on_weekday_filter,
    available_today_filter,
    normalize_dietary_options,
    parse_day_of_week,
    validate_weekly_schedule,
)
from services.restaurant_service import RESTAURANT_NOT_FOUND
from utils.serializers import serialize_document, serialize_documents, to_object_id
from utils.logger import get_logger

logger = get_logger("Dish_Service")

DISH_NOT_FOUND = "Plat non trouvé"

dish_query = QueryFilterTranslator(
    field_types={
        "price": float,
        "isAvailable": parse_bool,
        "restaurant": ObjectId,
        "availableDate": parse_datetime,
        "createdAt": parse_datetime,
        "updatedAt": parse_datetime,
    },
    normalizers={"dietaryOptions": normalize_dietary_options},
)


async def _find_dish(db, dish_id: str) -> dict:
    oid = to_object_id(dish_id)
    dish = await db.dishes_collection.find_one({"_id": oid}) if oid else None
    if dish is None:
        raise NotFoundError(DISH_NOT_FOUND)
    return dish


async def _find_parent_restaurant(db, restaurant_id) -> dict:
    oid = to_object_id(restaurant_id)
    restaurant = await db.restaurants_collection.find_one({"_id": oid}) if oid else None
    if restaurant is None:
        raise NotFoundError(RESTAURANT_NOT_FOUND)
    return restaurant


async def _authorize_dish(db, dish_id: str, current_user, message: str) -> dict:
    """
    Load the dish and check the requester owns its restaurant. A missing
    dish or parent restaurant is a 404 before ownership is looked at.
    """
    dish = await _find_dish(db, dish_id)
    restaurant = await _find_parent_restaurant(db, dish.get("restaurant"))
    ensure_restaurant_access(restaurant, current_user, message)
    return dish


async def list_dishes(db, query_items: list):
    plan = dish_query.translate(query_items)
    docs, total = await run_list_query(db.dishes_collection, plan)
    return {
        "success": True,
        "count": len(docs),
        "pagination": plan.pagination(total),
        "data": serialize_documents(docs),
    }


async def get_dish(db, dish_id: str):
    dish = await _find_dish(db, dish_id)
    return {"success": True, "data": serialize_document(dish)}


async def create_dish(db, payload, current_user):
    restaurant = await _find_parent_restaurant(db, payload.restaurant)
    ensure_restaurant_access(restaurant, current_user, "Vous n'avez pas l'autorisation d'ajouter un plat à ce restaurant")

    now = datetime.now(timezone.utc)
    doc = payload.to_document()
    doc["restaurant"] = restaurant["_id"]
    doc["availableDate"] = doc.get("availableDate") or now
    doc.update({"createdAt": now, "updatedAt": now})
    try:
        result = await db.dishes_collection.insert_one(doc)
    except PyMongoError:
        logger.exception("DB error creating dish")
        raise
    doc["_id"] = result.inserted_id
    logger.info("Dish created", extra={"actor": current_user.email, "dish_id": str(result.inserted_id)})
    return {"success": True, "data": serialize_document(doc)}


async def update_dish(db, dish_id: str, payload, current_user):
    dish = await _authorize_dish(db, dish_id, current_user, "Vous n'avez pas l'autorisation de modifier ce plat")
    update_doc = payload.to_document(exclude_unset=True)
    update_doc["updatedAt"] = datetime.now(timezone.utc)
    updated = await db.dishes_collection.find_one_and_update(
        {"_id": dish["_id"]},
        {"$set": update_doc},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFoundError(DISH_NOT_FOUND)
    logger.info("Dish updated", extra={"actor": current_user.email, "dish_id": dish_id})
    return {"success": True, "data": serialize_document(updated)}


async def delete_dish(db, dish_id: str, current_user):
    dish = await _authorize_dish(db, dish_id, current_user, "Vous n'avez pas l'autorisation de supprimer ce plat")
    await db.dishes_collection.delete_one({"_id": dish["_id"]})
    logger.info("Dish deleted", extra={"actor": current_user.email, "dish_id": dish_id})
    return {"success": True, "data": None}


async def _find_all(collection, query: dict) -> dict:
    docs = await collection.find(query).to_list(length=None)
    return {"success": True, "count": len(docs), "data": serialize_documents(docs)}


async def dishes_by_restaurant(db, restaurant_id: str):
    oid = to_object_id(restaurant_id)
    if oid is None:
        return {"success": True, "count": 0, "data": []}
    return await _find_all(db.dishes_collection, {"restaurant": oid})


async def dishes_available_today(db, now: Optional[datetime] = None):
    return await _find_all(db.dishes_collection, available_today_filter(now or local_now()))


async def dishes_available_on_day(db, day_of_week: str):
    day = parse_day_of_week(day_of_week)
    return await _find_all(db.dishes_collection, available_on_weekday_filter(day))


async def set_weekly_schedule(db, dish_id: str, payload, current_user):
    """Replace the whole weekly schedule; nothing is written if one entry is invalid."""
    dish = await _authorize_dish(db, dish_id, current_user, "Vous n'avez pas l'autorisation de programmer ce plat")
    schedule = validate_weekly_schedule(payload)
    updated = await db.dishes_collection.find_one_and_update(
        {"_id": dish["_id"]},
        {"$set": {"weeklySchedule": schedule, "updatedAt": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFoundError(DISH_NOT_FOUND)
    logger.info("Weekly schedule set", extra={"actor": current_user.email, "dish_id": dish_id, "entries": len(schedule)})
    return {"success": True, "data": serialize_document(updated)}


async def get_weekly_schedule(db, dish_id: str):
    dish = await _find_dish(db, dish_id)
    return {
        "success": True,
        "data": {
            "id": str(dish["_id"]),
            "name": dish.get("name"),
            "weeklySchedule": dish.get("weeklySchedule", []),
        },
    }
