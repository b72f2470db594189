# services/restaurant_service.py
from datetime import datetime, timezone
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from core.authorization import ensure_can_create_restaurant, ensure_restaurant_access
from core.exceptions import NotFoundError
from core.geo import center_sphere_filter, distance_km, parse_coordinate_pair, parse_distance, proximity_from_params
from core.query_filter import QueryFilterTranslator, parse_datetime, run_list_query
from utils.serializers import serialize_document, serialize_documents, to_object_id
from utils.logger import get_logger

logger = get_logger("Restaurant_Service")

RESTAURANT_NOT_FOUND = "Restaurant non trouvé"
GEO_PARAMS = ("lat", "lng", "maxDistance")

restaurant_query = QueryFilterTranslator(
    field_types={"owner": ObjectId, "createdAt": parse_datetime, "updatedAt": parse_datetime},
    extra_reserved=GEO_PARAMS,
)

async def _find_restaurant(db, restaurant_id: str) -> dict:
    oid = to_object_id(restaurant_id)
    doc = await db.restaurants_collection.find_one({"_id": oid}) if oid else None
    if doc is None:
        raise NotFoundError(RESTAURANT_NOT_FOUND)
    return doc

async def list_restaurants(db, query_items: list):
    """
    Generic listing; ``lat``/``lng``/``maxDistance`` (km) add a radius
    constraint when all three are present.
    """
    proximity = proximity_from_params(dict(query_items))
    plan = restaurant_query.translate(query_items)
    if proximity:
        plan.filter.update(proximity)
    docs, total = await run_list_query(db.restaurants_collection, plan)
    return {
        "success": True,
        "count": len(docs),
        "pagination": plan.pagination(total),
        "data": serialize_documents(docs),
    }

async def get_restaurant(db, restaurant_id: str):
    doc = await _find_restaurant(db, restaurant_id)
    return {"success": True, "data": serialize_document(doc)}

async def create_restaurant(db, payload, current_user):
    ensure_can_create_restaurant(current_user)
    now = datetime.now(timezone.utc)
    doc = payload.to_document()
    doc.update({"owner": ObjectId(current_user.id), "createdAt": now, "updatedAt": now})
    try:
        result = await db.restaurants_collection.insert_one(doc)
    except PyMongoError:
        logger.exception("DB error creating restaurant")
        raise
    doc["_id"] = result.inserted_id
    logger.info("Restaurant created", extra={"actor": current_user.email, "restaurant_id": str(result.inserted_id)})
    return {"success": True, "data": serialize_document(doc)}

async def update_restaurant(db, restaurant_id: str, payload, current_user):
    restaurant = await _find_restaurant(db, restaurant_id)
    ensure_restaurant_access(restaurant, current_user, "Vous n'avez pas l'autorisation de modifier ce restaurant")
    update_doc = payload.to_document(exclude_unset=True)
    update_doc["updatedAt"] = datetime.now(timezone.utc)
    updated = await db.restaurants_collection.find_one_and_update(
        {"_id": restaurant["_id"]},
        {"$set": update_doc},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFoundError(RESTAURANT_NOT_FOUND)
    logger.info("Restaurant updated", extra={"actor": current_user.email, "restaurant_id": restaurant_id})
    return {"success": True, "data": serialize_document(updated)}

async def delete_restaurant(db, restaurant_id: str, current_user):
    restaurant = await _find_restaurant(db, restaurant_id)
    ensure_restaurant_access(restaurant, current_user, "Vous n'avez pas l'autorisation de supprimer ce restaurant")
    await db.restaurants_collection.delete_one({"_id": restaurant["_id"]})
    logger.info("Restaurant deleted", extra={"actor": current_user.email, "restaurant_id": restaurant_id})
    return {"success": True, "data": None}

async def restaurants_in_radius(db, coordinates: str, distance: str):
    """
    ``coordinates`` is "lat,lng", ``distance`` is in km. Results carry their
    distance from the center, nearest first.
    """
    lat, lng = parse_coordinate_pair(coordinates)
    radius_km = parse_distance(distance)
    cursor = db.restaurants_collection.find(center_sphere_filter(lat, lng, radius_km))
    docs = await cursor.to_list(length=None)
    data = []
    for doc in docs:
        item = serialize_document(doc)
        point = (doc.get("location") or {}).get("coordinates")
        if point and len(point) == 2:
            item["distance"] = round(distance_km(lat, lng, point), 3)
        data.append(item)
    data.sort(key=lambda d: d.get("distance", float("inf")))
    logger.info(f"Radius search at ({lat}, {lng}) within {radius_km} km: {len(data)} found")
    return {"success": True, "count": len(data), "data": data}
