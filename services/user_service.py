from datetime import datetime, timezone
from bson.objectid import ObjectId
from pymongo import ReturnDocument

from core.exceptions import BadRequestError, NotFoundError, UnauthorizedError, DUPLICATE_EMAIL
from core.query_filter import QueryFilterTranslator, parse_datetime, run_list_query
from models.user import normalize_email
from utils.hash import hash_password, verify_password
from utils.serializers import serialize_document, serialize_documents, to_object_id
from utils.logger import get_logger

logger = get_logger("USER_SERVICE")

USER_NOT_FOUND = "Utilisateur non trouvé"
INVALID_CREDENTIALS = "Identifiants invalides"

user_query = QueryFilterTranslator(
    field_types={"email": normalize_email, "favorites": ObjectId, "createdAt": parse_datetime, "updatedAt": parse_datetime},
    hidden_fields=("password",),
)

def _user_document(payload, role: str = "user") -> dict:
    now = datetime.now(timezone.utc)
    doc = payload.to_document()
    doc["password"] = hash_password(payload.password)
    doc["role"] = role
    doc["favorites"] = [ObjectId(f) for f in doc.get("favorites", [])]
    doc.update({"createdAt": now, "updatedAt": now})
    return doc

async def _insert_user(db, doc: dict) -> dict:
    result = await db.users_collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info(f"User inserted into database with id: {result.inserted_id}")
    return doc

async def register_user(db, payload) -> dict:
    """Public sign-up. The role is always ``user``."""
    logger.info(f"User register request received for email: {payload.email}")
    if await db.users_collection.find_one({"email": payload.email}):
        raise BadRequestError(DUPLICATE_EMAIL)
    return await _insert_user(db, _user_document(payload, role="user"))

async def authenticate(db, email: str | None, password: str | None) -> dict:
    if not email or not password:
        raise BadRequestError("Veuillez fournir un email et un mot de passe")
    user = await db.users_collection.find_one({"email": email})
    if not user:
        logger.warning(f"Login failed: user not found {email}")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not verify_password(password, user.get("password")):
        logger.warning(f"Login failed: wrong password {email}")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    logger.info(f"Login successful: {email}")
    return user

async def get_user_document(db, user_id: str, with_password: bool = False) -> dict:
    oid = to_object_id(user_id)
    projection = None if with_password else {"password": 0}
    user = await db.users_collection.find_one({"_id": oid}, projection) if oid else None
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return user

async def _update_user(db, user_id, fields: dict) -> dict:
    fields["updatedAt"] = datetime.now(timezone.utc)
    updated = await db.users_collection.find_one_and_update(
        {"_id": ObjectId(str(user_id))},
        {"$set": fields},
        projection={"password": 0},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFoundError(USER_NOT_FOUND)
    return updated

async def update_details(db, user_id: str, payload) -> dict:
    fields = payload.to_document(exclude_unset=True)
    # fields explicitly sent as null are ignored
    fields = {k: v for k, v in fields.items() if v is not None}
    user = await _update_user(db, user_id, fields)
    logger.info(f"User {user_id} updated own details: {sorted(fields)}")
    return {"success": True, "data": serialize_document(user)}

async def change_password(db, user_id: str, payload) -> dict:
    user = await get_user_document(db, user_id, with_password=True)
    if not verify_password(payload.current_password, user.get("password")):
        logger.warning(f"Password change refused for {user_id}: wrong current password")
        raise UnauthorizedError("Mot de passe incorrect")
    updated = await _update_user(db, user["_id"], {"password": hash_password(payload.new_password)})
    logger.info(f"Password changed for user {user_id}")
    return updated

# admin operations

async def list_users(db, query_items: list):
    plan = user_query.translate(query_items)
    docs, total = await run_list_query(db.users_collection, plan)
    return {
        "success": True,
        "count": len(docs),
        "pagination": plan.pagination(total),
        "data": serialize_documents(docs),
    }

async def get_user(db, user_id: str):
    user = await get_user_document(db, user_id)
    return {"success": True, "data": serialize_document(user)}

async def create_user(db, payload, actor_email: str):
    """Admin creation path, the only one that may set a role other than ``user``."""
    doc = await _insert_user(db, _user_document(payload, role=payload.role))
    logger.info("User created by admin", extra={"actor": actor_email, "role": payload.role})
    return {"success": True, "data": serialize_document(doc)}

async def update_user(db, user_id: str, payload, actor_email: str):
    if to_object_id(user_id) is None:
        raise NotFoundError(USER_NOT_FOUND)
    fields = payload.to_document(exclude_unset=True)
    if fields.get("password"):
        fields["password"] = hash_password(fields["password"])
    if fields.get("favorites") is not None:
        fields["favorites"] = [ObjectId(f) for f in fields["favorites"]]
    fields = {k: v for k, v in fields.items() if v is not None}
    user = await _update_user(db, user_id, fields)
    logger.info("User updated by admin", extra={"actor": actor_email, "user_id": user_id})
    return {"success": True, "data": serialize_document(user)}

async def delete_user(db, user_id: str, actor_email: str):
    oid = to_object_id(user_id)
    result = await db.users_collection.delete_one({"_id": oid}) if oid else None
    if result is None or result.deleted_count == 0:
        raise NotFoundError(USER_NOT_FOUND)
    logger.info("User deleted by admin", extra={"actor": actor_email, "user_id": user_id})
    return {"success": True, "data": None}
