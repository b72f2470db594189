from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId

HIDDEN_FIELDS = ("password",)

def to_object_id(value) -> ObjectId | None:
    """ObjectId for a path/body id, None when the value is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None

def _convert(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_convert(v) for v in value]
    return value

def serialize_document(doc: dict | None) -> dict | None:
    """
    JSON-ready copy of a stored document: ``_id`` becomes ``id``, nested
    ObjectIds become strings and hidden fields are dropped.
    """
    if doc is None:
        return None
    out = {"id": str(doc["_id"])} if "_id" in doc else {}
    for key, value in doc.items():
        if key == "_id" or key in HIDDEN_FIELDS:
            continue
        out[key] = _convert(value)
    return out

def serialize_documents(docs) -> list:
    return [serialize_document(d) for d in docs]
