from bson import ObjectId
from bson.errors import InvalidId

from streamify.core.errors import ValidationError


def to_object_id(value, label: str = "ID") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label} format")


def is_object_id(value: str) -> bool:
    return ObjectId.is_valid(value)
