from bson.errors import InvalidId
from bson.objectid import ObjectId

from src.core.errors import InvalidIdError


def validate_object_id(value, label: str = "item") -> ObjectId:
    """
    Convert a string to a MongoDB ObjectId.

    Raises:
        InvalidIdError: If the value is not a valid ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdError(
            f"Invalid {label} ID format",
            details={f"{label}Id": str(value)},
        )
