"""Helpers shared by the collection modules.

This module provides identifier parsing, JSON-safe document serialization,
numeric coercion for ratings and like counters, and conversion of pymongo
write results into the acknowledgement shapes returned by the API.
"""

import logging
import math
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from src.api.exceptions import InvalidIdentifierError, StoreError

# Configure module logger
logger = logging.getLogger(__name__)

# Leading numeric prefixes, matching how the web frontend's numbers were parsed
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


def utcnow() -> datetime:
    """Server-assigned creation timestamp."""
    return datetime.now(timezone.utc)


def parse_object_id(value: str) -> ObjectId:
    """Convert a path identifier to an ObjectId.

    Args:
        value: Identifier string from the request path.

    Returns:
        The parsed ObjectId.

    Raises:
        InvalidIdentifierError: If the value is not a 24-character hex string.
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError(str(value))


def serialize_document(value: Any) -> Any:
    """Recursively replace ObjectId values so a document can be JSON encoded."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_document(item) for item in value]
    return value


def coerce_rating(value: Any) -> float:
    """Coerce a rating to a non-negative float.

    Strings use their leading numeric prefix (``"4.5 stars"`` is 4.5).
    Absent, non-numeric, non-finite or negative values become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0

    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def coerce_likes(value: Any) -> int:
    """Coerce a like counter to a non-negative int.

    Floats are truncated and strings use their leading integer prefix.
    Anything else, or a negative result, becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return 0
        number = int(value)
    elif isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if not match:
            return 0
        number = int(match.group(0))
    else:
        return 0

    return max(number, 0)


def insert_ack(result: InsertOneResult) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "insertedId": str(result.inserted_id),
    }


def update_ack(result: UpdateResult) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedId": str(result.upserted_id) if result.upserted_id is not None else None,
    }


def delete_ack(result: DeleteResult) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "deletedCount": result.deleted_count,
    }


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into ``StoreError``.

    Args:
        operation: Short description used in the client-facing message,
            e.g. ``"fetch recipes"``.
    """
    try:
        yield
    except PyMongoError as e:
        logger.error(
            f"Store operation failed: {operation}",
            extra={
                "operation": operation,
                "error": str(e),
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        raise StoreError(operation, e) from e
