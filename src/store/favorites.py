"""Operations over the ``favorites`` collection.

A favorite is owned by ``userEmail`` and carries an opaque snapshot of the
recipe it points to. The same recipe may be favorited more than once.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection

from src.api.exceptions import NotFoundError
from src.store.documents import (
    delete_ack,
    insert_ack,
    parse_object_id,
    serialize_document,
    store_errors,
    utcnow,
)

# Configure module logger
logger = logging.getLogger(__name__)


def create_favorite(collection: Collection, fields: Dict[str, Any]) -> Dict[str, Any]:
    document = dict(fields)
    document["createdAt"] = utcnow()

    with store_errors("create favorite"):
        result = collection.insert_one(document)

    logger.info(
        "Favorite created",
        extra={"favorite_id": str(result.inserted_id), "user_email": document.get("userEmail")},
    )
    return insert_ack(result)


def list_favorites(collection: Collection, email: Optional[str] = None) -> List[Dict[str, Any]]:
    """List favorites, newest first, optionally only those owned by ``email``."""
    query = {"userEmail": email} if email else {}

    with store_errors("fetch favorites"):
        cursor = collection.find(query).sort("createdAt", DESCENDING)
        return [serialize_document(doc) for doc in cursor]


def delete_favorite(collection: Collection, favorite_id: str) -> Dict[str, Any]:
    """Delete a favorite by identifier.

    Raises:
        NotFoundError: If nothing was deleted, including repeated deletes.
    """
    query = {"_id": parse_object_id(favorite_id)}

    with store_errors("delete favorite"):
        result = collection.delete_one(query)

    if result.deleted_count == 0:
        raise NotFoundError("Favorite", favorite_id)

    logger.info("Favorite deleted", extra={"favorite_id": favorite_id})
    return delete_ack(result)
