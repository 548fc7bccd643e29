"""Operations over the ``reviews`` collection.

Likes and bookmarks are kept as arrays of user emails on the review
(``likedBy`` and ``bookmarkedBy``). Both toggles are conditional updates
evaluated by the store, so concurrent requests cannot lose a like or a
bookmark flip between a read and a write.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from src.api.exceptions import ConflictError, NotFoundError, ValidationError
from src.store.documents import (
    coerce_likes,
    coerce_rating,
    delete_ack,
    insert_ack,
    parse_object_id,
    serialize_document,
    store_errors,
    update_ack,
    utcnow,
)

# Configure module logger
logger = logging.getLogger(__name__)

TOP_LIKED_LIMIT = 6

# Attempts before a bookmark flip racing with other flips gives up
BOOKMARK_ATTEMPTS = 3


def _require_email(user_email: Optional[str]) -> str:
    if not user_email or not user_email.strip():
        raise ValidationError("userEmail is required")
    return user_email


def create_review(collection: Collection, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a review with coerced ``rating``/``likes`` and a ``createdAt`` stamp.

    The like and bookmark sets always start empty.
    """
    document = dict(fields)
    document["rating"] = coerce_rating(document.get("rating"))
    document["likes"] = coerce_likes(document.get("likes"))
    document["likedBy"] = []
    document["bookmarkedBy"] = []
    document["createdAt"] = utcnow()

    with store_errors("create review"):
        result = collection.insert_one(document)

    logger.info(
        "Review created",
        extra={"review_id": str(result.inserted_id), "recipe_ref": document.get("recipe_id")},
    )
    return insert_ack(result)


def list_reviews(
    collection: Collection,
    recipe_id: Optional[str] = None,
    email: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """List reviews, newest first.

    ``search`` is a case-insensitive substring match on ``food_name`` and
    replaces the other filters. Otherwise ``recipe_id`` and ``email`` are
    exact matches and may be combined.
    """
    if search:
        query: Dict[str, Any] = {
            "food_name": {"$regex": re.escape(search), "$options": "i"}
        }
    else:
        query = {}
        if recipe_id:
            query["recipe_id"] = recipe_id
        if email:
            query["email"] = email

    with store_errors("fetch reviews"):
        cursor = collection.find(query).sort("createdAt", DESCENDING)
        return [serialize_document(doc) for doc in cursor]


def list_top_liked_reviews(
    collection: Collection, limit: int = TOP_LIKED_LIMIT
) -> List[Dict[str, Any]]:
    with store_errors("fetch top liked reviews"):
        cursor = (
            collection.find({})
            .sort([("likes", DESCENDING), ("createdAt", DESCENDING)])
            .limit(limit)
        )
        return [serialize_document(doc) for doc in cursor]


def list_bookmarked_reviews(collection: Collection, user_email: str) -> List[Dict[str, Any]]:
    """Reviews whose ``bookmarkedBy`` contains the email."""
    with store_errors("fetch bookmarked reviews"):
        cursor = collection.find({"bookmarkedBy": user_email}).sort("createdAt", DESCENDING)
        return [serialize_document(doc) for doc in cursor]


def get_review(collection: Collection, review_id: str) -> Dict[str, Any]:
    query = {"_id": parse_object_id(review_id)}

    with store_errors("fetch review"):
        document = collection.find_one(query)

    if document is None:
        raise NotFoundError("Review", review_id)
    return serialize_document(document)


def like_review(
    collection: Collection, review_id: str, user_email: Optional[str]
) -> Dict[str, Any]:
    """Record a like from ``user_email``, at most once per user.

    The email is added to ``likedBy`` and ``likes`` incremented by one in a
    single update that only matches while the email is absent. A repeated
    like therefore changes nothing and returns the current review.

    Returns:
        The review after the operation.

    Raises:
        ValidationError: If ``user_email`` is empty.
        NotFoundError: If the review does not exist.
    """
    user_email = _require_email(user_email)
    oid = parse_object_id(review_id)

    with store_errors("like review"):
        updated = collection.find_one_and_update(
            {"_id": oid, "likedBy": {"$ne": user_email}},
            {"$addToSet": {"likedBy": user_email}, "$inc": {"likes": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is not None:
            logger.info("Review liked", extra={"review_id": review_id, "user_email": user_email})
            return serialize_document(updated)

        current = collection.find_one({"_id": oid})

    if current is None:
        raise NotFoundError("Review", review_id)

    logger.debug("Review already liked", extra={"review_id": review_id, "user_email": user_email})
    return serialize_document(current)


def toggle_bookmark(
    collection: Collection, review_id: str, user_email: Optional[str]
) -> Dict[str, Any]:
    """Flip ``user_email``'s membership in the review's ``bookmarkedBy``.

    Returns:
        ``{"success": True, "bookmarked": <new state>}``.

    Raises:
        ValidationError: If ``user_email`` is empty.
        NotFoundError: If the review does not exist.
    """
    user_email = _require_email(user_email)
    oid = parse_object_id(review_id)

    with store_errors("toggle bookmark"):
        for _ in range(BOOKMARK_ATTEMPTS):
            added = collection.update_one(
                {"_id": oid, "bookmarkedBy": {"$ne": user_email}},
                {"$addToSet": {"bookmarkedBy": user_email}},
            )
            if added.matched_count:
                bookmarked = True
                break

            removed = collection.update_one(
                {"_id": oid, "bookmarkedBy": user_email},
                {"$pull": {"bookmarkedBy": user_email}},
            )
            if removed.matched_count:
                bookmarked = False
                break

            if collection.find_one({"_id": oid}, {"_id": 1}) is None:
                raise NotFoundError("Review", review_id)
        else:
            raise ConflictError("Review", review_id)

    logger.info(
        "Review bookmark toggled",
        extra={"review_id": review_id, "user_email": user_email, "bookmarked": bookmarked},
    )
    return {"success": True, "bookmarked": bookmarked}


def update_review(
    collection: Collection, review_id: str, fields: Dict[str, Any]
) -> Dict[str, Any]:
    """Merge the given fields into a review.

    Raises:
        ValidationError: If there is nothing to update.
        NotFoundError: If no document was modified.
    """
    if not fields:
        raise ValidationError("No fields to update")

    query = {"_id": parse_object_id(review_id)}
    changes = dict(fields)
    if "rating" in changes:
        changes["rating"] = coerce_rating(changes["rating"])

    with store_errors("update review"):
        result = collection.update_one(query, {"$set": changes})

    if result.modified_count == 0:
        raise NotFoundError(
            "Review", review_id, message="Review not found or no changes made"
        )

    logger.info("Review updated", extra={"review_id": review_id, "fields": sorted(changes)})
    return update_ack(result)


def delete_review(collection: Collection, review_id: str) -> Dict[str, Any]:
    query = {"_id": parse_object_id(review_id)}

    with store_errors("delete review"):
        result = collection.delete_one(query)

    if result.deleted_count == 0:
        raise NotFoundError("Review", review_id)

    logger.info("Review deleted", extra={"review_id": review_id})
    return delete_ack(result)
