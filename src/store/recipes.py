"""Operations over the ``recipes`` collection.

Every function takes the collection as its first argument and returns
JSON-safe values: serialized documents or write acknowledgements.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection

from src.api.exceptions import NotFoundError, ValidationError
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

# Listing sizes
FEATURED_LIMIT = 6
TOP_LIKED_LIMIT = 6


def create_recipe(collection: Collection, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a recipe.

    ``rating`` and ``likes`` are coerced (defaulting to 0) and ``createdAt``
    is stamped by the server. No other field is required.
    """
    document = dict(fields)
    document["rating"] = coerce_rating(document.get("rating"))
    document["likes"] = coerce_likes(document.get("likes"))
    document["createdAt"] = utcnow()

    with store_errors("create recipe"):
        result = collection.insert_one(document)

    logger.info("Recipe created", extra={"recipe_id": str(result.inserted_id)})
    return insert_ack(result)


def list_recipes(
    collection: Collection,
    email: Optional[str] = None,
    featured: bool = False,
) -> List[Dict[str, Any]]:
    """List recipes with at most one filter applied.

    Args:
        collection: The recipes collection.
        email: Return only recipes owned by this email.
        featured: Return the top rated recipes. Takes precedence over email.

    Returns:
        Serialized recipe documents.
    """
    with store_errors("fetch recipes"):
        if featured:
            cursor = collection.find({}).sort("rating", DESCENDING).limit(FEATURED_LIMIT)
        elif email:
            cursor = collection.find({"email": email})
        else:
            cursor = collection.find({})
        return [serialize_document(doc) for doc in cursor]


def list_all_recipes(collection: Collection) -> List[Dict[str, Any]]:
    """All recipes, newest first."""
    with store_errors("fetch recipes"):
        cursor = collection.find({}).sort("createdAt", DESCENDING)
        return [serialize_document(doc) for doc in cursor]


def list_top_liked_recipes(
    collection: Collection, limit: int = TOP_LIKED_LIMIT
) -> List[Dict[str, Any]]:
    """Most liked recipes, ties broken by recency."""
    with store_errors("fetch top liked recipes"):
        cursor = (
            collection.find({})
            .sort([("likes", DESCENDING), ("createdAt", DESCENDING)])
            .limit(limit)
        )
        return [serialize_document(doc) for doc in cursor]


def get_recipe(collection: Collection, recipe_id: str) -> Dict[str, Any]:
    query = {"_id": parse_object_id(recipe_id)}

    with store_errors("fetch recipe"):
        document = collection.find_one(query)

    if document is None:
        raise NotFoundError("Recipe", recipe_id)
    return serialize_document(document)


def update_recipe_likes(collection: Collection, recipe_id: str, likes: Any) -> Dict[str, Any]:
    """Overwrite the likes counter of a recipe.

    Raises:
        ValidationError: If ``likes`` is not a non-negative number.
        NotFoundError: If no recipe has this identifier.
    """
    if (
        isinstance(likes, bool)
        or not isinstance(likes, (int, float))
        or not math.isfinite(likes)
        or likes < 0
    ):
        # NaN and Infinity are not valid JSON in the error body
        raise ValidationError(
            "likes must be a non-negative number", details={"likes": str(likes)}
        )

    query = {"_id": parse_object_id(recipe_id)}

    with store_errors("update recipe likes"):
        result = collection.update_one(query, {"$set": {"likes": likes}})

    if result.matched_count == 0:
        raise NotFoundError("Recipe", recipe_id)

    logger.info("Recipe likes updated", extra={"recipe_id": recipe_id, "likes": likes})
    return update_ack(result)


def update_recipe(
    collection: Collection, recipe_id: str, fields: Dict[str, Any]
) -> Dict[str, Any]:
    """Merge the given fields into a recipe.

    Raises:
        ValidationError: If there is nothing to update.
        NotFoundError: If no document was modified.
    """
    if not fields:
        raise ValidationError("No fields to update")

    query = {"_id": parse_object_id(recipe_id)}
    changes = dict(fields)
    if "rating" in changes:
        changes["rating"] = coerce_rating(changes["rating"])
    if "likes" in changes:
        changes["likes"] = coerce_likes(changes["likes"])

    with store_errors("update recipe"):
        result = collection.update_one(query, {"$set": changes})

    if result.modified_count == 0:
        raise NotFoundError(
            "Recipe", recipe_id, message="Recipe not found or no changes made"
        )

    logger.info(
        "Recipe updated",
        extra={"recipe_id": recipe_id, "fields": sorted(changes)},
    )
    return update_ack(result)


def delete_recipe(collection: Collection, recipe_id: str) -> Dict[str, Any]:
    query = {"_id": parse_object_id(recipe_id)}

    with store_errors("delete recipe"):
        result = collection.delete_one(query)

    if result.deleted_count == 0:
        raise NotFoundError("Recipe", recipe_id)

    logger.info("Recipe deleted", extra={"recipe_id": recipe_id})
    return delete_ack(result)
