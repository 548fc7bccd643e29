"""Review endpoints for the Local Food Lovers Network API.

This module provides endpoints for creating, searching, updating and deleting
reviews, plus the per-user like and bookmark toggles.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo.collection import Collection

from src.api.dependencies import get_reviews_collection
from src.api.schemas import BookmarkResult, DeleteResult, InsertResult, UpdateResult
from src.store import reviews as review_store
from src.store.documents import coerce_likes, coerce_rating

# Create API router
router = APIRouter(tags=["reviews"])


class ReviewCreate(BaseModel):
    """Request body for posting a review.

    Attributes:
        email: Reviewer email.
        name: Reviewer display name.
        rating: Numeric rating; non-numeric input is stored as 0.
        review_text: Body of the review.
        recipe_id: Identifier of the reviewed recipe (not checked).
    """

    model_config = ConfigDict(extra="forbid")

    email: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    rating: float
    review_text: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    photo: Optional[str] = None
    food_name: Optional[str] = None
    food_image: Optional[str] = None
    restaurant_name: Optional[str] = None
    location: Optional[str] = None
    likes: int = 0

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float:
        return coerce_rating(value)

    @field_validator("likes", mode="before")
    @classmethod
    def _coerce_likes(cls, value: Any) -> int:
        return coerce_likes(value)


class ReviewUpdate(BaseModel):
    """Partial update. Likes and bookmarks change only through the toggles."""

    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    name: Optional[str] = None
    photo: Optional[str] = None
    rating: Optional[float] = None
    review_text: Optional[str] = None
    recipe_id: Optional[str] = None
    food_name: Optional[str] = None
    food_image: Optional[str] = None
    restaurant_name: Optional[str] = None
    location: Optional[str] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float:
        return coerce_rating(value)


class UserEmailBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    userEmail: Optional[str] = Field(default=None, description="Email of the acting user")


@router.post("/reviews", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
def create_review(
    body: ReviewCreate,
    collection: Collection = Depends(get_reviews_collection),
) -> Dict[str, Any]:
    """Post a review.

    ``email``, ``name``, ``rating``, ``review_text`` and ``recipe_id`` are
    required; a missing one is rejected with 400.
    """
    return review_store.create_review(collection, body.model_dump(exclude_none=True))


@router.get("/reviews")
def list_reviews(
    recipeId: Optional[str] = None,
    email: Optional[str] = None,
    search: Optional[str] = None,
    collection: Collection = Depends(get_reviews_collection),
) -> List[Dict[str, Any]]:
    """List reviews, newest first.

    Args:
        recipeId: Only reviews of this recipe.
        email: Only reviews written by this email.
        search: Case-insensitive substring of the food name. Replaces the
            other filters.

    Example:
        GET /reviews?search=pad
        Returns reviews of "Pad Thai", "Spicy PAD krapow", ...
    """
    return review_store.list_reviews(
        collection, recipe_id=recipeId, email=email, search=search
    )


@router.get("/all-reviews")
def list_all_reviews(
    collection: Collection = Depends(get_reviews_collection),
) -> List[Dict[str, Any]]:
    return review_store.list_reviews(collection)


@router.get("/all-reviews/like")
def list_top_liked_reviews(
    collection: Collection = Depends(get_reviews_collection),
) -> List[Dict[str, Any]]:
    return review_store.list_top_liked_reviews(collection)


@router.get("/reviews/email/{email}")
def list_reviews_by_email(
    email: str,
    collection: Collection = Depends(get_reviews_collection),
) -> List[Dict[str, Any]]:
    return review_store.list_reviews(collection, email=email)


@router.get("/reviews/bookmarked/{email}")
def list_bookmarked_reviews(
    email: str,
    collection: Collection = Depends(get_reviews_collection),
) -> List[Dict[str, Any]]:
    """Reviews bookmarked by the given user."""
    return review_store.list_bookmarked_reviews(collection, email)


@router.get("/reviews/{review_id}")
def get_review(
    review_id: str,
    collection: Collection = Depends(get_reviews_collection),
) -> Dict[str, Any]:
    return review_store.get_review(collection, review_id)


@router.patch("/reviews-likes/{review_id}")
def like_review(
    review_id: str,
    body: UserEmailBody,
    collection: Collection = Depends(get_reviews_collection),
) -> Dict[str, Any]:
    """Like a review once per user.

    Returns the review; liking again with the same email changes nothing.
    """
    return review_store.like_review(collection, review_id, body.userEmail)


@router.patch("/reviews/{review_id}/bookmark", response_model=BookmarkResult)
def toggle_bookmark(
    review_id: str,
    body: UserEmailBody,
    collection: Collection = Depends(get_reviews_collection),
) -> Dict[str, Any]:
    """Bookmark the review for the user, or remove an existing bookmark."""
    return review_store.toggle_bookmark(collection, review_id, body.userEmail)


@router.patch("/reviews/{review_id}", response_model=UpdateResult)
def update_review(
    review_id: str,
    body: ReviewUpdate,
    collection: Collection = Depends(get_reviews_collection),
) -> Dict[str, Any]:
    return review_store.update_review(
        collection, review_id, body.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.delete("/reviews/{review_id}", response_model=DeleteResult)
def delete_review(
    review_id: str,
    collection: Collection = Depends(get_reviews_collection),
) -> Dict[str, Any]:
    return review_store.delete_review(collection, review_id)
