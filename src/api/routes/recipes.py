"""Recipe endpoints for the Local Food Lovers Network API.

This module provides endpoints for creating, listing, updating and deleting
recipes, including the featured (top rated) and most liked listings.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo.collection import Collection

from src.api.dependencies import get_recipes_collection
from src.api.schemas import DeleteResult, InsertResult, UpdateResult
from src.store import recipes as recipe_store
from src.store.documents import coerce_likes, coerce_rating

# Create API router
router = APIRouter(tags=["recipes"])


class RecipeCreate(BaseModel):
    """Request body for creating a recipe.

    Attributes:
        name: Recipe name.
        email: Email of the owner or reviewer who posted it.
        rating: Numeric rating; non-numeric input is stored as 0.
        likes: Initial like counter; non-numeric input is stored as 0.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, description="Recipe name")
    email: Optional[str] = Field(default=None, description="Owner email")
    photo: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    ingredients: Optional[List[str]] = None
    rating: float = Field(default=0.0, description="Rating, defaults to 0")
    likes: int = Field(default=0, description="Like counter, defaults to 0")

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float:
        return coerce_rating(value)

    @field_validator("likes", mode="before")
    @classmethod
    def _coerce_likes(cls, value: Any) -> int:
        return coerce_likes(value)


class RecipeUpdate(BaseModel):
    """Partial update; only the fields sent are replaced."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = None
    photo: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    ingredients: Optional[List[str]] = None
    rating: Optional[float] = None
    likes: Optional[int] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float:
        return coerce_rating(value)

    @field_validator("likes", mode="before")
    @classmethod
    def _coerce_likes(cls, value: Any) -> int:
        return coerce_likes(value)


class RecipeLikesUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Checked by the store layer so every rejection reads the same
    likes: Any = None


@router.post("/recipes", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
def create_recipe(
    body: RecipeCreate,
    collection: Collection = Depends(get_recipes_collection),
) -> Dict[str, Any]:
    """Create a recipe.

    The server stamps ``createdAt``; ``rating`` and ``likes`` default to 0.

    Example:
        POST /recipes {"name": "Pad Thai", "rating": "4.5"}
        Stores rating 4.5 and likes 0.
    """
    return recipe_store.create_recipe(collection, body.model_dump(exclude_none=True))


@router.get("/recipes")
def list_recipes(
    email: Optional[str] = None,
    featured: bool = False,
    collection: Collection = Depends(get_recipes_collection),
) -> List[Dict[str, Any]]:
    """List recipes.

    Args:
        email: Only recipes owned by this email.
        featured: Only the six best rated recipes. Wins over ``email``.
    """
    return recipe_store.list_recipes(collection, email=email, featured=featured)


@router.get("/all-recipes")
def list_all_recipes(
    collection: Collection = Depends(get_recipes_collection),
) -> List[Dict[str, Any]]:
    """All recipes, latest first."""
    return recipe_store.list_all_recipes(collection)


@router.get("/all-recipes/like")
def list_top_liked_recipes(
    collection: Collection = Depends(get_recipes_collection),
) -> List[Dict[str, Any]]:
    """Top six recipes by likes."""
    return recipe_store.list_top_liked_recipes(collection)


@router.get("/recipes/email/{email}")
def list_recipes_by_email(
    email: str,
    collection: Collection = Depends(get_recipes_collection),
) -> List[Dict[str, Any]]:
    return recipe_store.list_recipes(collection, email=email)


@router.get("/recipes/{recipe_id}")
def get_recipe(
    recipe_id: str,
    collection: Collection = Depends(get_recipes_collection),
) -> Dict[str, Any]:
    return recipe_store.get_recipe(collection, recipe_id)


@router.patch("/recipes-likes/{recipe_id}", response_model=UpdateResult)
def update_recipe_likes(
    recipe_id: str,
    body: RecipeLikesUpdate,
    collection: Collection = Depends(get_recipes_collection),
) -> Dict[str, Any]:
    """Set the like counter of a recipe to a non-negative number."""
    return recipe_store.update_recipe_likes(collection, recipe_id, body.likes)


@router.patch("/recipes/{recipe_id}", response_model=UpdateResult)
def update_recipe(
    recipe_id: str,
    body: RecipeUpdate,
    collection: Collection = Depends(get_recipes_collection),
) -> Dict[str, Any]:
    return recipe_store.update_recipe(
        collection, recipe_id, body.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.delete("/recipes/{recipe_id}", response_model=DeleteResult)
def delete_recipe(
    recipe_id: str,
    collection: Collection = Depends(get_recipes_collection),
) -> Dict[str, Any]:
    return recipe_store.delete_recipe(collection, recipe_id)
