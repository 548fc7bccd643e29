"""Favorite endpoints for the Local Food Lovers Network API."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from pymongo.collection import Collection

from src.api.dependencies import get_favorites_collection
from src.api.schemas import DeleteResult, InsertResult
from src.store import favorites as favorite_store

# Create API router
router = APIRouter(
    prefix="/favorites",
    tags=["favorites"],
)


class FavoriteCreate(BaseModel):
    """Request body for saving a favorite.

    Attributes:
        userEmail: Owner of the favorite.
        recipeId: Identifier of the saved recipe (not checked).
        recipe: Snapshot of the recipe fields shown in the favorites list,
            stored as sent.
    """

    model_config = ConfigDict(extra="forbid")

    userEmail: Optional[str] = None
    recipeId: Optional[str] = None
    recipe: Dict[str, Any] = Field(default_factory=dict)


@router.post("", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
def create_favorite(
    body: FavoriteCreate,
    collection: Collection = Depends(get_favorites_collection),
) -> Dict[str, Any]:
    return favorite_store.create_favorite(collection, body.model_dump(exclude_none=True))


@router.get("")
def list_favorites(
    email: Optional[str] = None,
    collection: Collection = Depends(get_favorites_collection),
) -> List[Dict[str, Any]]:
    """List favorites, optionally only those saved by ``email``."""
    return favorite_store.list_favorites(collection, email=email)


@router.delete("/{favorite_id}", response_model=DeleteResult)
def delete_favorite(
    favorite_id: str,
    collection: Collection = Depends(get_favorites_collection),
) -> Dict[str, Any]:
    return favorite_store.delete_favorite(collection, favorite_id)
