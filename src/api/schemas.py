"""Response models shared by the entity routers.

The write endpoints return the store's acknowledgement rather than the
written document.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class InsertResult(BaseModel):
    acknowledged: bool = Field(..., description="Whether the store acknowledged the write")
    insertedId: str = Field(..., description="Identifier of the new document")


class UpdateResult(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int
    upsertedId: Optional[str] = None


class DeleteResult(BaseModel):
    acknowledged: bool
    deletedCount: int


class BookmarkResult(BaseModel):
    success: bool
    bookmarked: bool = Field(..., description="Bookmark state after the toggle")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: Dict[str, Any] = Field(default_factory=dict)
