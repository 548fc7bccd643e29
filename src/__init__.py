"""Local Food Lovers Network: recipe and review sharing backend.

This package provides a REST service for creating, listing, liking,
bookmarking and deleting recipes, reviews and favorites stored in MongoDB.

Modules:
    api: FastAPI application, routers and request schemas
    store: MongoDB session lifecycle and collection operations
"""

__version__ = "0.1.0"
