"""FastAPI dependencies resolving the shared store session and its collections."""

from fastapi import Request
from pymongo.collection import Collection

from src.store.session import FAVORITES, RECIPES, REVIEWS, StoreSession


def get_store(request: Request) -> StoreSession:
    return request.app.state.store


def get_recipes_collection(request: Request) -> Collection:
    return get_store(request).collection(RECIPES)


def get_reviews_collection(request: Request) -> Collection:
    return get_store(request).collection(REVIEWS)


def get_favorites_collection(request: Request) -> Collection:
    return get_store(request).collection(FAVORITES)
