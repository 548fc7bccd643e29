"""Seed the document store with fake recipes, reviews and favorites.

This module creates synthetic documents for local development and demos. It
connects with the same settings as the server (environment or ``.env``).

Example:
    Run the script directly to seed the configured database:
        $ python scripts/seed_data.py

    Or import and use programmatically:
        from scripts.seed_data import generate_fake_recipes
        recipes = generate_fake_recipes(num_recipes=10)
"""

import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import get_settings
from src.store.session import FAVORITES, RECIPES, REVIEWS, StoreSession

# Default configuration constants
DEFAULT_NUM_USERS = 10
DEFAULT_NUM_RECIPES = 20
DEFAULT_NUM_REVIEWS = 60
DEFAULT_NUM_FAVORITES = 15
DEFAULT_DAYS_BACK = 90
SECONDS_PER_DAY = 86400

DISHES = [
    "Pad Thai",
    "Chicken Biryani",
    "Beef Pho",
    "Margherita Pizza",
    "Shakshuka",
    "Fish Tacos",
    "Ramen",
    "Falafel Wrap",
    "Butter Chicken",
    "Mushroom Risotto",
]
CATEGORIES = ["Street Food", "Dinner", "Breakfast", "Dessert", "Snack"]


def _user_emails(num_users: int) -> List[str]:
    return [f"user{i}@example.com" for i in range(1, num_users + 1)]


def _random_timestamp(end_date: datetime, days_back: int) -> datetime:
    return end_date - timedelta(
        days=random.randrange(days_back),
        seconds=random.randrange(SECONDS_PER_DAY),
    )


def generate_fake_recipes(
    num_recipes: int = DEFAULT_NUM_RECIPES,
    num_users: int = DEFAULT_NUM_USERS,
    end_date: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Generate synthetic recipe documents.

    Args:
        num_recipes: Number of recipes to create. Must be positive.
        num_users: Number of distinct owner emails. Must be positive.
        end_date: Latest creation timestamp. Defaults to now.

    Returns:
        Recipe documents with ``name``, ``email``, ``category``, ``rating``,
        ``likes`` and ``createdAt``.

    Raises:
        ValueError: If a count is non-positive.
    """
    if num_recipes <= 0 or num_users <= 0:
        raise ValueError("num_recipes and num_users must be positive")

    end_date = end_date or datetime.now(timezone.utc)
    emails = _user_emails(num_users)

    return [
        {
            "name": random.choice(DISHES),
            "email": random.choice(emails),
            "category": random.choice(CATEGORIES),
            "rating": round(random.uniform(1, 5), 1),
            "likes": random.randint(0, 50),
            "createdAt": _random_timestamp(end_date, DEFAULT_DAYS_BACK),
        }
        for _ in range(num_recipes)
    ]


def generate_fake_reviews(
    recipe_ids: List[str],
    num_reviews: int = DEFAULT_NUM_REVIEWS,
    num_users: int = DEFAULT_NUM_USERS,
    end_date: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Generate synthetic reviews of the given recipes.

    ``likes`` always equals ``len(likedBy)``, as the like toggle keeps it.
    """
    if not recipe_ids:
        raise ValueError("recipe_ids must not be empty")
    if num_reviews <= 0 or num_users <= 0:
        raise ValueError("num_reviews and num_users must be positive")

    end_date = end_date or datetime.now(timezone.utc)
    emails = _user_emails(num_users)

    reviews = []
    for _ in range(num_reviews):
        email = random.choice(emails)
        liked_by = random.sample(emails, random.randint(0, len(emails)))
        reviews.append({
            "email": email,
            "name": email.split("@")[0].title(),
            "food_name": random.choice(DISHES),
            "rating": round(random.uniform(1, 5), 1),
            "review_text": "Would happily eat this again.",
            "recipe_id": random.choice(recipe_ids),
            "likes": len(liked_by),
            "likedBy": liked_by,
            "bookmarkedBy": random.sample(emails, random.randint(0, 3)),
            "createdAt": _random_timestamp(end_date, DEFAULT_DAYS_BACK),
        })
    return reviews


def generate_fake_favorites(
    recipes: List[Dict[str, Any]],
    recipe_ids: List[str],
    num_favorites: int = DEFAULT_NUM_FAVORITES,
    num_users: int = DEFAULT_NUM_USERS,
) -> List[Dict[str, Any]]:
    """Generate favorites pointing at the given recipes.

    ``recipe_ids`` holds the stored identifier of each entry of ``recipes``.

    Raises:
        ValueError: If there are no recipes or a count is non-positive.
    """
    if not recipes or not recipe_ids:
        raise ValueError("recipes and recipe_ids must not be empty")
    if num_favorites <= 0 or num_users <= 0:
        raise ValueError("num_favorites and num_users must be positive")

    emails = _user_emails(num_users)
    saved = list(zip(recipe_ids, recipes))

    favorites = []
    for _ in range(num_favorites):
        recipe_id, recipe = random.choice(saved)
        favorites.append({
            "userEmail": random.choice(emails),
            "recipeId": recipe_id,
            "recipe": {"name": recipe["name"], "rating": recipe["rating"]},
            "createdAt": datetime.now(timezone.utc),
        })
    return favorites


def seed(store: StoreSession) -> Dict[str, int]:
    """Insert fake documents through a connected store session.

    Returns:
        Number of inserted documents per collection.
    """
    recipes = generate_fake_recipes()
    result = store.collection(RECIPES).insert_many(recipes)

    recipe_ids = [str(oid) for oid in result.inserted_ids]
    reviews = generate_fake_reviews(recipe_ids)
    store.collection(REVIEWS).insert_many(reviews)

    favorites = generate_fake_favorites(recipes, recipe_ids)
    store.collection(FAVORITES).insert_many(favorites)

    return {
        RECIPES: len(recipes),
        REVIEWS: len(reviews),
        FAVORITES: len(favorites),
    }


def main() -> None:
    """Seed the configured database and print a summary."""
    settings = get_settings()
    store = StoreSession(settings)

    print(f"Seeding database '{settings.db_name}'...")
    store.connect()
    if not store.ping():
        print("Error: the document store is not reachable")
        store.close()
        sys.exit(1)

    try:
        counts = seed(store)
    finally:
        store.close()

    print("\nData seeded successfully!")
    for name, count in counts.items():
        print(f"  {name}: {count}")


if __name__ == '__main__':
    main()
