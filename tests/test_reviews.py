"""Tests for the review endpoints.

Covers strict creation, filtered listings and search, the like toggle
(once per user) and the bookmark toggle (flip per user).
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from src.store.session import REVIEWS

VALID_REVIEW = {
    "email": "ana@example.com",
    "name": "Ana",
    "rating": "4.5",
    "review_text": "Crispy and fresh.",
    "recipe_id": "64b7f0c2a1b2c3d4e5f60718",
    "food_name": "Pad Thai",
}


@pytest.fixture
def reviews(client, store):
    """The reviews collection, available once the client has connected the store."""
    return store.collection(REVIEWS)


def _insert(reviews, **fields):
    document = {
        "email": "ana@example.com",
        "name": "Ana",
        "rating": 4.0,
        "review_text": "Good.",
        "recipe_id": "r1",
        "likes": 0,
        "likedBy": [],
        "bookmarkedBy": [],
        "createdAt": datetime.now(timezone.utc),
    }
    document.update(fields)
    return str(reviews.insert_one(document).inserted_id)


def test_create_review_stamps_and_coerces(client, reviews):
    response = client.post("/reviews", json=VALID_REVIEW)

    assert response.status_code == 201
    stored = reviews.find_one({"_id": ObjectId(response.json()["insertedId"])})
    assert stored["rating"] == 4.5
    assert stored["likes"] == 0
    assert stored["likedBy"] == []
    assert stored["bookmarkedBy"] == []
    assert "createdAt" in stored


@pytest.mark.parametrize("missing", ["email", "name", "rating", "review_text", "recipe_id"])
def test_create_review_requires_fields(client, reviews, missing):
    payload = {k: v for k, v in VALID_REVIEW.items() if k != missing}

    response = client.post("/reviews", json=payload)

    assert response.status_code == 400
    assert reviews.count_documents({}) == 0


def test_list_reviews_filters(client, reviews):
    _insert(reviews, recipe_id="r1", email="a@example.com")
    _insert(reviews, recipe_id="r1", email="b@example.com")
    _insert(reviews, recipe_id="r2", email="a@example.com")

    assert len(client.get("/reviews").json()) == 3
    assert len(client.get("/reviews", params={"recipeId": "r1"}).json()) == 2
    assert len(client.get("/reviews", params={"email": "a@example.com"}).json()) == 2
    assert len(client.get("/reviews/email/b@example.com").json()) == 1


def test_search_is_case_insensitive_substring(client, reviews):
    _insert(reviews, food_name="Pad Thai")
    _insert(reviews, food_name="Spicy PAD Krapow")
    _insert(reviews, food_name="Ramen")
    _insert(reviews, food_name="a.b (special)")

    names = sorted(r["food_name"] for r in client.get("/reviews", params={"search": "pad"}).json())
    assert names == ["Pad Thai", "Spicy PAD Krapow"]

    # Regex metacharacters are matched literally
    special = client.get("/reviews", params={"search": "(special"}).json()
    assert [r["food_name"] for r in special] == ["a.b (special)"]


def test_all_reviews_and_top_liked(client, reviews):
    now = datetime.now(timezone.utc)
    for i in range(8):
        _insert(reviews, review_text=f"t{i}", likes=i, createdAt=now - timedelta(days=8 - i))

    latest = client.get("/all-reviews").json()
    assert [r["review_text"] for r in latest][:2] == ["t7", "t6"]

    top = client.get("/all-reviews/like").json()
    assert [r["likes"] for r in top] == [7, 6, 5, 4, 3, 2]


def test_get_review_not_found_and_malformed(client):
    assert client.get(f"/reviews/{ObjectId()}").status_code == 404
    assert client.get("/reviews/12345").status_code == 400


def test_like_is_idempotent_per_user(client, reviews):
    review_id = _insert(reviews, likes=2, likedBy=["x@example.com", "y@example.com"])

    first = client.patch(f"/reviews-likes/{review_id}", json={"userEmail": "ana@example.com"})
    assert first.status_code == 200
    assert first.json()["likes"] == 3
    assert first.json()["likedBy"] == ["x@example.com", "y@example.com", "ana@example.com"]

    second = client.patch(f"/reviews-likes/{review_id}", json={"userEmail": "ana@example.com"})
    assert second.status_code == 200
    assert second.json()["likes"] == 3
    assert second.json()["likedBy"] == first.json()["likedBy"]


def test_like_on_legacy_review_without_like_fields(client, reviews):
    review_id = str(reviews.insert_one({"review_text": "old", "createdAt": datetime.now(timezone.utc)}).inserted_id)

    response = client.patch(f"/reviews-likes/{review_id}", json={"userEmail": "ana@example.com"})

    assert response.status_code == 200
    assert response.json()["likes"] == 1
    assert response.json()["likedBy"] == ["ana@example.com"]


@pytest.mark.parametrize("body", [{}, {"userEmail": ""}, {"userEmail": "   "}])
def test_like_requires_user_email(client, reviews, body):
    review_id = _insert(reviews)

    response = client.patch(f"/reviews-likes/{review_id}", json=body)

    assert response.status_code == 400
    assert reviews.find_one({"_id": ObjectId(review_id)})["likes"] == 0


def test_like_missing_review_returns_404(client):
    response = client.patch(f"/reviews-likes/{ObjectId()}", json={"userEmail": "ana@example.com"})

    assert response.status_code == 404


def test_bookmark_toggle_flips_back(client, reviews):
    review_id = _insert(reviews, bookmarkedBy=["other@example.com"])
    url = f"/reviews/{review_id}/bookmark"

    first = client.patch(url, json={"userEmail": "ana@example.com"})
    assert first.status_code == 200
    assert first.json() == {"success": True, "bookmarked": True}
    assert client.get("/reviews/bookmarked/ana@example.com").json()[0]["_id"] == review_id

    second = client.patch(url, json={"userEmail": "ana@example.com"})
    assert second.json() == {"success": True, "bookmarked": False}
    assert client.get("/reviews/bookmarked/ana@example.com").json() == []

    stored = reviews.find_one({"_id": ObjectId(review_id)})
    assert stored["bookmarkedBy"] == ["other@example.com"]


def test_bookmark_missing_review_returns_404(client):
    response = client.patch(f"/reviews/{ObjectId()}/bookmark", json={"userEmail": "ana@example.com"})

    assert response.status_code == 404


def test_bookmark_requires_user_email(client, reviews):
    review_id = _insert(reviews)

    response = client.patch(f"/reviews/{review_id}/bookmark", json={})

    assert response.status_code == 400


def test_update_review_cannot_touch_like_fields(client, reviews):
    review_id = _insert(reviews)

    response = client.patch(f"/reviews/{review_id}", json={"likedBy": ["me@example.com"]})

    assert response.status_code == 400


def test_update_and_delete_review(client, reviews):
    review_id = _insert(reviews, review_text="Good.")

    updated = client.patch(f"/reviews/{review_id}", json={"review_text": "Great."})
    assert updated.status_code == 200
    assert client.get(f"/reviews/{review_id}").json()["review_text"] == "Great."

    assert client.delete(f"/reviews/{review_id}").status_code == 200
    assert client.delete(f"/reviews/{review_id}").status_code == 404


def test_update_missing_review_returns_404(client):
    response = client.patch(f"/reviews/{ObjectId()}", json={"review_text": "Great."})

    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"


def test_update_review_without_changes_returns_404(client, reviews):
    """Test that re-sending the stored text counts as nothing modified."""
    review_id = _insert(reviews, review_text="Good.")

    response = client.patch(f"/reviews/{review_id}", json={"review_text": "Good."})

    assert response.status_code == 404
    assert "not found or no changes made" in response.json()["message"]


def test_update_review_ignores_null_fields(client, reviews):
    review_id = _insert(reviews, review_text="Good.")

    only_null = client.patch(f"/reviews/{review_id}", json={"review_text": None})
    assert only_null.status_code == 400

    response = client.patch(f"/reviews/{review_id}", json={"review_text": None, "food_name": "Ramen"})

    assert response.status_code == 200
    stored = reviews.find_one({"_id": ObjectId(review_id)})
    assert stored["review_text"] == "Good."
    assert stored["food_name"] == "Ramen"
