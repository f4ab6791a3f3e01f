"""Unit tests for the HTTP API.

Routes run against an in-memory database and the no-key generation service,
so every response here is deterministic.
"""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.api.app import app
from src.api.routes import get_generation_service
from src.services.generation import RecipeGenerationService
from src.storage.database import get_db


def _png_bytes():
    buffer = BytesIO()
    Image.new("RGB", (8, 8), (0, 128, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generation_service] = lambda: RecipeGenerationService()
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        """Test the liveness endpoint and request id header."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert response.headers["X-Request-ID"]


class TestRecipesFromIngredients:
    def test_fallback_recipes_without_key(self, client):
        """Test that generation answers with fallback recipes when no key is configured."""
        response = client.post("/recipes-from-ingredients", json={"ingredients": ["chicken", "rice"]})

        assert response.status_code == 200
        recipes = response.json()["recipes"]
        assert [recipe["id"] for recipe in recipes] == ["fallback-1", "fallback-2"]
        assert "cookingTime" in recipes[0]

    def test_empty_ingredients(self, client):
        """Test that an empty ingredient list is a 400."""
        response = client.post("/recipes-from-ingredients", json={"ingredients": []})

        assert response.status_code == 400
        assert "ingredients" in response.json()["error"]

    def test_too_many_ingredients(self, client):
        """Test the 20 ingredient limit."""
        response = client.post("/recipes-from-ingredients", json={"ingredients": [f"item {i}" for i in range(21)]})

        assert response.status_code == 400

    def test_unknown_dietary_preference(self, client):
        """Test that validator messages are passed through without pydantic's prefix."""
        response = client.post(
            "/recipes-from-ingredients",
            json={"ingredients": ["rice"], "dietaryPreferences": ["carnivore"]},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "dietaryPreferences: Unknown dietary preferences: carnivore"

    def test_unexpected_error_is_500(self):
        """Test that unhandled errors return a generic message."""
        broken = MagicMock()
        broken.generate = AsyncMock(side_effect=RuntimeError("database exploded"))
        app.dependency_overrides[get_generation_service] = lambda: broken
        try:
            response = TestClient(app, raise_server_exceptions=False).post(
                "/recipes-from-ingredients", json={"ingredients": ["rice"]}
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestRecipeMatches:
    def test_matches(self, client):
        """Test that without AI the fallback and catalog recipes are ranked together by score, in camelCase."""
        response = client.post("/recipe-matches", json={"ingredients": ["chicken", "rice", "onion"]})

        assert response.status_code == 200
        body = response.json()
        assert body["usedAi"] is False
        assert body["totalFound"] == len(body["matches"])
        assert {m["origin"] for m in body["matches"]} == {"catalog"}
        scores = [m["matchScore"] for m in body["matches"]]
        assert scores == sorted(scores, reverse=True)
        assert {"matchScore", "ingredientMatches", "dietaryCompatibility", "explanation"} <= body["matches"][0].keys()


class TestIngredientsFromImage:
    def test_no_image(self, client):
        """Test that a request without image or URL is a 400."""
        response = client.post("/ingredients-from-image")

        assert response.status_code == 400
        assert response.json() == {"error": "No image provided"}

    def test_unsupported_format(self, client):
        """Test that non JPEG/PNG uploads are a 400."""
        response = client.post("/ingredients-from-image", files={"image": ("photo.gif", b"GIF89a....", "image/gif")})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid image format. Only JPEG and PNG are supported."

    def test_vision_unavailable_is_502(self, client):
        """Test that detection failures map to 502."""
        response = client.post("/ingredients-from-image", files={"image": ("photo.png", _png_bytes(), "image/png")})

        assert response.status_code == 502
        assert response.json() == {"error": "Image recognition failed"}

    def test_detected_ingredients(self, client):
        """Test the happy path with the detector mocked."""
        with patch("src.api.routes.detect_ingredients", AsyncMock(return_value=["tomato", "basil"])):
            response = client.post(
                "/ingredients-from-image", files={"image": ("photo.png", _png_bytes(), "image/png")}
            )

        assert response.status_code == 200
        assert response.json() == {"ingredients": ["tomato", "basil"]}

    def test_image_url(self, client):
        """Test that a data URL is accepted in place of an upload."""
        with patch("src.api.routes.detect_ingredients", AsyncMock(return_value=["egg"])) as detect:
            response = client.post(
                "/ingredients-from-image", data={"imageUrl": "data:image/png;base64,iVBORw0KGgo="}
            )

        assert response.status_code == 200
        detect.assert_awaited_once()


class TestFeedbackEndpoints:
    @pytest.mark.parametrize(
        "payload,message",
        [
            ({"userId": "u1", "recipeId": "sample-1", "rating": 0}, "Missing required fields: userId, recipeId, rating"),
            ({"userId": "u1", "rating": 4}, "Missing required fields: userId, recipeId, rating"),
            ({"userId": "u1", "recipeId": "sample-1", "rating": 6}, "Rating must be between 1 and 5"),
        ],
    )
    def test_invalid_feedback(self, client, payload, message):
        """Test the feedback validation messages."""
        response = client.post("/feedback", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": message}

    def test_submit_update_and_list(self, client):
        """Test submitting, updating and listing feedback."""
        payload = {"userId": "u1", "recipeId": "sample-1", "rating": 4, "review": "Tasty"}

        created = client.post("/feedback", json=payload)
        updated = client.post("/feedback", json={**payload, "rating": 5})
        listed = client.get("/feedback", params={"userId": "u1"})

        assert created.json()["message"] == "Feedback submitted successfully"
        assert updated.json()["message"] == "Feedback updated successfully"
        assert updated.json()["feedback"]["rating"] == 5
        assert listed.status_code == 200
        assert [f["recipeId"] for f in listed.json()["feedback"]] == ["sample-1"]

    def test_list_requires_user(self, client):
        """Test that listing without userId is a 400."""
        response = client.get("/feedback")

        assert response.status_code == 400
        assert response.json() == {"error": "userId is required"}


class TestRecommendationsEndpoint:
    def test_requires_user(self, client):
        """Test that userId is mandatory."""
        response = client.get("/recommendations")

        assert response.status_code == 400
        assert response.json() == {"error": "userId is required"}

    def test_recommendations(self, client):
        """Test the recommendation payload shape."""
        response = client.get("/recommendations", params={"userId": "u1", "limit": 3})

        assert response.status_code == 200
        body = response.json()
        assert body["totalFound"] == 3
        assert len(body["recommendations"]) == 3
        assert body["userPreferences"]["preferredCookingTime"] == 30
        assert body["recommendations"][0]["recommendationScore"] is not None


class TestRecipeStorage:
    def test_save_and_fetch(self, client):
        """Test that a saved recipe can be fetched by id."""
        recipe = client.post("/recipes-from-ingredients", json={"ingredients": ["tomato"]}).json()["recipes"][1]

        saved = client.post("/recipes", params={"aiGenerated": "true"}, json=recipe)
        fetched = client.get(f"/recipes/{recipe['id']}")

        assert saved.status_code == 200
        assert saved.json()["success"] is True
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Simple Tomato Skillet"

    def test_unknown_recipe_is_404(self, client):
        """Test the not-found mapping."""
        response = client.get("/recipes/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Recipe not found: nope"}
