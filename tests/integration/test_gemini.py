"""Integration tests against the live Gemini API.

Run with: pytest tests/integration
"""

from io import BytesIO

import pytest
from PIL import Image

from src.models.models import RecipeGenerationRequest
from src.services.detection import detect_ingredients
from src.services.generation import RecipeGenerationService
from src.services.matching import MatchingService
from src.utils.config import config


pytestmark = pytest.mark.integration


class TestLiveGeneration:
    @pytest.mark.asyncio
    async def test_generates_structured_recipes(self):
        """Test that Gemini returns valid recipes for a simple request."""
        request = RecipeGenerationRequest(ingredients=["chicken", "rice", "onion"], cooking_time=45)

        result = await RecipeGenerationService().generate(request)

        assert result.used_ai is True
        assert 1 <= len(result.recipes) <= config.MAX_GENERATED_RECIPES
        for recipe in result.recipes:
            assert recipe.id.startswith("generated-")
            assert recipe.ingredients
            assert [s.step_number for s in recipe.instructions] == list(range(1, len(recipe.instructions) + 1))

    @pytest.mark.asyncio
    async def test_vegetarian_request_has_no_meat(self):
        """Test that vegetarian output contains no chicken after the swap pass."""
        request = RecipeGenerationRequest(ingredients=["chicken", "broccoli"], dietary_preferences=["vegetarian"])

        result = await RecipeGenerationService().generate(request)

        for recipe in result.recipes:
            assert all("chicken" not in item.ingredient.lower() for item in recipe.ingredients)

    @pytest.mark.asyncio
    async def test_matches_lead_with_generated(self):
        """Test the end-to-end match flow with real generation."""
        result = await MatchingService().find_matches(RecipeGenerationRequest(ingredients=["tomato", "pasta", "basil"]))

        assert result.matches
        assert result.matches[0].origin.value == "generated"


class TestLiveDetection:
    @pytest.mark.asyncio
    async def test_detection_returns_list(self):
        """Test that a plain image round-trips through the vision API."""
        buffer = BytesIO()
        Image.new("RGB", (64, 64), (220, 30, 30)).save(buffer, format="PNG")

        ingredients = await detect_ingredients(buffer.getvalue())

        assert isinstance(ingredients, list)
        assert len(ingredients) <= config.MAX_DETECTED_INGREDIENTS
