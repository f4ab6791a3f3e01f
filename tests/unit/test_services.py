"""Unit tests for the feedback, recommendation and matching services."""

from unittest.mock import AsyncMock

import pytest

from src.models.models import RecipeGenerationRequest, RecipeOrigin
from src.models.schemas import FeedbackRequest
from src.services.feedback import FeedbackService
from src.services.generation import GenerationResult, RecipeGenerationService
from src.services.matching import MatchingService
from src.services.recommendations import RecommendationService, cooking_time_window
from src.storage.repository import RecipeRepository, UserRepository
from src.utils.errors import InvalidRequestError


class TestFeedbackService:
    @pytest.mark.parametrize(
        "payload",
        [
            {"recipeId": "sample-1", "rating": 4},
            {"userId": "u1", "rating": 4},
            {"userId": "u1", "recipeId": "sample-1"},
            {"userId": "u1", "recipeId": "sample-1", "rating": 0},
        ],
    )
    def test_missing_fields(self, db_session, payload):
        """Test that missing ids or a zero rating are reported as missing fields."""
        with pytest.raises(InvalidRequestError, match="Missing required fields: userId, recipeId, rating"):
            FeedbackService(db_session).submit(FeedbackRequest.model_validate(payload))

    @pytest.mark.parametrize("rating", [6, -1])
    def test_rating_out_of_range(self, db_session, rating):
        """Test the rating range check."""
        request = FeedbackRequest(user_id="u1", recipe_id="sample-1", rating=rating)
        with pytest.raises(InvalidRequestError, match="Rating must be between 1 and 5"):
            FeedbackService(db_session).submit(request)

    def test_submit_then_update(self, db_session):
        """Test the created and updated messages for the same pair."""
        service = FeedbackService(db_session)

        first = service.submit(FeedbackRequest(user_id="u1", recipe_id="sample-2", rating=3))
        second = service.submit(FeedbackRequest(user_id="u1", recipe_id="sample-2", rating=5))

        assert first.message == "Feedback submitted successfully"
        assert second.message == "Feedback updated successfully"
        assert second.feedback.id == first.feedback.id
        assert second.feedback.rating == 5

    def test_rating_sample_recipe_persists_it(self, db_session):
        """Test that the first rating of a catalog recipe stores it and updates its rating."""
        service = FeedbackService(db_session)

        service.submit(FeedbackRequest(user_id="u1", recipe_id="sample-2", rating=4))
        service.submit(FeedbackRequest(user_id="u2", recipe_id="sample-2", rating=5))

        recipe = RecipeRepository(db_session).get("sample-2")
        assert recipe.rating == 4.5
        assert recipe.total_ratings == 2

    def test_high_rating_updates_user_preferences(self, db_session):
        """Test that a rating of 4+ teaches the user's cuisine and time preferences."""
        FeedbackService(db_session).submit(
            FeedbackRequest(user_id="u1", recipe_id="sample-2", rating=5, is_favorite=True)
        )

        profile = UserRepository(db_session).get("u1")
        # Tomato Basil Pasta is italian, 20 minutes
        assert profile.preferences.favorite_cuisines == ["italian"]
        assert profile.preferences.preferred_cooking_time == 25
        assert profile.favorite_recipe_ids == ["sample-2"]
        assert len(profile.feedback_ids) == 1

    def test_unknown_recipe_stores_feedback_only(self, db_session):
        """Test that feedback for an unknown recipe leaves ratings and users alone."""
        service = FeedbackService(db_session)

        response = service.submit(FeedbackRequest(user_id="u1", recipe_id="mystery", rating=5))

        assert response.success is True
        assert UserRepository(db_session).get("u1") is None
        assert len(service.list_feedback("u1")) == 1

    def test_list_requires_user(self, db_session):
        """Test that listing feedback needs a user id."""
        with pytest.raises(InvalidRequestError, match="userId is required"):
            FeedbackService(db_session).list_feedback(None)


class TestCookingTimeWindow:
    @pytest.mark.parametrize("preferred,expected", [(30, (24.0, 36.0)), (10, (15, 12.0)), (60, (48.0, 72.0))])
    def test_window(self, preferred, expected):
        """Test the +/-20% window with a 15 minute floor."""
        assert cooking_time_window(preferred) == pytest.approx(expected)


class TestRecommendationService:
    def test_requires_user_id(self, db_session):
        """Test that a user id is mandatory."""
        with pytest.raises(InvalidRequestError, match="userId is required"):
            RecommendationService(db_session).recommend(None)

    def test_rejects_non_positive_limit(self, db_session):
        """Test that limit must be positive."""
        with pytest.raises(InvalidRequestError):
            RecommendationService(db_session).recommend("u1", limit=-2)

    def test_new_user_empty_database_gets_samples(self, db_session):
        """Test that an empty database falls back to the sample catalog."""
        response = RecommendationService(db_session).recommend("new-user", limit=5)

        assert response.total_found == 5
        assert all(recipe.id.startswith("sample-") for recipe in response.recommendations)
        assert all(recipe.recommendation_score is not None for recipe in response.recommendations)
        assert response.user_preferences.preferred_cooking_time == 30
        assert response.user_preferences.total_feedback == 0

    def test_recommendations_sorted_by_score(self, db_session):
        """Test that recommendations are best first."""
        response = RecommendationService(db_session).recommend("u1", limit=10)

        scores = [recipe.recommendation_score for recipe in response.recommendations]
        assert scores == sorted(scores, reverse=True)

    def test_filtered_pool_from_learned_preferences(self, db_session, recipe_factory):
        """Test that stored recipes matching cuisine and time are preferred and rated ones excluded."""
        FeedbackService(db_session).submit(FeedbackRequest(user_id="u1", recipe_id="sample-2", rating=5))
        recipes = RecipeRepository(db_session)
        recipes.save(recipe_factory("pasta-night", cuisine_type="italian", cooking_time=25))
        recipes.save(recipe_factory("slow-tacos", cuisine_type="mexican", cooking_time=90))

        response = RecommendationService(db_session).recommend("u1", limit=10)

        assert [recipe.id for recipe in response.recommendations] == ["pasta-night"]
        assert response.user_preferences.favorite_cuisines == ["italian"]
        assert response.user_preferences.total_feedback == 1

    def test_relaxes_filters_when_nothing_matches(self, db_session, recipe_factory):
        """Test that unrated recipes are used when no stored recipe fits the preferences."""
        RecipeRepository(db_session).save(recipe_factory("slow-tacos", cuisine_type="mexican", cooking_time=90))

        response = RecommendationService(db_session).recommend("u1", limit=10)

        assert [recipe.id for recipe in response.recommendations] == ["slow-tacos"]

    def test_collaborative_recommendations(self, db_session):
        """Test that recipes loved by similar users are included."""
        feedback = FeedbackService(db_session)
        feedback.submit(FeedbackRequest(user_id="me", recipe_id="sample-2", rating=5))
        feedback.submit(FeedbackRequest(user_id="fan", recipe_id="sample-2", rating=5))
        feedback.submit(FeedbackRequest(user_id="fan", recipe_id="sample-8", rating=4))

        response = RecommendationService(db_session).recommend("me", limit=10)

        ids = [recipe.id for recipe in response.recommendations]
        assert "sample-8" in ids
        assert "sample-2" not in ids


class TestMatchingService:
    @pytest.mark.asyncio
    async def test_fallback_recipes_ranked_with_catalog(self):
        """Test that fallback recipes compete with catalog recipes on score instead of leading."""
        service = MatchingService(generation=RecipeGenerationService())
        request = RecipeGenerationRequest(ingredients=["chicken", "rice", "onion"])

        result = await service.find_matches(request)

        assert result.used_ai is False
        assert {match.origin for match in result.matches} == {RecipeOrigin.CATALOG}
        scores = [match.match_score for match in result.matches]
        assert scores == sorted(scores, reverse=True)
        assert all(score >= 0.3 for score in scores)
        ids = [match.recipe.id for match in result.matches]
        assert ids.index("sample-1") < ids.index("fallback-1")

    @pytest.mark.asyncio
    async def test_ai_recipes_lead_catalog_matches(self, recipe_factory):
        """Test that AI-generated recipes come first even when they score lower."""
        weak = recipe_factory("generated-abc-1", ingredients=("saffron", "quail"))
        generation = RecipeGenerationService()
        generation.generate = AsyncMock(return_value=GenerationResult(recipes=[weak], used_ai=True))
        service = MatchingService(generation=generation)

        result = await service.find_matches(RecipeGenerationRequest(ingredients=["chicken", "rice", "onion"]))

        assert result.used_ai is True
        assert result.matches[0].recipe.id == "generated-abc-1"
        assert result.matches[0].origin == RecipeOrigin.GENERATED
        assert result.matches[0].match_score < result.matches[1].match_score
        assert {match.origin for match in result.matches[1:]} == {RecipeOrigin.CATALOG}

    @pytest.mark.asyncio
    async def test_custom_catalog(self, recipe_factory):
        """Test that an injected catalog replaces the sample recipes."""
        service = MatchingService(generation=RecipeGenerationService(), catalog=[recipe_factory("only-one")])

        result = await service.find_matches(RecipeGenerationRequest(ingredients=["chicken", "rice"]))

        ids = [match.recipe.id for match in result.matches]
        assert ids == ["only-one", "fallback-2", "fallback-1"]
