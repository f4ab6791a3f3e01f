"""Personalized recommendation feed.

Builds the candidate pool from storage (favorite cuisines, cooking time near
the user's preference, nothing already rated), relaxing the filters and
finally falling back to the sample catalog when storage has nothing to offer.
Candidates are ranked, then topped up with recipes liked by other
high-rating users.
"""

from typing import Optional

from sqlalchemy.orm import Session

from src.data.sample_recipes import get_sample_recipes
from src.models.models import Recipe, UserPreferences
from src.models.schemas import RecommendationPreferences, RecommendationsResponse
from src.recommendations.ranker import RecommendationRanker, collaborative_recipe_ids, merge_recommendations
from src.storage.repository import FeedbackRepository, RecipeRepository, UserRepository
from src.utils.config import config
from src.utils.errors import InvalidRequestError
from src.utils.logger import logger


HISTORY_SIZE = 20
TIME_TOLERANCE = 0.2
MIN_TIME_WINDOW_START = 15


def cooking_time_window(preferred_time: int) -> tuple[float, float]:
    """Cooking times within 20% of the preference, never starting below 15 minutes."""
    spread = preferred_time * TIME_TOLERANCE
    return max(MIN_TIME_WINDOW_START, preferred_time - spread), preferred_time + spread


class RecommendationService:
    def __init__(self, db: Session, ranker: Optional[RecommendationRanker] = None):
        self.users = UserRepository(db)
        self.recipes = RecipeRepository(db)
        self.feedback = FeedbackRepository(db)
        self.ranker = ranker or RecommendationRanker()

    def candidate_pool(self, preferences: UserPreferences, rated_ids: list[str], limit: int) -> list[Recipe]:
        min_time, max_time = cooking_time_window(preferences.preferred_cooking_time)
        candidates = self.recipes.find_candidates(
            exclude_ids=rated_ids,
            cuisines=preferences.favorite_cuisines,
            min_time=min_time,
            max_time=max_time,
            limit=limit * 2,
        )
        if candidates:
            return candidates

        logger.debug("No recipes match preferences, relaxing to unrated recipes")
        candidates = self.recipes.find_candidates(exclude_ids=rated_ids, limit=limit * 2)
        if candidates:
            return candidates

        logger.info("No recipes in database, using sample recipes")
        excluded = set(rated_ids)
        return [recipe for recipe in get_sample_recipes() if recipe.id not in excluded]

    def recommend(self, user_id: Optional[str], limit: Optional[int] = None) -> RecommendationsResponse:
        if not user_id:
            raise InvalidRequestError("userId is required")
        limit = limit or config.DEFAULT_RECOMMENDATION_LIMIT
        if limit < 1:
            raise InvalidRequestError("limit must be a positive integer")

        profile = self.users.get_or_create(user_id)
        preferences = profile.preferences

        history = self.feedback.list_for_user(user_id, limit=HISTORY_SIZE)
        rated_ids = [record.recipe_id for record in history]
        rated_recipes = [self.recipes.get(recipe_id) for recipe_id in rated_ids]

        ranked = self.ranker.rank(self.candidate_pool(preferences, rated_ids, limit), preferences, rated_recipes)

        collaborative: list[Recipe] = []
        if history:
            others = self.feedback.list_high_ratings_from_others(user_id)
            collaborative = self.recipes.get_by_ids(collaborative_recipe_ids(others, user_id, rated_ids), limit)

        recommendations = merge_recommendations(ranked, collaborative, limit=limit)
        logger.info(
            f"Recommending {len(recommendations)} recipes ({len(collaborative)} collaborative candidates)",
            extra={"user_id": user_id},
        )

        return RecommendationsResponse(
            recommendations=recommendations,
            user_preferences=RecommendationPreferences(
                favorite_cuisines=preferences.favorite_cuisines,
                preferred_cooking_time=preferences.preferred_cooking_time,
                dietary_restrictions=preferences.dietary_restrictions,
                total_feedback=len(history),
            ),
            total_found=len(recommendations),
        )
