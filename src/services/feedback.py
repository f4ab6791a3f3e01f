"""Feedback submission and retrieval.

Submitting feedback upserts the (user, recipe) record, recomputes the recipe's
average rating and folds the rating into the user's preferences.
"""

from typing import Optional

from sqlalchemy.orm import Session

from src.data.sample_recipes import get_sample_recipes
from src.models.models import Recipe, UserFeedback
from src.models.schemas import FeedbackRequest, FeedbackResponse
from src.storage.repository import FeedbackRepository, RecipeRepository, UserRepository
from src.utils.errors import InvalidRequestError
from src.utils.logger import logger


MAX_FEEDBACK_RESULTS = 50


class FeedbackService:
    def __init__(self, db: Session):
        self.users = UserRepository(db)
        self.recipes = RecipeRepository(db)
        self.feedback = FeedbackRepository(db)

    def _stored_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Stored recipe, saving a sample catalog recipe on its first rating."""
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            sample = next((r for r in get_sample_recipes() if r.id == recipe_id), None)
            if sample is not None:
                recipe = self.recipes.save(sample, source="sample")
        return recipe

    def submit(self, request: FeedbackRequest) -> FeedbackResponse:
        # Rating 0 is reported as missing
        if not request.user_id or not request.recipe_id or not request.rating:
            raise InvalidRequestError("Missing required fields: userId, recipeId, rating")
        if not 1 <= request.rating <= 5:
            raise InvalidRequestError("Rating must be between 1 and 5")

        feedback = UserFeedback.model_validate(request.model_dump())
        stored, created = self.feedback.upsert(feedback)

        if self._stored_recipe(stored.recipe_id) is not None:
            recipe = self.recipes.recompute_rating(stored.recipe_id)
            self.users.apply_feedback(stored, recipe)
        else:
            logger.debug(f"Recipe {stored.recipe_id} not stored, skipping rating and preference updates")

        logger.info(
            f"Feedback {'submitted' if created else 'updated'}: rating {stored.rating}",
            extra={"user_id": stored.user_id, "recipe_id": stored.recipe_id},
        )
        return FeedbackResponse(
            success=True,
            message="Feedback submitted successfully" if created else "Feedback updated successfully",
            feedback=stored,
        )

    def list_feedback(self, user_id: Optional[str], recipe_id: Optional[str] = None) -> list[UserFeedback]:
        if not user_id:
            raise InvalidRequestError("userId is required")
        return self.feedback.list_for_user(user_id, recipe_id=recipe_id, limit=MAX_FEEDBACK_RESULTS)
