"""Repositories over the SQLAlchemy tables.

Each repository wraps a request-scoped Session and converts between ORM
records and the pydantic domain models, so services never see ORM objects.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.models import Recipe, UserFeedback, UserPreferences, UserProfile
from src.storage.database import FeedbackRecord, RecipeRecord, UserRecord
from src.utils.logger import logger


FEEDBACK_FIELDS = (
    "rating",
    "review",
    "cooking_notes",
    "taste_rating",
    "difficulty_rating",
    "presentation_rating",
    "is_favorite",
    "would_cook_again",
    "tags",
)


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero: 2.25 -> 2.3, 2.5 -> 3."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class RecipeRepository:
    """Repository for stored recipes."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, recipe: Recipe, is_ai_generated: bool = False, source: str = "user") -> Recipe:
        """Insert a recipe, or replace the stored document when the id already exists.

        Rating and rating count are owned by feedback and survive a re-save.
        """
        record = self.db.query(RecipeRecord).filter(RecipeRecord.recipe_id == recipe.id).first()
        if record is None:
            record = RecipeRecord(recipe_id=recipe.id, rating=recipe.rating, total_ratings=recipe.total_ratings)
            self.db.add(record)
            logger.info(f"Saving new recipe {recipe.id}", extra={"recipe_id": recipe.id})
        else:
            recipe = recipe.model_copy(update={"rating": record.rating, "total_ratings": record.total_ratings})
            logger.info(f"Updating stored recipe {recipe.id}", extra={"recipe_id": recipe.id})

        record.name = recipe.name
        record.cuisine_type = recipe.cuisine_type
        record.cooking_time = recipe.cooking_time
        record.difficulty = recipe.difficulty.value
        record.is_ai_generated = is_ai_generated
        record.source = source
        record.payload = recipe.model_dump(mode="json", by_alias=True, exclude={"recommendation_score"})

        self.db.commit()
        self.db.refresh(record)
        return self._to_model(record)

    def get(self, recipe_id: str) -> Optional[Recipe]:
        record = self.db.query(RecipeRecord).filter(RecipeRecord.recipe_id == recipe_id).first()
        return self._to_model(record) if record else None

    def count(self) -> int:
        return self.db.query(RecipeRecord).count()

    def find_candidates(
        self,
        exclude_ids: Iterable[str],
        cuisines: Optional[Iterable[str]] = None,
        min_time: Optional[float] = None,
        max_time: Optional[float] = None,
        limit: int = 20,
    ) -> List[Recipe]:
        """Recipes not in `exclude_ids`, optionally filtered by cuisine and cooking time.

        Ordered by rating then rating count, both descending.
        """
        query = self.db.query(RecipeRecord)

        excluded = list(exclude_ids)
        if excluded:
            query = query.filter(RecipeRecord.recipe_id.notin_(excluded))

        cuisine_list = [c.lower() for c in (cuisines or [])]
        if cuisine_list:
            query = query.filter(func.lower(RecipeRecord.cuisine_type).in_(cuisine_list))

        if min_time is not None:
            query = query.filter(RecipeRecord.cooking_time >= min_time)
        if max_time is not None:
            query = query.filter(RecipeRecord.cooking_time <= max_time)

        records = (
            query.order_by(RecipeRecord.rating.desc(), RecipeRecord.total_ratings.desc(), RecipeRecord.id)
            .limit(limit)
            .all()
        )
        return [self._to_model(record) for record in records]

    def get_by_ids(self, recipe_ids: Iterable[str], limit: int) -> List[Recipe]:
        """Recipes with the given ids, highest rated first."""
        ids = list(recipe_ids)
        if not ids:
            return []
        records = (
            self.db.query(RecipeRecord)
            .filter(RecipeRecord.recipe_id.in_(ids))
            .order_by(RecipeRecord.rating.desc(), RecipeRecord.id)
            .limit(limit)
            .all()
        )
        return [self._to_model(record) for record in records]

    def recompute_rating(self, recipe_id: str) -> Optional[Recipe]:
        """Set rating to the average of all feedback (one decimal) and total_ratings to the count.

        Returns the updated recipe, or None if the recipe is not stored.
        """
        record = self.db.query(RecipeRecord).filter(RecipeRecord.recipe_id == recipe_id).first()
        if record is None:
            return None

        average, count = (
            self.db.query(func.avg(FeedbackRecord.rating), func.count(FeedbackRecord.id))
            .filter(FeedbackRecord.recipe_id == recipe_id)
            .one()
        )
        if count == 0:
            return self._to_model(record)

        record.rating = round_half_up(float(average), 1)
        record.total_ratings = count
        self.db.commit()
        self.db.refresh(record)
        logger.debug(f"Recipe {recipe_id} rating now {record.rating} from {count} ratings")
        return self._to_model(record)

    @staticmethod
    def _to_model(record: RecipeRecord) -> Recipe:
        recipe = Recipe.model_validate(record.payload)
        return recipe.model_copy(update={"rating": record.rating, "total_ratings": record.total_ratings})


class FeedbackRepository:
    """Repository for recipe feedback, one record per (user_id, recipe_id)."""

    def __init__(self, db: Session):
        self.db = db

    def upsert(self, feedback: UserFeedback) -> tuple[UserFeedback, bool]:
        """Create or update the user's feedback for a recipe.

        Returns:
            (stored feedback, True if a new record was created)
        """
        record = (
            self.db.query(FeedbackRecord)
            .filter(FeedbackRecord.user_id == feedback.user_id, FeedbackRecord.recipe_id == feedback.recipe_id)
            .first()
        )
        created = record is None
        if created:
            record = FeedbackRecord(user_id=feedback.user_id, recipe_id=feedback.recipe_id)
            self.db.add(record)

        for field in FEEDBACK_FIELDS:
            setattr(record, field, getattr(feedback, field))

        self.db.commit()
        self.db.refresh(record)
        return self._to_model(record), created

    def list_for_user(self, user_id: str, recipe_id: Optional[str] = None, limit: int = 50) -> List[UserFeedback]:
        """The user's feedback, newest first."""
        query = self.db.query(FeedbackRecord).filter(FeedbackRecord.user_id == user_id)
        if recipe_id:
            query = query.filter(FeedbackRecord.recipe_id == recipe_id)
        records = query.order_by(FeedbackRecord.created_at.desc(), FeedbackRecord.id.desc()).limit(limit).all()
        return [self._to_model(record) for record in records]

    def list_high_ratings_from_others(self, user_id: str, min_rating: int = 4) -> List[UserFeedback]:
        """Other users' feedback rated at least `min_rating`, oldest first."""
        records = (
            self.db.query(FeedbackRecord)
            .filter(FeedbackRecord.user_id != user_id, FeedbackRecord.rating >= min_rating)
            .order_by(FeedbackRecord.created_at, FeedbackRecord.id)
            .all()
        )
        return [self._to_model(record) for record in records]

    @staticmethod
    def _to_model(record: FeedbackRecord) -> UserFeedback:
        return UserFeedback(
            id=record.id,
            user_id=record.user_id,
            recipe_id=record.recipe_id,
            rating=record.rating,
            review=record.review,
            cooking_notes=record.cooking_notes,
            taste_rating=record.taste_rating,
            difficulty_rating=record.difficulty_rating,
            presentation_rating=record.presentation_rating,
            is_favorite=record.is_favorite,
            would_cook_again=record.would_cook_again,
            tags=record.tags or [],
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class UserRepository:
    """Repository for user profiles and their learned preferences."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[UserProfile]:
        record = self.db.query(UserRecord).filter(UserRecord.user_id == user_id).first()
        return self._to_model(record) if record else None

    def get_or_create(self, user_id: str) -> UserProfile:
        return self._to_model(self._get_or_create_record(user_id))

    def apply_feedback(self, feedback: UserFeedback, recipe: Recipe) -> UserProfile:
        """Fold one piece of feedback into the user's profile.

        The feedback id joins the history; the recipe joins or leaves the
        favorites depending on `is_favorite`. A rating of 4 or more adds the
        recipe's cuisine to the favorite cuisines and moves the preferred
        cooking time halfway toward the recipe's time when it has one.
        """
        record = self._get_or_create_record(feedback.user_id)

        feedback_ids = list(record.feedback_ids or [])
        if feedback.id is not None and feedback.id not in feedback_ids:
            feedback_ids.append(feedback.id)

        favorites = list(record.favorite_recipe_ids or [])
        if feedback.is_favorite and recipe.id not in favorites:
            favorites.append(recipe.id)
        elif not feedback.is_favorite:
            favorites = [recipe_id for recipe_id in favorites if recipe_id != recipe.id]

        preferences = UserPreferences.model_validate(record.preferences or {})
        if feedback.rating >= 4:
            if recipe.cuisine_type not in preferences.favorite_cuisines:
                preferences.favorite_cuisines.append(recipe.cuisine_type)
            if recipe.cooking_time > 0:
                preferences.preferred_cooking_time = int(
                    round_half_up((preferences.preferred_cooking_time + recipe.cooking_time) / 2)
                )

        # JSON columns only persist on reassignment
        record.feedback_ids = feedback_ids
        record.favorite_recipe_ids = favorites
        record.preferences = preferences.model_dump(mode="json", by_alias=True)

        self.db.commit()
        self.db.refresh(record)
        logger.debug(f"Updated preferences for {feedback.user_id}", extra={"user_id": feedback.user_id})
        return self._to_model(record)

    def _get_or_create_record(self, user_id: str) -> UserRecord:
        record = self.db.query(UserRecord).filter(UserRecord.user_id == user_id).first()
        if record is None:
            record = UserRecord(
                user_id=user_id,
                preferences=UserPreferences().model_dump(mode="json", by_alias=True),
                favorite_recipe_ids=[],
                feedback_ids=[],
            )
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
            logger.info(f"Created new user {user_id}", extra={"user_id": user_id})
        return record

    @staticmethod
    def _to_model(record: UserRecord) -> UserProfile:
        return UserProfile(
            user_id=record.user_id,
            preferences=UserPreferences.model_validate(record.preferences or {}),
            favorite_recipe_ids=list(record.favorite_recipe_ids or []),
            feedback_ids=list(record.feedback_ids or []),
        )
