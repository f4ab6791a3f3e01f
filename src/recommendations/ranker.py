"""Personalized recommendation scoring.

Ranks stored recipes for a user's feed from their saved preferences and
rating history, and picks collaborative candidates from other users who rate
highly. Both steps are pure; storage access lives in the service layer.
"""

from collections import Counter
from typing import Iterable, Optional, Sequence

from src.models.models import Difficulty, Recipe, UserFeedback, UserPreferences


FAVORITE_CUISINE_BONUS = 10
CLOSE_TIME_BONUS = 5  # within 10 minutes of the preferred time
NEAR_TIME_BONUS = 2  # within 20 minutes
MAX_POPULARITY_BONUS = 5
DIFFICULTY_BONUS = 3

COLLABORATIVE_MIN_RATING = 4
COLLABORATIVE_MIN_AVERAGE = 4.0
COLLABORATIVE_MAX_USERS = 10


def preferred_difficulty(rated_recipes: Sequence[Optional[Recipe]]) -> Difficulty:
    """Most frequent difficulty among recipes the user rated.

    A rated recipe that no longer resolves counts as medium. Ties go to the
    difficulty encountered first. No history means medium.
    """
    if not rated_recipes:
        return Difficulty.MEDIUM
    counts = Counter(recipe.difficulty if recipe is not None else Difficulty.MEDIUM for recipe in rated_recipes)
    # most_common keeps insertion order among equal counts
    return counts.most_common(1)[0][0]


def time_bonus(cooking_time: int, preferred_time: int) -> int:
    diff = abs(cooking_time - preferred_time)
    if diff <= 10:
        return CLOSE_TIME_BONUS
    if diff <= 20:
        return NEAR_TIME_BONUS
    return 0


class RecommendationRanker:
    """Scores candidates as rating*2 + cuisine, time, popularity and difficulty bonuses."""

    def score(self, recipe: Recipe, preferences: UserPreferences, difficulty: Difficulty) -> float:
        favorites = {cuisine.lower() for cuisine in preferences.favorite_cuisines}

        score = recipe.rating * 2
        if recipe.cuisine_type.lower() in favorites:
            score += FAVORITE_CUISINE_BONUS
        score += time_bonus(recipe.cooking_time, preferences.preferred_cooking_time)
        score += min(recipe.total_ratings / 10, MAX_POPULARITY_BONUS)
        if recipe.difficulty == difficulty:
            score += DIFFICULTY_BONUS
        return score

    def rank(
        self,
        candidates: Iterable[Recipe],
        preferences: UserPreferences,
        rated_recipes: Sequence[Optional[Recipe]] = (),
    ) -> list[Recipe]:
        """Return copies of the candidates with `recommendation_score` set, best first."""
        difficulty = preferred_difficulty(rated_recipes)
        scored = [
            recipe.model_copy(update={"recommendation_score": self.score(recipe, preferences, difficulty)})
            for recipe in candidates
        ]
        return sorted(scored, key=lambda recipe: recipe.recommendation_score, reverse=True)


def collaborative_recipe_ids(
    feedback: Iterable[UserFeedback],
    user_id: str,
    rated_ids: Iterable[str],
) -> list[str]:
    """Recipe ids liked by other high-rating users, minus the ones the user already rated.

    Feedback from other users with rating >= 4 is grouped by user in
    first-seen order. Groups averaging >= 4.0 qualify and the first ten are
    used. Their recipe ids are unioned in first-seen order.
    """
    groups: dict[str, list[UserFeedback]] = {}
    for record in feedback:
        if record.user_id == user_id or record.rating < COLLABORATIVE_MIN_RATING:
            continue
        groups.setdefault(record.user_id, []).append(record)

    similar_users = [
        records
        for records in groups.values()
        if sum(r.rating for r in records) / len(records) >= COLLABORATIVE_MIN_AVERAGE
    ][:COLLABORATIVE_MAX_USERS]

    excluded = set(rated_ids)
    recipe_ids = dict.fromkeys(record.recipe_id for records in similar_users for record in records)
    return [recipe_id for recipe_id in recipe_ids if recipe_id not in excluded]


def merge_recommendations(*groups: Iterable[Recipe], limit: int) -> list[Recipe]:
    """Concatenate groups, keep the first occurrence of each recipe id, cap to `limit`."""
    seen: set[str] = set()
    merged: list[Recipe] = []
    for group in groups:
        for recipe in group:
            if recipe.id in seen:
                continue
            seen.add(recipe.id)
            merged.append(recipe)
    return merged[:limit]
