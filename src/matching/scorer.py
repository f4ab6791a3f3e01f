"""Combine ingredient, dietary, cuisine and time sub-scores into one match score."""

from collections import Counter
from typing import Sequence

from src.matching.dietary import DietaryCompatibilityScorer
from src.matching.ingredients import IngredientMatcher
from src.matching.preferences import CuisineMatcher, TimeMatcher
from src.matching.tables import DEFAULT_TABLES, MatchingTables
from src.models.models import (
    MATCH_CONFIDENCE,
    IngredientMatch,
    MatchType,
    Recipe,
    RecipeGenerationRequest,
    RecipeMatch,
    RecipeOrigin,
)


# Must sum to 1.0
WEIGHTS = {
    "ingredient": 0.60,
    "dietary": 0.25,
    "cuisine": 0.10,
    "time": 0.05,
}

MAX_UTILIZATION_BONUS = 0.2


def ingredient_score(matches: Sequence[IngredientMatch], user_ingredient_count: int) -> float:
    """Weighted match coverage of the recipe plus a bonus for using the user's ingredients.

    raw = (exact + 0.8 * similar + 0.6 * substitute) / recipe ingredients
    bonus = min(0.2, 0.2 * matched / user ingredients)
    """
    if not matches:
        return 0.0

    counts = Counter(match.match_type for match in matches)
    raw = sum(MATCH_CONFIDENCE[match_type] * count for match_type, count in counts.items()) / len(matches)

    matched = len(matches) - counts[MatchType.MISSING]
    bonus = 0.0
    if user_ingredient_count > 0:
        bonus = min(MAX_UTILIZATION_BONUS, MAX_UTILIZATION_BONUS * matched / user_ingredient_count)

    return min(1.0, raw + bonus)


def build_explanation(
    ingredient: float,
    dietary: float,
    cuisine: float,
    time: float,
    matches: Sequence[IngredientMatch],
) -> str:
    parts = []

    if ingredient > 0.8:
        parts.append("Excellent ingredient match")
    elif ingredient > 0.6:
        parts.append("Good ingredient compatibility")
    elif ingredient > 0.4:
        parts.append("Moderate ingredient match")
    else:
        parts.append("Limited ingredient overlap")

    if dietary > 0.9:
        parts.append("Perfect for your dietary preferences")
    elif dietary > 0.7:
        parts.append("Compatible with your diet")
    elif dietary < 0.3:
        parts.append("May not meet dietary requirements")

    if cuisine > 0.8:
        parts.append("Matches your cuisine preference")

    if time > 0.8:
        parts.append("Fits your time constraints")

    missing = sum(1 for match in matches if match.match_type == MatchType.MISSING)
    if missing > 0:
        parts.append(f"Requires {missing} additional ingredients")

    return ". ".join(parts) + "."


class MatchScorer:
    """Scores one recipe against one request and wraps the result in a RecipeMatch."""

    def __init__(self, tables: MatchingTables = DEFAULT_TABLES):
        self.ingredient_matcher = IngredientMatcher(tables)
        self.dietary_scorer = DietaryCompatibilityScorer(tables)
        self.cuisine_matcher = CuisineMatcher(tables)
        self.time_matcher = TimeMatcher()

    def score(
        self,
        recipe: Recipe,
        request: RecipeGenerationRequest,
        origin: RecipeOrigin = RecipeOrigin.CATALOG,
    ) -> RecipeMatch:
        matches = self.ingredient_matcher.match(recipe.ingredients, request.ingredients)

        ingredient = ingredient_score(matches, len(request.ingredients))
        dietary = self.dietary_scorer.score(recipe, request.dietary_preferences)
        cuisine = self.cuisine_matcher.score(recipe.cuisine_type, request.cuisine_type)
        time = self.time_matcher.score(recipe.cooking_time, request.cooking_time)

        total = (
            ingredient * WEIGHTS["ingredient"]
            + dietary * WEIGHTS["dietary"]
            + cuisine * WEIGHTS["cuisine"]
            + time * WEIGHTS["time"]
        )

        return RecipeMatch(
            recipe=recipe,
            match_score=min(1.0, total),
            ingredient_matches=matches,
            dietary_compatibility=dietary,
            cuisine_match=cuisine,
            time_match=time,
            explanation=build_explanation(ingredient, dietary, cuisine, time, matches),
            origin=origin,
        )
