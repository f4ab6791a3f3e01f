"""Dietary compatibility scoring."""

from typing import Sequence

from src.matching.tables import DEFAULT_TABLES, MatchingTables
from src.models.models import Recipe


COMPATIBLE = 1.0
VIOLATION = 0.0
# Neither confirmed by a tag nor contradicted by an ingredient
PARTIAL = 0.5


class DietaryCompatibilityScorer:
    def __init__(self, tables: MatchingTables = DEFAULT_TABLES):
        self.tables = tables

    def score(self, recipe: Recipe, preferences: Sequence[str]) -> float:
        """Mean per-preference compatibility in [0, 1]; 1.0 when there are no preferences."""
        if not preferences:
            return 1.0

        tags = {tag.lower() for tag in recipe.tags}
        ingredient_names = [item.ingredient.lower() for item in recipe.ingredients]

        total = 0.0
        for preference in preferences:
            total += self._preference_score(preference.lower(), tags, ingredient_names)
        return total / len(preferences)

    def violates(self, recipe: Recipe, preference: str) -> bool:
        ingredient_names = [item.ingredient.lower() for item in recipe.ingredients]
        return self._has_violation(preference.lower(), ingredient_names)

    def _preference_score(self, preference: str, tags: set[str], ingredient_names: list[str]) -> float:
        compatible_tags = self.tables.dietary_compatibility.get(preference, ())
        if any(tag in tags for tag in compatible_tags):
            return COMPATIBLE
        if self._has_violation(preference, ingredient_names):
            return VIOLATION
        return PARTIAL

    def _has_violation(self, preference: str, ingredient_names: list[str]) -> bool:
        forbidden = self.tables.dietary_violations.get(preference, ())
        return any(term in name for term in forbidden for name in ingredient_names)
