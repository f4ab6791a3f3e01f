"""Classify each recipe ingredient against the user's available ingredients."""

from typing import Optional, Sequence

from src.matching.similarity import string_similarity
from src.matching.tables import DEFAULT_TABLES, MatchingTables
from src.models.models import MATCH_CONFIDENCE, IngredientMatch, MatchType, RecipeIngredient


SIMILARITY_THRESHOLD = 0.7
MISSING_SENTINEL = "missing"


class IngredientMatcher:
    """Produces exactly one IngredientMatch per recipe ingredient, in recipe order.

    Checks run in priority order: exact, similar (edit distance), substitute
    (table lookup), missing. The first check that succeeds decides the match.
    """

    def __init__(self, tables: MatchingTables = DEFAULT_TABLES, similarity_threshold: float = SIMILARITY_THRESHOLD):
        self.tables = tables
        self.similarity_threshold = similarity_threshold

    def match(self, recipe_ingredients: Sequence[RecipeIngredient], user_ingredients: Sequence[str]) -> list[IngredientMatch]:
        user_lower = [ingredient.lower() for ingredient in user_ingredients]
        user_set = set(user_lower)
        return [self._classify(item.ingredient, user_lower, user_set) for item in recipe_ingredients]

    def _classify(self, recipe_ingredient: str, user_lower: list[str], user_set: set[str]) -> IngredientMatch:
        name = recipe_ingredient.lower()

        if name in user_set:
            return self._build(recipe_ingredient, recipe_ingredient, MatchType.EXACT)

        similar = self._find_similar(name, user_lower)
        if similar is not None:
            return self._build(similar, recipe_ingredient, MatchType.SIMILAR)

        substitute = self._find_substitute(name, user_lower)
        if substitute is not None:
            return self._build(substitute, recipe_ingredient, MatchType.SUBSTITUTE, substitution=substitute)

        return self._build(MISSING_SENTINEL, recipe_ingredient, MatchType.MISSING)

    def _find_similar(self, name: str, user_lower: list[str]) -> Optional[str]:
        # First qualifying user ingredient wins, not the best one
        for user_ingredient in user_lower:
            if string_similarity(name, user_ingredient) > self.similarity_threshold:
                return user_ingredient
        return None

    def _find_substitute(self, name: str, user_lower: list[str]) -> Optional[str]:
        for _original, substitute in self.tables.substitutes_for(name):
            if any(substitute in user_ingredient for user_ingredient in user_lower):
                return substitute
        return None

    @staticmethod
    def _build(
        user_ingredient: str,
        recipe_ingredient: str,
        match_type: MatchType,
        substitution: Optional[str] = None,
    ) -> IngredientMatch:
        return IngredientMatch(
            user_ingredient=user_ingredient,
            recipe_ingredient=recipe_ingredient,
            match_type=match_type,
            confidence=MATCH_CONFIDENCE[match_type],
            substitution=substitution,
        )
