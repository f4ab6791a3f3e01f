"""Cuisine affinity and cooking-time fit scorers."""

from src.matching.tables import DEFAULT_TABLES, MatchingTables


NO_CUISINE_PREFERENCE = ("", "any")
SIMILAR_CUISINE_SCORE = 0.7
UNRELATED_CUISINE_SCORE = 0.3
MIN_TIME_SCORE = 0.1


class CuisineMatcher:
    def __init__(self, tables: MatchingTables = DEFAULT_TABLES):
        self.tables = tables

    def score(self, recipe_cuisine: str, user_cuisine: str) -> float:
        """1.0 for no preference or same cuisine, 0.7 for a related one, otherwise 0.3.

        No cuisine scores zero: an unrelated recipe can still rank on ingredients.
        """
        wanted = (user_cuisine or "").strip().lower()
        if wanted in NO_CUISINE_PREFERENCE:
            return 1.0

        actual = (recipe_cuisine or "").strip().lower()
        if actual == wanted:
            return 1.0

        related = self.tables.similar_cuisines.get(wanted, ())
        if any(cuisine in actual for cuisine in related):
            return SIMILAR_CUISINE_SCORE
        return UNRELATED_CUISINE_SCORE


class TimeMatcher:
    def score(self, recipe_time: float, user_max_time: float) -> float:
        """Faster than the limit is never penalized; slower decays toward a 0.1 floor."""
        if user_max_time == 0 or recipe_time <= user_max_time:
            return 1.0
        penalty = abs(recipe_time - user_max_time) / max(recipe_time, user_max_time)
        return max(MIN_TIME_SCORE, 1.0 - penalty)
