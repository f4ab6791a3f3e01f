"""Rank candidate recipes for a request.

`RecipeRankingEngine.rank` scores a pool, sorts by match score, drops weak
matches and truncates. `merge_by_origin` combines generated and catalog
results so every generated recipe comes first.
"""

from typing import Iterable, Sequence

from src.matching.scorer import MatchScorer
from src.matching.tables import DEFAULT_TABLES, MatchingTables
from src.models.models import Recipe, RecipeGenerationRequest, RecipeMatch, RecipeOrigin
from src.utils.logger import logger


DEFAULT_MIN_SCORE = 0.3
DEFAULT_MAX_RESULTS = 20

# Lower sorts first
ORIGIN_PRIORITY = {
    RecipeOrigin.GENERATED: 0,
    RecipeOrigin.CATALOG: 1,
}


class RecipeRankingEngine:
    def __init__(
        self,
        tables: MatchingTables = DEFAULT_TABLES,
        min_score: float = DEFAULT_MIN_SCORE,
        max_results: int = DEFAULT_MAX_RESULTS,
    ):
        self.scorer = MatchScorer(tables)
        self.min_score = min_score
        self.max_results = max_results

    def score_all(
        self,
        request: RecipeGenerationRequest,
        pool: Iterable[Recipe],
        origin: RecipeOrigin = RecipeOrigin.CATALOG,
    ) -> list[RecipeMatch]:
        """Score every recipe, sorted by match score descending, with no cutoff."""
        scored = [self.scorer.score(recipe, request, origin) for recipe in pool]
        # sorted() is stable, equal scores keep pool order
        return sorted(scored, key=lambda match: match.match_score, reverse=True)

    def rank(
        self,
        request: RecipeGenerationRequest,
        pool: Sequence[Recipe],
        origin: RecipeOrigin = RecipeOrigin.CATALOG,
    ) -> list[RecipeMatch]:
        if not pool:
            return []

        scored = self.score_all(request, pool, origin)
        kept = [match for match in scored if match.match_score >= self.min_score]
        logger.debug(
            f"Ranked {len(pool)} {origin.value} recipes: {len(kept)} above {self.min_score}, "
            f"returning {min(len(kept), self.max_results)}"
        )
        return kept[: self.max_results]


def merge_by_origin(*groups: Iterable[RecipeMatch]) -> list[RecipeMatch]:
    """Order matches by provenance first (generated before catalog), then by score descending."""
    combined = [match for group in groups for match in group]
    return sorted(combined, key=lambda match: (ORIGIN_PRIORITY[match.origin], -match.match_score))
