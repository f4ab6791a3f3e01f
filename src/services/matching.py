"""Match orchestration: generated recipes plus the sample catalog, ranked together."""

from typing import Optional

from pydantic import BaseModel

from src.data.sample_recipes import get_sample_recipes
from src.matching.ranking import RecipeRankingEngine, merge_by_origin
from src.models.models import Recipe, RecipeGenerationRequest, RecipeMatch, RecipeOrigin
from src.services.generation import RecipeGenerationService
from src.utils.config import config
from src.utils.logger import logger


class MatchResult(BaseModel):
    matches: list[RecipeMatch]
    used_ai: bool


class MatchingService:
    """Scores generated and catalog recipes for one request.

    AI-generated recipes are all kept (scored but not cut off) and always come
    first. Catalog recipes go through the ranking engine's cutoff and cap, and
    so do the fallback recipes served when generation did not use the AI.
    """

    def __init__(
        self,
        generation: Optional[RecipeGenerationService] = None,
        engine: Optional[RecipeRankingEngine] = None,
        catalog: Optional[list[Recipe]] = None,
    ):
        self.generation = generation or RecipeGenerationService()
        self.engine = engine or RecipeRankingEngine(
            min_score=config.MIN_MATCH_SCORE,
            max_results=config.MAX_MATCH_RESULTS,
        )
        self.catalog = catalog if catalog is not None else get_sample_recipes()

    async def find_matches(self, request: RecipeGenerationRequest) -> MatchResult:
        generated = await self.generation.generate(request)

        if generated.origin == RecipeOrigin.GENERATED:
            generated_matches = self.engine.score_all(request, generated.recipes, RecipeOrigin.GENERATED)
            catalog_matches = self.engine.rank(request, self.catalog, RecipeOrigin.CATALOG)
        else:
            generated_matches = []
            catalog_matches = self.engine.rank(request, [*generated.recipes, *self.catalog], RecipeOrigin.CATALOG)

        matches = merge_by_origin(generated_matches, catalog_matches)
        logger.info(
            f"Found {len(matches)} matches ({len(generated_matches)} generated, {len(catalog_matches)} catalog)"
        )
        return MatchResult(matches=matches, used_ai=generated.used_ai)
