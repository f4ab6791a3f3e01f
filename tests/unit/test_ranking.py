"""Unit tests for the ranking engine and origin merge."""

import pytest

from src.matching.ranking import RecipeRankingEngine, merge_by_origin
from src.models.models import RecipeGenerationRequest, RecipeOrigin


@pytest.fixture
def request_chicken():
    return RecipeGenerationRequest(ingredients=["chicken", "rice", "onion"])


class TestRank:
    def test_empty_pool(self, request_chicken):
        """Test that an empty pool ranks to an empty list."""
        assert RecipeRankingEngine().rank(request_chicken, []) == []

    def test_sorted_by_score_descending(self, request_chicken, sample_recipes):
        """Test that results are ordered best first."""
        ranked = RecipeRankingEngine().rank(request_chicken, sample_recipes)

        scores = [match.match_score for match in ranked]
        assert scores == sorted(scores, reverse=True)
        assert ranked[0].recipe.id == "sample-1"

    def test_min_score_cutoff(self, request_chicken, sample_recipes):
        """Test that matches under the minimum score are dropped."""
        ranked = RecipeRankingEngine(min_score=0.8).rank(request_chicken, sample_recipes)

        assert ranked
        assert all(match.match_score >= 0.8 for match in ranked)

    def test_max_results(self, request_chicken, sample_recipes):
        """Test that results are truncated to max_results."""
        ranked = RecipeRankingEngine(min_score=0.0, max_results=3).rank(request_chicken, sample_recipes)

        assert len(ranked) == 3

    def test_ties_keep_pool_order(self, request_chicken, recipe_factory):
        """Test that equal scores keep their input order."""
        pool = [recipe_factory(recipe_id=f"tie-{i}") for i in range(5)]

        ranked = RecipeRankingEngine(min_score=0.0).rank(request_chicken, pool)

        assert [match.recipe.id for match in ranked] == [f"tie-{i}" for i in range(5)]

    def test_origin_applied_to_every_match(self, request_chicken, sample_recipes):
        """Test that the pool's origin is recorded on each match."""
        ranked = RecipeRankingEngine(min_score=0.0).rank(request_chicken, sample_recipes, RecipeOrigin.GENERATED)

        assert {match.origin for match in ranked} == {RecipeOrigin.GENERATED}


class TestScoreAll:
    def test_no_cutoff(self, request_chicken, sample_recipes):
        """Test that score_all keeps weak matches."""
        scored = RecipeRankingEngine(min_score=0.99).score_all(request_chicken, sample_recipes)

        assert len(scored) == len(sample_recipes)


class TestMergeByOrigin:
    def test_generated_first_then_score(self, request_chicken, sample_recipes, recipe_factory):
        """Test that generated matches lead even when catalog matches score higher."""
        engine = RecipeRankingEngine(min_score=0.0)
        weak_generated = engine.score_all(
            request_chicken, [recipe_factory(recipe_id="gen-1", ingredients=("saffron",))], RecipeOrigin.GENERATED
        )
        catalog = engine.rank(request_chicken, sample_recipes)

        merged = merge_by_origin(catalog, weak_generated)

        assert merged[0].recipe.id == "gen-1"
        catalog_scores = [match.match_score for match in merged[1:]]
        assert catalog_scores == sorted(catalog_scores, reverse=True)
        assert weak_generated[0].match_score < catalog[0].match_score

    def test_empty_groups(self):
        """Test that merging nothing yields nothing."""
        assert merge_by_origin([], []) == []
