"""Unit tests for personalized recommendation scoring."""

import pytest

from src.models.models import Difficulty, UserFeedback, UserPreferences
from src.recommendations.ranker import (
    RecommendationRanker,
    collaborative_recipe_ids,
    merge_recommendations,
    preferred_difficulty,
    time_bonus,
)


def _feedback(user_id, recipe_id, rating):
    return UserFeedback(user_id=user_id, recipe_id=recipe_id, rating=rating)


class TestPreferredDifficulty:
    def test_no_history_is_medium(self):
        """Test the default for users who rated nothing."""
        assert preferred_difficulty([]) == Difficulty.MEDIUM

    def test_most_common(self, recipe_factory):
        """Test that the most frequent difficulty wins."""
        rated = [
            recipe_factory("a", difficulty="easy"),
            recipe_factory("b", difficulty="hard"),
            recipe_factory("c", difficulty="hard"),
        ]
        assert preferred_difficulty(rated) == Difficulty.HARD

    def test_unresolved_recipe_counts_as_medium(self, recipe_factory):
        """Test that rated recipes that no longer exist count as medium."""
        rated = [None, None, recipe_factory("a", difficulty="easy")]
        assert preferred_difficulty(rated) == Difficulty.MEDIUM

    def test_tie_goes_to_first_seen(self, recipe_factory):
        """Test that ties resolve to the difficulty encountered first."""
        rated = [recipe_factory("a", difficulty="easy"), recipe_factory("b", difficulty="hard")]
        assert preferred_difficulty(rated) == Difficulty.EASY


class TestTimeBonus:
    @pytest.mark.parametrize("cooking_time,expected", [(30, 5), (40, 5), (20, 5), (45, 2), (50, 2), (51, 0), (5, 0)])
    def test_bands(self, cooking_time, expected):
        """Test the close (<=10), near (<=20) and far bands around 30 minutes."""
        assert time_bonus(cooking_time, 30) == expected


class TestRecommendationRanker:
    def test_score_components(self, recipe_factory):
        """Test rating*2 plus cuisine, time, popularity and difficulty bonuses."""
        recipe = recipe_factory(
            rating=4.5, total_ratings=120, cuisine_type="Italian", cooking_time=25, difficulty="easy"
        )
        preferences = UserPreferences(favorite_cuisines=["italian"], preferred_cooking_time=30)

        score = RecommendationRanker().score(recipe, preferences, Difficulty.EASY)

        # 9 + 10 + 5 + min(12, 5) + 3
        assert score == pytest.approx(32.0)

    def test_score_without_bonuses(self, recipe_factory):
        """Test a recipe that only earns its rating and popularity."""
        recipe = recipe_factory(rating=3.0, total_ratings=20, cuisine_type="thai", cooking_time=90, difficulty="hard")

        score = RecommendationRanker().score(recipe, UserPreferences(), Difficulty.EASY)

        assert score == pytest.approx(6.0 + 2.0)

    def test_rank_sets_scores_and_sorts(self, recipe_factory):
        """Test that rank returns scored copies, best first, leaving inputs untouched."""
        low = recipe_factory("low", rating=1.0)
        high = recipe_factory("high", rating=5.0)

        ranked = RecommendationRanker().rank([low, high], UserPreferences())

        assert [recipe.id for recipe in ranked] == ["high", "low"]
        assert all(recipe.recommendation_score is not None for recipe in ranked)
        assert low.recommendation_score is None

    def test_favorite_cuisine_ranks_higher(self, recipe_factory):
        """Test that the favorite-cuisine bonus breaks an otherwise exact tie."""
        favorite = recipe_factory("favorite", rating=4.0, cuisine_type="mexican")
        other = recipe_factory("other", rating=4.0, cuisine_type="thai")
        preferences = UserPreferences(favorite_cuisines=["mexican"])

        ranked = RecommendationRanker().rank([other, favorite], preferences)

        assert [recipe.id for recipe in ranked] == ["favorite", "other"]
        assert ranked[0].recommendation_score - ranked[1].recommendation_score == pytest.approx(10.0)


class TestCollaborativeRecipeIds:
    def test_excludes_own_feedback_and_rated_recipes(self):
        """Test that the user's own ratings and already-rated recipes are skipped."""
        feedback = [
            _feedback("me", "mine", 5),
            _feedback("other", "seen", 5),
            _feedback("other", "new", 4),
        ]

        ids = collaborative_recipe_ids(feedback, "me", rated_ids=["seen"])

        assert ids == ["new"]

    def test_low_ratings_ignored(self):
        """Test that ratings below 4 do not make recommendations."""
        feedback = [_feedback("other", "meh", 3), _feedback("other", "great", 5)]

        assert collaborative_recipe_ids(feedback, "me", []) == ["great"]

    def test_union_in_first_seen_order_without_duplicates(self):
        """Test that recipes liked by several users appear once."""
        feedback = [
            _feedback("a", "r1", 5),
            _feedback("b", "r2", 4),
            _feedback("b", "r1", 5),
        ]

        assert collaborative_recipe_ids(feedback, "me", []) == ["r1", "r2"]

    def test_at_most_ten_similar_users(self):
        """Test that only the first ten qualifying users contribute."""
        feedback = [_feedback(f"user-{i}", f"recipe-{i}", 5) for i in range(12)]

        ids = collaborative_recipe_ids(feedback, "me", [])

        assert ids == [f"recipe-{i}" for i in range(10)]


class TestMergeRecommendations:
    def test_dedupes_and_limits(self, recipe_factory):
        """Test that the first occurrence of each id is kept and the list is capped."""
        a, b, c = recipe_factory("a"), recipe_factory("b"), recipe_factory("c")

        merged = merge_recommendations([a, b], [b, c], limit=2)

        assert [recipe.id for recipe in merged] == ["a", "b"]

    def test_collaborative_fills_remaining_slots(self, recipe_factory):
        """Test that later groups top up the list."""
        merged = merge_recommendations([recipe_factory("a")], [recipe_factory("b")], limit=5)

        assert [recipe.id for recipe in merged] == ["a", "b"]
