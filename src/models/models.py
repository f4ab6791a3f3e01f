"""Data models for the recipe matching and recommendation service.

Defines Pydantic models for recipes, matching results, users and feedback.
All models use Pydantic v2. Attributes are snake_case in Python and camelCase
on the wire; both spellings are accepted on input.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


DIETARY_PREFERENCES = (
    "vegetarian",
    "vegan",
    "gluten-free",
    "dairy-free",
    "keto",
    "paleo",
    "low-sodium",
    "low-calorie",
    "high-protein",
    "low-carb",
)

MAX_REQUEST_INGREDIENTS = 20
MAX_INGREDIENT_NAME_LENGTH = 50


class CamelModel(BaseModel):
    """Base model: camelCase aliases, snake_case attributes, whitespace stripped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DESSERT = "dessert"


class MatchType(str, Enum):
    """How a recipe ingredient relates to the user's available ingredients."""

    EXACT = "exact"
    SIMILAR = "similar"
    SUBSTITUTE = "substitute"
    MISSING = "missing"


# Confidence is fixed per match type
MATCH_CONFIDENCE = {
    MatchType.EXACT: 1.0,
    MatchType.SIMILAR: 0.8,
    MatchType.SUBSTITUTE: 0.6,
    MatchType.MISSING: 0.0,
}


class RecipeOrigin(str, Enum):
    """Provenance of a ranked recipe. Generated recipes sort ahead of catalog ones."""

    GENERATED = "generated"
    CATALOG = "catalog"


class SpiceLevel(str, Enum):
    MILD = "mild"
    MEDIUM = "medium"
    HOT = "hot"


class RecipeIngredient(CamelModel):
    """One ingredient line of a recipe. Duplicates within a recipe are allowed."""

    ingredient: Annotated[str, Field(min_length=1, max_length=200, description="Ingredient name (free text)")]
    amount: Annotated[float, Field(gt=0, description="Quantity, must be positive")]
    unit: Annotated[str, Field(max_length=50, description="Unit of measure (free text)")]
    notes: Annotated[Optional[str], Field(None, max_length=500)]
    is_optional: bool = False


class RecipeStep(CamelModel):
    step_number: Annotated[int, Field(ge=1)]
    instruction: Annotated[str, Field(min_length=1, max_length=2000)]
    time_minutes: Annotated[Optional[int], Field(None, ge=0)]
    tips: Optional[str] = None


class NutritionalInfo(CamelModel):
    calories: Annotated[float, Field(ge=0)]
    protein: Annotated[float, Field(ge=0)]
    carbs: Annotated[float, Field(ge=0)]
    fat: Annotated[float, Field(ge=0)]
    fiber: Annotated[Optional[float], Field(None, ge=0)]
    sugar: Annotated[Optional[float], Field(None, ge=0)]
    sodium: Annotated[Optional[float], Field(None, ge=0)]
    cholesterol: Annotated[Optional[float], Field(None, ge=0)]


class Recipe(CamelModel):
    """Domain model for a recipe.

    Created by the generation client (ephemeral until saved), loaded from the
    sample catalog, or read back from storage. `recommendation_score` is only
    populated by the recommendation ranker.
    """

    id: Annotated[str, Field(min_length=1, max_length=100)]
    name: Annotated[str, Field(min_length=1, max_length=200)]
    description: Annotated[str, Field("", max_length=1000)]
    ingredients: Annotated[List[RecipeIngredient], Field(default_factory=list, max_length=100)]
    instructions: Annotated[List[RecipeStep], Field(default_factory=list, max_length=100)]
    nutritional_info: NutritionalInfo
    cooking_time: Annotated[int, Field(ge=0, le=1440, description="Cooking time in minutes")]
    difficulty: Difficulty = Difficulty.MEDIUM
    cuisine_type: Annotated[str, Field("international", max_length=100)]
    meal_type: MealType = MealType.DINNER
    tags: Annotated[List[str], Field(default_factory=list)]
    image_url: Annotated[Optional[str], Field(None, max_length=500)]
    rating: Annotated[float, Field(0.0, ge=0, le=5)]
    total_ratings: Annotated[int, Field(0, ge=0)]
    servings: Annotated[int, Field(4, ge=1, le=100)]
    prep_time: Annotated[int, Field(0, ge=0, le=1440)]
    total_time: Annotated[int, Field(0, ge=0, le=2880)]
    recommendation_score: Optional[float] = None

    @model_validator(mode="after")
    def validate_step_numbers(self) -> "Recipe":
        """Renderers index steps by number, so they must run 1..N without gaps."""
        numbers = [step.step_number for step in self.instructions]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError(f"Instruction steps must be numbered 1..{len(numbers)} in order, got {numbers}")
        return self


class RecipeGenerationRequest(CamelModel):
    """Ingredients plus constraints submitted by the user.

    Ingredients are deduplicated case-insensitively (first spelling kept) so the
    scoring code can rely on a duplicate-free list.
    """

    ingredients: Annotated[
        List[str],
        Field(min_length=1, max_length=MAX_REQUEST_INGREDIENTS, description="Available ingredients (1-20)"),
    ]
    dietary_preferences: Annotated[List[str], Field(default_factory=list)]
    serving_size: Annotated[int, Field(2, ge=1, le=20)]
    cuisine_type: Annotated[str, Field("", max_length=100, description="Cuisine or 'any'/empty for no preference")]
    cooking_time: Annotated[int, Field(30, ge=0, le=480, description="Max minutes, 0 means no preference")]

    @field_validator("ingredients")
    @classmethod
    def normalize_ingredients(cls, ingredients: list[str]) -> list[str]:
        cleaned: list[str] = []
        seen: set[str] = set()
        for ingredient in ingredients:
            name = " ".join(ingredient.split())
            if not name or len(name) > MAX_INGREDIENT_NAME_LENGTH:
                raise ValueError(
                    f"All ingredients must be between 1 and {MAX_INGREDIENT_NAME_LENGTH} characters"
                )
            if name.lower() not in seen:
                seen.add(name.lower())
                cleaned.append(name)
        return cleaned

    @field_validator("dietary_preferences")
    @classmethod
    def validate_dietary_preferences(cls, preferences: list[str]) -> list[str]:
        normalized = list(dict.fromkeys(p.strip().lower() for p in preferences if p.strip()))
        unknown = [p for p in normalized if p not in DIETARY_PREFERENCES]
        if unknown:
            raise ValueError(f"Unknown dietary preferences: {', '.join(unknown)}")
        return normalized

    @field_validator("cooking_time")
    @classmethod
    def validate_cooking_time(cls, minutes: int) -> int:
        if minutes != 0 and minutes < 5:
            raise ValueError("Cooking time must be between 5 and 480 minutes")
        return minutes


class IngredientMatch(CamelModel):
    user_ingredient: str
    recipe_ingredient: str
    match_type: MatchType
    confidence: Annotated[float, Field(ge=0, le=1)]
    substitution: Optional[str] = None


class RecipeMatch(CamelModel):
    """Transient ranking artifact wrapping a recipe with its sub-scores. Never persisted."""

    recipe: Recipe
    match_score: Annotated[float, Field(ge=0, le=1)]
    ingredient_matches: List[IngredientMatch]
    dietary_compatibility: Annotated[float, Field(ge=0, le=1)]
    cuisine_match: Annotated[float, Field(ge=0, le=1)]
    time_match: Annotated[float, Field(ge=0, le=1)]
    explanation: str
    origin: RecipeOrigin = RecipeOrigin.CATALOG


class UserPreferences(CamelModel):
    dietary_restrictions: Annotated[List[str], Field(default_factory=list)]
    favorite_cuisines: Annotated[List[str], Field(default_factory=list)]
    preferred_cooking_time: Annotated[int, Field(30, ge=0, le=1440)]
    spice_level: SpiceLevel = SpiceLevel.MEDIUM
    serving_size: Annotated[int, Field(4, ge=1, le=20)]


class UserProfile(CamelModel):
    user_id: Annotated[str, Field(min_length=1, max_length=100)]
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    favorite_recipe_ids: List[str] = Field(default_factory=list)
    feedback_ids: List[int] = Field(default_factory=list)


class UserFeedback(CamelModel):
    """One user's rating of one recipe. Storage keeps at most one per (user_id, recipe_id)."""

    user_id: Annotated[str, Field(min_length=1, max_length=100)]
    recipe_id: Annotated[str, Field(min_length=1, max_length=100)]
    rating: Annotated[int, Field(ge=1, le=5, description="Overall rating 1-5")]
    review: Annotated[Optional[str], Field(None, max_length=1000)]
    cooking_notes: Annotated[Optional[str], Field(None, max_length=500)]
    taste_rating: Annotated[Optional[int], Field(None, ge=1, le=5)]
    difficulty_rating: Annotated[Optional[int], Field(None, ge=1, le=5)]
    presentation_rating: Annotated[Optional[int], Field(None, ge=1, le=5)]
    is_favorite: bool = False
    would_cook_again: bool = False
    tags: List[str] = Field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
