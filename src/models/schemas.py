"""Request/response schemas for the HTTP layer and the generation agent.

`GeneratedRecipeBatch` is the structured output requested from Gemini. It is
strict: any missing or malformed field fails validation, which the generation
service treats the same as an API failure and answers with fallback recipes.
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.models import (
    CamelModel,
    Difficulty,
    MealType,
    NutritionalInfo,
    Recipe,
    RecipeIngredient,
    RecipeMatch,
    RecipeStep,
    UserFeedback,
)


class GeneratedIngredient(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    ingredient: Annotated[str, Field(min_length=1, max_length=200)]
    amount: Annotated[float, Field(gt=0)]
    unit: Annotated[str, Field(max_length=50)]
    notes: Annotated[str, Field("", max_length=500)]


class GeneratedNutrition(BaseModel):
    calories: Annotated[float, Field(ge=0)]
    protein_g: Annotated[float, Field(ge=0)]
    carbs_g: Annotated[float, Field(ge=0)]
    fat_g: Annotated[float, Field(ge=0)]


class GeneratedRecipe(BaseModel):
    """One recipe as produced by the language model."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Annotated[str, Field(min_length=1, max_length=200, description="Recipe title")]
    description: Annotated[str, Field("", max_length=1000)]
    cuisine: Annotated[str, Field(min_length=1, max_length=100, description="Cuisine, lower-case, e.g. 'italian'")]
    difficulty: Difficulty
    meal_type: MealType = MealType.DINNER
    cook_time_min: Annotated[int, Field(ge=1, le=1440, description="Cooking time in minutes")]
    prep_time_min: Annotated[int, Field(0, ge=0, le=1440)]
    servings: Annotated[int, Field(ge=1, le=100)]
    ingredients: Annotated[List[GeneratedIngredient], Field(min_length=1, max_length=100)]
    steps: Annotated[List[str], Field(min_length=1, max_length=100, description="Instructions in order")]
    nutrition: GeneratedNutrition
    dietary_tags: Annotated[List[str], Field(default_factory=list)]

    @field_validator("steps")
    @classmethod
    def validate_steps(cls, steps: list[str]) -> list[str]:
        if any(not step.strip() for step in steps):
            raise ValueError("Recipe steps must not be empty")
        return [step.strip() for step in steps]

    def to_recipe(self, recipe_id: str) -> Recipe:
        """Convert to the domain model with steps numbered 1..N."""
        return Recipe(
            id=recipe_id,
            name=self.title,
            description=self.description,
            ingredients=[
                RecipeIngredient(
                    ingredient=item.ingredient,
                    amount=item.amount,
                    unit=item.unit,
                    notes=item.notes or None,
                )
                for item in self.ingredients
            ],
            instructions=[
                RecipeStep(step_number=number, instruction=text)
                for number, text in enumerate(self.steps, start=1)
            ],
            nutritional_info=NutritionalInfo(
                calories=self.nutrition.calories,
                protein=self.nutrition.protein_g,
                carbs=self.nutrition.carbs_g,
                fat=self.nutrition.fat_g,
            ),
            cooking_time=self.cook_time_min,
            difficulty=self.difficulty,
            cuisine_type=self.cuisine.lower(),
            meal_type=self.meal_type,
            tags=[tag.lower() for tag in self.dietary_tags],
            servings=self.servings,
            prep_time=self.prep_time_min,
            total_time=self.prep_time_min + self.cook_time_min,
        )


class GeneratedRecipeBatch(BaseModel):
    recipes: Annotated[List[GeneratedRecipe], Field(min_length=1, description="Generated recipes")]


class RecipesResponse(CamelModel):
    recipes: List[Recipe]


class RecipeMatchesResponse(CamelModel):
    matches: List[RecipeMatch]
    total_found: int
    used_ai: bool


class IngredientsResponse(CamelModel):
    ingredients: List[str]


class FeedbackRequest(CamelModel):
    """Body of POST /feedback. Presence and range checks run in the service so their messages match the API."""

    user_id: Optional[str] = None
    recipe_id: Optional[str] = None
    rating: Optional[int] = None
    review: Annotated[Optional[str], Field(None, max_length=1000)]
    cooking_notes: Annotated[Optional[str], Field(None, max_length=500)]
    taste_rating: Annotated[Optional[int], Field(None, ge=1, le=5)]
    difficulty_rating: Annotated[Optional[int], Field(None, ge=1, le=5)]
    presentation_rating: Annotated[Optional[int], Field(None, ge=1, le=5)]
    is_favorite: bool = False
    would_cook_again: bool = False
    tags: List[str] = Field(default_factory=list)


class FeedbackResponse(CamelModel):
    success: bool
    message: str
    feedback: UserFeedback


class FeedbackListResponse(CamelModel):
    success: bool
    feedback: List[UserFeedback]


class RecommendationPreferences(CamelModel):
    favorite_cuisines: List[str]
    preferred_cooking_time: int
    dietary_restrictions: List[str]
    total_feedback: int


class RecommendationsResponse(CamelModel):
    recommendations: List[Recipe]
    user_preferences: RecommendationPreferences
    total_found: int


class SaveRecipeResponse(CamelModel):
    success: bool
    recipe: Recipe


class ErrorResponse(BaseModel):
    error: str
