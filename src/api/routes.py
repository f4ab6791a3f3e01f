"""HTTP routes for recipe generation, matching, detection, recommendations and feedback."""

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from src.models.models import Recipe, RecipeGenerationRequest
from src.models.schemas import (
    FeedbackListResponse,
    FeedbackRequest,
    FeedbackResponse,
    IngredientsResponse,
    ErrorResponse,
    RecipeMatchesResponse,
    RecipesResponse,
    RecommendationsResponse,
    SaveRecipeResponse,
)
from src.services.detection import detect_ingredients, fetch_image_bytes
from src.services.feedback import FeedbackService
from src.services.generation import RecipeGenerationService
from src.services.matching import MatchingService
from src.services.recommendations import RecommendationService
from src.storage.database import get_db
from src.storage.repository import RecipeRepository
from src.utils.errors import ImageValidationError, RecipeNotFoundError
from src.utils.logger import logger


router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    }
)


@lru_cache
def get_generation_service() -> RecipeGenerationService:
    return RecipeGenerationService()


def get_matching_service(
    generation: RecipeGenerationService = Depends(get_generation_service),
) -> MatchingService:
    return MatchingService(generation=generation)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/recipes-from-ingredients", response_model=RecipesResponse)
async def recipes_from_ingredients(
    request: RecipeGenerationRequest,
    generation: RecipeGenerationService = Depends(get_generation_service),
):
    """Generate recipes for the given ingredients. AI failures fall back to fixed recipes."""
    logger.info(f"Generating recipes for {len(request.ingredients)} ingredients")
    result = await generation.generate(request)
    return RecipesResponse(recipes=result.recipes)


@router.post("/recipe-matches", response_model=RecipeMatchesResponse)
async def recipe_matches(
    request: RecipeGenerationRequest,
    matching: MatchingService = Depends(get_matching_service),
):
    """Generated recipes first, then sample catalog recipes ranked by match score."""
    result = await matching.find_matches(request)
    return RecipeMatchesResponse(matches=result.matches, total_found=len(result.matches), used_ai=result.used_ai)


@router.post("/ingredients-from-image", response_model=IngredientsResponse)
async def ingredients_from_image(
    image: Optional[UploadFile] = File(None),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
):
    if image is not None:
        image_bytes = await image.read()
    elif image_url:
        image_bytes = await fetch_image_bytes(image_url)
    else:
        raise ImageValidationError("No image provided")

    ingredients = await detect_ingredients(image_bytes)
    return IngredientsResponse(ingredients=ingredients)


@router.get("/recommendations", response_model=RecommendationsResponse)
def recommendations(
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return RecommendationService(db).recommend(user_id, limit)


@router.post("/feedback", response_model=FeedbackResponse)
def submit_feedback(request: FeedbackRequest, db: Session = Depends(get_db)):
    return FeedbackService(db).submit(request)


@router.get("/feedback", response_model=FeedbackListResponse)
def list_feedback(
    user_id: Optional[str] = Query(None, alias="userId"),
    recipe_id: Optional[str] = Query(None, alias="recipeId"),
    db: Session = Depends(get_db),
):
    return FeedbackListResponse(success=True, feedback=FeedbackService(db).list_feedback(user_id, recipe_id))


@router.post("/recipes", response_model=SaveRecipeResponse)
def save_recipe(
    recipe: Recipe,
    ai_generated: bool = Query(False, alias="aiGenerated"),
    db: Session = Depends(get_db),
):
    """Persist a recipe, e.g. a generated one the user wants to keep."""
    stored = RecipeRepository(db).save(
        recipe,
        is_ai_generated=ai_generated,
        source="ai" if ai_generated else "user",
    )
    return SaveRecipeResponse(success=True, recipe=stored)


@router.get("/recipes/{recipe_id}", response_model=Recipe)
def get_recipe(recipe_id: str, db: Session = Depends(get_db)):
    recipe = RecipeRepository(db).get(recipe_id)
    if recipe is None:
        raise RecipeNotFoundError(recipe_id)
    return recipe
