"""Recipe generation with a guaranteed answer.

Calls the Gemini-backed agent under a hard timeout and strictly parses its
output. Any failure (no API key, timeout, API error, malformed payload) is
logged and answered with a fixed fallback set, so callers always receive
recipes. Vegetarian requests get a final meat-substitution pass over whatever
the model produced.
"""

import asyncio
import json
import re
import uuid
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from src.agents.agent import create_recipe_agent
from src.models.models import (
    NutritionalInfo,
    Recipe,
    RecipeGenerationRequest,
    RecipeIngredient,
    RecipeOrigin,
    RecipeStep,
)
from src.models.schemas import GeneratedRecipeBatch
from src.prompts.prompts import get_generation_prompt
from src.utils.config import config
from src.utils.logger import logger


MEAT_INGREDIENTS = (
    "chicken", "beef", "pork", "lamb", "turkey", "duck", "goose", "quail", "pheasant",
    "steak", "ground beef", "ground pork", "bacon", "ham", "sausage", "hot dog",
    "fish", "salmon", "tuna", "cod", "tilapia", "shrimp", "prawn", "crab", "lobster",
    "mussel", "clam", "oyster", "scallop", "anchovy", "sardine", "mackerel",
    "meat", "poultry", "seafood", "shellfish", "game meat", "venison", "rabbit",
)

# (terms, replacement ingredient, notes, word used in titles and steps)
VEGETARIAN_SWAPS = (
    (("chicken",), "tofu", "firm tofu, cubed", "tofu"),
    (("beef", "pork"), "tempeh", "crumbled tempeh", "tempeh"),
    (("fish", "salmon", "tuna"), "chickpeas", "cooked chickpeas", "chickpeas"),
    (("shrimp", "prawn"), "mushrooms", "sliced mushrooms", "mushrooms"),
)

FALLBACK_ID_PREFIX = "fallback"
GENERATED_ID_PREFIX = "generated"


class GenerationResult(BaseModel):
    recipes: list[Recipe]
    used_ai: bool

    @property
    def origin(self) -> RecipeOrigin:
        # Fallback recipes rank with the catalog
        return RecipeOrigin.GENERATED if self.used_ai else RecipeOrigin.CATALOG


def _extract_json(text: str) -> str:
    cleaned = text.replace("```json", "").replace("```", "").strip()
    match = re.search(r"\{.*\}", cleaned, re.DOTALL)
    return match.group() if match else cleaned


def parse_generated_recipes(content: Any, max_recipes: int) -> Optional[list[Recipe]]:
    """Strictly decode agent output into domain recipes.

    Accepts a GeneratedRecipeBatch, a dict, or a JSON string (code fences and
    surrounding prose are tolerated). Any structural defect returns None.
    """
    try:
        if isinstance(content, GeneratedRecipeBatch):
            batch = content
        elif isinstance(content, dict):
            batch = GeneratedRecipeBatch.model_validate(content)
        elif isinstance(content, str):
            batch = GeneratedRecipeBatch.model_validate_json(_extract_json(content))
        else:
            logger.warning(f"Unexpected generation output type: {type(content).__name__}")
            return None
    except (ValidationError, json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Generated recipes failed validation: {e}")
        return None

    batch_id = uuid.uuid4().hex
    return [
        generated.to_recipe(f"{GENERATED_ID_PREFIX}-{batch_id}-{number}")
        for number, generated in enumerate(batch.recipes[:max_recipes], start=1)
    ]


def _swap_text(text: str, capitalize: bool) -> str:
    for terms, _ingredient, _notes, word in VEGETARIAN_SWAPS:
        replacement = word.capitalize() if capitalize else word
        text = re.sub("|".join(terms), replacement, text, flags=re.IGNORECASE)
    return text


def apply_vegetarian_swaps(recipe: Recipe) -> Recipe:
    """Replace meat in a recipe with plant proteins and tag it vegetarian.

    Recipes with no meat ingredient are returned unchanged.
    """
    names = [item.ingredient.lower() for item in recipe.ingredients]
    if not any(meat in name for meat in MEAT_INGREDIENTS for name in names):
        return recipe

    ingredients = []
    for item in recipe.ingredients:
        name = item.ingredient.lower()
        for terms, replacement, notes, _word in VEGETARIAN_SWAPS:
            if any(term in name for term in terms):
                item = item.model_copy(update={"ingredient": replacement, "notes": notes})
                break
        ingredients.append(item)

    steps = [
        step.model_copy(update={"instruction": _swap_text(step.instruction, capitalize=False)})
        for step in recipe.instructions
    ]
    tags = recipe.tags if "vegetarian" in recipe.tags else [*recipe.tags, "vegetarian"]

    logger.info(f"Applied vegetarian substitutions to '{recipe.name}'")
    return recipe.model_copy(
        update={
            "name": _swap_text(recipe.name, capitalize=True),
            "ingredients": ingredients,
            "instructions": steps,
            "tags": tags,
        }
    )


def get_fallback_recipes(request: RecipeGenerationRequest) -> list[Recipe]:
    """Fixed recipes returned when generation is unavailable."""
    stir_fry = Recipe(
        id=f"{FALLBACK_ID_PREFIX}-1",
        name="Quick Stir-Fry",
        description="A simple and delicious stir-fry using your available ingredients",
        ingredients=[
            RecipeIngredient(ingredient="vegetables", amount=2, unit="cups", notes="Use any vegetables you have"),
            RecipeIngredient(ingredient="protein", amount=1, unit="cup", notes="Tofu, beans, or any protein you have"),
        ],
        instructions=[
            RecipeStep(step_number=1, instruction="Heat oil in a large pan over medium-high heat", time_minutes=2),
            RecipeStep(step_number=2, instruction="Add protein and cook until browned, about 5-7 minutes", time_minutes=7),
            RecipeStep(step_number=3, instruction="Add vegetables and stir-fry for 3-4 minutes", time_minutes=4),
        ],
        nutritional_info=NutritionalInfo(calories=300, protein=25, carbs=20, fat=15),
        cooking_time=20,
        difficulty="easy",
        cuisine_type="international",
        meal_type="dinner",
        tags=["quick", "easy", "healthy"],
        rating=4.0,
        servings=2,
        prep_time=10,
        total_time=30,
    )

    main = request.ingredients[:5]
    skillet = Recipe(
        id=f"{FALLBACK_ID_PREFIX}-2",
        name=f"Simple {main[0].title()} Skillet",
        description=f"A one-pan dish built from {', '.join(main)}",
        ingredients=[
            *(RecipeIngredient(ingredient=name, amount=1, unit="cup", notes="chopped") for name in main),
            RecipeIngredient(ingredient="olive oil", amount=2, unit="tbsp"),
        ],
        instructions=[
            RecipeStep(step_number=1, instruction="Chop all ingredients into bite-sized pieces", time_minutes=5),
            RecipeStep(step_number=2, instruction="Heat olive oil in a skillet over medium heat", time_minutes=2),
            RecipeStep(
                step_number=3,
                instruction="Cook the ingredients, starting with the firmest, until tender",
                time_minutes=12,
            ),
            RecipeStep(step_number=4, instruction="Season to taste and serve warm", time_minutes=1),
        ],
        nutritional_info=NutritionalInfo(calories=350, protein=15, carbs=30, fat=18),
        cooking_time=20,
        difficulty="easy",
        cuisine_type="international",
        meal_type="dinner",
        tags=["quick", "easy", "one-pan"],
        rating=4.0,
        servings=request.serving_size,
        prep_time=5,
        total_time=25,
    )
    return [stir_fry, skillet]


class RecipeGenerationService:
    """Generates recipes for a request, never raising on AI failure."""

    def __init__(self, agent=None):
        self._agent = agent

    @property
    def agent(self):
        if self._agent is None:
            self._agent = create_recipe_agent()
        return self._agent

    async def _call_agent(self, request: RecipeGenerationRequest) -> Optional[list[Recipe]]:
        prompt = get_generation_prompt(request, config.MAX_GENERATED_RECIPES)
        response = await asyncio.wait_for(
            self.agent.arun(input=prompt),
            timeout=config.GENERATION_TIMEOUT_SECONDS,
        )
        return parse_generated_recipes(getattr(response, "content", None), config.MAX_GENERATED_RECIPES)

    async def generate(self, request: RecipeGenerationRequest) -> GenerationResult:
        recipes: Optional[list[Recipe]] = None

        if not config.has_gemini_key and self._agent is None:
            logger.warning("GEMINI_API_KEY not set, using fallback recipes")
        else:
            try:
                recipes = await self._call_agent(request)
            except asyncio.TimeoutError:
                logger.warning(f"Recipe generation timed out after {config.GENERATION_TIMEOUT_SECONDS}s")
            except Exception as e:
                logger.warning(f"Recipe generation failed: {e}")

        used_ai = bool(recipes)
        if not recipes:
            logger.info("Using fallback recipes")
            recipes = get_fallback_recipes(request)

        if "vegetarian" in request.dietary_preferences:
            recipes = [apply_vegetarian_swaps(recipe) for recipe in recipes]

        logger.info(f"Returning {len(recipes)} recipes (ai={used_ai})")
        return GenerationResult(recipes=recipes, used_ai=used_ai)
