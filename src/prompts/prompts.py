"""Prompts for recipe generation and ingredient detection.

Generation instructions are fixed per process and passed to the agent at
construction; the per-request prompt carries the user's ingredients and
constraints. Dietary restrictions that the model tends to ignore are spelled
out explicitly.
"""

from src.models.models import RecipeGenerationRequest


# Restriction text per dietary preference, emphasized so the model respects it
DIETARY_RESTRICTION_TEXT = {
    "vegetarian": "STRICTLY NO MEAT, FISH, OR ANIMAL PRODUCTS. Use only plant-based ingredients.",
    "vegan": "STRICTLY VEGAN - NO ANIMAL PRODUCTS, DAIRY, EGGS, OR HONEY. Use only plant-based ingredients.",
    "gluten-free": "GLUTEN-FREE - Avoid wheat, barley, rye, and any gluten-containing ingredients.",
    "dairy-free": "DAIRY-FREE - No milk, cheese, butter, or dairy products.",
}

NO_RESTRICTIONS = "No specific dietary restrictions"

INGREDIENT_DETECTION_PROMPT = (
    "Identify every food ingredient visible in this image. "
    'Return ONLY valid JSON of the form {"ingredients": ["tomato", "basil"]} '
    "with simple, lower-case ingredient names and no duplicates. "
    "Do not include dishes, utensils or packaging."
)


def get_dietary_restrictions(preferences: list[str]) -> str:
    """Join the restriction text for each preference that has one."""
    parts = [DIETARY_RESTRICTION_TEXT[p] for p in preferences if p in DIETARY_RESTRICTION_TEXT]
    return " ".join(parts) if parts else NO_RESTRICTIONS


def get_generation_instructions(max_recipes: int) -> str:
    """System instructions for the recipe generation agent.

    Args:
        max_recipes: Exact number of recipes the model must return.

    Returns:
        str: Instructions describing output rules and dietary handling.
    """
    return f"""You are a professional recipe developer. Generate exactly {max_recipes} unique, practical recipes
built around the ingredients the user has available.

## Output Rules
- Return exactly {max_recipes} recipes in the `recipes` array.
- Use as many of the provided ingredients as possible; keep extra ingredients to common pantry staples.
- `title` is a short dish name. `description` is one or two sentences.
- `cuisine` is a single lower-case cuisine such as "italian", "mexican" or "international".
- `difficulty` is one of: easy, medium, hard.
- `meal_type` is one of: breakfast, lunch, dinner, snack, dessert.
- `cook_time_min` and `prep_time_min` are whole minutes.
- Every ingredient has a positive numeric `amount` and a `unit` (use "whole" for countable items).
- `steps` are plain instructions in cooking order, one action per step, without numbering.
- `nutrition` is per serving: calories, protein_g, carbs_g, fat_g.
- `dietary_tags` lists lower-case tags that apply, e.g. vegetarian, vegan, gluten-free, dairy-free,
  low-carb, high-protein, quick.

## Dietary Rules
- Dietary restrictions given by the user are absolute. Never include a forbidden ingredient,
  not even as an optional garnish.
- If a provided ingredient conflicts with a restriction, leave it out and use a compatible alternative.
- Only add a dietary tag when the whole recipe satisfies it.
"""


def get_generation_prompt(request: RecipeGenerationRequest, max_recipes: int) -> str:
    """Per-request prompt listing ingredients and constraints."""
    preferences = ", ".join(request.dietary_preferences) or "any dietary preference"
    cuisine = request.cuisine_type if request.cuisine_type and request.cuisine_type.lower() != "any" else "any cuisine"
    max_time = f"{request.cooking_time} minutes" if request.cooking_time else "no limit"

    return (
        f"Generate exactly {max_recipes} recipes.\n"
        f"Available ingredients: {', '.join(request.ingredients)}\n"
        f"Dietary preferences: {preferences}\n"
        f"DIETARY RESTRICTIONS: {get_dietary_restrictions(request.dietary_preferences)}\n"
        f"Servings: {request.serving_size}\n"
        f"Cuisine: {cuisine}\n"
        f"Maximum cooking time: {max_time}"
    )
