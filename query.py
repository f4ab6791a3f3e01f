#!/usr/bin/env python3
"""Ad hoc query runner for the recipe matching engine.

Rank recipes for a list of ingredients without starting the API server.

Usage:
    python query.py "chicken, rice, onion"
    python query.py --diet vegetarian,gluten-free --cuisine italian --time 30 "tomato, pasta, basil"
    python query.py --ai "chicken, rice"  # Include Gemini-generated recipes
    python query.py --image images/fridge.jpg  # Detect ingredients from a photo first
    python query.py --debug "eggs, spinach"  # Show full JSON for every match

Features:
- Ranks the built-in sample catalog with the same engine as the API
- Optional AI generation (falls back to fixed recipes without GEMINI_API_KEY)
- Optional ingredient detection from a JPEG/PNG image
- Table output with per-factor scores and explanations
"""

import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from src.data.vocabulary import COMMON_INGREDIENTS
from src.models.models import RecipeGenerationRequest, RecipeMatch
from src.services.detection import detect_ingredients
from src.services.generation import GenerationResult, RecipeGenerationService
from src.services.matching import MatchingService
from src.utils.errors import RecipeServiceError
from src.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--ai] [--debug] [--diet D1,D2] [--cuisine C] [--time MIN] [--image PATH] "<ingredients>"'


class _CatalogOnlyGeneration(RecipeGenerationService):
    """Skips generation entirely so only the catalog is ranked."""

    async def generate(self, request):
        return GenerationResult(recipes=[], used_ai=False)


def print_suggestions() -> None:
    """Show common ingredients by category as a starting point."""
    table = Table(title="Common Ingredients")
    table.add_column("Category", style="cyan")
    table.add_column("Ingredients")
    for category, names in COMMON_INGREDIENTS.items():
        table.add_row(category, ", ".join(names))
    console.print(table)


def render_matches(matches: list[RecipeMatch], debug: bool = False) -> None:
    if not matches:
        console.print("[yellow]No recipes matched your ingredients[/yellow]")
        return

    table = Table(title="Recipe Matches", show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Recipe", style="bold")
    table.add_column("Origin")
    table.add_column("Score", justify="right")
    table.add_column("Ingr / Diet / Cuisine / Time")
    table.add_column("Why")

    for position, match in enumerate(matches, start=1):
        table.add_row(
            str(position),
            match.recipe.name,
            match.origin.value,
            f"{match.match_score:.2f}",
            " / ".join(
                f"{value:.2f}"
                for value in (
                    sum(m.confidence for m in match.ingredient_matches) / max(len(match.ingredient_matches), 1),
                    match.dietary_compatibility,
                    match.cuisine_match,
                    match.time_match,
                )
            ),
            match.explanation,
        )
    console.print(table)

    if debug:
        for match in matches:
            console.print_json(match.model_dump_json(by_alias=True))


def run_query(
    ingredients: list[str],
    use_ai: bool = False,
    debug: bool = False,
    diet: list[str] = (),
    cuisine: str = "",
    max_time: int = 30,
    image_path: str = None,
) -> None:
    """Detect (optionally), rank and print matches for one ingredient list."""
    try:
        if image_path:
            image_file = Path(image_path)
            if not image_file.exists():
                console.print(f"[red]✗ Error: Image file not found: {image_path}[/red]")
                sys.exit(1)
            logger.info(f"Detecting ingredients in {image_file.name}...")
            detected = asyncio.run(detect_ingredients(image_file.read_bytes()))
            console.print(f"[cyan]Detected:[/cyan] {', '.join(detected) or 'nothing'}")
            ingredients = [*ingredients, *detected]

        request = RecipeGenerationRequest(
            ingredients=ingredients,
            dietary_preferences=list(diet),
            cuisine_type=cuisine,
            cooking_time=max_time,
        )

        generation = RecipeGenerationService() if use_ai else _CatalogOnlyGeneration()
        result = asyncio.run(MatchingService(generation=generation).find_matches(request))

        console.print()
        render_matches(result.matches, debug=debug)
        if use_ai and not result.used_ai:
            console.print("[yellow]AI generation unavailable, showing fallback recipes[/yellow]")

    except ValidationError as e:
        console.print(f"[red]✗ Invalid request: {e.errors()[0]['msg']}[/red]")
        sys.exit(1)
    except RecipeServiceError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    use_ai = False
    debug_mode = False
    diet: list[str] = []
    cuisine = ""
    max_time = 30
    image_path = None
    argv_start = 1

    # Flags taking a value
    value_flags = ("--diet", "--cuisine", "--time", "--image")

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        if flag == "--ai":
            use_ai = True
        elif flag == "--debug":
            debug_mode = True
        elif flag in value_flags:
            argv_start += 1
            if argv_start >= len(sys.argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            value = sys.argv[argv_start]
            if flag == "--diet":
                diet = [d.strip() for d in value.split(",") if d.strip()]
            elif flag == "--cuisine":
                cuisine = value
            elif flag == "--time":
                if not value.isdigit():
                    print("Error: --time must be a whole number of minutes")
                    sys.exit(1)
                max_time = int(value)
            else:
                image_path = value
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)
        argv_start += 1

    ingredient_text = " ".join(sys.argv[argv_start:])
    ingredient_list = [i.strip() for i in ingredient_text.split(",") if i.strip()]

    if not ingredient_list and not image_path:
        print("Error: No ingredients provided")
        print(USAGE)
        print_suggestions()
        sys.exit(1)

    run_query(
        ingredient_list,
        use_ai=use_ai,
        debug=debug_mode,
        diet=diet,
        cuisine=cuisine,
        max_time=max_time,
        image_path=image_path,
    )
