"""Built-in sample recipe catalog.

Ranked alongside generated recipes on every match request, and used as the
recommendation pool of last resort when storage holds no recipes.
"""

from src.models.models import NutritionalInfo, Recipe, RecipeIngredient, RecipeStep


def _recipe(
    recipe_id: str,
    name: str,
    description: str,
    ingredients: list[tuple[str, float, str]],
    steps: list[str],
    nutrition: tuple[float, float, float, float],
    **fields,
) -> Recipe:
    calories, protein, carbs, fat = nutrition
    return Recipe(
        id=recipe_id,
        name=name,
        description=description,
        ingredients=[RecipeIngredient(ingredient=n, amount=a, unit=u) for n, a, u in ingredients],
        instructions=[RecipeStep(step_number=i, instruction=text) for i, text in enumerate(steps, start=1)],
        nutritional_info=NutritionalInfo(calories=calories, protein=protein, carbs=carbs, fat=fat),
        **fields,
    )


SAMPLE_RECIPES: list[Recipe] = [
    _recipe(
        "sample-1",
        "Classic Chicken Fried Rice",
        "Day-old rice tossed with chicken, egg and onion in a hot pan.",
        [("chicken", 300, "g"), ("rice", 2, "cups"), ("onion", 1, "whole"), ("eggs", 2, "whole"), ("soy sauce", 2, "tbsp")],
        [
            "Dice the chicken and onion.",
            "Stir-fry the chicken until cooked through, then set aside.",
            "Scramble the eggs in the same pan.",
            "Add onion and rice, fry for 5 minutes, then return the chicken and season with soy sauce.",
        ],
        (520, 32, 58, 14),
        cooking_time=25,
        difficulty="easy",
        cuisine_type="chinese",
        meal_type="dinner",
        tags=["quick", "high-protein"],
        rating=4.5,
        total_ratings=120,
        servings=2,
        prep_time=10,
        total_time=35,
    ),
    _recipe(
        "sample-2",
        "Tomato Basil Pasta",
        "Simple pasta with a fresh tomato, garlic and basil sauce.",
        [("pasta", 250, "g"), ("tomato", 4, "whole"), ("garlic", 3, "cloves"), ("basil", 1, "handful"), ("olive oil", 3, "tbsp")],
        [
            "Boil the pasta in salted water until al dente.",
            "Saute garlic in olive oil, add chopped tomatoes and simmer for 10 minutes.",
            "Toss the pasta with the sauce and torn basil.",
        ],
        (450, 14, 72, 12),
        cooking_time=20,
        difficulty="easy",
        cuisine_type="italian",
        meal_type="dinner",
        tags=["vegetarian", "vegan", "plant-based", "quick"],
        rating=4.6,
        total_ratings=210,
        servings=2,
        prep_time=5,
        total_time=25,
    ),
    _recipe(
        "sample-3",
        "Vegetable Curry",
        "Mixed vegetables simmered in a coconut curry sauce.",
        [
            ("potato", 2, "whole"),
            ("carrot", 2, "whole"),
            ("cauliflower", 1, "head"),
            ("coconut milk", 400, "ml"),
            ("curry paste", 2, "tbsp"),
            ("onion", 1, "whole"),
        ],
        [
            "Fry the onion with curry paste until fragrant.",
            "Add diced potato, carrot and cauliflower and stir to coat.",
            "Pour in coconut milk and simmer for 25 minutes until tender.",
        ],
        (380, 8, 45, 19),
        cooking_time=40,
        difficulty="medium",
        cuisine_type="indian",
        meal_type="dinner",
        tags=["vegan", "plant-based", "gluten-free", "dairy-free"],
        rating=4.4,
        total_ratings=95,
        servings=4,
        prep_time=15,
        total_time=55,
    ),
    _recipe(
        "sample-4",
        "Beef Tacos",
        "Seasoned ground beef in warm tortillas with fresh toppings.",
        [
            ("ground beef", 400, "g"),
            ("tortillas", 8, "whole"),
            ("lettuce", 1, "cup"),
            ("tomato", 2, "whole"),
            ("cheese", 100, "g"),
            ("chili powder", 1, "tbsp"),
        ],
        [
            "Brown the beef with chili powder.",
            "Warm the tortillas.",
            "Fill tortillas with beef, lettuce, diced tomato and cheese.",
        ],
        (610, 34, 40, 32),
        cooking_time=20,
        difficulty="easy",
        cuisine_type="mexican",
        meal_type="dinner",
        tags=["quick", "high-protein"],
        rating=4.3,
        total_ratings=150,
        servings=4,
        prep_time=10,
        total_time=30,
    ),
    _recipe(
        "sample-5",
        "Greek Salad",
        "Crisp vegetables with feta cheese and olives.",
        [
            ("cucumber", 1, "whole"),
            ("tomato", 3, "whole"),
            ("feta cheese", 150, "g"),
            ("olives", 0.5, "cup"),
            ("red onion", 0.5, "whole"),
            ("olive oil", 2, "tbsp"),
        ],
        [
            "Chop the cucumber, tomatoes and onion.",
            "Combine with olives and crumbled feta.",
            "Dress with olive oil and serve.",
        ],
        (320, 10, 12, 26),
        cooking_time=10,
        difficulty="easy",
        cuisine_type="greek",
        meal_type="lunch",
        tags=["vegetarian", "gluten-free", "low-carb", "keto"],
        rating=4.2,
        total_ratings=80,
        servings=2,
        prep_time=10,
        total_time=10,
    ),
    _recipe(
        "sample-6",
        "Salmon Teriyaki",
        "Glazed salmon fillets with a sweet soy teriyaki sauce.",
        [("salmon", 2, "fillets"), ("soy sauce", 3, "tbsp"), ("honey", 1, "tbsp"), ("garlic", 2, "cloves"), ("rice", 1, "cup")],
        [
            "Mix soy sauce, honey and minced garlic.",
            "Sear the salmon skin-side down for 4 minutes, then flip.",
            "Pour over the sauce and cook until glazed. Serve with rice.",
        ],
        (540, 38, 48, 18),
        cooking_time=25,
        difficulty="medium",
        cuisine_type="japanese",
        meal_type="dinner",
        tags=["high-protein", "dairy-free"],
        rating=4.7,
        total_ratings=60,
        servings=2,
        prep_time=10,
        total_time=35,
    ),
    _recipe(
        "sample-7",
        "Spinach Mushroom Omelette",
        "Fluffy omelette filled with sauteed spinach and mushrooms.",
        [("eggs", 3, "whole"), ("spinach", 1, "cup"), ("mushroom", 100, "g"), ("butter", 1, "tbsp"), ("salt", 1, "pinch")],
        [
            "Saute mushrooms in butter, add spinach until wilted.",
            "Pour in the beaten eggs and cook gently.",
            "Fold the omelette over the filling and season with salt.",
        ],
        (310, 21, 5, 23),
        cooking_time=15,
        difficulty="easy",
        cuisine_type="french",
        meal_type="breakfast",
        tags=["vegetarian", "gluten-free", "low-carb", "keto"],
        rating=4.1,
        total_ratings=45,
        servings=1,
        prep_time=5,
        total_time=20,
    ),
    _recipe(
        "sample-8",
        "Thai Green Curry with Chicken",
        "Fragrant green curry with chicken and vegetables.",
        [
            ("chicken", 400, "g"),
            ("green curry paste", 3, "tbsp"),
            ("coconut milk", 400, "ml"),
            ("bell pepper", 1, "whole"),
            ("basil", 1, "handful"),
            ("rice", 1.5, "cups"),
        ],
        [
            "Fry the curry paste until fragrant.",
            "Add sliced chicken and cook for 5 minutes.",
            "Pour in coconut milk, add bell pepper and simmer for 15 minutes.",
            "Stir in basil and serve with rice.",
        ],
        (650, 36, 52, 32),
        cooking_time=45,
        difficulty="hard",
        cuisine_type="thai",
        meal_type="dinner",
        tags=["spicy", "gluten-free", "dairy-free"],
        rating=4.8,
        total_ratings=30,
        servings=4,
        prep_time=15,
        total_time=60,
    ),
]


def get_sample_recipes() -> list[Recipe]:
    """Return copies of the catalog so callers can mutate them freely."""
    return [recipe.model_copy(deep=True) for recipe in SAMPLE_RECIPES]
