"""Ingredient vocabularies."""

# Scanned for in free-text vision responses when structured parsing fails
VISION_VOCABULARY: tuple[str, ...] = (
    "tomato", "onion", "garlic", "potato", "carrot", "bell pepper", "mushroom",
    "chicken", "beef", "pork", "fish", "shrimp", "egg", "cheese", "milk",
    "rice", "pasta", "bread", "flour", "oil", "butter", "salt", "pepper",
    "basil", "oregano", "thyme", "lemon", "lime", "apple", "banana", "orange",
    "lettuce", "spinach", "kale", "cucumber", "avocado", "corn", "peas",
    "broccoli", "cauliflower", "zucchini", "eggplant", "asparagus",
)

MAX_LEXICAL_MATCHES = 10

# Suggestions printed by query.py, grouped by category
COMMON_INGREDIENTS: dict[str, tuple[str, ...]] = {
    "protein": ("chicken breast", "ground beef", "salmon", "eggs", "tofu"),
    "grain": ("quinoa", "rice", "pasta", "bread"),
    "vegetable": (
        "onion", "garlic", "tomato", "bell pepper", "spinach", "kale", "carrot",
        "potato", "sweet potato", "broccoli", "cauliflower", "mushroom",
        "zucchini", "eggplant", "cucumber", "lettuce",
    ),
    "fruit": ("apple", "banana", "orange", "strawberry", "blueberry"),
    "dairy": ("milk", "cheese", "yogurt", "butter"),
    "oil": ("olive oil", "coconut oil", "vegetable oil"),
    "spice": ("salt", "black pepper", "chili powder", "cumin", "oregano", "basil", "thyme", "rosemary"),
}


def extract_known_ingredients(text: str, limit: int = MAX_LEXICAL_MATCHES) -> list[str]:
    """Return vocabulary words mentioned in `text`, in vocabulary order."""
    lowered = text.lower()
    return [word for word in VISION_VOCABULARY if word in lowered][:limit]
