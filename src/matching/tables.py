"""Static lookup tables used by the matching components.

The tables are bundled into one read-only `MatchingTables` value that each
matcher receives at construction, so tests can swap in small tables without
touching module globals. Key order is significant: substitution lookup walks
originals in the order listed here.
"""

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_SUBSTITUTIONS: dict[str, tuple[str, ...]] = {
    "butter": ("olive oil", "coconut oil", "margarine"),
    "eggs": ("flax seeds", "chia seeds", "banana"),
    "milk": ("almond milk", "soy milk", "oat milk"),
    "flour": ("almond flour", "coconut flour", "gluten-free flour"),
    "sugar": ("honey", "maple syrup", "stevia"),
    "salt": ("herbs", "spices", "lemon juice"),
    "onion": ("shallots", "leeks", "garlic"),
    "tomato": ("bell pepper", "zucchini", "eggplant"),
    "chicken": ("tofu", "tempeh", "seitan"),
    "beef": ("lentils", "mushrooms", "beans"),
}

# Recipe tags that confirm a dietary preference is satisfied
DEFAULT_DIETARY_COMPATIBILITY: dict[str, tuple[str, ...]] = {
    "vegan": ("vegan", "plant-based"),
    "vegetarian": ("vegan", "vegetarian", "plant-based"),
    "gluten-free": ("gluten-free", "celiac-safe"),
    "dairy-free": ("dairy-free", "lactose-free", "vegan"),
    "keto": ("keto", "low-carb", "high-fat"),
    "paleo": ("paleo", "grain-free", "dairy-free"),
    "low-sodium": ("low-sodium", "heart-healthy"),
    "low-calorie": ("low-calorie", "weight-loss"),
    "high-protein": ("high-protein", "muscle-building"),
    "low-carb": ("low-carb", "keto", "diabetic-friendly"),
}

MEAT_TERMS = ("meat", "poultry", "chicken", "beef", "pork", "bacon", "lamb", "turkey")

# Ingredient terms that violate a dietary preference (substring match)
DEFAULT_DIETARY_VIOLATIONS: dict[str, tuple[str, ...]] = {
    "vegan": (*MEAT_TERMS, "fish", "shrimp", "dairy", "eggs", "honey", "gelatin"),
    "vegetarian": (*MEAT_TERMS, "fish", "shrimp"),
    "gluten-free": ("wheat", "barley", "rye", "gluten"),
    "dairy-free": ("milk", "cheese", "yogurt", "butter", "cream"),
    "keto": ("sugar", "grains", "high-carb"),
    "paleo": ("grains", "legumes", "dairy", "processed-foods"),
}

DEFAULT_SIMILAR_CUISINES: dict[str, tuple[str, ...]] = {
    "italian": ("mediterranean", "european"),
    "chinese": ("asian", "oriental"),
    "indian": ("south-asian", "spicy"),
    "mexican": ("latin-american", "tex-mex"),
    "french": ("european", "continental"),
    "japanese": ("asian", "oriental"),
    "thai": ("asian", "southeast-asian"),
    "greek": ("mediterranean", "european"),
    "spanish": ("mediterranean", "european"),
    "american": ("western", "comfort-food"),
}


class MatchingTables(BaseModel):
    """Read-only bundle of the substitution, dietary and cuisine tables."""

    model_config = ConfigDict(frozen=True)

    substitutions: dict[str, tuple[str, ...]] = Field(default_factory=lambda: dict(DEFAULT_SUBSTITUTIONS))
    dietary_compatibility: dict[str, tuple[str, ...]] = Field(
        default_factory=lambda: dict(DEFAULT_DIETARY_COMPATIBILITY)
    )
    dietary_violations: dict[str, tuple[str, ...]] = Field(default_factory=lambda: dict(DEFAULT_DIETARY_VIOLATIONS))
    similar_cuisines: dict[str, tuple[str, ...]] = Field(default_factory=lambda: dict(DEFAULT_SIMILAR_CUISINES))

    def substitutes_for(self, ingredient: str) -> list[tuple[str, str]]:
        """Return (original, substitute) pairs whose original term appears in `ingredient`, in table order."""
        return [
            (original, substitute)
            for original, substitutes in self.substitutions.items()
            if original in ingredient
            for substitute in substitutes
        ]


DEFAULT_TABLES = MatchingTables()
