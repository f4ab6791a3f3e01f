"""Domain exceptions raised by services and translated to HTTP responses in src.api."""


class RecipeServiceError(Exception):
    """Base class for errors raised by the recipe service layer."""


class InvalidRequestError(RecipeServiceError, ValueError):
    """Client input failed a check; the message is safe to return to the caller."""


class ImageValidationError(InvalidRequestError):
    """Uploaded image is missing, unreadable, not JPEG/PNG, or too large."""


class IngredientDetectionError(RecipeServiceError):
    """Vision API could not be reached or kept failing after retries."""


class RecipeNotFoundError(RecipeServiceError):
    """A recipe id was not present in storage."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id
