"""Configuration management for Recipe Matching Service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Gemini API key: optional, generation falls back to the fixed recipe set without it
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Model used for recipe generation
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Vision model used for ingredient detection from photos
        self.IMAGE_DETECTION_MODEL: str = os.getenv("IMAGE_DETECTION_MODEL", "gemini-2.5-flash-lite")
        # Server Port
        self.PORT: int = int(os.getenv("PORT", "8000"))
        # Database URL: any SQLAlchemy URL. Default: local SQLite file
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///recipes.db")
        # Comma-separated list of allowed CORS origins. Default: "*"
        self.CORS_ORIGINS: list[str] = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

        # Image handling
        # Maximum image size (in MB) that can be processed. Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Compress images above the threshold before sending them to Gemini
        self.COMPRESS_IMG: bool = _env_bool("COMPRESS_IMG", "true")
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))
        # Maximum number of ingredients returned by image detection
        self.MAX_DETECTED_INGREDIENTS: int = int(os.getenv("MAX_DETECTED_INGREDIENTS", "15"))

        # Recipe generation
        # Number of recipes requested from Gemini per call
        self.MAX_GENERATED_RECIPES: int = int(os.getenv("MAX_GENERATED_RECIPES", "3"))
        # Hard timeout for one generation call, fallback recipes are used when exceeded
        self.GENERATION_TIMEOUT_SECONDS: float = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "30"))
        # Temperature: 0.7 keeps generated recipes varied between requests
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        # Max Output Tokens: three detailed recipes fit comfortably in 8192
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "8192"))

        # Retry Configuration - applies to generation agent and vision calls
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: Initial delay in seconds (doubled each retry if exponential_backoff=True)
        self.DELAY_BETWEEN_RETRIES: int = int(os.getenv("DELAY_BETWEEN_RETRIES", "1"))
        self.EXPONENTIAL_BACKOFF: bool = _env_bool("EXPONENTIAL_BACKOFF", "true")

        # Ranking
        # Matches scoring below this are dropped from ranked results
        self.MIN_MATCH_SCORE: float = float(os.getenv("MIN_MATCH_SCORE", "0.3"))
        # Maximum number of ranked matches returned
        self.MAX_MATCH_RESULTS: int = int(os.getenv("MAX_MATCH_RESULTS", "20"))
        # Default size of the personalized recommendation feed
        self.DEFAULT_RECOMMENDATION_LIMIT: int = int(os.getenv("DEFAULT_RECOMMENDATION_LIMIT", "10"))

    @property
    def has_gemini_key(self) -> bool:
        return bool(self.GEMINI_API_KEY)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any value is outside its accepted range.
        """
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(
                f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES < 0:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must not be negative, got: {self.DELAY_BETWEEN_RETRIES}"
            )
        if self.GENERATION_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"GENERATION_TIMEOUT_SECONDS must be positive, got: {self.GENERATION_TIMEOUT_SECONDS}"
            )
        if not (1 <= self.MAX_GENERATED_RECIPES <= 10):
            raise ValueError(
                f"MAX_GENERATED_RECIPES must be between 1 and 10, got: {self.MAX_GENERATED_RECIPES}"
            )
        if not (0.0 <= self.MIN_MATCH_SCORE <= 1.0):
            raise ValueError(
                f"MIN_MATCH_SCORE must be between 0.0 and 1.0, got: {self.MIN_MATCH_SCORE}"
            )
        if self.MAX_MATCH_RESULTS < 1:
            raise ValueError(
                f"MAX_MATCH_RESULTS must be at least 1, got: {self.MAX_MATCH_RESULTS}"
            )
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(
                f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
