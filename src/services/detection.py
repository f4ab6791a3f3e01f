"""Ingredient detection from food photos using the Gemini vision API.

Pipeline: fetch or receive image bytes, validate format (JPEG/PNG by magic
bytes) and size, optionally compress with Pillow, call Gemini with retries,
then parse the JSON answer. When the answer is not the expected JSON, known
ingredient words are scanned from the raw text instead.

Core Functions:
- fetch_image_bytes(): Get image bytes from an http(s) or data URL (async)
- validate_image(): JPEG/PNG only, MAX_IMAGE_SIZE_MB limit
- compress_image(): Pillow JPEG re-encode above COMPRESS_IMG_THRESHOLD_KB
- parse_ingredient_response(): Strict JSON parse with cleanup and cap
- call_vision_with_retries(): Exponential backoff on transient errors (async)
- detect_ingredients(): Full pipeline, returns lower-cased ingredient names
"""

import asyncio
import base64
import json
import re
from io import BytesIO
from typing import Any, Callable, Optional

import aiohttp
import filetype
from google import genai
from google.genai import types
from PIL import Image

from src.data.vocabulary import extract_known_ingredients
from src.prompts.prompts import INGREDIENT_DETECTION_PROMPT
from src.utils.config import config
from src.utils.errors import ImageValidationError, IngredientDetectionError
from src.utils.logger import logger


TRANSIENT_ERROR_KEYWORDS = ("timeout", "connection", "429", "500", "502", "503", "retryable")
IMAGE_FETCH_TIMEOUT_SECONDS = 10


def safe_execute_sync(func: Callable[[], Any], operation_name: str, default_return: Any = None) -> Any:
    """Run an optional operation, logging and returning `default_return` on failure."""
    try:
        return func()
    except Exception as e:
        logger.warning(f"{operation_name}: {e}")
        return default_return


def compress_image(image_bytes: bytes, max_width: int = 1024) -> bytes:
    """Re-encode large images as JPEG (quality 85), resizing to `max_width`.

    Images under COMPRESS_IMG_THRESHOLD_KB are returned untouched, as is the
    original when Pillow cannot decode it.
    """
    size_kb = len(image_bytes) / 1024
    if size_kb < config.COMPRESS_IMG_THRESHOLD_KB:
        logger.debug(f"Image size {size_kb:.1f}KB below compression threshold, skipping compression")
        return image_bytes

    def _compress():
        img = Image.open(BytesIO(image_bytes))

        # JPEG has no alpha channel
        if img.mode in ("RGBA", "LA", "P"):
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            if img.mode == "RGBA":
                rgb_img.paste(img, mask=img.split()[-1])
            else:
                rgb_img.paste(img)
            img = rgb_img

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=85, optimize=True, progressive=True)
        compressed = output.getvalue()
        logger.debug(f"Image compressed: {size_kb:.1f}KB → {len(compressed) / 1024:.1f}KB")
        return compressed

    return safe_execute_sync(_compress, "Image compression", default_return=image_bytes)


async def fetch_image_bytes(image_url: str) -> bytes:
    """Fetch image bytes from an http(s) URL (10s timeout) or decode a base64 data URL.

    Raises:
        ImageValidationError: If the image cannot be retrieved.
    """
    if image_url.startswith("data:"):

        def _decode_data_url():
            _, encoded = image_url.split(",", 1)
            return base64.b64decode(encoded)

        image_bytes = safe_execute_sync(_decode_data_url, "Decode data URL")
    elif image_url.startswith(("http://", "https://")):
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    image_url, timeout=aiohttp.ClientTimeout(total=IMAGE_FETCH_TIMEOUT_SECONDS)
                ) as response:
                    response.raise_for_status()
                    image_bytes = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Fetch image from URL {image_url}: {e}")
            image_bytes = None
    else:
        raise ImageValidationError("imageUrl must be an http(s) or data URL")

    if not image_bytes:
        raise ImageValidationError("Could not retrieve image from imageUrl")
    return image_bytes


def validate_image(image_bytes: bytes) -> None:
    """Raise ImageValidationError unless the bytes are a JPEG/PNG within MAX_IMAGE_SIZE_MB."""
    if not image_bytes:
        raise ImageValidationError("No image provided")

    kind = filetype.guess(image_bytes)
    if kind is None or kind.extension not in ("jpg", "jpeg", "png"):
        logger.warning(f"Invalid image format: {kind.mime if kind else 'unknown'}")
        raise ImageValidationError("Invalid image format. Only JPEG and PNG are supported.")

    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        raise ImageValidationError(f"Image too large. Maximum size is {config.MAX_IMAGE_SIZE_MB}MB")


def parse_ingredient_response(response_text: str) -> Optional[list[str]]:
    """Parse `{"ingredients": [...]}` from a model answer.

    Code fences and surrounding prose are stripped. Entries are kept only if
    they are non-empty strings, then trimmed, lower-cased, deduplicated and
    capped at MAX_DETECTED_INGREDIENTS.

    Returns:
        Cleaned ingredient list, or None if no JSON object with an
        `ingredients` array can be found.
    """
    cleaned = response_text.replace("```json", "").replace("```", "").strip()
    match = re.search(r"\{.*\}", cleaned, re.DOTALL)
    if not match:
        return None

    try:
        parsed = json.loads(match.group())
    except json.JSONDecodeError as e:
        logger.debug(f"Vision response is not valid JSON: {e}")
        return None

    if not isinstance(parsed, dict) or not isinstance(parsed.get("ingredients"), list):
        return None

    names = (item.strip().lower() for item in parsed["ingredients"] if isinstance(item, str))
    unique = list(dict.fromkeys(name for name in names if name))
    return unique[: config.MAX_DETECTED_INGREDIENTS]


async def call_vision_api(image_bytes: bytes) -> str:
    """Single Gemini vision call returning the raw response text (no retries)."""
    kind = filetype.guess(image_bytes)
    mime_type = "image/png" if kind is not None and kind.extension == "png" else "image/jpeg"

    client = genai.Client(api_key=config.GEMINI_API_KEY)
    response = await asyncio.to_thread(
        client.models.generate_content,
        model=config.IMAGE_DETECTION_MODEL,
        contents=[
            INGREDIENT_DETECTION_PROMPT,
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
        ],
    )
    return response.text or ""


async def call_vision_with_retries(image_bytes: bytes, max_retries: Optional[int] = None) -> str:
    """Call the vision API, retrying transient failures with exponential backoff.

    Transient errors (timeouts, connection problems, 429/5xx) are retried up to
    `max_retries` attempts in total. Anything else fails immediately.

    Raises:
        IngredientDetectionError: When the API keeps failing or fails permanently.
    """
    max_retries = max_retries or config.MAX_RETRIES
    delay_seconds = config.DELAY_BETWEEN_RETRIES

    for attempt in range(1, max_retries + 1):
        try:
            return await call_vision_api(image_bytes)
        except Exception as e:
            error_str = str(e).lower()
            is_transient = any(keyword in error_str for keyword in TRANSIENT_ERROR_KEYWORDS)

            if is_transient and attempt < max_retries:
                logger.debug(
                    f"Transient vision error, retrying (attempt {attempt + 1}/{max_retries}) "
                    f"after {delay_seconds}s: {e}"
                )
                await asyncio.sleep(delay_seconds)
                if config.EXPONENTIAL_BACKOFF:
                    delay_seconds *= 2
                continue

            logger.error(f"Ingredient detection failed after {attempt} attempt(s): {e}")
            raise IngredientDetectionError("Image recognition failed") from e

    raise IngredientDetectionError("Image recognition failed")


async def detect_ingredients(image_bytes: bytes) -> list[str]:
    """Detect ingredients in a JPEG/PNG image.

    Raises:
        ImageValidationError: Invalid format or size.
        IngredientDetectionError: Vision API unavailable or failing.
    """
    validate_image(image_bytes)

    if not config.has_gemini_key:
        logger.error("GEMINI_API_KEY not set, ingredient detection unavailable")
        raise IngredientDetectionError("Image recognition failed")

    if config.COMPRESS_IMG:
        image_bytes = compress_image(image_bytes)

    response_text = await call_vision_with_retries(image_bytes)

    ingredients = parse_ingredient_response(response_text)
    if ingredients is None:
        ingredients = extract_known_ingredients(response_text)
        logger.warning(f"Vision response was not structured, lexical fallback found {len(ingredients)} ingredients")

    logger.info(f"Detected {len(ingredients)} ingredients: {ingredients}")
    return ingredients
