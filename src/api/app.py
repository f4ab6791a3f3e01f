"""FastAPI application factory.

Maps domain exceptions to JSON error bodies of the form {"error": message}:
client input problems are 400, unknown recipes 404, vision failures 502 and
anything unexpected a generic 500 with the traceback only in the logs.
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import router
from src.storage.database import init_db
from src.utils.config import config
from src.utils.errors import IngredientDetectionError, InvalidRequestError, RecipeNotFoundError
from src.utils.logger import logger


def format_validation_error(exc: RequestValidationError) -> str:
    """First validation problem as 'field: message'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "form"))
    message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if not config.has_gemini_key:
        logger.warning("GEMINI_API_KEY not set: generation uses fallback recipes, image detection is disabled")
    logger.info("Recipe matching service started")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Recipe Matching Service",
        description="Generates, ranks and recommends recipes from available ingredients",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = uuid.uuid4().hex[:8]
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)",
            extra={"request_id": request_id},
        )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        message = format_validation_error(exc)
        logger.info(f"Rejected {request.method} {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(InvalidRequestError)
    async def handle_invalid_request(request: Request, exc: InvalidRequestError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RecipeNotFoundError)
    async def handle_not_found(request: Request, exc: RecipeNotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(IngredientDetectionError)
    async def handle_detection_error(request: Request, exc: IngredientDetectionError):
        return JSONResponse(status_code=502, content={"error": "Image recognition failed"})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(router)
    return app


app = create_app()
