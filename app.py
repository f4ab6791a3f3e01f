"""Recipe Matching Service entry point.

Serves the FastAPI application (src.api.app) with uvicorn:
- POST /recipes-from-ingredients, POST /recipe-matches
- POST /ingredients-from-image
- GET /recommendations, POST/GET /feedback
- POST /recipes, GET /recipes/{recipeId}, GET /health

Run with: python app.py
"""

import uvicorn

from src.api.app import app
from src.utils.config import config
from src.utils.logger import logger


if __name__ == "__main__":
    logger.info(f"Starting Recipe Matching Service on port {config.PORT}")
    logger.info(f"Recipe generation model: {config.GEMINI_MODEL}")
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
