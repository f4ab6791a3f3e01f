"""Agent factory for recipe generation.

Builds the Agno Agent that turns a user's ingredients and constraints into
structured recipes. The agent is stateless: no session database, memory or
tools, one structured Gemini call per request with Agno handling retries.
"""

from agno.agent import Agent
from agno.models.google import Gemini

from src.models.schemas import GeneratedRecipeBatch
from src.prompts.prompts import get_generation_instructions
from src.utils.config import config
from src.utils.logger import logger


def create_recipe_agent() -> Agent:
    """Create the recipe generation agent from configuration.

    Returns:
        Configured Agent whose run output content is a GeneratedRecipeBatch.
    """
    logger.info(f"Configuring recipe generation agent with model {config.GEMINI_MODEL}...")

    agent = Agent(
        # === Model Configuration ===
        model=Gemini(
            id=config.GEMINI_MODEL,
            api_key=config.GEMINI_API_KEY,
            temperature=config.TEMPERATURE,  # 0.7 keeps recipes varied across requests
            max_output_tokens=config.MAX_OUTPUT_TOKENS,
        ),
        # === Output Schema ===
        output_schema=GeneratedRecipeBatch,
        structured_outputs=True,  # Gemini native structured output, schema-valid JSON at API level
        # === Instructions ===
        instructions=get_generation_instructions(max_recipes=config.MAX_GENERATED_RECIPES),
        # === Retry & Error Handling ===
        retries=config.MAX_RETRIES,
        exponential_backoff=config.EXPONENTIAL_BACKOFF,
        delay_between_retries=config.DELAY_BETWEEN_RETRIES,
        # === Metadata ===
        name="Recipe Generation Agent",
        description="Generates structured recipes from available ingredients and dietary constraints",
    )

    logger.info("✓ Recipe generation agent configured")
    return agent
