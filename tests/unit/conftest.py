"""Shared fixtures for unit tests.

Unit tests never reach Gemini or a real database: the API key is blanked for
every test and each test gets its own in-memory SQLite database.
"""

import os

# Must be set before src.storage.database creates the module-level engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.data.sample_recipes import get_sample_recipes
from src.models.models import NutritionalInfo, Recipe, RecipeIngredient, RecipeStep
from src.storage.database import init_db
from src.utils.config import config


@pytest.fixture(autouse=True)
def no_gemini_key(monkeypatch):
    """Force the no-key code paths unless a test opts back in."""
    monkeypatch.setattr(config, "GEMINI_API_KEY", "")


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sample_recipes():
    return get_sample_recipes()


def make_recipe(recipe_id="r-1", ingredients=("chicken", "rice"), **fields) -> Recipe:
    """Minimal valid recipe for tests. Extra keyword arguments override fields."""
    defaults = {
        "name": f"Recipe {recipe_id}",
        "nutritional_info": NutritionalInfo(calories=400, protein=20, carbs=40, fat=10),
        "cooking_time": 20,
        "instructions": [RecipeStep(step_number=1, instruction="Cook everything.")],
    }
    defaults.update(fields)
    return Recipe(
        id=recipe_id,
        ingredients=[RecipeIngredient(ingredient=name, amount=1, unit="cup") for name in ingredients],
        **defaults,
    )


@pytest.fixture
def recipe_factory():
    return make_recipe
