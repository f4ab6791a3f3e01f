"""Pytest configuration and fixtures for integration tests.

Integration tests call the live Gemini API. They load .env from the project
root and are skipped when GEMINI_API_KEY is not configured.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env before test modules import the application config."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests require a valid GEMINI_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip the whole session if GEMINI_API_KEY is missing."""
    if not os.getenv("GEMINI_API_KEY"):
        pytest.skip("Missing GEMINI_API_KEY. Set it in .env to run integration tests.")
