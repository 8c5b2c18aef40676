"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests.
"""

import os
import sys
import pytest
from pathlib import Path
from unittest.mock import MagicMock, AsyncMock

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment
os.environ["TESTING"] = "true"


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_nutrition_record():
    """Nutrition record as the vision model would return it."""
    return {
        "name": "Apple",
        "calories": 95,
        "protein": 0.5,
        "fat": 0.3,
        "carbs": 25,
    }


@pytest.fixture
def sample_image_url():
    """Small base64 data URL."""
    return "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQAAAQABAAD"


# =============================================================================
# Mock Service Fixtures
# =============================================================================


@pytest.fixture
def mock_vision(sample_nutrition_record):
    """Vision service whose analyze() returns the sample record."""
    mock = MagicMock()
    mock.analyze = AsyncMock(return_value=sample_nutrition_record)
    return mock


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app(mock_vision):
    """FastAPI test application with the vision service mocked out."""
    from food_analyzer.main import app
    from food_analyzer.api.deps import get_vision_service

    app.dependency_overrides[get_vision_service] = lambda: mock_vision
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Sync test client for API tests."""
    from fastapi.testclient import TestClient
    return TestClient(app)


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def jsonrpc():
    """Build a JSON-RPC 2.0 request envelope."""
    def _build(method, params=None, id=1):
        envelope = {"jsonrpc": "2.0", "id": id, "method": method}
        if params is not None:
            envelope["params"] = params
        return envelope
    return _build
