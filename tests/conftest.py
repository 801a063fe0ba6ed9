"""
Pytest fixtures for the Next Business Idea test suite.
"""

import pytest
from fastapi.testclient import TestClient
from loguru import logger

from nextidea.api import app, clear_recent_results
from nextidea.integrations import reset_providers
from nextidea.models import CostRange, IdeaTemplate, Location, UserInputs, create_idea


@pytest.fixture(autouse=True)
def _fresh_state():
    """Every test starts with default providers and no remembered results."""
    reset_providers()
    clear_recent_results()
    yield
    reset_providers()
    clear_recent_results()


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def make_template():
    def _make(**overrides) -> IdeaTemplate:
        data = dict(
            title="Test Idea",
            summary="A test business idea",
            target_customer="Everyone",
            steps_to_start=["Start"],
            cost_range=CostRange(min=100, max=500),
            complexity="LOW",
            local_viability_notes="Good",
            tags=["test"],
            why_now_signals=["Trend"],
        )
        data.update(overrides)
        return IdeaTemplate(**data)
    return _make


@pytest.fixture
def make_idea(make_template):
    def _make(**overrides):
        return create_idea(make_template(**overrides))
    return _make


@pytest.fixture
def make_inputs():
    def _make(**overrides) -> UserInputs:
        data = dict(
            location=Location(city="Austin", state="TX"),
            interests=[],
            budget="LOW",
            hours_per_week=20,
            business_type="SERVICE",
            risk_tolerance="LOW",
        )
        data.update(overrides)
        return UserInputs(**data)
    return _make


@pytest.fixture
def profile_payload():
    """A JSON body for /api/ideas/generate."""
    return {
        "location": {"city": "Austin", "state": "TX"},
        "interests": ["pets", "marketing"],
        "budget": "MEDIUM",
        "hours_per_week": 20,
        "business_type": "SERVICE",
        "risk_tolerance": "MEDIUM",
    }


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(messages.append, format="{message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)
