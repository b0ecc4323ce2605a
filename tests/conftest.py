"""
Pytest fixtures for AI Code Reviewer tests.

Provides reusable test fixtures, mocks, and sample data.
"""

from typing import Callable, Generator
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import app, get_review_service
from src.services.review_client import ReviewClient
from src.services.review_service import ReviewService

REVIEW_URL = "http://review.test/ai/getReview"

# Sample code snippets for testing
SAMPLE_JS_CODE = '''function calculateSum(a, b) {
    if (typeof a !== 'number' || typeof b !== 'number') {
        return 'Invalid Input';
    }
    return a + b;
}'''

SAMPLE_REVIEW = """## Review

- **Readability**: the function is short and clear.
- **Best practices**: throw instead of returning a string on invalid input.
"""


class FakeSleep:
    """Records backoff waits instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sample_code() -> str:
    """Provide sample code to review."""
    return SAMPLE_JS_CODE


@pytest.fixture
def sample_review() -> str:
    """Provide a sample markdown review."""
    return SAMPLE_REVIEW


@pytest.fixture
def mock_settings() -> Settings:
    """Provide mock settings."""
    return Settings(
        openai_api_key="test-api-key",
        log_level="DEBUG",
        debug=True,
    )


def make_completion(content) -> MagicMock:
    """Build an object shaped like an OpenAI chat completion."""
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def mock_openai_client() -> MagicMock:
    """Provide a mock AsyncOpenAI client returning the sample review."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion(SAMPLE_REVIEW))
    return client


@pytest.fixture
def review_service(mock_openai_client) -> ReviewService:
    """Provide a review service backed by a mock model client."""
    return ReviewService(
        api_key="test-key",
        model="test-model",
        client=mock_openai_client,
    )


@pytest.fixture
def test_client(review_service) -> Generator[TestClient, None, None]:
    """Provide a test client with the mock-backed review service injected."""
    app.dependency_overrides[get_review_service] = lambda: review_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    """Provide a sleep replacement that records delays."""
    return FakeSleep()


@pytest.fixture
def make_review_client(fake_sleep) -> Callable[..., ReviewClient]:
    """
    Provide a factory for review clients talking to a mock transport.

    The handler receives each httpx.Request and returns an httpx.Response
    or raises an httpx exception.
    """

    def factory(handler, **kwargs) -> ReviewClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ReviewClient(
            api_url=REVIEW_URL,
            max_attempts=kwargs.pop("max_attempts", 3),
            backoff_base=kwargs.pop("backoff_base", 1.0),
            http_client=http_client,
            sleep=kwargs.pop("sleep", fake_sleep),
            **kwargs,
        )

    return factory
