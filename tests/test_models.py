"""
Tests for Pydantic models.

Tests the review request, the discriminated review result and states.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from src.models.schemas import (
    FailureKind,
    HealthResponse,
    ReviewFailure,
    ReviewRequest,
    ReviewResult,
    ReviewState,
    ReviewSuccess,
)


class TestReviewRequest:
    """Tests for ReviewRequest model."""

    def test_with_code(self):
        """Test a request carrying code."""
        assert ReviewRequest(code="x = 1").code == "x = 1"

    def test_code_optional(self):
        """Test a missing code field parses as None."""
        assert ReviewRequest().code is None

    def test_non_string_code_rejected(self):
        """Test non-string code fails validation."""
        with pytest.raises(ValidationError):
            ReviewRequest(code=42)


class TestReviewResult:
    """Tests for the ReviewResult union."""

    def test_success(self):
        """Test a successful review."""
        result = ReviewSuccess(text="## Looks good")

        assert result.ok is True
        assert result.status == "success"
        assert result.to_markdown() == "## Looks good"

    def test_validation_failure_markdown(self):
        """Test local failures render as errors."""
        result = ReviewFailure(
            kind=FailureKind.VALIDATION_ERROR,
            detail="Please enter code to review.",
        )

        assert result.ok is False
        assert result.to_markdown() == "**Error:** Please enter code to review."

    def test_server_failure_markdown(self):
        """Test server failures render as API errors."""
        result = ReviewFailure(
            kind=FailureKind.SERVER_ERROR,
            detail="500: Error generating review",
            attempts=3,
        )

        assert result.to_markdown() == "**API Error:** 500: Error generating review"

    def test_failure_requires_detail(self):
        """Test a failure must carry a diagnostic."""
        with pytest.raises(ValidationError):
            ReviewFailure(kind=FailureKind.TRANSPORT_ERROR, detail="")

    def test_discriminated_parsing(self):
        """Test results parse into the right variant by status."""
        adapter = TypeAdapter(ReviewResult)

        success = adapter.validate_python({"status": "success", "text": "ok"})
        failure = adapter.validate_python(
            {"status": "failure", "kind": "transport_error", "detail": "down"}
        )

        assert isinstance(success, ReviewSuccess)
        assert isinstance(failure, ReviewFailure)
        assert failure.kind == FailureKind.TRANSPORT_ERROR


class TestReviewState:
    """Tests for ReviewState enum."""

    @pytest.mark.parametrize(
        "state,terminal",
        [
            (ReviewState.IDLE, False),
            (ReviewState.ATTEMPTING, False),
            (ReviewState.RETRYING, False),
            (ReviewState.SUCCESS, True),
            (ReviewState.FAILURE, True),
        ],
    )
    def test_is_terminal(self, state, terminal):
        """Test only success and failure are terminal."""
        assert state.is_terminal is terminal


def test_health_response_defaults():
    """Test health response defaults."""
    health = HealthResponse()

    assert health.status == "healthy"
    assert health.model_configured is False
