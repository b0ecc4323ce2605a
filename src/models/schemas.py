"""
Pydantic schemas for AI Code Reviewer.

Defines the review request, the discriminated review result returned by the
review client, and API response models.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.utils.helpers import format_error_markdown


class FailureKind(str, Enum):
    """Why a review could not be produced."""

    VALIDATION_ERROR = "validation_error"
    TRANSPORT_ERROR = "transport_error"
    SERVER_ERROR = "server_error"


class ReviewState(str, Enum):
    """Position of a review in the client state machine."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can happen from this state."""
        return self in (ReviewState.SUCCESS, ReviewState.FAILURE)


class ReviewRequest(BaseModel):
    """
    Request body for the review endpoint.

    ``code`` is optional at the schema level so that a missing field reaches
    the service and is rejected there with the endpoint's own 400 message.
    """

    code: Optional[str] = Field(None, description="Source code to review")

    class Config:
        """Pydantic model configuration."""

        json_schema_extra = {
            "example": {
                "code": "function calculateSum(a, b) {\n    return a + b;\n}",
            }
        }


class ReviewSuccess(BaseModel):
    """A generated review."""

    status: Literal["success"] = "success"
    text: str = Field(..., description="Markdown review produced by the model")
    attempts: int = Field(default=1, ge=1, description="Attempts made")

    @property
    def ok(self) -> bool:
        return True

    def to_markdown(self) -> str:
        """Render the review for display."""
        return self.text


class ReviewFailure(BaseModel):
    """
    A review that could not be produced.

    Attributes:
        kind: Failure classification.
        detail: Human-readable diagnostic.
        attempts: Attempts made before giving up (0 when never sent).
    """

    status: Literal["failure"] = "failure"
    kind: FailureKind = Field(..., description="Failure classification")
    detail: str = Field(..., min_length=1, description="Diagnostic message")
    attempts: int = Field(default=0, ge=0, description="Attempts made")

    @property
    def ok(self) -> bool:
        return False

    def to_markdown(self) -> str:
        """Render the failure as a markdown error line."""
        return format_error_markdown(
            self.detail,
            api_error=self.kind == FailureKind.SERVER_ERROR,
        )


ReviewResult = Annotated[
    Union[ReviewSuccess, ReviewFailure],
    Field(discriminator="status"),
]


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(default="healthy", description="Service status")
    version: str = Field(default="1.0.0", description="Application version")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    model_configured: bool = Field(default=False, description="Review model API key configured")
