"""
Models package for AI Code Reviewer.

Contains Pydantic models for data validation and serialization.
"""

from src.models.schemas import (
    FailureKind,
    HealthResponse,
    ReviewFailure,
    ReviewRequest,
    ReviewResult,
    ReviewState,
    ReviewSuccess,
)

__all__ = [
    "FailureKind",
    "HealthResponse",
    "ReviewFailure",
    "ReviewRequest",
    "ReviewResult",
    "ReviewState",
    "ReviewSuccess",
]
