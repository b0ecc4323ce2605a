"""
Services package for AI Code Reviewer.

Contains the review service forwarding code to the model, and the
client side that calls it with retry.
"""

from src.services.review_client import ReviewClient
from src.services.review_service import (
    InvalidInputError,
    ReviewService,
    ReviewServiceError,
    UpstreamError,
)
from src.services.review_session import ReviewSession

__all__ = [
    "InvalidInputError",
    "ReviewClient",
    "ReviewService",
    "ReviewServiceError",
    "ReviewSession",
    "UpstreamError",
]
