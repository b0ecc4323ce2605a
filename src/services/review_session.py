"""
Review Session for AI Code Reviewer.

Holds the caller-side state of a review: progress indicator, state machine
position and the last result. Only the newest review may publish a result.
"""

import asyncio
import logging
from typing import Optional

from src.models.schemas import ReviewResult, ReviewState
from src.services.review_client import ReviewClient


class ReviewSession:
    """Tracks one caller's reviews on top of a ReviewClient."""

    def __init__(self, client: ReviewClient) -> None:
        self._logger = logging.getLogger("code_reviewer.review_session")
        self._client = client
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

        self.state = ReviewState.IDLE
        self.attempt = 0
        self.result: Optional[ReviewResult] = None

    @property
    def in_progress(self) -> bool:
        """Whether a review is currently being attempted or waiting to retry."""
        return self.state in (ReviewState.ATTEMPTING, ReviewState.RETRYING)

    def cancel(self) -> None:
        """Abort the in-flight review, if any, and return to idle."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._logger.debug("Cancelling in-flight review")
            self._task.cancel()
        self._task = None
        self.state = ReviewState.IDLE
        self.attempt = 0

    async def review(self, code: str) -> Optional[ReviewResult]:
        """
        Run a review, superseding any review still in flight.

        Args:
            code: The code to review.

        Returns:
            The result, or None if a newer review or cancel() superseded this one.
        """
        self.cancel()
        generation = self._generation
        self.result = None

        def track(state: ReviewState, attempt: int) -> None:
            if generation == self._generation:
                self.state = state
                self.attempt = attempt

        task = asyncio.create_task(self._client.submit_review(code, on_state_change=track))
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                return None
            self.cancel()
            raise
        except Exception:
            if generation == self._generation:
                self._logger.error("Review failed unexpectedly", exc_info=True)
                self._task = None
                self.state = ReviewState.FAILURE
            raise

        if generation != self._generation:
            self._logger.debug("Discarding stale review result")
            return None

        self._task = None
        self.result = result
        return result
