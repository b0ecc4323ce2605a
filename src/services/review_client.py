"""
Review Client for AI Code Reviewer.

Posts code to the review endpoint with bounded retry and exponential
backoff, and turns every outcome into a ReviewResult.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from src.config import get_settings
from src.models.schemas import (
    FailureKind,
    ReviewFailure,
    ReviewResult,
    ReviewState,
    ReviewSuccess,
)
from src.utils.helpers import is_blank, truncate_string

EMPTY_CODE_MESSAGE = "Please enter code to review."
UNREACHABLE_MESSAGE = "could not reach the service; verify it is running"
EMPTY_RESPONSE_MESSAGE = "empty response from server"
SERVER_ERROR_FALLBACK = "Failed to generate review."

StateCallback = Callable[[ReviewState, int], None]


class ReviewClient:
    """
    HTTP client for the review endpoint.

    A review is attempted up to ``max_attempts`` times. After attempt ``n``
    fails the client waits ``2**n * backoff_base`` seconds before the next one.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        max_attempts: Optional[int] = None,
        backoff_base: Optional[float] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the Review Client.

        Args:
            api_url: Review endpoint URL. Uses settings if not provided.
            max_attempts: Total attempts per review. Uses settings if not provided.
            backoff_base: Backoff unit in seconds. Uses settings if not provided.
            timeout: Per-attempt timeout in seconds. Uses settings if not provided.
            http_client: Pre-built httpx client. The caller keeps ownership of it.
            sleep: Coroutine used for backoff waits.

        Raises:
            ValueError: If max_attempts is less than 1.
        """
        self._logger = logging.getLogger("code_reviewer.review_client")
        settings = get_settings()

        self._api_url = api_url or settings.review_api_url
        self._max_attempts = (
            max_attempts if max_attempts is not None else settings.client_max_attempts
        )
        if self._max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._backoff_base = (
            backoff_base if backoff_base is not None else settings.client_backoff_base
        )
        self._timeout = timeout if timeout is not None else settings.client_timeout
        self._sleep = sleep

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self._timeout)

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) attempt has failed."""
        return (2 ** attempt) * self._backoff_base

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "ReviewClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _post(self, code: str) -> httpx.Response:
        response = await self._http.post(self._api_url, json={"code": code})
        response.raise_for_status()
        return response

    def _retrying(self, notify: StateCallback) -> AsyncRetrying:
        def before_sleep(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            self._logger.warning(
                f"Review attempt {retry_state.attempt_number}/{self._max_attempts} "
                f"failed ({exc!r}); retrying in {delay:.1f}s"
            )
            notify(ReviewState.RETRYING, retry_state.attempt_number)

        return AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=lambda retry_state: self.backoff_delay(retry_state.attempt_number),
            retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
            before_sleep=before_sleep,
            sleep=self._sleep,
            reraise=True,
        )

    async def submit_review(
        self,
        code: str,
        on_state_change: Optional[StateCallback] = None,
    ) -> ReviewResult:
        """
        Request a review of a piece of code.

        Transport and HTTP failures never escape: they are returned as a
        ReviewFailure. Cancelling the awaiting task stops any in-flight
        attempt or backoff wait.

        Args:
            code: The code to review.
            on_state_change: Called with (state, attempt) on every transition.

        Returns:
            ReviewSuccess with the review text, or ReviewFailure.
        """

        def notify(state: ReviewState, attempt: int) -> None:
            if on_state_change is not None:
                on_state_change(state, attempt)

        if is_blank(code):
            notify(ReviewState.FAILURE, 0)
            return ReviewFailure(
                kind=FailureKind.VALIDATION_ERROR,
                detail=EMPTY_CODE_MESSAGE,
                attempts=0,
            )

        attempts = 0
        try:
            async for attempt in self._retrying(notify):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    notify(ReviewState.ATTEMPTING, attempts)
                    response = await self._post(code)
        except httpx.HTTPStatusError as e:
            body = e.response.text
            self._logger.error(
                f"Review failed after {attempts} attempts: HTTP {e.response.status_code} "
                f"{truncate_string(body, 200)}"
            )
            notify(ReviewState.FAILURE, attempts)
            return ReviewFailure(
                kind=FailureKind.SERVER_ERROR,
                detail=f"{e.response.status_code}: {body or SERVER_ERROR_FALLBACK}",
                attempts=attempts,
            )
        except httpx.RequestError as e:
            self._logger.error(
                f"Review failed after {attempts} attempts: could not reach "
                f"{self._api_url} ({e!r})"
            )
            notify(ReviewState.FAILURE, attempts)
            return ReviewFailure(
                kind=FailureKind.TRANSPORT_ERROR,
                detail=UNREACHABLE_MESSAGE,
                attempts=attempts,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._logger.error(
                f"Review failed after {attempts} attempts: request to "
                f"{self._api_url} could not be sent ({e!r})"
            )
            notify(ReviewState.FAILURE, attempts)
            return ReviewFailure(
                kind=FailureKind.TRANSPORT_ERROR,
                detail=UNREACHABLE_MESSAGE,
                attempts=attempts,
            )

        if not response.text:
            self._logger.error("Review service returned an empty response")
            notify(ReviewState.FAILURE, attempts)
            return ReviewFailure(
                kind=FailureKind.SERVER_ERROR,
                detail=EMPTY_RESPONSE_MESSAGE,
                attempts=attempts,
            )

        notify(ReviewState.SUCCESS, attempts)
        return ReviewSuccess(text=response.text, attempts=attempts)
