"""
Review Service for AI Code Reviewer.

Forwards submitted code, with a fixed system instruction, to an
OpenAI-compatible chat-completions API and returns the generated review.
"""

import logging
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from src.config import get_settings
from src.utils.helpers import count_lines_of_code, is_blank, truncate_string


class ReviewServiceError(Exception):
    """Base class for review service failures."""


class InvalidInputError(ReviewServiceError):
    """Submitted code is missing, not a string, or empty."""


class UpstreamError(ReviewServiceError):
    """The model API call failed."""


class ReviewService:
    """
    Generates code reviews through a language model.

    The service is stateless between calls and never retries: retrying
    is left to the review client.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        """
        Initialize the Review Service.

        Args:
            api_key: OpenAI API key. Uses settings if not provided.
            model: Model to use. Uses settings if not provided.
            system_instruction: Reviewer persona. Uses settings if not provided.
            timeout: Upstream call timeout in seconds. Uses settings if not provided.
            client: Pre-built OpenAI client, mainly for tests.
        """
        self._logger = logging.getLogger("code_reviewer.review_service")
        settings = get_settings()

        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_model
        self._system_instruction = system_instruction or settings.system_instruction
        self._timeout = timeout if timeout is not None else settings.upstream_timeout
        self._temperature = settings.openai_temperature
        self._max_tokens = settings.openai_max_tokens

        self._client: Optional[AsyncOpenAI] = client
        if self._client is None and self._api_key and self._api_key != "your_openai_api_key_here":
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=settings.openai_base_url,
                timeout=self._timeout,
                max_retries=0,
            )

    @property
    def is_configured(self) -> bool:
        """Check if the model client is available."""
        return self._client is not None

    @property
    def model(self) -> str:
        return self._model

    @property
    def system_instruction(self) -> str:
        return self._system_instruction

    def build_messages(self, code: str) -> list[dict[str, str]]:
        """Build the chat messages: the system instruction and one user message."""
        return [
            {"role": "system", "content": self._system_instruction},
            {"role": "user", "content": code},
        ]

    async def generate_review(self, code: Any) -> str:
        """
        Generate a review for a piece of code.

        Args:
            code: The code to review, as received from the caller.

        Returns:
            The model's review text, unmodified.

        Raises:
            InvalidInputError: If code is missing, not a string, or blank.
            UpstreamError: If the model call fails for any reason.
        """
        if is_blank(code):
            raise InvalidInputError("A valid text prompt (code) is required.")

        if not self._client:
            self._logger.error("OpenAI client not configured")
            raise UpstreamError("Model client is not configured")

        stats = count_lines_of_code(code)
        self._logger.info(
            f"Requesting review from {self._model} for {stats['total']} lines "
            f"({len(code)} chars)"
        )

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=self.build_messages(code),
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                timeout=self._timeout,
            )
        except OpenAIError as e:
            self._logger.error(f"OpenAI API error: {e}")
            raise UpstreamError(str(e)) from e
        except Exception as e:
            self._logger.error(f"Unexpected error calling OpenAI: {e}", exc_info=True)
            raise UpstreamError(str(e)) from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            self._logger.error(f"Malformed model response: {truncate_string(repr(response), 200)}")
            raise UpstreamError("Malformed model response") from e

        return text or ""
