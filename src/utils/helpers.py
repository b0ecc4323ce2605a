"""
Helper utilities for AI Code Reviewer.

Contains common utility functions used across the application.
"""

from typing import Any


def is_blank(code: Any) -> bool:
    """
    Check whether a submitted code value carries nothing to review.

    Args:
        code: Value received from the caller, of any type.

    Returns:
        True for non-strings, empty strings and whitespace-only strings.
    """
    return not isinstance(code, str) or not code.strip()


def format_error_markdown(detail: str, api_error: bool = False) -> str:
    """
    Format a diagnostic message as a markdown error line.

    Args:
        detail: The diagnostic message.
        api_error: Whether the message came from an error response of the API.

    Returns:
        Markdown-formatted string.
    """
    label = "API Error" if api_error else "Error"
    return f"**{label}:** {detail}"


def truncate_string(
    text: str,
    max_length: int = 500,
    suffix: str = "...",
) -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: The text to truncate.
        max_length: Maximum length including suffix.
        suffix: Suffix to append when truncated.

    Returns:
        Truncated string.
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def count_lines_of_code(code: str) -> dict[str, int]:
    """
    Count lines of code statistics.

    Args:
        code: The source code.

    Returns:
        Dictionary with line counts.
    """
    lines = code.splitlines()
    total = len(lines)
    blank = sum(1 for line in lines if not line.strip())

    return {
        "total": total,
        "blank": blank,
        "code": total - blank,
    }
