"""
Utilities package for AI Code Reviewer.

Contains helper functions and common utilities.
"""

from src.utils.helpers import (
    count_lines_of_code,
    format_error_markdown,
    is_blank,
    truncate_string,
)

__all__ = [
    "count_lines_of_code",
    "format_error_markdown",
    "is_blank",
    "truncate_string",
]
