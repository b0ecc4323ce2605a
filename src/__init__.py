"""
AI Code Reviewer.

Forwards pasted source code to a large-language-model and relays the review.
"""

__version__ = "1.0.0"
