"""Cleanup and validation of user-entered vote text and admin codes."""
import re
from typing import Optional

from classvote.core.constants import (
    MAX_FREE_TEXT_LENGTH,
    MAX_OPTION_LENGTH,
    MAX_TITLE_LENGTH,
    MIN_TITLE_LENGTH,
)

ADMIN_CODE_PATTERN = re.compile(r"^\d{4}$")
ADMIN_LOGIN_PATTERN = re.compile(r"^(\d{4}|\d{8})$")


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Trim, strip markup from and collapse whitespace in user text.

    Entities are left unescaped; the frontend escapes on render. Anything
    that still looks like a tag after stripping is rejected.

    Raises:
        ValueError: non-string input, text over ``max_length``, or leftover
            angle brackets
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_vote_title(title: str) -> str:
    """Sanitize a vote title (3 to 100 characters after cleanup)."""
    sanitized = sanitize_text(title, max_length=MAX_TITLE_LENGTH)

    if len(sanitized) < MIN_TITLE_LENGTH:
        raise ValueError(f"Title must be at least {MIN_TITLE_LENGTH} characters")

    return sanitized


def sanitize_option_text(text: str) -> str:
    """Sanitize an option label. Blank labels come back as an empty string."""
    return sanitize_text(text, max_length=MAX_OPTION_LENGTH)


def sanitize_free_text(text: str) -> str:
    """
    Clean up a free-text answer.

    Answers are shown back verbatim, so only surrounding whitespace is removed
    and the length limit enforced.
    """
    if not isinstance(text, str):
        raise ValueError("Answer must be a string")

    sanitized = text.strip()
    if len(sanitized) > MAX_FREE_TEXT_LENGTH:
        raise ValueError(f"Answer exceeds maximum length of {MAX_FREE_TEXT_LENGTH} characters")
    return sanitized


def validate_admin_code(code: str) -> str:
    """Admin codes chosen at vote creation are exactly four digits."""
    if not isinstance(code, str) or not ADMIN_CODE_PATTERN.match(code):
        raise ValueError("Admin password must be a 4-digit number")
    return code


def validate_admin_login_code(code: str) -> str:
    """
    Validate the code typed on the admin login form.

    Four digits (the vote's code) or eight digits (the YYYYMMDD master key).
    """
    if not isinstance(code, str) or not ADMIN_LOGIN_PATTERN.match(code):
        raise ValueError("Password must be a 4-digit or 8-digit number")
    return code
