"""Email normalization and shape checks for the admin roster."""

from __future__ import annotations

import re

# local@domain.tld, no whitespace, a single @
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address."""
    return email.strip().lower()


def is_valid_email(email: object) -> bool:
    """Check whether a value looks like an email address."""
    return isinstance(email, str) and bool(_EMAIL_PATTERN.match(email.strip()))
