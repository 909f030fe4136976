"""Reference code generation for public submission tracking.

A reference code is the only handle a citizen gets for their submission,
so it must be hard to guess: codes are drawn with the secrets module, not
random.
"""

from __future__ import annotations

import re
import secrets
import string

REFERENCE_CODE_LENGTH = 8
REFERENCE_CODE_ALPHABET = string.ascii_uppercase + string.digits

_REFERENCE_CODE_PATTERN = re.compile(rf"^[A-Z0-9]{{{REFERENCE_CODE_LENGTH}}}$")


def generate_reference_code() -> str:
    """Generate a random 8-character code over A-Z and 0-9.

    Uniqueness is not checked here; the store rejects collisions and the
    caller retries.

    Returns:
        A new reference code.
    """
    return "".join(
        secrets.choice(REFERENCE_CODE_ALPHABET) for _ in range(REFERENCE_CODE_LENGTH)
    )


def is_reference_code(value: object) -> bool:
    """Check whether a value has the shape of a reference code."""
    return isinstance(value, str) and bool(_REFERENCE_CODE_PATTERN.match(value))
