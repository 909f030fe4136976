"""Pure domain services (no I/O)."""

from desaconnect.domain.services.email import is_valid_email, normalize_email
from desaconnect.domain.services.reference_code import (
    REFERENCE_CODE_ALPHABET,
    REFERENCE_CODE_LENGTH,
    generate_reference_code,
    is_reference_code,
)

__all__: list[str] = [
    "REFERENCE_CODE_ALPHABET",
    "REFERENCE_CODE_LENGTH",
    "generate_reference_code",
    "is_reference_code",
    "is_valid_email",
    "normalize_email",
]
