"""Attachment payload received with a submission."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded attachment held in memory until it is stored.

    Attributes:
        filename: Client-supplied file name.
        content_type: Declared MIME type.
        data: Raw file bytes.
    """

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        """Size in bytes."""
        return len(self.data)
