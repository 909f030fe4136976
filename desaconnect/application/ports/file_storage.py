"""Attachment storage port."""

from __future__ import annotations

from typing import Protocol


class FileStoragePort(Protocol):
    """Stores attachment bytes and hands back a public URL."""

    async def store(self, data: bytes, content_type: str, filename: str) -> str:
        """Store a file under a unique key.

        Args:
            data: File contents.
            content_type: MIME type recorded with the object.
            filename: Client file name, used for the extension only.

        Returns:
            Public URL of the stored object.

        Raises:
            FileStorageError: If the object cannot be written.
        """
        ...
