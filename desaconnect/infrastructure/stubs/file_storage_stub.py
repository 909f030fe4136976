"""In-memory attachment storage for development and testing."""

from __future__ import annotations

import posixpath
from uuid import uuid4

from desaconnect.application.ports.file_storage import FileStoragePort


class FileStorageStub(FileStoragePort):
    """Keeps uploaded bytes in memory and returns memory:// URLs.

    Attributes:
        objects: Mapping of object key to (content_type, data).
    """

    def __init__(self, base_url: str = "memory://submission-files") -> None:
        self._base_url = base_url.rstrip("/")
        self.objects: dict[str, tuple[str, bytes]] = {}

    async def store(self, data: bytes, content_type: str, filename: str) -> str:
        extension = posixpath.splitext(filename)[1].lower()
        key = f"{uuid4().hex}{extension}"
        self.objects[key] = (content_type, data)
        return f"{self._base_url}/{key}"
