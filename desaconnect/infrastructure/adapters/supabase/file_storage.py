"""Supabase Storage adapter for submission attachments."""

from __future__ import annotations

import posixpath
from datetime import datetime, timezone
from uuid import uuid4

import httpx
from supabase import Client, StorageException

from desaconnect.application.ports.file_storage import FileStoragePort
from desaconnect.domain.errors.dependency import FileStorageError
from desaconnect.infrastructure.observability.logging import get_logger_for_component


class SupabaseFileStorage(FileStoragePort):
    """Uploads attachments to a public Supabase Storage bucket.

    Objects are keyed by upload month and a random id; the client file
    name only contributes its extension.
    """

    def __init__(self, client: Client, bucket: str = "submission-files") -> None:
        self._client = client
        self._bucket = bucket
        self._log = get_logger_for_component(self.__class__.__name__)

    async def store(self, data: bytes, content_type: str, filename: str) -> str:
        extension = posixpath.splitext(filename)[1].lower()
        now = datetime.now(timezone.utc)
        path = f"{now:%Y/%m}/{uuid4().hex}{extension}"
        bucket = self._client.storage.from_(self._bucket)
        try:
            bucket.upload(path, data, {"content-type": content_type})
            url = bucket.get_public_url(path)
        except (StorageException, httpx.HTTPError) as e:
            self._log.error(
                "attachment_upload_failed",
                bucket=self._bucket,
                path=path,
                error=str(e),
            )
            raise FileStorageError(filename, str(e)) from e
        self._log.info("attachment_uploaded", bucket=self._bucket, path=path)
        return url
