"""Blob storage for uploaded files.

``IBlobStore`` is the contract the services depend on.  ``DjangoBlobStore``
satisfies it through Django's storage API, so the backend (local
filesystem, S3, ...) is selected by the ``STORAGES`` setting.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import structlog
from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage

from modules.core.exceptions import StorageFailure

logger = structlog.get_logger(__name__)


class BlobStorageError(StorageFailure):
    """The blob backend rejected a write."""


@dataclass(frozen=True)
class StoredBlob:
    """A blob that has been written: its storage key and public URI."""

    name: str
    uri: str
    size: int


class IBlobStore(ABC):
    """Write-once blob store keyed by name."""

    @abstractmethod
    def write(self, name: str, content: bytes) -> StoredBlob:
        """Persist ``content`` under ``name``.

        Raises:
            BlobStorageError: if the backend cannot store the blob.
        """

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove a blob. Missing blobs are ignored."""


class DjangoBlobStore(IBlobStore):
    """Blob store backed by a Django ``Storage`` (``default_storage`` unless given)."""

    def __init__(self, storage: Optional[Storage] = None) -> None:
        self._storage = storage or default_storage

    def write(self, name: str, content: bytes) -> StoredBlob:
        try:
            stored_name = self._storage.save(name, ContentFile(content))
            uri = self._storage.url(stored_name)
        except OSError as exc:
            logger.error("storage.write_failed", name=name, error=str(exc))
            raise BlobStorageError(f"Could not store '{name}': {exc}") from exc
        logger.info("storage.written", name=stored_name, size=len(content))
        return StoredBlob(name=stored_name, uri=uri, size=len(content))

    def delete(self, name: str) -> None:
        try:
            self._storage.delete(name)
        except OSError as exc:
            logger.warning("storage.delete_failed", name=name, error=str(exc))
            return
        logger.info("storage.deleted", name=name)
