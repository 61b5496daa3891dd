"""Abstract base class for durable object stores."""

from __future__ import annotations

from abc import ABC, abstractmethod

PEM_CONTENT_TYPE = "application/x-pem-file"


class ObjectStore(ABC):
    """Named binary blobs in one bucket/container.

    Implementations must map "object does not exist" to ``None`` and raise
    ``ArtifactStoreError`` for every other failure.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the object's content, or None if it does not exist."""

    @abstractmethod
    def put(self, key: str, data: bytes, metadata: dict[str, str], filename: str) -> None:
        """Write (or overwrite) an object privately with user metadata and a download filename."""
