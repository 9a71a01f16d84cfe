"""Object storage interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StorageError(Exception):
    """Raised when the object store rejects or cannot serve a request."""


@dataclass(frozen=True, slots=True)
class SignedUpload:
    url: str
    path: str
    token: str | None = None


class ObjectStorage(ABC):
    @abstractmethod
    def create_signed_download_url(self, path: str, ttl_seconds: int) -> str:
        """Short-lived read URL for an uploaded object."""

    @abstractmethod
    def create_signed_upload_url(self, path: str) -> SignedUpload:
        """Write-once URL the browser uploads the media file to."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove an object."""


__all__ = ["ObjectStorage", "SignedUpload", "StorageError"]
