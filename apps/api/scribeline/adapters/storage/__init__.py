"""Object storage adapters."""

from .base import ObjectStorage, SignedUpload, StorageError
from .s3 import S3ObjectStorage

__all__ = ["ObjectStorage", "S3ObjectStorage", "SignedUpload", "StorageError"]
