"""S3-compatible object storage adapter."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from scribeline.adapters.storage.base import ObjectStorage, SignedUpload, StorageError

_UPLOAD_URL_TTL_SECONDS = 3600


class S3ObjectStorage(ObjectStorage):
    def __init__(
        self,
        *,
        bucket: str,
        endpoint_url: str | None = None,
        region: str | None = None,
        client: Any | None = None,
    ) -> None:
        self._bucket = bucket
        self._client = client or boto3.client("s3", endpoint_url=endpoint_url, region_name=region)

    def create_signed_download_url(self, path: str, ttl_seconds: int) -> str:
        try:
            url = self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": path},
                ExpiresIn=ttl_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to create signed URL: {exc}") from exc
        if not url:
            raise StorageError("No signed URL returned from storage")
        return url

    def create_signed_upload_url(self, path: str) -> SignedUpload:
        try:
            url = self._client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self._bucket, "Key": path},
                ExpiresIn=_UPLOAD_URL_TTL_SECONDS,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to create signed upload URL: {exc}") from exc
        if not url:
            raise StorageError("No signed upload URL returned from storage")
        return SignedUpload(url=url, path=path)

    def delete(self, path: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=path)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to delete file: {exc}") from exc


__all__ = ["S3ObjectStorage"]
