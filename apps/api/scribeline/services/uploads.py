"""Upload slot service layer."""

from datetime import UTC, datetime
import logging
import re

from scribeline.adapters.storage import ObjectStorage, StorageError
from scribeline.core.logging_safety import safe_log_identifier
from scribeline.errors import NotFoundError, StorageUnavailableError
from scribeline.schemas.upload import UploadSlot

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(file_name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", file_name)


def build_storage_path(user_id: str, file_name: str, *, now: datetime | None = None) -> str:
    """``<user_id>/<epoch_ms>_<sanitized name>``; the user id prefix scopes ownership."""
    moment = now or datetime.now(UTC)
    timestamp_ms = int(moment.timestamp() * 1000)
    return f"{user_id}/{timestamp_ms}_{sanitize_filename(file_name)}"


def is_owned_storage_path(owner_id: str, storage_path: str) -> bool:
    return storage_path.startswith(f"{owner_id}/") and ".." not in storage_path.split("/")


class UploadService:
    def __init__(self, storage: ObjectStorage) -> None:
        self._storage = storage

    def create_upload_slot(self, *, owner_id: str, file_name: str) -> UploadSlot:
        storage_path = build_storage_path(owner_id, file_name)
        try:
            signed = self._storage.create_signed_upload_url(storage_path)
        except StorageError as exc:
            logger.warning(
                "upload.slot_failed user_id=%s reason=%s",
                safe_log_identifier(owner_id, prefix="uid"),
                exc,
            )
            raise StorageUnavailableError("Failed to generate upload URL") from exc

        return UploadSlot(
            signed_url=signed.url,
            token=signed.token,
            storage_path=signed.path,
            file_name=file_name,
        )

    def discard_upload(self, *, owner_id: str, storage_path: str) -> None:
        """Delete an uploaded object that was never submitted."""
        normalized = storage_path.strip()
        if not is_owned_storage_path(owner_id, normalized):
            raise NotFoundError()

        try:
            self._storage.delete(normalized)
        except StorageError as exc:
            logger.warning(
                "upload.discard_failed user_id=%s reason=%s",
                safe_log_identifier(owner_id, prefix="uid"),
                exc,
            )
            raise StorageUnavailableError("Failed to delete uploaded file") from exc

        logger.info("upload.discarded user_id=%s", safe_log_identifier(owner_id, prefix="uid"))
