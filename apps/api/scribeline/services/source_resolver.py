"""Resolve a submission into a single media URL the provider can fetch."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from urllib.parse import urlsplit

from scribeline.adapters.extraction import ExtractionServiceError, VideoExtractor
from scribeline.adapters.storage import ObjectStorage, StorageError
from scribeline.core.logging_safety import safe_log_identifier, safe_url_host
from scribeline.domain.entitlement import is_active_subscription, max_upload_bytes
from scribeline.errors import (
    ExtractionFailedError,
    FileTooLargeError,
    InvalidRequestError,
    NotFoundError,
    StorageUnavailableError,
)
from scribeline.repositories.memory import UserRecord
from scribeline.schemas.transcription import SubmitTranscriptionRequest
from scribeline.services.uploads import is_owned_storage_path

logger = logging.getLogger(__name__)

VIDEO_PLATFORM_DOMAINS: tuple[str, ...] = (
    "youtube.com",
    "youtu.be",
    "tiktok.com",
    "instagram.com",
    "twitter.com",
    "x.com",
    "vimeo.com",
    "dailymotion.com",
    "twitch.tv",
)
DIRECT_URL_FILE_NAME = "URL-based transcription"


@dataclass(frozen=True, slots=True)
class ResolvedSource:
    media_url: str
    file_name: str
    source: str
    file_size_bytes: int = 0
    duration_seconds: float | None = None


def is_video_platform_url(url: str) -> bool:
    """True when the URL host is, or is a subdomain of, a known video platform."""
    try:
        host = (urlsplit(url.strip()).hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False
    return any(host == domain or host.endswith(f".{domain}") for domain in VIDEO_PLATFORM_DOMAINS)


class SourceResolver:
    def __init__(
        self,
        *,
        storage: ObjectStorage,
        extractor: VideoExtractor,
        signed_url_ttl_seconds: int = 3600,
        trial_max_upload_mb: int = 100,
        paid_max_upload_mb: int = 5 * 1024,
    ) -> None:
        self._storage = storage
        self._extractor = extractor
        self._signed_url_ttl_seconds = signed_url_ttl_seconds
        self._trial_max_upload_mb = trial_max_upload_mb
        self._paid_max_upload_mb = paid_max_upload_mb

    def resolve(self, request: SubmitTranscriptionRequest, *, user: UserRecord) -> ResolvedSource:
        audio_url = (request.audio_url or "").strip()
        storage_path = (request.storage_path or "").strip()

        if not audio_url and not storage_path:
            raise InvalidRequestError("No storage path or audio URL provided")
        if audio_url and storage_path:
            raise InvalidRequestError("Provide either a storage path or an audio URL, not both")

        if audio_url:
            return self._resolve_url(audio_url, file_name=request.file_name)
        return self._resolve_stored_file(storage_path, request=request, user=user)

    def _resolve_url(self, audio_url: str, *, file_name: str | None) -> ResolvedSource:
        if not is_video_platform_url(audio_url):
            logger.info("source.direct_url host=%s", safe_url_host(audio_url))
            return ResolvedSource(
                media_url=audio_url,
                file_name=file_name or DIRECT_URL_FILE_NAME,
                source=audio_url,
            )

        try:
            extracted = self._extractor.extract(audio_url)
        except ExtractionServiceError as exc:
            logger.warning("source.extraction_failed host=%s reason=%s", safe_url_host(audio_url), exc)
            raise ExtractionFailedError(str(exc) or "Could not extract audio from video") from exc

        logger.info(
            "source.extracted host=%s duration_seconds=%s",
            safe_url_host(audio_url),
            extracted.duration_seconds,
        )
        return ResolvedSource(
            media_url=extracted.media_url,
            file_name=file_name or extracted.title,
            source=audio_url,
            duration_seconds=extracted.duration_seconds,
        )

    def _resolve_stored_file(
        self,
        storage_path: str,
        *,
        request: SubmitTranscriptionRequest,
        user: UserRecord,
    ) -> ResolvedSource:
        if not is_owned_storage_path(user.id, storage_path):
            logger.warning(
                "source.rejected user_id=%s code=RESOURCE_NOT_FOUND reason=foreign_storage_path",
                safe_log_identifier(user.id, prefix="uid"),
            )
            raise NotFoundError()
        if request.file_size is None:
            raise InvalidRequestError("file_size is required for uploaded files", {"fields": ["file_size"]})

        size_bytes = request.file_size
        limit_bytes = max_upload_bytes(
            user,
            trial_max_mb=self._trial_max_upload_mb,
            paid_max_mb=self._paid_max_upload_mb,
        )
        if size_bytes > limit_bytes:
            logger.info(
                "source.rejected user_id=%s code=FILE_TOO_LARGE size_bytes=%s limit_bytes=%s",
                safe_log_identifier(user.id, prefix="uid"),
                size_bytes,
                limit_bytes,
            )
            raise FileTooLargeError(
                size_bytes=size_bytes,
                limit_bytes=limit_bytes,
                subscribed=is_active_subscription(user.subscription_status),
            )

        try:
            media_url = self._storage.create_signed_download_url(storage_path, self._signed_url_ttl_seconds)
        except StorageError as exc:
            logger.warning(
                "source.storage_failed user_id=%s reason=%s",
                safe_log_identifier(user.id, prefix="uid"),
                exc,
            )
            raise StorageUnavailableError() from exc

        return ResolvedSource(
            media_url=media_url,
            file_name=request.file_name or storage_path.rsplit("/", 1)[-1],
            source=storage_path,
            file_size_bytes=size_bytes,
        )
