"""HTTP client for the yt-dlp extraction microservice."""

from __future__ import annotations

import httpx

from scribeline.adapters.extraction.base import ExtractedMedia, ExtractionServiceError, VideoExtractor


class HttpVideoExtractor(VideoExtractor):
    """Posts ``{"url": ...}`` to the extraction service; a single attempt, no retry."""

    def __init__(
        self,
        *,
        service_url: str | None,
        timeout_seconds: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._service_url = service_url
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def extract(self, video_url: str) -> ExtractedMedia:
        if not self._service_url:
            raise ExtractionServiceError("Video extraction service URL is not configured.")

        try:
            response = self._client.post(self._service_url, json={"url": video_url})
        except httpx.HTTPError as exc:
            raise ExtractionServiceError(f"Failed to extract audio from video: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code >= 400:
            message = data.get("message") or data.get("error") or response.reason_phrase
            raise ExtractionServiceError(f"Failed to extract audio from video: {message}")

        media_url = str(data.get("audioUrl") or "").strip()
        if not media_url:
            raise ExtractionServiceError("Failed to extract audio from video: no audio URL returned")

        return ExtractedMedia(
            media_url=media_url,
            title=str(data.get("title") or "Video"),
            duration_seconds=float(data.get("duration") or 0),
            thumbnail=data.get("thumbnail"),
        )

    def close(self) -> None:
        self._client.close()


__all__ = ["HttpVideoExtractor"]
