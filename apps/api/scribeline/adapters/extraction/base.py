"""Video extraction service interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class ExtractionServiceError(Exception):
    """Raised when the extraction service cannot produce a media URL."""


@dataclass(frozen=True, slots=True)
class ExtractedMedia:
    media_url: str
    title: str
    duration_seconds: float
    thumbnail: str | None = None


class VideoExtractor(ABC):
    @abstractmethod
    def extract(self, video_url: str) -> ExtractedMedia:
        """Resolve a video page URL into a directly fetchable audio URL."""


__all__ = ["ExtractedMedia", "ExtractionServiceError", "VideoExtractor"]
