"""Video extraction adapters."""

from .base import ExtractedMedia, ExtractionServiceError, VideoExtractor
from .http_extractor import HttpVideoExtractor

__all__ = ["ExtractedMedia", "ExtractionServiceError", "HttpVideoExtractor", "VideoExtractor"]
