"""Transcription provider interfaces."""

from abc import ABC, abstractmethod
from typing import Any

from scribeline.schemas.transcription import ProviderTranscript


class ProviderRequestError(Exception):
    """Raised when the provider rejects a request or cannot be reached."""


class TranscriptionProvider(ABC):
    """Hosted speech-to-text service that runs jobs asynchronously."""

    @abstractmethod
    def submit(self, media_url: str, options: dict[str, Any]) -> ProviderTranscript:
        """Queue a transcription for ``media_url`` and return the new job."""

    @abstractmethod
    def get(self, provider_job_id: str) -> ProviderTranscript:
        """Fetch the current state, and on completion the payload, of a job."""


__all__ = ["ProviderRequestError", "TranscriptionProvider"]
