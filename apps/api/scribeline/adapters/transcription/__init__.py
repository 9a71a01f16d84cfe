"""Transcription provider adapters."""

from .assemblyai import AssemblyAIProvider
from .base import ProviderRequestError, TranscriptionProvider

__all__ = ["AssemblyAIProvider", "ProviderRequestError", "TranscriptionProvider"]
