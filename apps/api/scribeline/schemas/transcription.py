"""Transcription API schemas."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class LifecycleState(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ProviderStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class ExportFormat(str, Enum):
    TXT = "txt"
    JSON = "json"
    SRT = "srt"
    VTT = "vtt"


class Word(BaseModel):
    text: str = ""
    start: int = 0
    end: int = 0
    confidence: float | None = None
    speaker: str | None = None


class SpeakerUtterance(BaseModel):
    speaker: str | None = None
    text: str = ""
    start: int = 0
    end: int = 0
    confidence: float | None = None
    words: list[Word] = Field(default_factory=list)


class SentimentResult(BaseModel):
    text: str = ""
    sentiment: str | None = None
    confidence: float | None = None
    start: int = 0
    end: int = 0


class EntityResult(BaseModel):
    type: str | None = None
    text: str = ""
    start: int = 0
    end: int = 0


class HighlightTimestamp(BaseModel):
    start: int = 0
    end: int = 0


class HighlightResult(BaseModel):
    text: str = ""
    count: int = 0
    rank: float | None = None
    timestamps: list[HighlightTimestamp] = Field(default_factory=list)


class TranscriptionResult(BaseModel):
    transcript_text: str = ""
    speakers: list[SpeakerUtterance] = Field(default_factory=list)
    sentiment: list[SentimentResult] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    summary: str = ""
    entities: list[EntityResult] = Field(default_factory=list)
    highlights: list[HighlightResult] = Field(default_factory=list)
    words: list[Word] = Field(default_factory=list)
    duration_seconds: float | None = None
    language_code: str | None = None


class Transcription(BaseModel):
    id: str
    file_name: str
    source: str
    file_size_bytes: int = 0
    language: str | None = None
    folder_id: str | None = None
    provider_job_id: str
    status: LifecycleState
    progress: int = Field(ge=0, le=100)
    result: TranscriptionResult | None = None
    error: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    completed_at: datetime | None = None


class TranscriptionSummary(BaseModel):
    id: str
    file_name: str
    folder_id: str | None = None
    status: LifecycleState
    progress: int
    created_at: datetime
    completed_at: datetime | None = None


class TranscriptionPage(BaseModel):
    items: list[TranscriptionSummary]
    total: int
    limit: int
    offset: int


class SubmitTranscriptionRequest(BaseModel):
    storage_path: str | None = Field(default=None, max_length=1024)
    file_name: str | None = Field(default=None, max_length=512)
    file_size: int | None = Field(default=None, ge=0)
    audio_url: str | None = Field(default=None, max_length=2048)
    language: str | None = Field(default=None, max_length=16)
    folder_id: str | None = Field(default=None, min_length=1, max_length=128)


class SubmitTranscriptionResponse(BaseModel):
    transcription: Transcription
    message: str


class ProviderTranscript(BaseModel):
    """Provider transcript payload as returned by the status endpoint.

    Only ``id`` and ``status`` are relied upon; the analysis sections are kept
    as raw mappings and flattened by the normalizer.
    """

    id: str
    status: str
    error: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
