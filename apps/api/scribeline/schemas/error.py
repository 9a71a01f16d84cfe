"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel

from scribeline.schemas.transcription import LifecycleState


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class NoLeakNotFoundError(BaseModel):
    code: Literal["RESOURCE_NOT_FOUND"]
    message: str


class AccessDeniedErrorDetails(BaseModel):
    reason: Literal["limit_reached", "trial_expired"]
    limit_reached: bool
    trial_expired: bool
    transcriptions_used: int
    subscription_status: str


class AccessDeniedError(BaseModel):
    code: Literal["ACCESS_DENIED"]
    message: str
    details: AccessDeniedErrorDetails


class FileTooLargeErrorDetails(BaseModel):
    size_bytes: int
    limit_bytes: int
    subscribed: bool


class FileTooLargeError(BaseModel):
    code: Literal["FILE_TOO_LARGE"]
    message: str
    details: FileTooLargeErrorDetails


class ExtractionFailedErrorDetails(BaseModel):
    upstream_message: str
    suggestion: str


class ExtractionFailedError(BaseModel):
    code: Literal["EXTRACTION_FAILED"]
    message: str
    details: ExtractionFailedErrorDetails


class ProviderErrorDetails(BaseModel):
    cause: Literal["not_found", "unauthorized", "timeout", "unsupported_format", "other"]
    upstream_message: str | None = None


class ProviderError(BaseModel):
    code: Literal["PROVIDER_ERROR"]
    message: str
    details: ProviderErrorDetails


class PersistenceFailureErrorDetails(BaseModel):
    provider_job_id: str


class PersistenceFailureError(BaseModel):
    code: Literal["PERSISTENCE_FAILURE"]
    message: str
    details: PersistenceFailureErrorDetails


class NotReadyErrorDetails(BaseModel):
    current_status: LifecycleState


class TranscriptNotReadyError(BaseModel):
    code: Literal["TRANSCRIPT_NOT_READY"]
    message: str
    details: NotReadyErrorDetails
