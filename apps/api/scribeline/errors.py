"""Application exception types."""

from scribeline.schemas.error import ErrorResponse

EXTRACTION_SUGGESTION = "Download the video and upload the file directly, or try a different video URL."


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Server-side failures may succeed later; client errors need new input."""
        return self.status_code >= 500


class UnauthenticatedError(ApiError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(status_code=401, code="UNAUTHORIZED", message=message)


class AccessDeniedError(ApiError):
    def __init__(
        self,
        *,
        limit_reached: bool,
        trial_expired: bool,
        transcriptions_used: int,
        subscription_status: str,
        trial_limit: int,
    ) -> None:
        if trial_expired:
            reason = "trial_expired"
            message = "Your trial has ended. Please subscribe to continue."
        else:
            reason = "limit_reached"
            message = (
                f"You have reached your trial limit ({trial_limit} transcriptions). "
                "Please subscribe to continue."
            )
        super().__init__(
            status_code=403,
            code="ACCESS_DENIED",
            message=message,
            details={
                "reason": reason,
                "limit_reached": limit_reached,
                "trial_expired": trial_expired,
                "transcriptions_used": transcriptions_used,
                "subscription_status": subscription_status,
            },
        )


class InvalidRequestError(ApiError):
    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(status_code=400, code="INVALID_REQUEST", message=message, details=details)


class FileTooLargeError(ApiError):
    def __init__(self, *, size_bytes: int, limit_bytes: int, subscribed: bool) -> None:
        size_mb = size_bytes / (1024 * 1024)
        limit_text = _format_limit(limit_bytes)
        tier = "paid" if subscribed else "trial"
        hint = "Please use a smaller file." if subscribed else "Upgrade to Pro to transcribe files up to 5GB!"
        super().__init__(
            status_code=413,
            code="FILE_TOO_LARGE",
            message=f"Your file is {size_mb:.1f}MB. The maximum file size for {tier} users is {limit_text}. {hint}",
            details={"size_bytes": size_bytes, "limit_bytes": limit_bytes, "subscribed": subscribed},
        )


class ExtractionFailedError(ApiError):
    def __init__(self, upstream_message: str) -> None:
        super().__init__(
            status_code=422,
            code="EXTRACTION_FAILED",
            message="Could not extract audio from the video URL.",
            details={"upstream_message": upstream_message, "suggestion": EXTRACTION_SUGGESTION},
        )


class StorageUnavailableError(ApiError):
    def __init__(self, message: str = "Failed to access uploaded file. Please try uploading again.") -> None:
        super().__init__(status_code=503, code="STORAGE_UNAVAILABLE", message=message)


class ProviderError(ApiError):
    def __init__(self, *, cause: str, message: str, upstream_message: str | None = None) -> None:
        self.cause = cause
        super().__init__(
            status_code=502,
            code="PROVIDER_ERROR",
            message=message,
            details={"cause": cause, "upstream_message": upstream_message},
        )


class PersistenceFailureError(ApiError):
    def __init__(self, *, provider_job_id: str) -> None:
        super().__init__(
            status_code=500,
            code="PERSISTENCE_FAILURE",
            message="Transcription was submitted but could not be saved. Please contact support.",
            details={"provider_job_id": provider_job_id},
        )


class NotFoundError(ApiError):
    def __init__(self) -> None:
        super().__init__(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")


def _format_limit(limit_bytes: int) -> str:
    gib = 1024 * 1024 * 1024
    if limit_bytes >= gib and limit_bytes % gib == 0:
        return f"{limit_bytes // gib}GB"
    return f"{limit_bytes // (1024 * 1024)}MB"


__all__ = [
    "AccessDeniedError",
    "ApiError",
    "ExtractionFailedError",
    "FileTooLargeError",
    "InvalidRequestError",
    "NotFoundError",
    "PersistenceFailureError",
    "ProviderError",
    "StorageUnavailableError",
    "UnauthenticatedError",
]
