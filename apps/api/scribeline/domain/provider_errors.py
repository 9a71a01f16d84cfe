"""Classification of free-text transcription provider errors."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from scribeline.errors import ProviderError

CAUSE_NOT_FOUND = "not_found"
CAUSE_UNAUTHORIZED = "unauthorized"
CAUSE_TIMEOUT = "timeout"
CAUSE_UNSUPPORTED_FORMAT = "unsupported_format"
CAUSE_OTHER = "other"


def _contains(*needles: str) -> Callable[[str], bool]:
    return lambda message: any(needle in message for needle in needles)


@dataclass(frozen=True, slots=True)
class _Rule:
    matches: Callable[[str], bool]
    cause: str
    user_message: str


# Evaluated top to bottom against the lower-cased provider message; first match wins.
# The provider only exposes prose, so wording changes upstream fall through to CAUSE_OTHER.
_RULES: tuple[_Rule, ...] = (
    _Rule(
        matches=_contains("not found", "404"),
        cause=CAUSE_NOT_FOUND,
        user_message="Audio file not found. Please check the URL and try again.",
    ),
    _Rule(
        matches=_contains("unauthorized", "401"),
        cause=CAUSE_UNAUTHORIZED,
        user_message="API authentication error. Please contact support.",
    ),
    _Rule(
        matches=_contains("timeout", "timed out"),
        cause=CAUSE_TIMEOUT,
        user_message="Transcription timed out. Please try a shorter file.",
    ),
    _Rule(
        matches=_contains("format", "codec"),
        cause=CAUSE_UNSUPPORTED_FORMAT,
        user_message="Unsupported format. Please use MP3, MP4, WAV, or M4A files.",
    ),
)


def classify_provider_message(message: str | None) -> tuple[str, str]:
    """Return ``(cause, user_message)`` for a provider error message."""
    raw = (message or "").strip()
    lowered = raw.lower()
    for rule in _RULES:
        if rule.matches(lowered):
            return rule.cause, rule.user_message
    if raw:
        return CAUSE_OTHER, f"Transcription error: {raw}"
    return CAUSE_OTHER, "Transcription failed"


def provider_error_from_message(message: str | None) -> ProviderError:
    cause, user_message = classify_provider_message(message)
    return ProviderError(cause=cause, message=user_message, upstream_message=message or None)
