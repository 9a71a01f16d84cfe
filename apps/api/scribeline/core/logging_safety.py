"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any
from urllib.parse import urlsplit


def safe_log_identifier(value: Any, *, prefix: str, length: int = 12) -> str:
    """Return a deterministic non-reversible token for log correlation fields.

    User ids, transcription ids and provider job ids all pass through here so
    that log lines can be joined without exposing the raw identifiers.
    """
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:length]
    return f"{prefix}-{digest}"


def safe_url_host(url: str | None) -> str:
    """Return only the host part of a media URL for log lines."""
    if not url:
        return "none"
    try:
        host = urlsplit(url.strip()).hostname
    except ValueError:
        return "invalid"
    return host or "none"
