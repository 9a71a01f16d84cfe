"""Trial and subscription entitlement rules."""

from __future__ import annotations

from datetime import datetime

from scribeline.repositories.memory import UserRecord
from scribeline.schemas.user import (
    SUBSCRIPTION_ACTIVE,
    SUBSCRIPTION_ACTIVE_UNLIMITED,
    AccessDecision,
)

DEFAULT_TRIAL_LIMIT = 3
_MB = 1024 * 1024

ACTIVE_SUBSCRIPTION_STATUSES: frozenset[str] = frozenset({SUBSCRIPTION_ACTIVE, SUBSCRIPTION_ACTIVE_UNLIMITED})


def is_active_subscription(status: str | None) -> bool:
    return status in ACTIVE_SUBSCRIPTION_STATUSES


def check_access(user: UserRecord, *, now: datetime, trial_limit: int = DEFAULT_TRIAL_LIMIT) -> AccessDecision:
    """Decide whether ``user`` may start a new transcription.

    Rules are evaluated in order and the first match sets the reason: an
    active subscription always passes, then an expired trial, then an
    exhausted trial quota deny.
    """
    used = user.trial_transcriptions_used
    if is_active_subscription(user.subscription_status):
        return AccessDecision(
            allowed=True,
            transcriptions_used=used,
            subscription_status=user.subscription_status,
        )

    if user.trial_ends_at is not None and user.trial_ends_at < now:
        return AccessDecision(
            allowed=False,
            trial_expired=True,
            limit_reached=used >= trial_limit,
            transcriptions_used=used,
            subscription_status=user.subscription_status,
        )

    if used >= trial_limit:
        return AccessDecision(
            allowed=False,
            limit_reached=True,
            transcriptions_used=used,
            subscription_status=user.subscription_status,
        )

    return AccessDecision(
        allowed=True,
        transcriptions_used=used,
        subscription_status=user.subscription_status,
    )


def max_upload_bytes(user: UserRecord, *, trial_max_mb: int = 100, paid_max_mb: int = 5 * 1024) -> int:
    """Upload ceiling for the user's tier."""
    if is_active_subscription(user.subscription_status):
        return paid_max_mb * _MB
    return trial_max_mb * _MB
