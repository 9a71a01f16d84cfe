"""Transcription lifecycle transition rules."""

from scribeline.errors import ApiError
from scribeline.schemas.transcription import LifecycleState, ProviderStatus

INITIAL_PROGRESS = 10
MAX_ESTIMATED_PROGRESS = 90
COMPLETED_PROGRESS = 100
PROGRESS_STEP = 10

_TERMINAL_STATES: set[LifecycleState] = {
    LifecycleState.COMPLETED,
    LifecycleState.FAILED,
}

_ALLOWED_TRANSITIONS: dict[LifecycleState, set[LifecycleState]] = {
    LifecycleState.PROCESSING: {LifecycleState.PROCESSING, LifecycleState.COMPLETED, LifecycleState.FAILED},
    LifecycleState.COMPLETED: set(),
    LifecycleState.FAILED: set(),
}


def is_terminal(state: LifecycleState) -> bool:
    return state in _TERMINAL_STATES


def allowed_next_states(state: LifecycleState) -> list[LifecycleState]:
    """Return deterministically ordered allowed successors for a state."""
    return sorted(_ALLOWED_TRANSITIONS.get(state, set()), key=lambda s: s.value)


def ensure_transition(old_state: LifecycleState, new_state: LifecycleState) -> None:
    """Validate transition according to lifecycle rules."""
    if old_state in _TERMINAL_STATES:
        raise ApiError(
            status_code=409,
            code="FSM_TERMINAL_IMMUTABLE",
            message="Terminal state cannot be mutated",
            details={
                "current_status": old_state,
                "attempted_status": new_state,
                "allowed_next_statuses": [],
            },
        )

    if new_state not in _ALLOWED_TRANSITIONS.get(old_state, set()):
        raise ApiError(
            status_code=409,
            code="FSM_TRANSITION_INVALID",
            message="Invalid status transition",
            details={
                "current_status": old_state,
                "attempted_status": new_state,
                "allowed_next_statuses": allowed_next_states(old_state),
            },
        )


def parse_provider_status(raw: str | None) -> ProviderStatus:
    """Map a provider status string; unknown values count as still processing."""
    try:
        return ProviderStatus((raw or "").strip().lower())
    except ValueError:
        return ProviderStatus.PROCESSING


def estimate_progress(current: int, provider_status: ProviderStatus) -> int:
    """Display estimate for a job that is still running upstream.

    Queued jobs sit at the initial value and processing jobs creep up by a
    fixed step, capped below 100 so only a confirmed completion reaches it.
    The stored value is never lowered.
    """
    if provider_status is ProviderStatus.QUEUED:
        return max(current, INITIAL_PROGRESS)
    if provider_status is ProviderStatus.COMPLETED:
        return COMPLETED_PROGRESS
    return max(current, min(current + PROGRESS_STEP, MAX_ESTIMATED_PROGRESS))
