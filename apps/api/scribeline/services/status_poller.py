"""Client-driven status checks against the transcription provider."""

from __future__ import annotations

import logging

from scribeline.adapters.transcription import ProviderRequestError, TranscriptionProvider
from scribeline.core.logging_safety import safe_log_identifier
from scribeline.domain.job_fsm import estimate_progress, is_terminal, parse_provider_status
from scribeline.domain.normalization import normalize_transcript
from scribeline.domain.provider_errors import provider_error_from_message
from scribeline.errors import PersistenceFailureError
from scribeline.repositories.memory import InMemoryStore, TranscriptionRecord
from scribeline.schemas.transcription import ProviderStatus

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Transcription failed"


class StatusPoller:
    """Advance one transcription by at most one provider query and one write."""

    def __init__(self, *, store: InMemoryStore, provider: TranscriptionProvider) -> None:
        self._store = store
        self._provider = provider

    def poll(self, record: TranscriptionRecord) -> TranscriptionRecord:
        if is_terminal(record.status):
            return record

        safe_transcription_id = safe_log_identifier(record.id, prefix="tid")
        try:
            transcript = self._provider.get(record.provider_job_id)
        except ProviderRequestError as exc:
            error = provider_error_from_message(str(exc))
            logger.warning(
                "poll.provider_failed transcription_id=%s cause=%s",
                safe_transcription_id,
                error.cause,
            )
            raise error from exc

        provider_status = parse_provider_status(transcript.status)
        try:
            if provider_status is ProviderStatus.COMPLETED:
                self._complete(record, payload=transcript.payload)
            elif provider_status is ProviderStatus.ERROR:
                self._fail(record, error=transcript.error or DEFAULT_FAILURE_MESSAGE)
            else:
                previous = record.progress
                self._store.update_progress(record=record, progress=estimate_progress(previous, provider_status))
                logger.info(
                    "poll.progress transcription_id=%s provider_status=%s progress=%s->%s",
                    safe_transcription_id,
                    provider_status.value,
                    previous,
                    record.progress,
                )
        except RuntimeError as exc:
            logger.error(
                "poll.persist_failed transcription_id=%s reason=%s",
                safe_transcription_id,
                type(exc).__name__,
            )
            raise PersistenceFailureError(provider_job_id=record.provider_job_id) from exc

        return record

    def _complete(self, record: TranscriptionRecord, *, payload: dict) -> None:
        safe_transcription_id = safe_log_identifier(record.id, prefix="tid")
        result = normalize_transcript(payload)
        won = self._store.complete_transcription(record=record, result=result)
        if not won:
            logger.info("poll.completion_replayed transcription_id=%s", safe_transcription_id)
            return

        logger.info(
            "poll.completed transcription_id=%s words=%s speakers=%s",
            safe_transcription_id,
            len(result.words),
            len(result.speakers),
        )
        self._record_trial_usage(record)

    def _fail(self, record: TranscriptionRecord, *, error: str) -> None:
        if self._store.fail_transcription(record=record, error=error):
            logger.info("poll.failed transcription_id=%s", safe_log_identifier(record.id, prefix="tid"))

    def _record_trial_usage(self, record: TranscriptionRecord) -> None:
        # Best effort: the ledger is already completed and must not be reported as failed.
        safe_owner_id = safe_log_identifier(record.owner_id, prefix="uid")
        try:
            used = self._store.increment_trial_usage(record.owner_id)
        except RuntimeError as exc:
            logger.error(
                "poll.trial_usage_failed user_id=%s transcription_id=%s reason=%s",
                safe_owner_id,
                safe_log_identifier(record.id, prefix="tid"),
                type(exc).__name__,
            )
            return
        if used is not None:
            logger.info("poll.trial_usage user_id=%s used=%s", safe_owner_id, used)
