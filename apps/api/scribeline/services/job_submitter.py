"""Submit resolved media to the transcription provider and open a ledger row."""

from __future__ import annotations

import logging
from typing import Any

from scribeline.adapters.transcription import ProviderRequestError, TranscriptionProvider
from scribeline.core.logging_safety import safe_log_identifier, safe_url_host
from scribeline.domain.job_fsm import parse_provider_status
from scribeline.domain.provider_errors import provider_error_from_message
from scribeline.errors import PersistenceFailureError
from scribeline.repositories.memory import InMemoryStore, TranscriptionRecord
from scribeline.schemas.transcription import ProviderStatus
from scribeline.services.source_resolver import ResolvedSource

logger = logging.getLogger(__name__)

# Every analysis facet is requested on each submission.
_ANALYSIS_OPTIONS: dict[str, Any] = {
    "speaker_labels": True,
    "sentiment_analysis": True,
    "iab_categories": True,
    "content_safety": True,
    "summarization": True,
    "summary_model": "informative",
    "summary_type": "bullets",
    "entity_detection": True,
    "auto_highlights": True,
    "format_text": True,
    "punctuate": True,
    "redact_pii": False,
    "disfluencies": False,
}


class JobSubmitter:
    def __init__(
        self,
        *,
        store: InMemoryStore,
        provider: TranscriptionProvider,
        speech_model: str = "nano",
    ) -> None:
        self._store = store
        self._provider = provider
        self._speech_model = speech_model

    def build_options(self, *, owner_id: str, language: str | None) -> dict[str, Any]:
        options: dict[str, Any] = {"speech_model": self._speech_model, **_ANALYSIS_OPTIONS}
        if language:
            options["language_code"] = language

        word_boost = self._word_boost(owner_id)
        # The provider treats an empty boost list differently from no boosting at all.
        if word_boost:
            options["word_boost"] = word_boost
            options["boost_param"] = "high"
        return options

    def submit(
        self,
        *,
        owner_id: str,
        source: ResolvedSource,
        language: str | None = None,
        folder_id: str | None = None,
    ) -> TranscriptionRecord:
        safe_owner_id = safe_log_identifier(owner_id, prefix="uid")
        options = self.build_options(owner_id=owner_id, language=language)

        try:
            transcript = self._provider.submit(source.media_url, options)
        except ProviderRequestError as exc:
            error = provider_error_from_message(str(exc))
            logger.warning(
                "submit.provider_rejected user_id=%s host=%s cause=%s",
                safe_owner_id,
                safe_url_host(source.media_url),
                error.cause,
            )
            raise error from exc

        if parse_provider_status(transcript.status) is ProviderStatus.ERROR:
            error = provider_error_from_message(transcript.error or "Transcription failed - unknown error")
            logger.warning("submit.provider_failed user_id=%s cause=%s", safe_owner_id, error.cause)
            raise error

        safe_provider_job_id = safe_log_identifier(transcript.id, prefix="pjid")
        try:
            record = self._store.create_transcription(
                owner_id=owner_id,
                source=source.source,
                file_name=source.file_name,
                file_size_bytes=source.file_size_bytes,
                language=language,
                provider_job_id=transcript.id,
                folder_id=folder_id,
            )
        except RuntimeError as exc:
            # The provider job already exists; resubmitting would duplicate it upstream.
            logger.error(
                "submit.persist_failed user_id=%s provider_job_id=%s reason=%s",
                safe_owner_id,
                safe_provider_job_id,
                type(exc).__name__,
            )
            raise PersistenceFailureError(provider_job_id=transcript.id) from exc

        logger.info(
            "submit.accepted user_id=%s transcription_id=%s provider_job_id=%s boosted_terms=%s",
            safe_owner_id,
            safe_log_identifier(record.id, prefix="tid"),
            safe_provider_job_id,
            len(options.get("word_boost", [])),
        )
        return record

    def _word_boost(self, owner_id: str) -> list[str]:
        entries = self._store.list_vocabulary_for_user(owner_id)
        words = [entry.word for entry in entries]
        phrases = [phrase for entry in entries for phrase in entry.phrases]
        return [term for term in (*words, *phrases) if term and term.strip()]
