"""Transcription service layer."""

from datetime import UTC, datetime
import logging

from scribeline.core.logging_safety import safe_log_identifier
from scribeline.domain.entitlement import DEFAULT_TRIAL_LIMIT, check_access
from scribeline.domain.export_formatter import format_transcription, media_type_for
from scribeline.errors import AccessDeniedError, ApiError, InvalidRequestError, NotFoundError
from scribeline.repositories.memory import InMemoryStore, TranscriptionRecord
from scribeline.schemas.auth import AuthPrincipal
from scribeline.schemas.transcription import (
    ExportFormat,
    LifecycleState,
    SubmitTranscriptionRequest,
    SubmitTranscriptionResponse,
    Transcription,
    TranscriptionPage,
    TranscriptionSummary,
)
from scribeline.services.job_submitter import JobSubmitter
from scribeline.services.source_resolver import SourceResolver
from scribeline.services.status_poller import StatusPoller

logger = logging.getLogger(__name__)

_LIST_LIMIT_MIN = 1
_LIST_LIMIT_MAX = 100


class TranscriptionService:
    def __init__(
        self,
        *,
        store: InMemoryStore,
        resolver: SourceResolver,
        submitter: JobSubmitter,
        poller: StatusPoller,
        trial_limit: int = DEFAULT_TRIAL_LIMIT,
        trial_length_days: int = 7,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._submitter = submitter
        self._poller = poller
        self._trial_limit = trial_limit
        self._trial_length_days = trial_length_days

    def submit(self, *, principal: AuthPrincipal, request: SubmitTranscriptionRequest) -> SubmitTranscriptionResponse:
        user = self._store.ensure_user(
            principal.user_id,
            trial_length_days=self._trial_length_days,
            email=principal.email,
        )
        decision = check_access(user, now=datetime.now(UTC), trial_limit=self._trial_limit)
        if not decision.allowed:
            logger.info(
                "submit.denied user_id=%s limit_reached=%s trial_expired=%s",
                safe_log_identifier(user.id, prefix="uid"),
                decision.limit_reached,
                decision.trial_expired,
            )
            raise AccessDeniedError(
                limit_reached=decision.limit_reached,
                trial_expired=decision.trial_expired,
                transcriptions_used=decision.transcriptions_used,
                subscription_status=decision.subscription_status,
                trial_limit=self._trial_limit,
            )

        source = self._resolver.resolve(request, user=user)
        record = self._submitter.submit(
            owner_id=user.id,
            source=source,
            language=request.language,
            folder_id=request.folder_id,
        )
        return SubmitTranscriptionResponse(
            transcription=self._to_transcription(record),
            message="Transcription started. This may take a few minutes.",
        )

    def get_transcription(self, *, owner_id: str, transcription_id: str) -> Transcription:
        return self._to_transcription(self._get_owned(owner_id=owner_id, transcription_id=transcription_id))

    def check_status(self, *, owner_id: str, transcription_id: str) -> Transcription:
        record = self._get_owned(owner_id=owner_id, transcription_id=transcription_id)
        return self._to_transcription(self._poller.poll(record))

    def list_transcriptions(
        self,
        *,
        owner_id: str,
        status: LifecycleState | None,
        limit: int,
        offset: int,
        folder_id: str | None = None,
    ) -> TranscriptionPage:
        if limit < _LIST_LIMIT_MIN or limit > _LIST_LIMIT_MAX or offset < 0:
            raise InvalidRequestError(
                "Invalid pagination parameters",
                details={"limit": limit, "offset": offset, "min_limit": _LIST_LIMIT_MIN, "max_limit": _LIST_LIMIT_MAX},
            )

        records, total = self._store.list_transcriptions_for_owner(
            owner_id,
            status=status,
            folder_id=folder_id,
            limit=limit,
            offset=offset,
        )
        items = [
            TranscriptionSummary(
                id=record.id,
                file_name=record.file_name,
                folder_id=record.folder_id,
                status=record.status,
                progress=record.progress,
                created_at=record.created_at,
                completed_at=record.completed_at,
            )
            for record in records
        ]
        return TranscriptionPage(items=items, total=total, limit=limit, offset=offset)

    def export(self, *, owner_id: str, transcription_id: str, kind: ExportFormat) -> tuple[str, str, str]:
        """Return ``(content, media_type, filename)`` for a completed transcription."""
        record = self._get_owned(owner_id=owner_id, transcription_id=transcription_id)
        if record.status is not LifecycleState.COMPLETED:
            raise ApiError(
                status_code=409,
                code="TRANSCRIPT_NOT_READY",
                message="Transcript is not available for this transcription state.",
                details={"current_status": record.status},
            )

        content = format_transcription(self._to_transcription(record), kind)
        return content, media_type_for(kind), f"transcription-{record.id}.{kind.value}"

    def _get_owned(self, *, owner_id: str, transcription_id: str) -> TranscriptionRecord:
        record = self._store.get_transcription_for_owner(owner_id=owner_id, transcription_id=transcription_id)
        if record is None:
            raise NotFoundError()
        return record

    @staticmethod
    def _to_transcription(record: TranscriptionRecord) -> Transcription:
        return Transcription(
            id=record.id,
            file_name=record.file_name,
            source=record.source,
            file_size_bytes=record.file_size_bytes,
            language=record.language,
            folder_id=record.folder_id,
            provider_job_id=record.provider_job_id,
            status=record.status,
            progress=record.progress,
            result=record.result if record.status is LifecycleState.COMPLETED else None,
            error=record.error if record.status is LifecycleState.FAILED else None,
            created_at=record.created_at,
            updated_at=record.updated_at,
            completed_at=record.completed_at,
        )
