"""In-memory repositories used by the API scaffold and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from threading import Lock
from uuid import uuid4

from scribeline.domain.job_fsm import INITIAL_PROGRESS, ensure_transition
from scribeline.schemas.transcription import LifecycleState, TranscriptionResult
from scribeline.schemas.user import SUBSCRIPTION_TRIALING


@dataclass(slots=True)
class UserRecord:
    id: str
    subscription_status: str
    trial_transcriptions_used: int
    trial_ends_at: datetime | None
    created_at: datetime
    email: str | None = None


@dataclass(slots=True)
class TranscriptionRecord:
    id: str
    owner_id: str
    source: str
    file_name: str
    file_size_bytes: int
    language: str | None
    provider_job_id: str
    status: LifecycleState
    progress: int
    created_at: datetime
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    result: TranscriptionResult | None = None
    error: str | None = None
    folder_id: str | None = None


@dataclass(slots=True)
class VocabularyRecord:
    id: str
    owner_id: str
    word: str
    phrases: list[str]
    created_at: datetime


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer for scaffolding and tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    transcriptions: dict[str, TranscriptionRecord] = field(default_factory=dict)
    vocabulary: dict[str, VocabularyRecord] = field(default_factory=dict)
    user_write_count: int = 0
    transcription_write_count: int = 0
    transcription_failure_message: str | None = None
    user_failure_message: str | None = None
    _lock: Lock = field(default_factory=Lock, repr=False)

    def ensure_user(self, user_id: str, *, trial_length_days: int = 7, email: str | None = None) -> UserRecord:
        """Return the user, provisioning a fresh trial account on first sight."""
        with self._lock:
            user = self.users.get(user_id)
            if user is not None:
                return user
            now = datetime.now(UTC)
            user = UserRecord(
                id=user_id,
                subscription_status=SUBSCRIPTION_TRIALING,
                trial_transcriptions_used=0,
                trial_ends_at=now + timedelta(days=trial_length_days),
                created_at=now,
                email=email,
            )
            self.users[user_id] = user
            self.user_write_count += 1
            return user

    def upsert_user(
        self,
        user_id: str,
        *,
        subscription_status: str,
        trial_transcriptions_used: int = 0,
        trial_ends_at: datetime | None = None,
    ) -> UserRecord:
        user = UserRecord(
            id=user_id,
            subscription_status=subscription_status,
            trial_transcriptions_used=trial_transcriptions_used,
            trial_ends_at=trial_ends_at,
            created_at=datetime.now(UTC),
        )
        self.users[user_id] = user
        self.user_write_count += 1
        return user

    def get_user(self, user_id: str) -> UserRecord | None:
        return self.users.get(user_id)

    def increment_trial_usage(self, user_id: str) -> int | None:
        """Add one completed trial transcription; only applies to trialing users."""
        if self.user_failure_message is not None:
            message = self.user_failure_message
            self.user_failure_message = None
            raise RuntimeError(message)

        with self._lock:
            user = self.users.get(user_id)
            if user is None or user.subscription_status != SUBSCRIPTION_TRIALING:
                return None
            user.trial_transcriptions_used += 1
            self.user_write_count += 1
            return user.trial_transcriptions_used

    def create_transcription(
        self,
        *,
        owner_id: str,
        source: str,
        file_name: str,
        file_size_bytes: int,
        language: str | None,
        provider_job_id: str,
        folder_id: str | None = None,
    ) -> TranscriptionRecord:
        self._maybe_raise_transcription_failure()

        now = datetime.now(UTC)
        record = TranscriptionRecord(
            id=str(uuid4()),
            owner_id=owner_id,
            source=source,
            file_name=file_name,
            file_size_bytes=file_size_bytes,
            language=language,
            provider_job_id=provider_job_id,
            status=LifecycleState.PROCESSING,
            progress=INITIAL_PROGRESS,
            created_at=now,
            updated_at=now,
            folder_id=folder_id,
        )
        self.transcriptions[record.id] = record
        self.transcription_write_count += 1
        return record

    def get_transcription_for_owner(self, owner_id: str, transcription_id: str) -> TranscriptionRecord | None:
        record = self.transcriptions.get(transcription_id)
        if record is None or record.owner_id != owner_id:
            return None
        return record

    def list_transcriptions_for_owner(
        self,
        owner_id: str,
        *,
        status: LifecycleState | None = None,
        folder_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[TranscriptionRecord], int]:
        records = [
            record
            for record in self.transcriptions.values()
            if record.owner_id == owner_id
            and (status is None or record.status is status)
            and (folder_id is None or record.folder_id == folder_id)
        ]
        records.sort(key=lambda record: record.created_at, reverse=True)
        return records[offset : offset + limit], len(records)

    def update_progress(self, *, record: TranscriptionRecord, progress: int) -> bool:
        """Persist a progress estimate; skipped once the job has left ``processing``."""
        self._maybe_raise_transcription_failure()
        with self._lock:
            if record.status is not LifecycleState.PROCESSING:
                return False
            ensure_transition(record.status, LifecycleState.PROCESSING)
            record.progress = max(record.progress, progress)
            record.updated_at = datetime.now(UTC)
            self.transcription_write_count += 1
            return True

    def complete_transcription(self, *, record: TranscriptionRecord, result: TranscriptionResult) -> bool:
        """Compare-and-swap ``processing -> completed``.

        Returns False when another caller already moved the job out of
        ``processing``; nothing is written in that case.
        """
        self._maybe_raise_transcription_failure()
        with self._lock:
            if record.status is not LifecycleState.PROCESSING:
                return False
            ensure_transition(record.status, LifecycleState.COMPLETED)
            now = datetime.now(UTC)
            record.status = LifecycleState.COMPLETED
            record.progress = 100
            record.result = result
            record.completed_at = now
            record.updated_at = now
            self.transcription_write_count += 1
            return True

    def fail_transcription(self, *, record: TranscriptionRecord, error: str) -> bool:
        """Compare-and-swap ``processing -> failed``."""
        self._maybe_raise_transcription_failure()
        with self._lock:
            if record.status is not LifecycleState.PROCESSING:
                return False
            ensure_transition(record.status, LifecycleState.FAILED)
            record.status = LifecycleState.FAILED
            record.error = error
            record.updated_at = datetime.now(UTC)
            self.transcription_write_count += 1
            return True

    def add_vocabulary(self, *, owner_id: str, word: str, phrases: list[str]) -> VocabularyRecord:
        record = VocabularyRecord(
            id=str(uuid4()),
            owner_id=owner_id,
            word=word,
            phrases=list(phrases),
            created_at=datetime.now(UTC),
        )
        self.vocabulary[record.id] = record
        return record

    def list_vocabulary_for_user(self, owner_id: str) -> list[VocabularyRecord]:
        entries = [record for record in self.vocabulary.values() if record.owner_id == owner_id]
        entries.sort(key=lambda record: record.created_at)
        return entries

    def _maybe_raise_transcription_failure(self) -> None:
        if self.transcription_failure_message is None:
            return

        message = self.transcription_failure_message
        self.transcription_failure_message = None
        raise RuntimeError(message)
