"""Account access and custom vocabulary service layer."""

from datetime import UTC, datetime

from scribeline.domain.entitlement import DEFAULT_TRIAL_LIMIT, check_access
from scribeline.errors import InvalidRequestError
from scribeline.repositories.memory import InMemoryStore, VocabularyRecord
from scribeline.schemas.auth import AuthPrincipal
from scribeline.schemas.user import AccessDecision, VocabularyEntry


class AccountService:
    def __init__(
        self,
        store: InMemoryStore,
        *,
        trial_limit: int = DEFAULT_TRIAL_LIMIT,
        trial_length_days: int = 7,
    ) -> None:
        self._store = store
        self._trial_limit = trial_limit
        self._trial_length_days = trial_length_days

    def get_access(self, *, principal: AuthPrincipal) -> AccessDecision:
        user = self._store.ensure_user(
            principal.user_id,
            trial_length_days=self._trial_length_days,
            email=principal.email,
        )
        return check_access(user, now=datetime.now(UTC), trial_limit=self._trial_limit)

    def list_vocabulary(self, *, owner_id: str) -> list[VocabularyEntry]:
        return [self._to_entry(record) for record in self._store.list_vocabulary_for_user(owner_id)]

    def add_vocabulary(self, *, owner_id: str, word: str, phrases: list[str]) -> VocabularyEntry:
        normalized_word = word.strip()
        if not normalized_word:
            raise InvalidRequestError("Vocabulary word must not be blank")

        cleaned_phrases = [phrase.strip() for phrase in phrases if phrase and phrase.strip()]
        record = self._store.add_vocabulary(owner_id=owner_id, word=normalized_word, phrases=cleaned_phrases)
        return self._to_entry(record)

    @staticmethod
    def _to_entry(record: VocabularyRecord) -> VocabularyEntry:
        return VocabularyEntry(
            id=record.id,
            word=record.word,
            phrases=list(record.phrases),
            created_at=record.created_at,
        )
