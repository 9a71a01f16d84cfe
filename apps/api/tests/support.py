"""Shared collaborator fakes and settings fixtures for API tests."""

from __future__ import annotations

import os
from typing import Any
import unittest

from scribeline.adapters.extraction import ExtractedMedia, ExtractionServiceError, VideoExtractor
from scribeline.adapters.storage import ObjectStorage, SignedUpload, StorageError
from scribeline.adapters.transcription import ProviderRequestError, TranscriptionProvider
from scribeline.core.config import get_settings
from scribeline.schemas.transcription import ProviderTranscript


class FakeTranscriptionProvider(TranscriptionProvider):
    """Scripted provider: ``get`` replays queued statuses per job id."""

    def __init__(self) -> None:
        self.submissions: list[tuple[str, dict[str, Any]]] = []
        self.get_calls: list[str] = []
        self.submit_error: str | None = None
        self.submit_status = "queued"
        self.get_error: str | None = None
        self._scripts: dict[str, list[ProviderTranscript]] = {}
        self._counter = 0

    def submit(self, media_url: str, options: dict[str, Any]) -> ProviderTranscript:
        self.submissions.append((media_url, dict(options)))
        if self.submit_error is not None:
            raise ProviderRequestError(self.submit_error)
        self._counter += 1
        return ProviderTranscript(id=f"aai-{self._counter}", status=self.submit_status, error=None)

    def script(self, provider_job_id: str, *transcripts: ProviderTranscript) -> None:
        self._scripts.setdefault(provider_job_id, []).extend(transcripts)

    def get(self, provider_job_id: str) -> ProviderTranscript:
        self.get_calls.append(provider_job_id)
        if self.get_error is not None:
            raise ProviderRequestError(self.get_error)
        queue = self._scripts.get(provider_job_id) or []
        if len(queue) > 1:
            return queue.pop(0)
        if queue:
            return queue[0]
        return ProviderTranscript(id=provider_job_id, status="processing")


class FakeObjectStorage(ObjectStorage):
    def __init__(self) -> None:
        self.download_requests: list[tuple[str, int]] = []
        self.upload_requests: list[str] = []
        self.deleted: list[str] = []
        self.fail_with: str | None = None

    def create_signed_download_url(self, path: str, ttl_seconds: int) -> str:
        self._maybe_fail()
        self.download_requests.append((path, ttl_seconds))
        return f"https://storage.test/download/{path}?ttl={ttl_seconds}"

    def create_signed_upload_url(self, path: str) -> SignedUpload:
        self._maybe_fail()
        self.upload_requests.append(path)
        return SignedUpload(url=f"https://storage.test/upload/{path}", path=path, token="upload-token")

    def delete(self, path: str) -> None:
        self._maybe_fail()
        self.deleted.append(path)

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise StorageError(self.fail_with)


class FakeVideoExtractor(VideoExtractor):
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.fail_with: str | None = None

    def extract(self, video_url: str) -> ExtractedMedia:
        self.calls.append(video_url)
        if self.fail_with is not None:
            raise ExtractionServiceError(self.fail_with)
        return ExtractedMedia(
            media_url="https://cdn.test/extracted-audio.m4a",
            title="Conference keynote",
            duration_seconds=612.0,
        )


def completed_payload(provider_job_id: str, *, word_count: int = 3) -> ProviderTranscript:
    words = [
        {"text": f"word{index}", "start": index * 500, "end": index * 500 + 400, "confidence": 0.9, "speaker": "A"}
        for index in range(word_count)
    ]
    payload = {
        "id": provider_job_id,
        "status": "completed",
        "text": " ".join(word["text"] for word in words),
        "utterances": [
            {"speaker": "A", "text": "word0 word1", "start": 0, "end": 900, "confidence": 0.93, "words": words[:2]},
        ],
        "sentiment_analysis_results": [
            {"text": "word0 word1", "sentiment": "POSITIVE", "confidence": 0.8, "start": 0, "end": 900},
        ],
        "iab_categories_result": {
            "status": "success",
            "results": [{"text": "word0 word1", "labels": [{"relevance": 0.9, "label": "Technology>AI"}]}],
        },
        "summary": "- word zero\n- word one",
        "entities": [{"entity_type": "person_name", "text": "word1", "start": 500, "end": 900}],
        "auto_highlights_result": {
            "status": "success",
            "results": [{"text": "word0", "count": 2, "rank": 0.07, "timestamps": [{"start": 0, "end": 400}]}],
        },
        "words": words,
        "audio_duration": 12,
        "language_code": "en_us",
    }
    return ProviderTranscript(id=provider_job_id, status="completed", payload=payload)


class SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "SCRIBELINE_AUTH_PROVIDER",
        "SCRIBELINE_TRIAL_TRANSCRIPTION_LIMIT",
        "SCRIBELINE_ASSEMBLYAI_API_KEY",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["SCRIBELINE_AUTH_PROVIDER"] = "mock"
        os.environ.pop("SCRIBELINE_TRIAL_TRANSCRIPTION_LIMIT", None)
        os.environ["SCRIBELINE_ASSEMBLYAI_API_KEY"] = "test-key"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()
