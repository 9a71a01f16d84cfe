"""Source resolution tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import unittest

from scribeline.errors import (
    ExtractionFailedError,
    FileTooLargeError,
    InvalidRequestError,
    NotFoundError,
    StorageUnavailableError,
)
from scribeline.repositories.memory import UserRecord
from scribeline.schemas.transcription import SubmitTranscriptionRequest
from scribeline.services.source_resolver import (
    DIRECT_URL_FILE_NAME,
    SourceResolver,
    is_video_platform_url,
)
from support import FakeObjectStorage, FakeVideoExtractor

_MB = 1024 * 1024


def _user(status: str = "trialing") -> UserRecord:
    now = datetime.now(UTC)
    return UserRecord(
        id="user-1",
        subscription_status=status,
        trial_transcriptions_used=0,
        trial_ends_at=now + timedelta(days=7),
        created_at=now,
    )


class VideoPlatformDetectionTests(unittest.TestCase):
    def test_known_platforms_and_subdomains(self) -> None:
        for url in (
            "https://youtu.be/abc123",
            "https://www.youtube.com/watch?v=abc123",
            "https://m.youtube.com/watch?v=abc123",
            "https://vimeo.com/12345",
            "https://www.tiktok.com/@someone/video/1",
            "https://x.com/user/status/1",
            "https://www.twitch.tv/videos/1",
        ):
            with self.subTest(url=url):
                self.assertTrue(is_video_platform_url(url))

    def test_other_hosts_are_direct(self) -> None:
        for url in (
            "https://example.com/audio.mp3",
            "https://notyoutube.com/watch",
            "https://youtube.com.evil.test/watch",
            "not a url",
            "",
        ):
            with self.subTest(url=url):
                self.assertFalse(is_video_platform_url(url))


class SourceResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.storage = FakeObjectStorage()
        self.extractor = FakeVideoExtractor()
        self.resolver = SourceResolver(storage=self.storage, extractor=self.extractor, signed_url_ttl_seconds=900)

    def test_video_platform_url_goes_through_extractor(self) -> None:
        resolved = self.resolver.resolve(
            SubmitTranscriptionRequest(audio_url="https://youtu.be/abc123"),
            user=_user(),
        )

        self.assertEqual(self.extractor.calls, ["https://youtu.be/abc123"])
        self.assertEqual(resolved.media_url, "https://cdn.test/extracted-audio.m4a")
        self.assertEqual(resolved.file_name, "Conference keynote")
        self.assertEqual(resolved.source, "https://youtu.be/abc123")
        self.assertEqual(resolved.duration_seconds, 612.0)
        self.assertEqual(self.storage.download_requests, [])

    def test_direct_url_passes_through_unchanged(self) -> None:
        resolved = self.resolver.resolve(
            SubmitTranscriptionRequest(audio_url="https://example.com/audio.mp3"),
            user=_user(),
        )

        self.assertEqual(resolved.media_url, "https://example.com/audio.mp3")
        self.assertEqual(resolved.file_name, DIRECT_URL_FILE_NAME)
        self.assertEqual(self.extractor.calls, [])
        self.assertEqual(self.storage.download_requests, [])

    def test_direct_url_keeps_supplied_file_name(self) -> None:
        resolved = self.resolver.resolve(
            SubmitTranscriptionRequest(audio_url="https://example.com/a.mp3", file_name="Interview"),
            user=_user(),
        )

        self.assertEqual(resolved.file_name, "Interview")

    def test_missing_source_is_invalid(self) -> None:
        for request in (
            SubmitTranscriptionRequest(),
            SubmitTranscriptionRequest(audio_url="   ", storage_path=""),
        ):
            with self.subTest(request=request):
                with self.assertRaises(InvalidRequestError):
                    self.resolver.resolve(request, user=_user())

    def test_both_sources_are_invalid(self) -> None:
        request = SubmitTranscriptionRequest(audio_url="https://example.com/a.mp3", storage_path="user-1/1_a.mp3")

        with self.assertRaises(InvalidRequestError):
            self.resolver.resolve(request, user=_user())
        self.assertEqual(self.storage.download_requests, [])

    def test_stored_file_is_signed_with_configured_ttl(self) -> None:
        resolved = self.resolver.resolve(
            SubmitTranscriptionRequest(storage_path="user-1/1700000000000_talk.mp3", file_size=5 * _MB),
            user=_user(),
        )

        self.assertEqual(self.storage.download_requests, [("user-1/1700000000000_talk.mp3", 900)])
        self.assertTrue(resolved.media_url.startswith("https://storage.test/download/"))
        self.assertEqual(resolved.file_name, "1700000000000_talk.mp3")
        self.assertEqual(resolved.file_size_bytes, 5 * _MB)

    def test_trial_user_over_ceiling_is_rejected_before_signing(self) -> None:
        request = SubmitTranscriptionRequest(storage_path="user-1/1_big.wav", file_name="big.wav", file_size=101 * _MB)

        with self.assertRaises(FileTooLargeError) as context:
            self.resolver.resolve(request, user=_user("trialing"))

        self.assertEqual(context.exception.status_code, 413)
        self.assertEqual(context.exception.payload.details["limit_bytes"], 100 * _MB)
        self.assertFalse(context.exception.payload.details["subscribed"])
        self.assertIn("101.0MB", context.exception.payload.message)
        self.assertIn("100MB", context.exception.payload.message)
        self.assertEqual(self.storage.download_requests, [])

    def test_subscriber_may_upload_beyond_trial_ceiling(self) -> None:
        request = SubmitTranscriptionRequest(storage_path="user-1/1_big.wav", file_name="big.wav", file_size=101 * _MB)

        resolved = self.resolver.resolve(request, user=_user("active"))

        self.assertEqual(resolved.file_name, "big.wav")
        self.assertEqual(len(self.storage.download_requests), 1)

    def test_subscriber_over_paid_ceiling_is_rejected(self) -> None:
        request = SubmitTranscriptionRequest(storage_path="user-1/1_huge.wav", file_size=5 * 1024 * _MB + 1)

        with self.assertRaises(FileTooLargeError) as context:
            self.resolver.resolve(request, user=_user("Active Unlimited"))

        self.assertTrue(context.exception.payload.details["subscribed"])
        self.assertIn("5GB", context.exception.payload.message)

    def test_stored_file_without_size_is_invalid(self) -> None:
        request = SubmitTranscriptionRequest(storage_path="user-1/1_huge.wav", file_name="huge.wav")

        with self.assertRaises(InvalidRequestError) as context:
            self.resolver.resolve(request, user=_user("trialing"))

        self.assertEqual(context.exception.payload.details, {"fields": ["file_size"]})
        self.assertEqual(self.storage.download_requests, [])

    def test_stored_file_outside_caller_prefix_is_not_found(self) -> None:
        for path in ("user-2/1700000000000_private.mp3", "user-1/../user-2/1_a.mp3", "user-10/1_a.mp3"):
            with self.subTest(path=path):
                with self.assertRaises(NotFoundError):
                    self.resolver.resolve(
                        SubmitTranscriptionRequest(storage_path=path, file_size=1024),
                        user=_user(),
                    )
        self.assertEqual(self.storage.download_requests, [])

    def test_extraction_failure_is_reported_with_suggestion(self) -> None:
        self.extractor.fail_with = "Failed to extract audio from video: video unavailable"

        with self.assertRaises(ExtractionFailedError) as context:
            self.resolver.resolve(SubmitTranscriptionRequest(audio_url="https://vimeo.com/1"), user=_user())

        details = context.exception.payload.details
        self.assertEqual(context.exception.status_code, 422)
        self.assertIn("video unavailable", details["upstream_message"])
        self.assertTrue(details["suggestion"])

    def test_storage_failure_is_unavailable(self) -> None:
        self.storage.fail_with = "bucket offline"

        with self.assertRaises(StorageUnavailableError) as context:
            self.resolver.resolve(
                SubmitTranscriptionRequest(storage_path="user-1/1_talk.mp3", file_size=10),
                user=_user(),
            )

        self.assertEqual(context.exception.status_code, 503)
        self.assertTrue(context.exception.retryable)


if __name__ == "__main__":
    unittest.main()
