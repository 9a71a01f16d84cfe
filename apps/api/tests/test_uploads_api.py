"""Upload slot API tests."""

from __future__ import annotations

from datetime import UTC, datetime
import unittest

from fastapi.testclient import TestClient

from scribeline.main import create_app
from scribeline.repositories.memory import InMemoryStore
from scribeline.services.uploads import build_storage_path, sanitize_filename
from support import FakeObjectStorage, FakeTranscriptionProvider, FakeVideoExtractor, SettingsEnvCase


class UploadPathUnitTests(unittest.TestCase):
    def test_unsafe_characters_are_replaced(self) -> None:
        self.assertEqual(sanitize_filename("my talk (final)!.mp3"), "my_talk__final__.mp3")
        self.assertEqual(sanitize_filename("clean-name_v2.wav"), "clean-name_v2.wav")
        self.assertEqual(sanitize_filename("../../etc/passwd"), ".._.._etc_passwd")

    def test_storage_path_is_scoped_to_user(self) -> None:
        moment = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)

        path = build_storage_path("user-1", "talk.mp3", now=moment)

        self.assertEqual(path, f"user-1/{int(moment.timestamp() * 1000)}_talk.mp3")


class UploadApiTests(SettingsEnvCase):
    owner_headers = {"Authorization": "Bearer test:user-1"}

    def setUp(self) -> None:
        super().setUp()
        self.storage = FakeObjectStorage()
        app = create_app(
            store=InMemoryStore(),
            transcription_provider=FakeTranscriptionProvider(),
            object_storage=self.storage,
            video_extractor=FakeVideoExtractor(),
        )
        self.client = TestClient(app)

    def test_presigned_slot_returns_signed_url_and_owner_path(self) -> None:
        response = self.client.post(
            "/api/v1/uploads/presigned",
            headers=self.owner_headers,
            json={"file_name": "board meeting.m4a", "file_size": 4096, "content_type": "audio/mp4"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertRegex(body["storage_path"], r"^user-1/\d+_board_meeting\.m4a$")
        self.assertEqual(body["signed_url"], f"https://storage.test/upload/{body['storage_path']}")
        self.assertEqual(body["token"], "upload-token")
        self.assertEqual(body["file_name"], "board meeting.m4a")
        self.assertEqual(self.storage.upload_requests, [body["storage_path"]])

    def test_invalid_slot_request_returns_invalid_request(self) -> None:
        for payload in ({"file_name": "a.mp3", "file_size": 0}, {"file_size": 10}, {"file_name": "", "file_size": 10}):
            with self.subTest(payload=payload):
                response = self.client.post("/api/v1/uploads/presigned", headers=self.owner_headers, json=payload)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["code"], "INVALID_REQUEST")
        self.assertEqual(self.storage.upload_requests, [])

    def test_storage_failure_returns_503(self) -> None:
        self.storage.fail_with = "signing key unavailable"

        response = self.client.post(
            "/api/v1/uploads/presigned",
            headers=self.owner_headers,
            json={"file_name": "a.mp3", "file_size": 10},
        )

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["code"], "STORAGE_UNAVAILABLE")

    def test_slot_requires_authentication(self) -> None:
        response = self.client.post("/api/v1/uploads/presigned", json={"file_name": "a.mp3", "file_size": 10})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.storage.upload_requests, [])

    def test_discard_deletes_owned_upload(self) -> None:
        response = self.client.delete(
            "/api/v1/uploads",
            headers=self.owner_headers,
            params={"path": "user-1/1700000000000_talk.mp3"},
        )

        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.storage.deleted, ["user-1/1700000000000_talk.mp3"])

    def test_discard_of_foreign_or_traversal_path_returns_no_leak_404(self) -> None:
        for path in ("user-2/1_talk.mp3", "user-1/../user-2/1_talk.mp3", "user-10/1_talk.mp3"):
            with self.subTest(path=path):
                response = self.client.delete("/api/v1/uploads", headers=self.owner_headers, params={"path": path})
                self.assertEqual(response.status_code, 404)
                self.assertEqual(response.json(), {"code": "RESOURCE_NOT_FOUND", "message": "Resource not found"})
        self.assertEqual(self.storage.deleted, [])


if __name__ == "__main__":
    unittest.main()
