"""AssemblyAI REST adapter."""

from __future__ import annotations

from typing import Any

import httpx

from scribeline.adapters.transcription.base import ProviderRequestError, TranscriptionProvider
from scribeline.schemas.transcription import ProviderTranscript

_TRANSCRIPT_PATH = "/v2/transcript"


class AssemblyAIProvider(TranscriptionProvider):
    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.assemblyai.com",
        timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout_seconds)

    def submit(self, media_url: str, options: dict[str, Any]) -> ProviderTranscript:
        body = {"audio_url": media_url, **options}
        data = self._request("POST", _TRANSCRIPT_PATH, json=body)
        return self._to_transcript(data)

    def get(self, provider_job_id: str) -> ProviderTranscript:
        data = self._request("GET", f"{_TRANSCRIPT_PATH}/{provider_job_id}")
        return self._to_transcript(data)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if not self._api_key:
            raise ProviderRequestError("unauthorized: AssemblyAI API key is not configured")

        try:
            response = self._client.request(method, path, headers={"authorization": self._api_key}, **kwargs)
        except httpx.TimeoutException as exc:
            raise ProviderRequestError(f"Request timeout: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProviderRequestError(f"Provider request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ProviderRequestError(f"{response.status_code} {_error_text(response)}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderRequestError("Provider returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise ProviderRequestError("Provider returned an unexpected response shape")
        return data

    @staticmethod
    def _to_transcript(data: dict[str, Any]) -> ProviderTranscript:
        transcript_id = str(data.get("id") or "").strip()
        if not transcript_id:
            raise ProviderRequestError("Provider response is missing the transcript id")
        return ProviderTranscript(
            id=transcript_id,
            status=str(data.get("status") or ""),
            error=data.get("error"),
            payload=data,
        )


def _error_text(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or response.text
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.reason_phrase or response.text


__all__ = ["AssemblyAIProvider"]
