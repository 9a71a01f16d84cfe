"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from scribeline.adapters.auth import (
    AuthVerificationError,
    FirebaseTokenVerifier,
    MockTokenVerifier,
    TokenVerifier,
)
from scribeline.adapters.extraction import VideoExtractor
from scribeline.adapters.storage import ObjectStorage
from scribeline.adapters.transcription import TranscriptionProvider
from scribeline.core.config import Settings, get_settings
from scribeline.core.logging_safety import safe_log_identifier
from scribeline.errors import UnauthenticatedError
from scribeline.repositories.memory import InMemoryStore
from scribeline.schemas.auth import AuthPrincipal
from scribeline.services.accounts import AccountService
from scribeline.services.job_submitter import JobSubmitter
from scribeline.services.source_resolver import SourceResolver
from scribeline.services.status_poller import StatusPoller
from scribeline.services.transcriptions import TranscriptionService
from scribeline.services.uploads import UploadService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "firebase":
        return FirebaseTokenVerifier(
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
        )
    return MockTokenVerifier()


def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthPrincipal:
    """Validate bearer token and attach the signed-in caller to request context."""
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise UnauthenticatedError("Please sign in to continue")

    try:
        principal = verifier.verify_token(credentials.credentials)
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=%s",
            safe_correlation_id,
            request.method,
            request.url.path,
            exc.reason,
        )
        raise UnauthenticatedError(str(exc) or "Invalid bearer token") from exc

    logger.debug(
        "auth.accepted correlation_id=%s method=%s path=%s user_id=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.user_id, prefix="uid"),
    )
    request.state.auth_principal = principal
    return principal


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_transcription_provider(request: Request) -> TranscriptionProvider:
    return request.app.state.transcription_provider


def get_object_storage(request: Request) -> ObjectStorage:
    return request.app.state.object_storage


def get_video_extractor(request: Request) -> VideoExtractor:
    return request.app.state.video_extractor


def get_transcription_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    provider: Annotated[TranscriptionProvider, Depends(get_transcription_provider)],
    storage: Annotated[ObjectStorage, Depends(get_object_storage)],
    extractor: Annotated[VideoExtractor, Depends(get_video_extractor)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TranscriptionService:
    resolver = SourceResolver(
        storage=storage,
        extractor=extractor,
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
        trial_max_upload_mb=settings.trial_max_upload_mb,
        paid_max_upload_mb=settings.paid_max_upload_mb,
    )
    return TranscriptionService(
        store=store,
        resolver=resolver,
        submitter=JobSubmitter(store=store, provider=provider, speech_model=settings.assemblyai_speech_model),
        poller=StatusPoller(store=store, provider=provider),
        trial_limit=settings.trial_transcription_limit,
        trial_length_days=settings.trial_length_days,
    )


def get_upload_service(storage: Annotated[ObjectStorage, Depends(get_object_storage)]) -> UploadService:
    return UploadService(storage)


def get_account_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AccountService:
    return AccountService(
        store,
        trial_limit=settings.trial_transcription_limit,
        trial_length_days=settings.trial_length_days,
    )
