"""Transcription routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from scribeline.routes.dependencies import get_authenticated_principal, get_transcription_service
from scribeline.schemas.auth import AuthPrincipal
from scribeline.schemas.error import (
    AccessDeniedError,
    ErrorResponse,
    ExtractionFailedError,
    FileTooLargeError,
    NoLeakNotFoundError,
    PersistenceFailureError,
    ProviderError,
    TranscriptNotReadyError,
)
from scribeline.schemas.transcription import (
    ExportFormat,
    LifecycleState,
    SubmitTranscriptionRequest,
    SubmitTranscriptionResponse,
    Transcription,
    TranscriptionPage,
)
from scribeline.services.transcriptions import TranscriptionService

router = APIRouter(prefix="/transcriptions", tags=["Transcriptions"])


# Handlers that call the provider, extractor or storage are plain `def` so they run in the threadpool.
@router.post(
    "",
    response_model=SubmitTranscriptionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": AccessDeniedError},
        413: {"model": FileTooLargeError},
        422: {"model": ExtractionFailedError},
        500: {"model": PersistenceFailureError},
        502: {"model": ProviderError},
        503: {"model": ErrorResponse},
    },
)
def submit_transcription(
    payload: SubmitTranscriptionRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[TranscriptionService, Depends(get_transcription_service)],
) -> SubmitTranscriptionResponse:
    return service.submit(principal=principal, request=payload)


@router.get(
    "",
    response_model=TranscriptionPage,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def list_transcriptions(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[TranscriptionService, Depends(get_transcription_service)],
    status_filter: Annotated[LifecycleState | None, Query(alias="status")] = None,
    limit: Annotated[int, Query()] = 50,
    offset: Annotated[int, Query()] = 0,
    folder_id: Annotated[str | None, Query()] = None,
) -> TranscriptionPage:
    return service.list_transcriptions(
        owner_id=principal.user_id,
        status=status_filter,
        folder_id=folder_id,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{transcriptionId}",
    response_model=Transcription,
    responses={401: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)
async def get_transcription(
    transcription_id: Annotated[str, Path(alias="transcriptionId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[TranscriptionService, Depends(get_transcription_service)],
) -> Transcription:
    return service.get_transcription(owner_id=principal.user_id, transcription_id=transcription_id)


@router.get(
    "/{transcriptionId}/status",
    response_model=Transcription,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": NoLeakNotFoundError},
        500: {"model": PersistenceFailureError},
        502: {"model": ProviderError},
    },
)
def check_transcription_status(
    transcription_id: Annotated[str, Path(alias="transcriptionId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[TranscriptionService, Depends(get_transcription_service)],
) -> Transcription:
    return service.check_status(owner_id=principal.user_id, transcription_id=transcription_id)


@router.get(
    "/{transcriptionId}/export",
    response_class=Response,
    responses={
        200: {"content": {"text/plain": {}, "application/json": {}, "application/x-subrip": {}, "text/vtt": {}}},
        401: {"model": ErrorResponse},
        404: {"model": NoLeakNotFoundError},
        409: {"model": TranscriptNotReadyError},
    },
)
async def export_transcription(
    transcription_id: Annotated[str, Path(alias="transcriptionId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[TranscriptionService, Depends(get_transcription_service)],
    export_format: Annotated[ExportFormat, Query(alias="format")] = ExportFormat.TXT,
) -> Response:
    content, media_type, filename = service.export(
        owner_id=principal.user_id,
        transcription_id=transcription_id,
        kind=export_format,
    )
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
