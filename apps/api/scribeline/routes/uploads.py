"""Upload slot routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from scribeline.routes.dependencies import get_authenticated_principal, get_upload_service
from scribeline.schemas.auth import AuthPrincipal
from scribeline.schemas.error import ErrorResponse, NoLeakNotFoundError
from scribeline.schemas.upload import UploadSlot, UploadSlotRequest
from scribeline.services.uploads import UploadService

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.post(
    "/presigned",
    response_model=UploadSlot,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def create_upload_slot(
    payload: UploadSlotRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UploadService, Depends(get_upload_service)],
) -> UploadSlot:
    return service.create_upload_slot(owner_id=principal.user_id, file_name=payload.file_name)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}, 503: {"model": ErrorResponse}},
)
def discard_upload(
    storage_path: Annotated[str, Query(alias="path", min_length=1)],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UploadService, Depends(get_upload_service)],
) -> Response:
    service.discard_upload(owner_id=principal.user_id, storage_path=storage_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
