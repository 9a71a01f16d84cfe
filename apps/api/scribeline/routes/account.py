"""Signed-in account routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from scribeline.routes.dependencies import get_account_service, get_authenticated_principal
from scribeline.schemas.auth import AuthPrincipal
from scribeline.schemas.error import ErrorResponse
from scribeline.schemas.user import AccessDecision, CreateVocabularyRequest, VocabularyEntry
from scribeline.services.accounts import AccountService

router = APIRouter(prefix="/me", tags=["Account"])


@router.get("/access", response_model=AccessDecision, responses={401: {"model": ErrorResponse}})
async def get_access(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccessDecision:
    return service.get_access(principal=principal)


@router.get("/vocabulary", response_model=list[VocabularyEntry], responses={401: {"model": ErrorResponse}})
async def list_vocabulary(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> list[VocabularyEntry]:
    return service.list_vocabulary(owner_id=principal.user_id)


@router.post(
    "/vocabulary",
    response_model=VocabularyEntry,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def add_vocabulary(
    payload: CreateVocabularyRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> VocabularyEntry:
    return service.add_vocabulary(owner_id=principal.user_id, word=payload.word, phrases=payload.phrases)
