"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from scribeline.adapters.extraction import HttpVideoExtractor, VideoExtractor
from scribeline.adapters.storage import ObjectStorage, S3ObjectStorage
from scribeline.adapters.transcription import AssemblyAIProvider, TranscriptionProvider
from scribeline.core.config import get_settings
from scribeline.core.logging_config import setup_logging
from scribeline.core.logging_safety import safe_log_identifier
from scribeline.errors import ApiError
from scribeline.repositories.memory import InMemoryStore
from scribeline.routes import account_router, transcriptions_router, uploads_router
from scribeline.routes.account import add_vocabulary
from scribeline.routes.transcriptions import submit_transcription
from scribeline.routes.uploads import create_upload_slot
from scribeline.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_API_PREFIX = "/api/v1"

# Body validation on these operations is reported as INVALID_REQUEST (400) instead of FastAPI's 422.
_INVALID_REQUEST_VALIDATION_ENDPOINTS = frozenset({submit_transcription, create_upload_slot, add_vocabulary})
_INVALID_REQUEST_VALIDATION_PATHS: set[tuple[str, str]] = {
    ("POST", f"{_API_PREFIX}/transcriptions"),
    ("POST", f"{_API_PREFIX}/uploads/presigned"),
    ("POST", f"{_API_PREFIX}/me/vocabulary"),
}


_OPENAPI_WITHOUT_VALIDATION_422: set[tuple[str, str]] = {
    ("post", f"{_API_PREFIX}/uploads/presigned"),
    ("post", f"{_API_PREFIX}/me/vocabulary"),
}


def _apply_contract_response_codes(schema: dict) -> None:
    """Drop the default 422 from operations whose validation errors map to 400."""
    for method, path in _OPENAPI_WITHOUT_VALIDATION_422:
        operation = schema.get("paths", {}).get(path, {}).get(method)
        if not operation:
            continue

        responses = operation.setdefault("responses", {})
        responses.pop("422", None)
        responses.setdefault("400", {"description": "See API contract"})


def _reports_invalid_request(request: Request) -> bool:
    """Match by endpoint; included routers keep the un-prefixed path on `scope["route"]`."""
    endpoint = getattr(request.scope.get("route"), "endpoint", None)
    if endpoint in _INVALID_REQUEST_VALIDATION_ENDPOINTS:
        return True

    path = request.url.path
    root_path = request.scope.get("root_path") or ""
    if root_path and path.startswith(root_path):
        path = path[len(root_path):]
    return (request.method.upper(), path.rstrip("/") or "/") in _INVALID_REQUEST_VALIDATION_PATHS


def _validation_fields(exc: RequestValidationError) -> list[str]:
    fields: list[str] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields.append(".".join(location) or "body")
    return fields


def create_app(
    *,
    store: InMemoryStore | None = None,
    transcription_provider: TranscriptionProvider | None = None,
    object_storage: ObjectStorage | None = None,
    video_extractor: VideoExtractor | None = None,
) -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Scribeline API", version="0.3.0")
    app.state.store = store if store is not None else InMemoryStore()
    app.state.transcription_provider = transcription_provider or AssemblyAIProvider(
        api_key=settings.assemblyai_api_key,
        base_url=settings.assemblyai_base_url,
        timeout_seconds=settings.provider_timeout_seconds,
    )
    app.state.object_storage = object_storage or S3ObjectStorage(
        bucket=settings.storage_bucket,
        endpoint_url=settings.storage_endpoint_url,
        region=settings.storage_region,
    )
    app.state.video_extractor = video_extractor or HttpVideoExtractor(
        service_url=settings.extractor_url,
        timeout_seconds=settings.extractor_timeout_seconds,
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        if exc.retryable:
            logger.error(
                "request.failed correlation_id=%s method=%s path=%s code=%s status=%s",
                safe_log_identifier(getattr(request.state, "correlation_id", None), prefix="cid"),
                request.method,
                request.url.path,
                exc.payload.code,
                exc.status_code,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        if _reports_invalid_request(request):
            payload = ErrorResponse(
                code="INVALID_REQUEST",
                message="Invalid request payload",
                details={"fields": _validation_fields(exc)},
            )
            return JSONResponse(status_code=400, content=payload.model_dump())

        return await request_validation_exception_handler(request, exc)

    app.include_router(transcriptions_router, prefix=_API_PREFIX)
    app.include_router(uploads_router, prefix=_API_PREFIX)
    app.include_router(account_router, prefix=_API_PREFIX)

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        _apply_contract_response_codes(schema)
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app


app = create_app()
