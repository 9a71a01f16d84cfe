"""Firebase ID token verifier for signed-in web sessions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scribeline.adapters.auth.base import (
    REASON_NO_IDENTITY,
    REASON_REJECTED,
    REASON_UNAVAILABLE,
    REASON_WRONG_PROJECT,
    AuthVerificationError,
    TokenVerifier,
)
from scribeline.schemas.auth import AuthPrincipal

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."


def principal_from_claims(
    claims: Mapping[str, Any],
    *,
    project_id: str | None = None,
    audience: str | None = None,
) -> AuthPrincipal:
    """Check that decoded ID token claims belong to this project and build the caller."""
    token_audience = str(claims.get("aud") or "")
    if audience and token_audience != audience:
        raise AuthVerificationError(SESSION_EXPIRED_MESSAGE, reason=REASON_WRONG_PROJECT)

    if project_id:
        issuer = str(claims.get("iss") or "")
        if not issuer.endswith(f"/{project_id}") and token_audience != project_id:
            raise AuthVerificationError(SESSION_EXPIRED_MESSAGE, reason=REASON_WRONG_PROJECT)

    user_id = str(claims.get("uid") or claims.get("sub") or "").strip()
    if not user_id:
        raise AuthVerificationError("Please sign in to continue", reason=REASON_NO_IDENTITY)

    email = str(claims.get("email") or "").strip().lower()
    return AuthPrincipal(user_id=user_id, email=email or None)


class FirebaseTokenVerifier(TokenVerifier):
    def __init__(self, project_id: str | None, audience: str | None, *, check_revoked: bool = True) -> None:
        self._project_id = project_id
        self._audience = audience
        self._check_revoked = check_revoked

    def verify_token(self, token: str) -> AuthPrincipal:
        firebase_auth = self._auth_module()
        try:
            claims = firebase_auth.verify_id_token(token, check_revoked=self._check_revoked)
        except Exception as exc:  # firebase_admin raises several unrelated error types
            raise AuthVerificationError(SESSION_EXPIRED_MESSAGE, reason=REASON_REJECTED) from exc

        return principal_from_claims(claims, project_id=self._project_id, audience=self._audience)

    @staticmethod
    def _auth_module() -> Any:
        try:
            import firebase_admin
            from firebase_admin import auth as firebase_auth
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise AuthVerificationError("Sign-in is temporarily unavailable", reason=REASON_UNAVAILABLE) from exc

        if not firebase_admin._apps:
            firebase_admin.initialize_app()
        return firebase_auth


__all__ = ["FirebaseTokenVerifier", "principal_from_claims"]
