"""Deterministic verifier for local development and tests."""

from scribeline.adapters.auth.base import (
    REASON_MALFORMED,
    REASON_NO_IDENTITY,
    AuthVerificationError,
    TokenVerifier,
)
from scribeline.schemas.auth import AuthPrincipal

_TOKEN_PREFIX = "test"


class MockTokenVerifier(TokenVerifier):
    """Accepts ``test:<user_id>`` or ``test:<user_id>:<email>``."""

    def verify_token(self, token: str) -> AuthPrincipal:
        prefix, _, rest = token.partition(":")
        user_id, _, email = rest.partition(":")
        if prefix != _TOKEN_PREFIX or ":" in email:
            raise AuthVerificationError("Invalid bearer token", reason=REASON_MALFORMED)

        if not user_id.strip():
            raise AuthVerificationError("Please sign in to continue", reason=REASON_NO_IDENTITY)

        return AuthPrincipal(user_id=user_id.strip(), email=email.strip() or None)


__all__ = ["MockTokenVerifier"]
