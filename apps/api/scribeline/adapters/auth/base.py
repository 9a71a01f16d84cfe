"""Session token verification interfaces."""

from abc import ABC, abstractmethod

from scribeline.schemas.auth import AuthPrincipal

REASON_MALFORMED = "malformed_token"
REASON_REJECTED = "token_rejected"
REASON_WRONG_PROJECT = "wrong_project"
REASON_NO_IDENTITY = "missing_identity"
REASON_UNAVAILABLE = "verifier_unavailable"


class AuthVerificationError(Exception):
    """A bearer token could not be turned into a signed-in caller.

    ``reason`` is a short code for log lines; the message is shown to the caller.
    """

    def __init__(self, message: str, *, reason: str = REASON_REJECTED) -> None:
        super().__init__(message)
        self.reason = reason


class TokenVerifier(ABC):
    @abstractmethod
    def verify_token(self, token: str) -> AuthPrincipal:
        """Resolve ``token`` to the caller or raise ``AuthVerificationError``."""


__all__ = [
    "REASON_MALFORMED",
    "REASON_NO_IDENTITY",
    "REASON_REJECTED",
    "REASON_UNAVAILABLE",
    "REASON_WRONG_PROJECT",
    "AuthVerificationError",
    "TokenVerifier",
]
