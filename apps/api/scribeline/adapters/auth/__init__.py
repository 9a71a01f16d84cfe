"""Bearer token verifiers."""

from .base import AuthVerificationError, TokenVerifier
from .firebase_auth import FirebaseTokenVerifier, principal_from_claims
from .mock_auth import MockTokenVerifier

__all__ = [
    "AuthVerificationError",
    "FirebaseTokenVerifier",
    "MockTokenVerifier",
    "TokenVerifier",
    "principal_from_claims",
]
