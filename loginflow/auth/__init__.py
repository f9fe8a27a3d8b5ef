"""Authentication core for the login screen.

Validation, request construction, and the gateway that runs a single
attempt against the direct endpoint or an identity provider.

Services:
    - validate: Form checks that produce ``Credentials``.
    - build: Serialize ``Credentials`` into an ``AuthRequest``.
    - DirectAuthService: First-party username/password login over HTTP.
    - AuthGateway: Provider dispatch with a single-shot completion.
"""
from .direct_service import DirectAuthService
from .errors import (
    AttemptInProgressError,
    AuthError,
    MissingFieldError,
    PasswordTooShortError,
    ResponseDecodeError,
    SdkError,
    ServerRejectedError,
    SignInCancelledError,
    TransportError,
    ValidationError,
)
from .gateway import AuthGateway
from .request_builder import build
from .schemas import AuthOutcome, AuthProvider, AuthRequest, Credentials, OutcomeStatus
from .validation import MIN_PASSWORD_LENGTH, validate

__all__ = [
    "AttemptInProgressError",
    "AuthError",
    "AuthGateway",
    "AuthOutcome",
    "AuthProvider",
    "AuthRequest",
    "Credentials",
    "DirectAuthService",
    "MIN_PASSWORD_LENGTH",
    "MissingFieldError",
    "OutcomeStatus",
    "PasswordTooShortError",
    "ResponseDecodeError",
    "SdkError",
    "ServerRejectedError",
    "SignInCancelledError",
    "TransportError",
    "ValidationError",
    "build",
    "validate",
]
