"""Value types shared by the validator, request builder, gateway and workflow.

Every value here is attempt-scoped: created when the user taps a login
action and dropped once the outcome has been consumed.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class AuthProvider(str, Enum):
    """Supported authentication backends."""
    DIRECT = "direct"
    GOOGLE = "google"
    FACEBOOK = "facebook"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Credentials:
    """A validated username/password pair."""
    username: str
    password: str = field(repr=False)


class DirectLoginBody(BaseModel):
    """Wire body for the direct-auth endpoint."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    username: str
    password: str


@dataclass(frozen=True)
class AuthRequest:
    """A serialized, ready-to-send direct-auth request."""
    url: str
    body: bytes = field(repr=False)
    method: str = "POST"
    headers: Tuple[Tuple[str, str], ...] = (("Content-Type", "application/json"),)


@dataclass(frozen=True)
class AuthOutcome:
    """Terminal result of one authentication attempt.

    Attributes:
        provider: Backend that produced the outcome.
        status: success, failure, or cancelled.
        reason: Human-readable failure reason (failure and cancelled only).
        identity: Profile returned by an identity provider on success.
    """
    provider: AuthProvider
    status: OutcomeStatus
    reason: str = ""
    identity: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls, provider: AuthProvider, identity: Optional[Dict[str, Any]] = None) -> "AuthOutcome":
        return cls(provider=provider, status=OutcomeStatus.SUCCESS, identity=identity)

    @classmethod
    def failure(cls, provider: AuthProvider, reason: str) -> "AuthOutcome":
        return cls(provider=provider, status=OutcomeStatus.FAILURE, reason=reason or "login failed")

    @classmethod
    def cancelled(cls, provider: AuthProvider, reason: str = "User cancelled login") -> "AuthOutcome":
        return cls(provider=provider, status=OutcomeStatus.CANCELLED, reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS
