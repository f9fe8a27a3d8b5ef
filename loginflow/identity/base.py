"""Identity-provider sign-in interface.

An identity SDK runs an interactive sign-in presented from the login
screen and reports exactly one ``SignInResult`` through a completion
callback.

Usage:
    from loginflow.identity import GoogleSignIn

    sdk = GoogleSignIn(client_id="...", client_secret="...")
    sdk.sign_in(surface, completion=handle_result)
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional


class SignInStatus(str, Enum):
    SIGNED_IN = "signed_in"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SignInResult:
    """What an identity SDK reports at the end of a sign-in.

    Attributes:
        status: signed_in, failed, or cancelled.
        user: Profile of the signed-in user (signed_in only).
        error: Provider error message (failed only).
    """
    status: SignInStatus
    user: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def signed_in(cls, user: Dict[str, Any]) -> "SignInResult":
        return cls(status=SignInStatus.SIGNED_IN, user=user)

    @classmethod
    def failed(cls, error: str) -> "SignInResult":
        return cls(status=SignInStatus.FAILED, error=error)

    @classmethod
    def cancelled(cls) -> "SignInResult":
        return cls(status=SignInStatus.CANCELLED)


SignInCompletion = Callable[[SignInResult], None]


class PresentingSurface(ABC):
    """The screen an interactive sign-in is presented from.

    Device-authorization sign-ins show a verification URL and a short user
    code; the user may cancel while the code is on screen.
    """

    @abstractmethod
    def present_device_code(self, provider_name: str, verification_url: str, user_code: str) -> None:
        pass

    @abstractmethod
    def dismiss(self) -> None:
        pass

    def is_cancelled(self) -> bool:
        return False


class IdentitySDK(ABC):
    """Abstract base class for third-party identity providers."""

    name: str = "identity provider"

    @abstractmethod
    def sign_in(self, surface: PresentingSurface, completion: SignInCompletion) -> None:
        """Run an interactive sign-in presented from ``surface``.

        ``completion`` must be called exactly once, from any thread.
        """
        pass

    def close(self) -> None:
        """Release resources held by the SDK."""
