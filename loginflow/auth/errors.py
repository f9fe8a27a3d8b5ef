"""Error taxonomy for login attempts.

Validation errors are raised before any request is built and never reach
the network. Auth errors are raised inside the gateway and converted to an
``AuthOutcome`` at its boundary; only ``display_message`` reaches the UI.
"""


class ValidationError(Exception):
    """Base class for form validation failures."""

    display_message = "invalid input"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.display_message)
        if message:
            self.display_message = message


class MissingFieldError(ValidationError):
    display_message = "some fields empty"

    def __init__(self, field: str):
        super().__init__()
        self.field = field


class PasswordTooShortError(ValidationError):
    def __init__(self, min_length: int):
        super().__init__(f"password should be at least {min_length} character long")
        self.min_length = min_length


class AuthError(Exception):
    """Base class for failures of a single authentication attempt."""

    @property
    def display_message(self) -> str:
        return str(self)


class TransportError(AuthError):
    """The request never produced an HTTP response."""


class ServerRejectedError(AuthError):
    def __init__(self, status_code: int):
        super().__init__(f"login failed (status {status_code})")
        self.status_code = status_code


class ResponseDecodeError(AuthError):
    def __init__(self, detail: str = ""):
        super().__init__("login failed: unreadable server response")
        self.detail = detail


class SdkError(AuthError):
    """An identity provider reported an error during sign-in."""


class SignInCancelledError(AuthError):
    def __init__(self):
        super().__init__("User cancelled login")


class AttemptInProgressError(RuntimeError):
    """A login attempt is already validating or submitting."""
