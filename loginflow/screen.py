"""Actions of the login screen.

``LoginScreen`` holds the text typed into the form and turns taps into
workflow calls. Field text is copied into each attempt when it starts,
so nothing downstream reads the live form.
"""
import logging
from concurrent.futures import Future
from enum import Enum
from typing import Optional

from loginflow.auth.errors import AttemptInProgressError
from loginflow.auth.schemas import AuthProvider
from loginflow.identity.base import PresentingSurface
from loginflow.presenter import NavigationPresenter
from loginflow.workflow import Attempt, LoginWorkflow

logger = logging.getLogger(__name__)


class FormField(str, Enum):
    USERNAME = "username"
    PASSWORD = "password"


class LoginScreen:
    """Form state and button handlers for the login view."""

    def __init__(self, workflow: LoginWorkflow, presenter: NavigationPresenter) -> None:
        self.workflow = workflow
        self.presenter = presenter
        self.username: Optional[str] = None
        self.password: Optional[str] = None
        self.focused_field: Optional[FormField] = None

    def available_providers(self) -> list:
        """Providers whose login buttons should be shown."""
        return self.workflow.gateway.available_providers()

    # ------------------------------------------------------------------
    # Buttons
    # ------------------------------------------------------------------

    def tap_login(self) -> Optional["Future[Attempt]"]:
        try:
            return self.workflow.submit(self.username, self.password)
        except AttemptInProgressError as e:
            logger.debug("Ignoring login tap: %s", e)
            return None

    def tap_login_with_google(self, surface: PresentingSurface) -> Optional["Future[Attempt]"]:
        return self._sign_in_with(AuthProvider.GOOGLE, surface)

    def tap_login_with_facebook(self, surface: PresentingSurface) -> Optional["Future[Attempt]"]:
        return self._sign_in_with(AuthProvider.FACEBOOK, surface)

    def tap_sign_up(self) -> None:
        self.presenter.go_to_sign_up_screen()

    def _sign_in_with(self, provider: AuthProvider, surface: PresentingSurface) -> Optional["Future[Attempt]"]:
        try:
            return self.workflow.sign_in_with(provider, surface)
        except AttemptInProgressError as e:
            logger.debug("Ignoring %s tap: %s", provider.value, e)
            return None

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def focus(self, field: FormField) -> None:
        self.focused_field = field

    def dismiss_keyboard(self) -> None:
        self.focused_field = None

    def press_return(self, field: FormField) -> Optional["Future[Attempt]"]:
        """Return key: move from username to password, submit from password."""
        if field is FormField.USERNAME:
            self.focus(FormField.PASSWORD)
            return None
        self.dismiss_keyboard()
        return self.tap_login()
