"""Login workflow: validate, build, authenticate, then navigate or show an error.

One attempt runs at a time:

    IDLE -> VALIDATING -> SUBMITTING -> COMPLETED

Identity-provider attempts have no form to validate and go straight from
IDLE to SUBMITTING. COMPLETED is terminal for the attempt and accepts the
next one. Every presenter call is posted through the UI dispatcher.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from loginflow.auth import request_builder
from loginflow.auth.errors import AttemptInProgressError, ValidationError
from loginflow.auth.gateway import AuthGateway
from loginflow.auth.schemas import AuthOutcome, AuthProvider, Credentials
from loginflow.auth.validation import validate
from loginflow.dispatch import UIDispatcher
from loginflow.identity.base import PresentingSurface
from loginflow.presenter import NavigationPresenter

logger = logging.getLogger(__name__)


class AttemptState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    COMPLETED = "completed"


@dataclass
class Attempt:
    """Record of one login attempt, resolved once its effect has run on the UI context.

    Attributes:
        provider: Backend used for the attempt.
        state: Current state; COMPLETED once resolved.
        outcome: Gateway outcome, if the attempt reached the network.
        validation_error: Form error, if the attempt stopped at validation.
        message: Error text shown to the user, or None after a success.
    """
    provider: AuthProvider
    state: AttemptState = AttemptState.IDLE
    outcome: Optional[AuthOutcome] = None
    validation_error: Optional[ValidationError] = None
    message: Optional[str] = None
    future: "Future[Attempt]" = field(default_factory=Future, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.outcome is not None and self.outcome.succeeded


class LoginWorkflow:
    """Orchestrates one login attempt at a time.

    Collaborators are injected so each can be replaced with a test double.
    """

    def __init__(
        self,
        gateway: AuthGateway,
        presenter: NavigationPresenter,
        dispatcher: UIDispatcher,
        endpoint_url: str,
        validator: Callable[[Optional[str], Optional[str]], Credentials] = validate,
    ) -> None:
        self.gateway = gateway
        self.presenter = presenter
        self.dispatcher = dispatcher
        self.endpoint_url = endpoint_url
        self._validator = validator
        self._lock = threading.Lock()
        self._current: Optional[Attempt] = None

    @property
    def state(self) -> AttemptState:
        with self._lock:
            return self._current.state if self._current else AttemptState.IDLE

    @property
    def in_flight(self) -> bool:
        return self.state in (AttemptState.VALIDATING, AttemptState.SUBMITTING)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def submit(self, username: Optional[str], password: Optional[str]) -> "Future[Attempt]":
        """Start a direct username/password attempt.

        Raises:
            AttemptInProgressError: Another attempt has not completed yet.
        """
        attempt = self._begin(AuthProvider.DIRECT, AttemptState.VALIDATING)
        try:
            credentials = self._validator(username, password)
        except ValidationError as e:
            logger.info("Login form rejected: %s", e.display_message)
            attempt.validation_error = e
            self._finish(attempt, e.display_message)
            return attempt.future

        request = request_builder.build(credentials, self.endpoint_url)
        self._set_state(attempt, AttemptState.SUBMITTING)
        self._authenticate(attempt, request=request)
        return attempt.future

    def sign_in_with(self, provider: AuthProvider, surface: PresentingSurface) -> "Future[Attempt]":
        """Start an identity-provider attempt presented from ``surface``.

        Raises:
            AttemptInProgressError: Another attempt has not completed yet.
            ValueError: ``provider`` is not an identity provider.
        """
        if provider is AuthProvider.DIRECT:
            raise ValueError("Use submit() for direct logins")
        attempt = self._begin(provider, AttemptState.SUBMITTING)
        self._authenticate(attempt, surface=surface)
        return attempt.future

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin(self, provider: AuthProvider, first_state: AttemptState) -> Attempt:
        with self._lock:
            current = self._current
            if current is not None and current.state in (AttemptState.VALIDATING, AttemptState.SUBMITTING):
                raise AttemptInProgressError(
                    f"{current.provider.value} login is still {current.state.value}"
                )
            attempt = Attempt(provider=provider, state=first_state)
            self._current = attempt
        logger.debug("Attempt started (provider=%s)", provider.value)
        return attempt

    def _set_state(self, attempt: Attempt, state: AttemptState) -> None:
        with self._lock:
            attempt.state = state

    def _authenticate(self, attempt: Attempt, **kwargs) -> None:
        try:
            self.gateway.authenticate(
                attempt.provider,
                completion=lambda outcome: self._on_outcome(attempt, outcome),
                **kwargs,
            )
        except Exception:
            # Nothing was scheduled; release the guard before propagating.
            self._set_state(attempt, AttemptState.COMPLETED)
            attempt.future.cancel()
            raise

    def _on_outcome(self, attempt: Attempt, outcome: AuthOutcome) -> None:
        # Worker thread: record the outcome, then hop to the UI context.
        attempt.outcome = outcome
        logger.info(
            "%s login finished: %s", outcome.provider.value, outcome.status.value
        )
        self._finish(attempt, None if outcome.succeeded else outcome.reason)

    def _finish(self, attempt: Attempt, message: Optional[str]) -> None:
        attempt.message = message
        self.dispatcher.post(self._present, attempt)

    def _present(self, attempt: Attempt) -> None:
        try:
            if attempt.message is None:
                self.presenter.go_to_home_screen()
            else:
                self.presenter.show_error(attempt.message)
        finally:
            self._set_state(attempt, AttemptState.COMPLETED)
            attempt.future.set_result(attempt)
