"""Single entry point for running one authentication attempt.

The gateway picks the backend for the requested ``AuthProvider``, runs it
on a worker pool, and reports exactly one ``AuthOutcome`` through the
caller's completion callback. The callback fires on a worker thread.
"""
import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional

from loginflow.identity.base import IdentitySDK, PresentingSurface, SignInResult, SignInStatus

from .direct_service import DirectAuthService
from .errors import AuthError, SdkError, SignInCancelledError
from .schemas import AuthOutcome, AuthProvider, AuthRequest

logger = logging.getLogger(__name__)

AuthCompletion = Callable[[AuthOutcome], None]


def _single_shot(completion: AuthCompletion, provider: AuthProvider) -> AuthCompletion:
    """Wrap ``completion`` so only the first outcome is delivered."""
    lock = threading.Lock()
    delivered = False

    def deliver(outcome: AuthOutcome) -> None:
        nonlocal delivered
        with lock:
            if delivered:
                logger.warning(
                    "Dropping extra %s outcome (%s) for a finished attempt",
                    provider.value,
                    outcome.status.value,
                )
                return
            delivered = True
        completion(outcome)

    return deliver


def outcome_from_sign_in(provider: AuthProvider, result: SignInResult) -> AuthOutcome:
    """Map an identity SDK result to an outcome.

    An error always wins: a result that carries both a user and an error
    is a failure.
    """
    if result.error:
        return AuthOutcome.failure(provider, SdkError(result.error).display_message)
    if result.status is SignInStatus.CANCELLED:
        return AuthOutcome.cancelled(provider, SignInCancelledError().display_message)
    if result.status is SignInStatus.SIGNED_IN:
        return AuthOutcome.success(provider, identity=result.user)
    return AuthOutcome.failure(provider, f"{provider.label} sign-in failed")


class AuthGateway:
    """Runs authentication attempts against the direct endpoint or an identity SDK.

    Attributes:
        direct: Service for first-party username/password logins.
        identity_providers: Configured identity SDKs keyed by provider.
    """

    def __init__(
        self,
        direct: DirectAuthService,
        identity_providers: Optional[Dict[AuthProvider, IdentitySDK]] = None,
        executor: Optional[Executor] = None,
        max_workers: int = 4,
    ) -> None:
        self.direct = direct
        self.identity_providers: Dict[AuthProvider, IdentitySDK] = dict(identity_providers or {})
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="loginflow-auth"
        )
        self._owns_executor = executor is None

    def available_providers(self) -> List[AuthProvider]:
        """Providers that can serve an attempt right now."""
        return [AuthProvider.DIRECT] + [
            p for p in (AuthProvider.GOOGLE, AuthProvider.FACEBOOK) if p in self.identity_providers
        ]

    def authenticate(
        self,
        provider: AuthProvider,
        completion: AuthCompletion,
        request: Optional[AuthRequest] = None,
        surface: Optional[PresentingSurface] = None,
    ) -> None:
        """Start one attempt; ``completion`` receives its outcome exactly once.

        Args:
            provider: Backend to authenticate against.
            completion: Called with the outcome, on a worker thread.
            request: Built request (direct provider only).
            surface: Screen to present the sign-in from (identity providers only).

        Raises:
            ValueError: A direct attempt was started without a request, or an
                identity-provider attempt without a surface.
        """
        if provider is AuthProvider.DIRECT and request is None:
            raise ValueError("Direct authentication requires a built request")
        if provider is not AuthProvider.DIRECT and surface is None:
            raise ValueError(f"{provider.label} sign-in requires a presenting surface")

        deliver = _single_shot(completion, provider)
        logger.info("Starting %s authentication", provider.value)
        self._executor.submit(self._run, provider, deliver, request, surface)

    def _run(
        self,
        provider: AuthProvider,
        deliver: AuthCompletion,
        request: Optional[AuthRequest],
        surface: Optional[PresentingSurface],
    ) -> None:
        try:
            if provider is AuthProvider.DIRECT:
                deliver(self._run_direct(request))
                return

            sdk = self.identity_providers.get(provider)
            if sdk is None:
                deliver(AuthOutcome.failure(provider, f"{provider.label} sign-in is not enabled"))
                return
            sdk.sign_in(surface, lambda result: deliver(outcome_from_sign_in(provider, result)))
        except Exception:  # pylint: disable=broad-except
            logger.exception("%s authentication crashed", provider.value)
            deliver(AuthOutcome.failure(provider, f"{provider.label} sign-in failed"))

    def _run_direct(self, request: AuthRequest) -> AuthOutcome:
        try:
            body = self.direct.send(request)
        except AuthError as e:
            return AuthOutcome.failure(AuthProvider.DIRECT, e.display_message)
        return AuthOutcome.success(AuthProvider.DIRECT, identity=body or None)

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
        self.direct.close()
        for sdk in self.identity_providers.values():
            sdk.close()
