"""Shared device-authorization sign-in loop.

Both identity adapters follow the same pattern:
1. Start device authorization (user gets a verification URL + code)
2. Poll for token completion, honouring the server's interval
3. Use the access token to fetch the user's profile
"""
import logging
import time
from abc import abstractmethod
from dataclasses import dataclass
from typing import Callable

import httpx

from .base import IdentitySDK, PresentingSurface, SignInCompletion, SignInResult

logger = logging.getLogger(__name__)

# Seconds added to the poll interval when the server asks us to slow down.
SLOW_DOWN_INCREMENT = 5


class SlowDown(Exception):
    """Polling faster than the server allows."""


class AccessDenied(Exception):
    """The user declined the sign-in on the verification page."""


class DeviceCodeExpired(Exception):
    """The device code expired before the user finished signing in."""


@dataclass(frozen=True)
class DeviceAuthorization:
    device_code: str
    user_code: str
    verification_url: str
    expires_in: int
    interval: int


class DeviceFlowSignIn(IdentitySDK):
    """Template for identity providers that support a device flow.

    Subclasses implement the three HTTP steps; this class drives the poll
    loop and reports a single ``SignInResult``.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._http = http_client or httpx.Client()
        self._owns_client = http_client is None
        self._sleep = sleep
        self._clock = clock

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    @abstractmethod
    def start_device_flow(self) -> DeviceAuthorization:
        pass

    @abstractmethod
    def poll_for_token(self, device_code: str) -> str | None:
        """Return the access token, or None while authorization is pending.

        Raises:
            SlowDown, AccessDenied, DeviceCodeExpired: Protocol signals.
            RuntimeError: Any other terminal provider error.
        """
        pass

    @abstractmethod
    def get_identity(self, access_token: str) -> dict:
        pass

    def sign_in(self, surface: PresentingSurface, completion: SignInCompletion) -> None:
        try:
            device = self.start_device_flow()
        except (httpx.HTTPError, RuntimeError, KeyError, ValueError) as e:
            logger.error(f"{self.name} device flow start failed: {e}")
            completion(SignInResult.failed(str(e) or f"{self.name} sign-in failed"))
            return

        surface.present_device_code(self.name, device.verification_url, device.user_code)
        try:
            result = self._wait_for_user(surface, device)
        finally:
            surface.dismiss()
        completion(result)

    def _wait_for_user(self, surface: PresentingSurface, device: DeviceAuthorization) -> SignInResult:
        deadline = self._clock() + device.expires_in
        interval = device.interval

        while True:
            if surface.is_cancelled():
                logger.info("%s sign-in cancelled by user", self.name)
                return SignInResult.cancelled()
            if self._clock() >= deadline:
                return SignInResult.failed(f"{self.name} sign-in code expired")

            self._sleep(interval)
            if surface.is_cancelled():
                logger.info("%s sign-in cancelled by user", self.name)
                return SignInResult.cancelled()

            try:
                access_token = self.poll_for_token(device.device_code)
            except SlowDown:
                interval += SLOW_DOWN_INCREMENT
                logger.debug("%s asked to slow down, interval now %ss", self.name, interval)
                continue
            except AccessDenied:
                return SignInResult.cancelled()
            except DeviceCodeExpired:
                return SignInResult.failed(f"{self.name} sign-in code expired")
            except (httpx.HTTPError, RuntimeError, ValueError) as e:
                logger.error(f"{self.name} poll failed: {e}")
                return SignInResult.failed(str(e))

            if access_token is None:
                continue

            try:
                identity = self.get_identity(access_token)
            except (httpx.HTTPError, KeyError, ValueError) as e:
                logger.error(f"{self.name} identity lookup failed: {e}")
                return SignInResult.failed(str(e) or f"{self.name} sign-in failed")
            return SignInResult.signed_in(identity)
