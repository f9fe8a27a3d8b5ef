"""Shared test fixtures and doubles for loginflow tests."""
import threading
from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest

from loginflow.auth.direct_service import DirectAuthService
from loginflow.auth.gateway import AuthGateway
from loginflow.dispatch import InlineDispatcher
from loginflow.identity.base import IdentitySDK, PresentingSurface, SignInResult
from loginflow.presenter import NavigationPresenter
from loginflow.workflow import LoginWorkflow

ENDPOINT = "https://login.example.test/auth"


class RecordingPresenter(NavigationPresenter):
    """Records every navigation call and the thread it arrived on."""

    def __init__(self):
        self.errors = []
        self.home_calls = 0
        self.sign_up_calls = 0
        self.threads = []

    def show_error(self, message):
        self.threads.append(threading.get_ident())
        self.errors.append(message)

    def go_to_home_screen(self):
        self.threads.append(threading.get_ident())
        self.home_calls += 1

    def go_to_sign_up_screen(self):
        self.sign_up_calls += 1


class FakeSurface(PresentingSurface):
    def __init__(self, cancel_after_presented=False):
        self.presented = []
        self.dismissed = False
        self.cancelled = False
        self._cancel_after_presented = cancel_after_presented

    def present_device_code(self, provider_name, verification_url, user_code):
        self.presented.append((provider_name, verification_url, user_code))
        if self._cancel_after_presented:
            self.cancelled = True

    def dismiss(self):
        self.dismissed = True

    def is_cancelled(self):
        return self.cancelled


class FakeSDK(IdentitySDK):
    """Identity SDK that reports canned results, optionally after a gate opens."""

    name = "Fake"

    def __init__(self, *results, gate=None):
        self.results = results or (SignInResult.signed_in({"id": "1"}),)
        self.gate = gate
        self.calls = 0

    def sign_in(self, surface, completion):
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        for result in self.results:
            completion(result)


def mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=2)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def make_workflow(presenter, executor):
    """Build a workflow around a mocked HTTP handler and optional identity SDKs."""

    def _make(handler=None, identity_providers=None, dispatcher=None):
        handler = handler or (lambda request: httpx.Response(200))
        gateway = AuthGateway(
            direct=DirectAuthService(http_client=mock_client(handler)),
            identity_providers=identity_providers,
            executor=executor,
        )
        return LoginWorkflow(
            gateway=gateway,
            presenter=presenter,
            dispatcher=dispatcher if dispatcher is not None else InlineDispatcher(),
            endpoint_url=ENDPOINT,
        )

    return _make
