"""Tests for the direct login service and the auth gateway."""
import json
import threading
from concurrent.futures import Future

import httpx
import pytest
from conftest import ENDPOINT, FakeSDK, FakeSurface, mock_client

from loginflow.auth import request_builder
from loginflow.auth.direct_service import DirectAuthService
from loginflow.auth.errors import ResponseDecodeError, ServerRejectedError, TransportError
from loginflow.auth.gateway import AuthGateway, outcome_from_sign_in
from loginflow.auth.schemas import AuthOutcome, AuthProvider, Credentials, OutcomeStatus
from loginflow.identity.base import SignInResult, SignInStatus
from loginflow.identity.facebook_service import FacebookSignIn
from loginflow.identity.google_service import GoogleSignIn


def _request():
    return request_builder.build(Credentials("alice", "hunter22"), ENDPOINT)


def _run(gateway, provider, **kwargs) -> AuthOutcome:
    future: Future = Future()
    gateway.authenticate(provider, completion=future.set_result, **kwargs)
    return future.result(timeout=5)


class TestDirectAuthService:
    """Tests for DirectAuthService.send()."""

    def test_posts_json_body_to_endpoint(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200)

        DirectAuthService(http_client=mock_client(handler)).send(_request())

        assert seen == {
            "method": "POST",
            "url": ENDPOINT,
            "content_type": "application/json",
            "body": {"username": "alice", "password": "hunter22"},
        }

    def test_returns_json_body_on_200(self):
        service = DirectAuthService(http_client=mock_client(lambda r: httpx.Response(200, json={"user": "alice"})))
        assert service.send(_request()) == {"user": "alice"}

    def test_empty_200_is_accepted(self):
        service = DirectAuthService(http_client=mock_client(lambda r: httpx.Response(200)))
        assert service.send(_request()) == {}

    @pytest.mark.parametrize("status", [201, 204, 301, 400, 401, 403, 500, 503])
    def test_non_200_is_rejected(self, status):
        service = DirectAuthService(http_client=mock_client(lambda r: httpx.Response(status)))
        with pytest.raises(ServerRejectedError) as exc_info:
            service.send(_request())
        assert exc_info.value.status_code == status
        assert str(status) in exc_info.value.display_message

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = DirectAuthService(http_client=mock_client(handler))
        with pytest.raises(TransportError) as exc_info:
            service.send(_request())
        assert "connection refused" in exc_info.value.display_message

    def test_undecodable_json_body(self):
        def handler(request):
            return httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})

        service = DirectAuthService(http_client=mock_client(handler))
        with pytest.raises(ResponseDecodeError):
            service.send(_request())


class TestOutcomeFromSignIn:
    """Tests for mapping identity SDK results to outcomes."""

    def test_signed_in_is_success(self):
        outcome = outcome_from_sign_in(AuthProvider.GOOGLE, SignInResult.signed_in({"id": "42"}))
        assert outcome.status is OutcomeStatus.SUCCESS
        assert outcome.identity == {"id": "42"}

    def test_cancelled(self):
        outcome = outcome_from_sign_in(AuthProvider.FACEBOOK, SignInResult.cancelled())
        assert outcome.status is OutcomeStatus.CANCELLED
        assert outcome.reason == "User cancelled login"

    def test_failed(self):
        outcome = outcome_from_sign_in(AuthProvider.GOOGLE, SignInResult.failed("boom"))
        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.reason == "boom"

    def test_error_alongside_user_is_failure(self):
        result = SignInResult(status=SignInStatus.SIGNED_IN, user={"id": "42"}, error="token revoked")
        outcome = outcome_from_sign_in(AuthProvider.GOOGLE, result)
        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.reason == "token revoked"


class TestAuthGateway:
    """Tests for AuthGateway.authenticate()."""

    def test_direct_success(self, executor):
        gateway = AuthGateway(DirectAuthService(mock_client(lambda r: httpx.Response(200))), executor=executor)
        outcome = _run(gateway, AuthProvider.DIRECT, request=_request())
        assert outcome.succeeded
        assert outcome.provider is AuthProvider.DIRECT

    def test_direct_rejection_becomes_failure(self, executor):
        gateway = AuthGateway(DirectAuthService(mock_client(lambda r: httpx.Response(401))), executor=executor)
        outcome = _run(gateway, AuthProvider.DIRECT, request=_request())
        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.reason == "login failed (status 401)"

    def test_completion_runs_on_worker_thread(self, executor):
        gateway = AuthGateway(DirectAuthService(mock_client(lambda r: httpx.Response(200))), executor=executor)
        threads: Future = Future()
        gateway.authenticate(
            AuthProvider.DIRECT,
            completion=lambda outcome: threads.set_result(threading.get_ident()),
            request=_request(),
        )
        assert threads.result(timeout=5) != threading.get_ident()

    def test_direct_without_request_raises(self, executor):
        gateway = AuthGateway(DirectAuthService(mock_client(lambda r: httpx.Response(200))), executor=executor)
        with pytest.raises(ValueError):
            gateway.authenticate(AuthProvider.DIRECT, completion=lambda outcome: None)

    def test_identity_without_surface_raises(self, executor):
        gateway = AuthGateway(
            DirectAuthService(mock_client(lambda r: httpx.Response(200))),
            identity_providers={AuthProvider.GOOGLE: FakeSDK()},
            executor=executor,
        )
        with pytest.raises(ValueError):
            gateway.authenticate(AuthProvider.GOOGLE, completion=lambda outcome: None)

    def test_disabled_provider_fails_without_network(self, executor):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        gateway = AuthGateway(DirectAuthService(mock_client(handler)), executor=executor)
        outcome = _run(gateway, AuthProvider.FACEBOOK, surface=FakeSurface())

        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.reason == "Facebook sign-in is not enabled"
        assert calls == []

    def test_only_first_sdk_result_is_delivered(self, executor):
        sdk = FakeSDK(SignInResult.failed("first"), SignInResult.signed_in({"id": "1"}))
        gateway = AuthGateway(
            DirectAuthService(mock_client(lambda r: httpx.Response(200))),
            identity_providers={AuthProvider.GOOGLE: sdk},
            executor=executor,
        )
        delivered = []
        done = threading.Event()

        def completion(outcome):
            delivered.append(outcome)
            done.set()

        gateway.authenticate(AuthProvider.GOOGLE, completion=completion, surface=FakeSurface())
        assert done.wait(timeout=5)
        executor.shutdown(wait=True)

        assert len(delivered) == 1
        assert delivered[0].reason == "first"

    def test_sdk_crash_becomes_failure(self, executor):
        class CrashingSDK(FakeSDK):
            def sign_in(self, surface, completion):
                raise RuntimeError("sdk exploded")

        gateway = AuthGateway(
            DirectAuthService(mock_client(lambda r: httpx.Response(200))),
            identity_providers={AuthProvider.GOOGLE: CrashingSDK()},
            executor=executor,
        )
        outcome = _run(gateway, AuthProvider.GOOGLE, surface=FakeSurface())
        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.reason == "Google sign-in failed"

    def test_malformed_provider_reply_is_not_shown_raw(self, executor):
        def handler(request):
            if str(request.url) == FacebookSignIn.DEVICE_LOGIN_URL:
                return httpx.Response(
                    200,
                    json={"code": "c", "user_code": "U", "verification_uri": "v", "interval": 0},
                )
            return httpx.Response(200, json=["unexpected"])

        sdk = FacebookSignIn(app_id="app", client_token="tok", http_client=mock_client(handler), sleep=lambda s: None)
        gateway = AuthGateway(
            DirectAuthService(mock_client(lambda r: httpx.Response(200))),
            identity_providers={AuthProvider.FACEBOOK: sdk},
            executor=executor,
        )
        outcome = _run(gateway, AuthProvider.FACEBOOK, surface=FakeSurface())
        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.reason == "Facebook sign-in failed"
        assert "attribute" not in outcome.reason

    def test_available_providers(self, executor):
        gateway = AuthGateway(
            DirectAuthService(mock_client(lambda r: httpx.Response(200))),
            identity_providers={AuthProvider.FACEBOOK: FakeSDK()},
            executor=executor,
        )
        assert gateway.available_providers() == [AuthProvider.DIRECT, AuthProvider.FACEBOOK]


class TestShutdown:
    """Tests for releasing HTTP clients and workers."""

    def test_shared_client_is_left_open(self):
        shared = mock_client(lambda r: httpx.Response(200))
        gateway = AuthGateway(
            DirectAuthService(http_client=shared),
            identity_providers={AuthProvider.GOOGLE: GoogleSignIn(client_id="cid", http_client=shared)},
        )

        gateway.shutdown()

        assert not shared.is_closed

    def test_owned_clients_are_closed(self):
        direct = DirectAuthService()
        google = GoogleSignIn(client_id="cid")
        facebook = FacebookSignIn(app_id="app", client_token="tok")
        gateway = AuthGateway(
            direct,
            identity_providers={AuthProvider.GOOGLE: google, AuthProvider.FACEBOOK: facebook},
        )

        gateway.shutdown()

        assert direct._client.is_closed
        assert google._http.is_closed
        assert facebook._http.is_closed

    def test_sdk_without_resources_can_be_closed(self, executor):
        gateway = AuthGateway(
            DirectAuthService(mock_client(lambda r: httpx.Response(200))),
            identity_providers={AuthProvider.GOOGLE: FakeSDK()},
            executor=executor,
        )
        gateway.shutdown()
