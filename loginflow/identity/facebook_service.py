"""Facebook device login sign-in.

Facebook reports device-flow state through Graph API error subcodes
rather than OAuth error strings.
"""
import logging

import httpx

from .device_flow import (
    DeviceAuthorization,
    DeviceCodeExpired,
    DeviceFlowSignIn,
    SlowDown,
)

logger = logging.getLogger(__name__)

PENDING_SUBCODE = 1349174
SLOW_DOWN_SUBCODE = 1349172
EXPIRED_SUBCODE = 1349152


class FacebookSignIn(DeviceFlowSignIn):
    """Signs a user in with Facebook and resolves their profile."""

    name = "Facebook"

    DEVICE_LOGIN_URL = "https://graph.facebook.com/v2.6/device/login"
    LOGIN_STATUS_URL = "https://graph.facebook.com/v2.6/device/login_status"
    ME_URL = "https://graph.facebook.com/me"
    SCOPES = "public_profile"

    def __init__(self, app_id: str, client_token: str, **kwargs):
        super().__init__(**kwargs)
        self.app_id = app_id
        self.client_token = client_token

    @property
    def _app_token(self) -> str:
        return f"{self.app_id}|{self.client_token}"

    def start_device_flow(self) -> DeviceAuthorization:
        resp = self._http.post(
            self.DEVICE_LOGIN_URL,
            data={"access_token": self._app_token, "scope": self.SCOPES},
        )
        resp.raise_for_status()
        data = resp.json()

        return DeviceAuthorization(
            device_code=data["code"],
            user_code=data["user_code"],
            verification_url=data.get("verification_uri", ""),
            expires_in=data.get("expires_in", 420),
            interval=data.get("interval", 5),
        )

    def poll_for_token(self, device_code: str) -> str | None:
        resp = self._http.post(
            self.LOGIN_STATUS_URL,
            data={"access_token": self._app_token, "code": device_code},
        )
        data = resp.json()

        if "access_token" in data:
            return data["access_token"]

        error = data.get("error") or {}
        subcode = error.get("error_subcode")
        if subcode == PENDING_SUBCODE:
            return None
        if subcode == SLOW_DOWN_SUBCODE:
            raise SlowDown()
        if subcode == EXPIRED_SUBCODE:
            raise DeviceCodeExpired()

        message = error.get("error_user_msg") or error.get("message") or "unknown error"
        raise RuntimeError(f"Facebook login error: {message}")

    def get_identity(self, access_token: str) -> dict:
        resp = self._http.get(
            self.ME_URL,
            params={"fields": "id,name,email", "access_token": access_token},
        )
        resp.raise_for_status()
        data = resp.json()

        return {
            "email": data.get("email", ""),
            "name": data.get("name", ""),
            "id": data.get("id", ""),
        }
