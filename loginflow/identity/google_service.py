"""Google OAuth 2.0 device authorization sign-in."""
import logging

import httpx

from .device_flow import (
    AccessDenied,
    DeviceAuthorization,
    DeviceCodeExpired,
    DeviceFlowSignIn,
    SlowDown,
)

logger = logging.getLogger(__name__)


class GoogleSignIn(DeviceFlowSignIn):
    """Signs a user in with Google and resolves their profile."""

    name = "Google"

    DEVICE_CODE_URL = "https://oauth2.googleapis.com/device/code"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    SCOPES = "openid email profile"

    def __init__(self, client_id: str, client_secret: str = "", **kwargs):
        super().__init__(**kwargs)
        self.client_id = client_id
        self.client_secret = client_secret

    def start_device_flow(self) -> DeviceAuthorization:
        resp = self._http.post(
            self.DEVICE_CODE_URL,
            data={
                "client_id": self.client_id,
                "scope": self.SCOPES,
            },
        )
        resp.raise_for_status()
        data = resp.json()

        return DeviceAuthorization(
            device_code=data["device_code"],
            user_code=data["user_code"],
            verification_url=data.get("verification_url", ""),
            expires_in=data.get("expires_in", 1800),
            interval=data.get("interval", 5),
        )

    def poll_for_token(self, device_code: str) -> str | None:
        resp = self._http.post(
            self.TOKEN_URL,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "device_code": device_code,
                "grant_type": "urn:ietf:params:oauth:grant-type:device_code",
            },
        )
        data = resp.json()

        if "access_token" in data:
            return data["access_token"]

        error = data.get("error", "")
        if error == "authorization_pending":
            return None
        if error == "slow_down":
            raise SlowDown()
        if error == "access_denied":
            raise AccessDenied()
        if error == "expired_token":
            raise DeviceCodeExpired()

        # Terminal error
        error_desc = data.get("error_description", error)
        raise RuntimeError(f"Google token error: {error_desc}")

    def get_identity(self, access_token: str) -> dict:
        resp = self._http.get(
            self.USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        resp.raise_for_status()
        data = resp.json()

        return {
            "email": data.get("email", ""),
            "name": data.get("name", ""),
            "picture": data.get("picture", ""),
            "id": data.get("id", ""),
        }
