"""Third-party identity providers (Google, Facebook).

Provides sign-in via device authorization flows:
- Google OAuth 2.0 (device flow)
- Facebook Login for Devices

Services:
    - GoogleSignIn: Google device authorization.
    - FacebookSignIn: Facebook device login.
"""
from .base import IdentitySDK, PresentingSurface, SignInResult, SignInStatus
from .facebook_service import FacebookSignIn
from .google_service import GoogleSignIn

__all__ = [
    "FacebookSignIn",
    "GoogleSignIn",
    "IdentitySDK",
    "PresentingSurface",
    "SignInResult",
    "SignInStatus",
]
