"""Loginflow composition root.

Builds a ready-to-use ``LoginScreen`` from configuration:

    - auth: validation, request building, direct login, provider gateway
    - identity: Google and Facebook device sign-in
    - workflow: attempt state machine and UI-context marshaling
    - screen: login view actions

Usage:
    from loginflow.main import build_login_screen

    screen = build_login_screen(presenter, QueueDispatcher())
"""
import logging
from typing import Dict, Optional

import httpx

from loginflow.auth.direct_service import DirectAuthService
from loginflow.auth.gateway import AuthGateway
from loginflow.auth.schemas import AuthProvider
from loginflow.config import LoginFlowConfig, get_config
from loginflow.dispatch import UIDispatcher
from loginflow.identity.base import IdentitySDK
from loginflow.identity.facebook_service import FacebookSignIn
from loginflow.identity.google_service import GoogleSignIn
from loginflow.presenter import NavigationPresenter
from loginflow.screen import LoginScreen
from loginflow.workflow import LoginWorkflow

logger = logging.getLogger(__name__)

# httpx/httpcore log every connection and TLS handshake.
_NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
)


def configure_logging(config: LoginFlowConfig) -> None:
    """Set up root logging and apply the configured level."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    for _noisy in _NOISY_LOGGERS:
        logging.getLogger(_noisy).setLevel(logging.WARNING)

    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())


def build_identity_providers(
    config: LoginFlowConfig,
    http_client: Optional[httpx.Client] = None,
) -> Dict[AuthProvider, IdentitySDK]:
    """Create identity SDKs that are both enabled and configured."""
    providers: Dict[AuthProvider, IdentitySDK] = {}

    if config.google_configured:
        providers[AuthProvider.GOOGLE] = GoogleSignIn(
            client_id=config.secrets.google.client_id,
            client_secret=config.secrets.google.client_secret or "",
            http_client=http_client,
        )
    elif config.google_sign_in.enabled:
        logger.warning("Google sign-in is enabled but client_id is not configured")

    if config.facebook_configured:
        providers[AuthProvider.FACEBOOK] = FacebookSignIn(
            app_id=config.secrets.facebook.app_id,
            client_token=config.secrets.facebook.client_token,
            http_client=http_client,
        )
    elif config.facebook_sign_in.enabled:
        logger.warning("Facebook sign-in is enabled but app_id/client_token are not configured")

    return providers


def build_login_screen(
    presenter: NavigationPresenter,
    dispatcher: UIDispatcher,
    config: Optional[LoginFlowConfig] = None,
    http_client: Optional[httpx.Client] = None,
) -> LoginScreen:
    """Wire config, gateway, workflow and screen together."""
    config = config or get_config()
    configure_logging(config)

    gateway = AuthGateway(
        direct=DirectAuthService(http_client=http_client),
        identity_providers=build_identity_providers(config, http_client=http_client),
        max_workers=config.workers.max_workers,
    )
    workflow = LoginWorkflow(
        gateway=gateway,
        presenter=presenter,
        dispatcher=dispatcher,
        endpoint_url=config.direct_auth.endpoint_url,
    )
    logger.info(
        "Login screen ready (providers=%s)",
        ", ".join(p.value for p in gateway.available_providers()),
    )
    return LoginScreen(workflow=workflow, presenter=presenter)
