"""Loginflow configuration.

Loads settings from two YAML files:
  * loginflow.settings.yaml  — non-secret configuration
  * loginflow.secrets.yaml   — identity-provider credentials (never committed)
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("loginflow.settings.yaml")
SECRETS_FILE  = Path("loginflow.secrets.yaml")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Secrets models
# ---------------------------------------------------------------------------


class GoogleSecrets(BaseModel):
    client_id:     Optional[str] = None
    client_secret: Optional[str] = None


class FacebookSecrets(BaseModel):
    app_id:       Optional[str] = None
    client_token: Optional[str] = None


class Secrets(BaseModel):
    google:   GoogleSecrets   = Field(default_factory=GoogleSecrets)
    facebook: FacebookSecrets = Field(default_factory=FacebookSecrets)


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class LoggingSettings(BaseModel):
    level: str = "info"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"Unknown log level: {value}")
        return value.lower()


class DirectAuthSettings(BaseModel):
    endpoint_url: str = "https://someurl.com"


class GoogleSignInSettings(BaseModel):
    enabled: bool = False


class FacebookSignInSettings(BaseModel):
    enabled: bool = False


class WorkerSettings(BaseModel):
    """Pool that runs gateway work off the UI context."""
    max_workers: int = Field(default=4, ge=1)


class LoginFlowConfig(BaseModel):
    logging:          LoggingSettings        = Field(default_factory=LoggingSettings)
    direct_auth:      DirectAuthSettings     = Field(default_factory=DirectAuthSettings)
    google_sign_in:   GoogleSignInSettings   = Field(default_factory=GoogleSignInSettings)
    facebook_sign_in: FacebookSignInSettings = Field(default_factory=FacebookSignInSettings)
    workers:          WorkerSettings         = Field(default_factory=WorkerSettings)
    secrets:          Secrets                = Field(default_factory=Secrets)

    @property
    def google_configured(self) -> bool:
        return self.google_sign_in.enabled and bool(self.secrets.google.client_id)

    @property
    def facebook_configured(self) -> bool:
        return (
            self.facebook_sign_in.enabled
            and bool(self.secrets.facebook.app_id)
            and bool(self.secrets.facebook.client_token)
        )


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    secrets_path: Optional[Path] = None,
) -> LoginFlowConfig:
    """Load and merge settings + secrets into a single *LoginFlowConfig*."""
    settings_data = _load_yaml(Path(settings_path) if settings_path else SETTINGS_FILE)
    secrets_data  = _load_yaml(Path(secrets_path) if secrets_path else SECRETS_FILE)

    # Merge: secrets live under the "secrets" key in LoginFlowConfig
    settings_data["secrets"] = secrets_data

    config = LoginFlowConfig(**settings_data)
    logger.info(
        "Config loaded (endpoint=%s, google=%s, facebook=%s)",
        config.direct_auth.endpoint_url,
        config.google_configured,
        config.facebook_configured,
    )
    return config


@lru_cache(maxsize=1)
def get_config() -> LoginFlowConfig:
    """Return the process-wide config, loading it on first use."""
    return load_config()
