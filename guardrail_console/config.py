"""
ConsoleConfig - Deployment configuration.

Loaded once at startup (env vars > YAML > defaults) and injected into every
component. A missing base URL is the explicit UNCONFIGURED state: the console
still starts, but every network feature reports UnconfiguredError instead of
calling an empty URL.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

API_URL_ENV = "GUARDRAIL_API_URL"
LEGACY_API_URL_ENV = "NEXT_PUBLIC_API_URL"
CONFIG_PATH_ENV = "GUARDRAIL_CONFIG_PATH"

# field name -> environment variable
ENV_FIELDS: Dict[str, str] = {
    "request_timeout": "GUARDRAIL_REQUEST_TIMEOUT",
    "scan_timeout": "GUARDRAIL_SCAN_TIMEOUT",
    "chat_timeout": "GUARDRAIL_CHAT_TIMEOUT",
    "probe_timeout": "GUARDRAIL_PROBE_TIMEOUT",
    "wake_deadline": "GUARDRAIL_WAKE_DEADLINE",
    "wake_interval": "GUARDRAIL_WAKE_INTERVAL",
    "incident_limit": "GUARDRAIL_INCIDENT_LIMIT",
    "chat_user": "GUARDRAIL_CHAT_USER",
    "chat_refreshes_dashboard": "GUARDRAIL_CHAT_REFRESHES_DASHBOARD",
}


class ConfigState(str, Enum):
    """Whether a backend base URL is available."""
    CONFIGURED = "configured"
    UNCONFIGURED = "unconfigured"


class ConsoleConfig(BaseModel):
    """Guardrail console configuration."""

    api_url: Optional[str] = Field(default=None, description="Backend base URL")
    request_timeout: float = Field(default=15.0, gt=0, description="Seconds per dashboard read")
    scan_timeout: float = Field(default=60.0, gt=0, description="Seconds per scan (slow inference)")
    chat_timeout: float = Field(default=60.0, gt=0, description="Seconds per chat message")
    probe_timeout: float = Field(default=10.0, gt=0, description="Seconds per wake health probe")
    wake_deadline: float = Field(default=75.0, gt=0, description="Seconds before a wake gives up")
    wake_interval: float = Field(default=1.5, ge=0, description="Seconds between wake probes")
    incident_limit: int = Field(default=10, ge=1, le=1000, description="Incidents fetched per load")
    chat_user: str = Field(default="tester", description="User label sent with chat messages")
    chat_refreshes_dashboard: bool = Field(
        default=False,
        description="Refresh the dashboard after chat (for backends that log chat as incidents)",
    )

    @field_validator("api_url")
    @classmethod
    def _clean_api_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @property
    def state(self) -> ConfigState:
        return ConfigState.CONFIGURED if self.api_url else ConfigState.UNCONFIGURED

    @property
    def configured(self) -> bool:
        return self.state is ConfigState.CONFIGURED

    @classmethod
    def from_yaml(cls, path: str) -> "ConsoleConfig":
        """Load config from the `console:` section of a YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            logger.warning(f"Config file not found: {path}; using defaults")
            return cls()

        with open(config_path) as f:
            yaml_data = yaml.safe_load(f) or {}

        return cls(**(yaml_data.get("console") or {}))

    @classmethod
    def from_env(cls, base: Optional["ConsoleConfig"] = None) -> "ConsoleConfig":
        """Overlay environment variables on `base` (or on defaults)."""
        data: Dict[str, Any] = (base or cls()).model_dump()

        api_url = os.environ.get(API_URL_ENV) or os.environ.get(LEGACY_API_URL_ENV)
        if api_url is not None and api_url.strip():
            data["api_url"] = api_url

        for field_name, env_name in ENV_FIELDS.items():
            value = os.environ.get(env_name)
            if value is None or value.strip() == "":
                continue
            if field_name == "chat_refreshes_dashboard":
                data[field_name] = value.strip().lower() in ("true", "1", "yes", "on")
            else:
                data[field_name] = value.strip()

        return cls(**data)

    def unconfigured_warning(self) -> Optional[str]:
        """Operator-facing warning when no backend URL is set."""
        if self.configured:
            return None
        return (
            f"Set {API_URL_ENV} to the guardrail backend URL; "
            "network features are disabled until then."
        )


def load_dotenv_file(path: Optional[Path] = None) -> bool:
    """Load a .env file (default: ./.env) without overriding the real environment."""
    from dotenv import load_dotenv

    env_path = path or Path.cwd() / ".env"
    if not env_path.exists():
        logger.debug("No .env file found at %s", env_path)
        return False
    load_dotenv(env_path, override=False)
    logger.info(f"Loaded environment from: {env_path}")
    return True


def load_config(
    config_path: Optional[str] = None,
    api_url: Optional[str] = None,
    use_dotenv: bool = True,
) -> ConsoleConfig:
    """
    Build the console configuration.

    Priority: explicit api_url > env vars > YAML (config_path or
    GUARDRAIL_CONFIG_PATH) > defaults.
    """
    if use_dotenv:
        load_dotenv_file()

    path = config_path or os.environ.get(CONFIG_PATH_ENV)
    base = ConsoleConfig.from_yaml(path) if path else ConsoleConfig()
    config = ConsoleConfig.from_env(base)

    if api_url:
        config = config.model_copy(update={"api_url": api_url.strip().rstrip("/") or None})

    if not config.configured:
        logger.warning(config.unconfigured_warning())
    else:
        logger.info(f"Guardrail backend: {config.api_url}")
    return config
