"""
Settings Manager for the storefront test harness.

Loads configuration once per process from ``config/harness.yaml`` and overlays
environment variables (a ``.env`` file is honoured). A missing or invalid
required setting is a ConfigurationError raised at startup, never per test.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from storefront_harness.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_FILE = PROJECT_ROOT / "config" / "harness.yaml"


class BrowserSettings(BaseModel):
    """Browser launch and timeout settings."""

    model_config = ConfigDict(extra="forbid")

    timeout_ms: int = Field(..., gt=0, description="Default timeout for page operations")
    headless: bool = Field(True, description="Run the browser without a window")
    slow_mo_ms: int = Field(0, ge=0, description="Pause before each browser action")
    window_width: int = Field(1920, gt=0)
    window_height: int = Field(1080, gt=0)
    ignore_https_errors: bool = Field(True, description="Accept invalid TLS certificates")
    driver_path: str | None = Field(None, description="chromedriver executable, PATH if unset")
    binary_location: str | None = Field(None, description="Chrome binary, auto-detected if unset")
    remote_url: str | None = Field(
        None, description="Remote WebDriver URL instead of local chromedriver"
    )


class RetrySettings(BaseModel):
    """Retry policy for flaky browser actions."""

    model_config = ConfigDict(extra="forbid")

    count: int = Field(..., ge=1, description="Attempts per action, including the first")
    delay_ms: int = Field(..., ge=0, description="Fixed delay between attempts")


class NetworkSettings(BaseModel):
    """Network monitoring settings."""

    model_config = ConfigDict(extra="forbid")

    ignored_error_patterns: list[str] = Field(
        ..., description="Regular expressions for URLs and messages that are known noise"
    )

    @field_validator("ignored_error_patterns", mode="before")
    @classmethod
    def split_patterns(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        return value


class HarnessSettings(BaseModel):
    """Top-level harness configuration."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(..., min_length=1, description="Storefront base URL")
    browser: BrowserSettings
    retry: RetrySettings
    network: NetworkSettings
    log_level: str = Field("INFO", description="Root log level for test runs")
    credentials_file: str = Field(
        "config/credentials.yaml", description="Credentials file, relative to the project root"
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def credentials_path(self) -> Path:
        path = Path(self.credentials_file)
        return path if path.is_absolute() else PROJECT_ROOT / path


# Environment variable -> (section, key); section None means top level
ENV_MAPPINGS = {
    "HARNESS_BASE_URL": (None, "base_url"),
    "HARNESS_LOG_LEVEL": (None, "log_level"),
    "HARNESS_CREDENTIALS_FILE": (None, "credentials_file"),
    "HARNESS_HEADLESS": ("browser", "headless"),
    "HARNESS_SLOW_MO_MS": ("browser", "slow_mo_ms"),
    "HARNESS_TIMEOUT_MS": ("browser", "timeout_ms"),
    "HARNESS_DRIVER_PATH": ("browser", "driver_path"),
    "HARNESS_REMOTE_URL": ("browser", "remote_url"),
    "HARNESS_RETRY_COUNT": ("retry", "count"),
    "HARNESS_RETRY_DELAY_MS": ("retry", "delay_ms"),
    "HARNESS_IGNORED_ERROR_PATTERNS": ("network", "ignored_error_patterns"),
}


def _read_config_file(config_file: Path) -> dict[str, Any]:
    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed configuration file {config_file}: {e}") from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"Configuration file {config_file} must contain a mapping")
    return config_dict


def _apply_env_overrides(config_dict: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    for env_key, (section, key) in ENV_MAPPINGS.items():
        value = environ.get(env_key)
        if value is None or value == "":
            continue
        if section is None:
            config_dict[key] = value
        else:
            target = config_dict.get(section)
            if not isinstance(target, dict):
                target = {}
                config_dict[section] = target
            target[key] = value
        logger.debug(f"Setting {section + '.' if section else ''}{key} taken from {env_key}")
    return config_dict


def load_settings(
    config_file: str | Path | None = None, environ: dict[str, str] | None = None
) -> HarnessSettings:
    """
    Load harness settings from YAML and environment variables.

    Args:
        config_file: YAML file path; defaults to $HARNESS_CONFIG or config/harness.yaml
        environ: Environment mapping; defaults to os.environ after loading .env

    Returns:
        Validated HarnessSettings

    Raises:
        ConfigurationError: If the file is missing or a required setting is absent or invalid
    """
    if environ is None:
        load_dotenv()
        environ = dict(os.environ)

    if config_file is None:
        config_file = environ.get("HARNESS_CONFIG") or DEFAULT_CONFIG_FILE
    config_file = Path(config_file)

    config_dict = _apply_env_overrides(_read_config_file(config_file), environ)

    try:
        settings = HarnessSettings(**config_dict)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        logger.error(f"Invalid configuration in {config_file}: {problems}")
        raise ConfigurationError(f"Invalid configuration in {config_file}: {problems}") from e

    logger.info(f"Configuration loaded successfully from {config_file}")
    return settings


_settings: HarnessSettings | None = None


def get_settings() -> HarnessSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings."""
    global _settings
    _settings = None
