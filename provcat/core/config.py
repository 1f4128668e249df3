"""Configuration management for provcat.

Settings are layered: built-in defaults, then the optional user config file
at ``~/.provcat/config.json``, then environment variables. Callers such as the
CLI may apply explicit overrides on top via ``load_settings(**overrides)``.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from provcat.utils.log import get_logger
from provcat.utils.user_agent import build_user_agent


logger = get_logger()

DEFAULT_CATALOG_URL = "https://models.dev/api.json"
DEFAULT_TIMEOUT_SEC = 30.0

CATALOG_URL_ENV = "PROVCAT_CATALOG_URL"
TIMEOUT_ENV = "PROVCAT_TIMEOUT"


class CatalogSettings(BaseModel):
    """Where and how the provider catalog is fetched."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str = DEFAULT_CATALOG_URL
    # Seconds; applies to connect and read.
    timeout: float = Field(default=DEFAULT_TIMEOUT_SEC, gt=0)
    user_agent: str = Field(default_factory=build_user_agent)

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        value = (value or "").strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Catalog URL must be http(s), got '{value}'")
        try:
            httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid catalog URL '{value}': {e}") from e
        return value


def config_path() -> Path:
    """Location of the optional user config file."""
    return Path.home() / ".provcat" / "config.json"


def _load_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug("[config] Config file not found; using defaults", extra={"path": str(path)})
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(
            "[config] Error loading config file: %s: %s",
            type(e).__name__,
            e,
            extra={"path": str(path)},
        )
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "[config] Config file root must be an object; ignoring it",
            extra={"path": str(path)},
        )
        return {}
    logger.debug("[config] Loaded config file", extra={"path": str(path), "keys": sorted(data)})
    return data


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    url = os.environ.get(CATALOG_URL_ENV, "").strip()
    if url:
        overrides["url"] = url
    timeout = os.environ.get(TIMEOUT_ENV, "").strip()
    if timeout:
        try:
            overrides["timeout"] = float(timeout)
        except ValueError:
            logger.warning("[config] Ignoring non-numeric %s=%r", TIMEOUT_ENV, timeout)
    return overrides


def load_settings(path: Optional[Path] = None, **overrides: Any) -> CatalogSettings:
    """Build settings from the config file, environment and explicit overrides.

    A config file that fails validation is logged and skipped rather than
    aborting; invalid environment values or explicit overrides raise
    ``pydantic.ValidationError``.
    """
    file_values = _load_config_file(path or config_path())
    if file_values:
        try:
            CatalogSettings(**file_values)
        except ValidationError as e:
            logger.warning(
                "[config] Invalid config file values; ignoring them: %s",
                e,
                extra={"path": str(path or config_path())},
            )
            file_values = {}

    merged: Dict[str, Any] = {**file_values, **_env_overrides()}
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return CatalogSettings(**merged)


__all__ = [
    "CATALOG_URL_ENV",
    "CatalogSettings",
    "DEFAULT_CATALOG_URL",
    "DEFAULT_TIMEOUT_SEC",
    "TIMEOUT_ENV",
    "config_path",
    "load_settings",
]
