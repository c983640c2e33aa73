"""Container settings and environment detection.

Settings are read from ``MORTAR_*`` environment variables, and any field can
also be passed explicitly:

    MORTAR_ERROR_MODE   strict | fallback        (default: strict)
    MORTAR_PRODUCTION   true | false             (default: unset)
    MORTAR_ENV          production | prod | development | dev | local | test | testing
    MORTAR_MAX_DEPTH    positive integer         (default: 64)
"""

import logging
from enum import Enum
from typing import Any, Optional

from pydantic import PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["ErrorMode", "Settings", "detect_production"]

logger = logging.getLogger(__name__)

PRODUCTION_NAMES = frozenset({"production", "prod"})
DEVELOPMENT_NAMES = frozenset({"development", "dev", "local", "test", "testing"})


class ErrorMode(Enum):
    """How prototype-mode builds report failures."""

    STRICT = "strict"      # Raise to the caller
    FALLBACK = "fallback"  # Return an ErrorComponent instead


class Settings(BaseSettings):
    """Container configuration.

    Attributes:
        error_mode: Whether prototype builds raise or fall back to an error component.
        production: Explicit production flag; ``None`` defers to ``env``.
        env: Deployment environment name, consulted when ``production`` is unset.
        max_depth: Maximum number of nested resolutions on one stack.

    Raises:
        pydantic.ValidationError: If a value, explicit or from the environment, is invalid.
    """

    model_config = SettingsConfigDict(
        env_prefix="MORTAR_",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    error_mode: ErrorMode = ErrorMode.STRICT
    production: Optional[bool] = None
    env: Optional[str] = None
    max_depth: PositiveInt = 64

    @field_validator("error_mode", mode="before")
    @classmethod
    def _normalise_error_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("env")
    @classmethod
    def _normalise_env(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip().lower() or None

    def is_production(self) -> bool:
        return detect_production(self.production, self.env)


def detect_production(explicit: Optional[bool] = None, env: Optional[str] = None) -> bool:
    """Decide whether error output must be production-safe.

    An explicit flag wins, then the environment name (``MORTAR_ENV`` when
    ``env`` is not given). Without either the answer is production-safe,
    whether or not the process is interactive.
    """
    if explicit is not None:
        return explicit
    if env is None:
        env = Settings().env
    if not env:
        return True

    env = env.strip().lower()
    if env in PRODUCTION_NAMES:
        return True
    if env in DEVELOPMENT_NAMES:
        return False
    logger.warning("Ignoring unrecognised MORTAR_ENV value %r", env)
    return True
