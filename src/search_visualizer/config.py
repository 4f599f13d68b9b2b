# config.py
# Environment-driven settings. Values may come from the process environment
# or a local .env file. Nothing here touches the engine directly — callers
# hand the resulting PacingPolicy to the stepper.

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from search_visualizer.models import PacingPolicy

ENV_PREFIX = "SEARCH_VIZ_"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when an environment value cannot be turned into a setting."""


class Settings(BaseModel):
    """Resolved runtime settings."""

    inspect_delay: float = Field(default=7.0, ge=0)
    smaller_delay: float = Field(default=7.0, ge=0)
    larger_delay: float = Field(default=5.0, ge=0)
    terminal_delay: float = Field(default=0.0, ge=0)
    speed: float = Field(default=1.0, gt=0)
    log_level: str = Field(default="WARNING")

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "Settings":
        """
        Build settings from `env` (defaults to os.environ after loading .env).

        Raises ConfigError on any malformed or out-of-range value.
        """
        if env is None:
            load_dotenv()
            env = dict(os.environ)

        values: dict[str, object] = {}
        for name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip()

        level = str(values.get("log_level", "WARNING")).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigError(
                f"Invalid {ENV_PREFIX}LOG_LEVEL '{level}'. Must be one of {list(VALID_LOG_LEVELS)}"
            )
        values["log_level"] = level

        try:
            return cls.model_validate(values)
        except PydanticValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    def pacing(self) -> PacingPolicy:
        return PacingPolicy(
            inspect=self.inspect_delay,
            smaller=self.smaller_delay,
            larger=self.larger_delay,
            terminal=self.terminal_delay,
            speed=self.speed,
        )
