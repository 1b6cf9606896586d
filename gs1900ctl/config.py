"""Session settings for the GS1900 command line."""

from __future__ import annotations

import os
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "GS1900CTL_"

# Lines that mark a rejected command. Firmware releases differ in wording, so
# this list is a default, not an exhaustive set.
DEFAULT_ERROR_PATTERNS: tuple[str, ...] = (
    r"^%\s*",
    r"Invalid input",
    r"Unrecognized command",
    r"Incomplete command",
    r"Ambiguous command",
    r"[Ii]nvalid port",
    r"Permission denied",
)


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"invalid regex {pattern!r}: {e}") from e


class SessionSettings(BaseModel):
    """Device-specific constants the line reader and session match against."""

    model_config = ConfigDict(frozen=True)

    prompt_pattern: str = r"[\w\-.()]+[#>]"
    pager_marker: str = "--More--"
    continuation_key: str = " "
    read_timeout: float = Field(default=10.0, gt=0)
    connect_timeout: float = Field(default=10.0, gt=0)
    encoding: str = "utf-8"
    error_patterns: tuple[str, ...] = DEFAULT_ERROR_PATTERNS
    max_port: int = Field(default=52, ge=1)

    @field_validator("prompt_pattern")
    @classmethod
    def _check_prompt(cls, value: str) -> str:
        _compile(value)
        return value

    @field_validator("error_patterns")
    @classmethod
    def _check_error_patterns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in value:
            _compile(pattern)
        return value

    @property
    def compiled_error_patterns(self) -> list[re.Pattern[str]]:
        return [re.compile(p) for p in self.error_patterns]

    def with_error_patterns(self, *patterns: str) -> SessionSettings:
        """Return a copy that also recognizes ``patterns`` as device errors."""
        return type(self)(**dict(self.model_dump(), error_patterns=self.error_patterns + tuple(patterns)))

    @classmethod
    def from_env(cls, **overrides: object) -> SessionSettings:
        """Build settings from ``GS1900CTL_*`` environment variables.

        Explicit keyword ``overrides`` win over the environment.
        """
        values: dict[str, object] = {}
        for name in ("prompt_pattern", "pager_marker", "continuation_key", "encoding"):
            env = os.getenv(ENV_PREFIX + name.upper())
            if env is not None:
                values[name] = env
        for name in ("read_timeout", "connect_timeout"):
            env = os.getenv(ENV_PREFIX + name.upper())
            if env is not None:
                values[name] = float(env)
        env = os.getenv(ENV_PREFIX + "MAX_PORT")
        if env is not None:
            values["max_port"] = int(env)
        env = os.getenv(ENV_PREFIX + "EXTRA_ERROR_PATTERNS")
        if env:
            values["error_patterns"] = DEFAULT_ERROR_PATTERNS + tuple(p for p in env.split("||") if p)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
