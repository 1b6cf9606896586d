"""Port attributes shared by several command families."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class DuplexMode(str, Enum):
    """Port duplex mode."""

    AUTO = "auto"
    FULL = "full"
    HALF = "half"


class MediaType(str, Enum):
    """Physical port media."""

    COPPER = "copper"
    FIBER = "fiber"


class PortSpeed(BaseModel):
    """Configured or negotiated port speed.

    ``auto`` is set when the speed is (or was) auto-negotiated; ``mbps`` is
    absent while nothing has been negotiated yet.
    """

    model_config = ConfigDict(frozen=True)

    auto: bool = False
    mbps: int | None = None

    def __str__(self) -> str:
        if self.mbps is None:
            return "auto" if self.auto else "-"
        return f"{'a-' if self.auto else ''}{self.mbps}M"
