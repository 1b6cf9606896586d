"""LLDP neighbor model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LldpCapability(str, Enum):
    STATION = "Station Only"
    BRIDGE = "Bridge"
    WLAN = "WLAN"
    ROUTER = "Router"
    TELEPHONE = "Telephone"
    REPEATER = "Repeater"
    DOCSIS = "DOCSIS Cable Device"
    OTHER = "Other"


class LldpNeighbor(BaseModel):
    model_config = ConfigDict(frozen=True)

    port: int
    chassis_id: str = ""
    port_id: str = ""
    system_name: str | None = None
    capabilities: frozenset[LldpCapability] = Field(default_factory=frozenset)
    ttl: int | None = None  # seconds
