"""MAC address table model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MacEntryType(str, Enum):
    MANAGEMENT = "management"
    DYNAMIC = "dynamic"
    STATIC = "static"


class MacEntry(BaseModel):
    """One row of ``show mac address-table``.

    ``interface`` keeps the device's port column verbatim; ``port`` is the
    numeric physical port, absent for entries learned on the CPU or a LAG.
    """

    model_config = ConfigDict(frozen=True)

    vlan_id: int
    mac_address: str
    entry_type: MacEntryType
    interface: str = ""
    port: int | None = None
