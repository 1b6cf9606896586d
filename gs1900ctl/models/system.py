"""System information model."""

from __future__ import annotations

from ipaddress import IPv4Address

from pydantic import BaseModel, ConfigDict


class SwitchInfo(BaseModel):
    """Output of ``show info``."""

    model_config = ConfigDict(frozen=True)

    system_name: str = ""
    system_location: str = ""
    system_contact: str = ""
    mac_address: str | None = None
    ip_address: IPv4Address | None = None
    subnet_mask: IPv4Address | None = None
    boot_version: str | None = None
    firmware_version: str | None = None
    system_object_id: str | None = None
    uptime: int | None = None  # seconds
    model: str | None = None
    serial_number: str | None = None
