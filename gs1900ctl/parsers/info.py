"""Parser for ``show info``."""

from __future__ import annotations

from ipaddress import IPv4Address
from typing import Any, Callable

from loguru import logger

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock
from gs1900ctl.models.system import SwitchInfo
from gs1900ctl.parsers.base import normalize_mac, parse_uptime, split_key_value, text_or_none


def _address(value: str) -> IPv4Address | None:
    text = text_or_none(value)
    return IPv4Address(text) if text is not None else None


def _mac(value: str) -> str | None:
    text = text_or_none(value)
    return normalize_mac(text) if text is not None else None


def _uptime(value: str) -> int | None:
    text = text_or_none(value)
    return parse_uptime(text) if text is not None else None


_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "system name": ("system_name", str.strip),
    "system location": ("system_location", str.strip),
    "system contact": ("system_contact", str.strip),
    "mac address": ("mac_address", _mac),
    "ip address": ("ip_address", _address),
    "subnet mask": ("subnet_mask", _address),
    "boot version": ("boot_version", text_or_none),
    "firmware version": ("firmware_version", text_or_none),
    "system object id": ("system_object_id", text_or_none),
    "system up time": ("uptime", _uptime),
    "model name": ("model", text_or_none),
    "model": ("model", text_or_none),
    "serial number": ("serial_number", text_or_none),
}


def parse_switch_info(block: RawBlock) -> SwitchInfo:
    """Parse ``show info`` into a :class:`SwitchInfo`.

    Expected format::

        System Name         : GS1900
        System Location     : Server Room
        System Contact      :
        MAC Address         : BC:CF:4F:11:22:33
        IP Address          : 192.168.1.1
        Subnet Mask         : 255.255.255.0
        Boot Version        : V2.40
        Firmware Version    : V2.60(AAHH.2) | 08/27/2020
        System Object ID    : 1.3.6.1.4.1.890.1.15
        System Up Time      : 12 days, 3 hours, 14 mins, 5 secs

    Keys the firmware adds beyond these are ignored. Any malformed value fails
    the whole query.
    """
    values: dict[str, Any] = {}

    for line_no, line in block.numbered():
        kv = split_key_value(line)
        if kv is None:
            continue
        key, raw = kv
        spec = _FIELDS.get(" ".join(key.lower().split()))
        if spec is None:
            logger.debug(f"show info: ignoring unknown key {key!r}")
            continue

        field_name, convert = spec
        try:
            values[field_name] = convert(raw)
        except ValueError as e:
            raise ParseError(f"line {line_no}: {key}: {e}", line_no=line_no, line=line) from e

    if not values:
        raise ParseError("no system information found in 'show info' output")

    return SwitchInfo(**values)
