"""Parsers for ``show interfaces`` and ``show interfaces all status``."""

from __future__ import annotations

import re
from typing import Any

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.interface import InterfaceStatus, InterfaceTraffic
from gs1900ctl.parsers.base import parse_duplex, parse_media_type, parse_speed, row_error

_HEADER_RE = re.compile(r"^\w*Ethernet\s*(\d+)\s+is\s+(up|down|administratively down)\b", re.IGNORECASE)
_MEDIA_RE = re.compile(r"^\s*([\w-]+?)-duplex,\s*([\w/-]+?)(?:-speed)?,\s*media type is\s+(\w+)", re.IGNORECASE)
_FLOW_RE = re.compile(r"^\s*flow-control is\s+(\w+)", re.IGNORECASE)
_RATE_RE = re.compile(r"(\d+) (?:minute|second)s? (input|output) rate (\d+) bits/sec, (\d+) packets/sec")
# The last counter line of a port block.
_LAST_LINE_RE = re.compile(r"\d+ PAUSE output")

# Each counter line and the fields its groups fill, in order; ``None`` skips a group.
_COUNTERS: tuple[tuple[re.Pattern[str], tuple[str | None, ...]], ...] = (
    (re.compile(r"(\d+) packets input, (\d+) bytes, (\d+) throttles"), ("input_packets", "input_bytes", "input_throttles")),
    (re.compile(r"Received (\d+) broadcasts \((\d+) multicasts\)"), ("input_broadcasts", "input_multicasts")),
    (re.compile(r"(\d+) runts, (\d+) giants"), ("input_runts", "input_giants")),
    (
        re.compile(r"(\d+) input errors, (\d+) CRC, (\d+) frame, (\d+) overrun, (\d+) ignored"),
        ("input_errors", "input_crc", "input_frame", "input_overrun", "input_ignored"),
    ),
    (re.compile(r"(\d+) multicast, (\d+) pause input"), (None, "input_pause")),
    (re.compile(r"(\d+) input packets with dribble condition detected"), ("input_dribble",)),
    (re.compile(r"(\d+) packets output, (\d+) bytes, (\d+) underrun"), ("output_packets", "output_bytes", "output_underrun")),
    (
        re.compile(r"(\d+) output errors, (\d+) collisions, (\d+) interface resets"),
        ("output_errors", "output_collisions", "output_interface_resets"),
    ),
    (
        re.compile(r"(\d+) babbles, (\d+) late collision, (\d+) deferred"),
        ("output_babbles", "output_late_collisions", "output_deferred"),
    ),
    (re.compile(r"(\d+) PAUSE output"), ("output_paused",)),
)


def _apply_line(entry: dict[str, Any], line: str) -> None:
    media = _MEDIA_RE.match(line)
    if media:
        entry["duplex"] = parse_duplex(media.group(1))
        entry["speed"] = parse_speed(media.group(2))
        entry["media_type"] = parse_media_type(media.group(3))
        return

    flow = _FLOW_RE.match(line)
    if flow:
        entry["flow_control"] = flow.group(1).lower() == "on"
        return

    rate = _RATE_RE.search(line)
    if rate:
        direction = rate.group(2)
        entry[f"{direction}_rate_bps"] = int(rate.group(3))
        entry[f"{direction}_rate_pps"] = int(rate.group(4))
        return

    for pattern, fields in _COUNTERS:
        match = pattern.search(line)
        if match:
            for field, value in zip(fields, match.groups()):
                if field is not None:
                    entry[field] = int(value)


def parse_interface_traffic(block: RawBlock) -> TableResult[InterfaceTraffic]:
    """Parse ``show interfaces all`` (or a single port).

    Expected format::

        GigabitEthernet1 is up
          Hardware is Gigabit Ethernet
          Full-duplex, 1000Mb/s, media type is Copper
          flow-control is off
             5 minute input rate 1344 bits/sec, 2 packets/sec
             5 minute output rate 9816 bits/sec, 8 packets/sec
             12345 packets input, 2345678 bytes, 0 throttles
             Received 120 broadcasts (340 multicasts)
             0 runts, 0 giants, 0 throttles
             0 input errors, 0 CRC, 0 frame, 0 overrun, 0 ignored
             0 multicast, 0 pause input
             0 input packets with dribble condition detected
             54321 packets output, 7654321 bytes, 0 underrun
             0 output errors, 0 collisions, 0 interface resets
             0 babbles, 0 late collision, 0 deferred
             0 PAUSE output

    Each ``...Ethernet<N> is ...`` line starts a new port and ``PAUSE output``
    ends it. Blocks of other interfaces (LAGs) are skipped. A malformed line
    drops only the port it belongs to.
    """
    records: list[InterfaceTraffic] = []
    errors: list[ParseError] = []
    entry: dict[str, Any] | None = None
    broken = False

    def flush() -> None:
        nonlocal entry
        if entry is not None and not broken:
            records.append(InterfaceTraffic(**entry))
        entry = None

    for line_no, line in block.numbered():
        header = _HEADER_RE.match(line)
        if header:
            flush()
            broken = False
            state = header.group(2).lower()
            entry = {
                "port": int(header.group(1)),
                "link_up": state == "up",
                "admin_up": state != "administratively down",
            }
            continue
        if not line.strip():
            continue
        if not line[0].isspace():
            # Header of a block that is not a physical port (``LAG1 is down``).
            flush()
            broken = False
            continue
        if entry is None or broken:
            continue
        try:
            _apply_line(entry, line)
        except ValueError as e:
            errors.append(row_error(e, line_no, line))
            broken = True
            continue
        if _LAST_LINE_RE.search(line):
            flush()
    flush()

    return TableResult(tuple(records), tuple(errors))


_STATUS_RE = re.compile(
    r"^\s*(\d+)\s+(.*?)\s+(notconnect|connected|disabled|err-disabled)\s+(\d+|N/A|-)\s+(\S+)\s+(\S+)\s+(Copper|Fiber)\s*$",
    re.IGNORECASE,
)


def _parse_status_line(match: re.Match[str]) -> InterfaceStatus:
    state = match.group(3).lower()
    vlan = match.group(4)
    return InterfaceStatus(
        port=int(match.group(1)),
        name=match.group(2).strip(),
        link_up=state == "connected",
        admin_enabled=state not in ("disabled", "err-disabled"),
        vlan=int(vlan) if vlan.isdigit() else None,
        duplex=parse_duplex(match.group(5)),
        speed=parse_speed(match.group(6)),
        media_type=parse_media_type(match.group(7)),
    )


def parse_interface_status(block: RawBlock) -> TableResult[InterfaceStatus]:
    """Parse ``show interfaces all status``.

    Expected format::

        Port   Name          Status      Vlan  Duplex  Speed    Type
        ------ ------------- ----------- ----- ------- -------- -------
        1      uplink        connected   1     a-full  a-1000M  Copper
        2                    notconnect  1     auto    auto     Copper

    The name column may be empty or contain spaces, so rows are matched as a
    whole rather than cut at the separator.
    """
    records: list[InterfaceStatus] = []
    errors: list[ParseError] = []

    for line_no, line in block.numbered():
        match = _STATUS_RE.match(line)
        if match is None:
            if re.match(r"^\s*\d+\s", line):
                errors.append(ParseError(f"line {line_no}: unrecognized status row", line_no=line_no, line=line))
            continue
        try:
            records.append(_parse_status_line(match))
        except ValueError as e:
            errors.append(row_error(e, line_no, line))

    return TableResult(tuple(records), tuple(errors))
