"""Parser for ``show lldp neighbor``."""

from __future__ import annotations

from typing import Any

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.lldp import LldpCapability, LldpNeighbor
from gs1900ctl.parsers.base import PipeRow, is_absent, iter_pipe_table, parse_int, row_error

_CAPABILITIES = {c.value.lower(): c for c in LldpCapability}


def parse_capabilities(text: str) -> frozenset[LldpCapability]:
    if is_absent(text) or not text.strip():
        return frozenset()
    caps = set()
    for name in text.split(","):
        name = name.strip()
        if not name:
            continue
        cap = _CAPABILITIES.get(name.lower())
        if cap is None:
            raise ValueError(f"invalid LLDP capability {name!r}")
        caps.add(cap)
    return frozenset(caps)


def _start(row: PipeRow) -> dict[str, Any]:
    port = parse_int(row.get("Port"), "port")
    if port is None:
        raise ValueError("missing port")
    return {
        "port": port,
        "chassis_id": row.get("Device ID", "Chassis ID"),
        "port_id": row.get("Port ID"),
        "system_name": row.get("SysName", "System Name"),
        "capabilities": row.get("Capabilities"),
        "ttl": row.get("TTL"),
    }


def _extend(entry: dict[str, Any], row: PipeRow) -> None:
    """Append the cells of a wrapped continuation row."""
    for key, names in (
        ("chassis_id", ("Device ID", "Chassis ID")),
        ("port_id", ("Port ID",)),
        ("system_name", ("SysName", "System Name")),
    ):
        extra = row.find(*names)
        if extra:
            entry[key] += extra
    caps = row.find("Capabilities")
    if caps:
        entry["capabilities"] = f"{entry['capabilities']}, {caps}" if entry["capabilities"] else caps


def _finish(entry: dict[str, Any]) -> LldpNeighbor:
    system_name = entry["system_name"]
    return LldpNeighbor(
        port=entry["port"],
        chassis_id=entry["chassis_id"],
        port_id=entry["port_id"],
        system_name=None if is_absent(system_name) or not system_name else system_name,
        capabilities=parse_capabilities(entry["capabilities"]),
        ttl=parse_int(entry["ttl"], "TTL"),
    )


def parse_lldp_neighbors(block: RawBlock) -> TableResult[LldpNeighbor]:
    """Parse ``show lldp neighbor``.

    Expected format::

         Port | Device ID         | Port ID  | SysName     | Capabilities   | TTL
        ------+-------------------+----------+-------------+----------------+-----
            1 | 00:11:22:33:44:55 | gi0/1    | core-switch | Bridge, Router | 120
              |                   |          | -01         |                |

    A row with an empty port cell continues the wrapped cells of the
    neighbor above it.
    """
    records: list[LldpNeighbor] = []
    errors: list[ParseError] = []
    entry: dict[str, Any] | None = None
    entry_row: PipeRow | None = None

    def flush() -> None:
        nonlocal entry, entry_row
        if entry is not None and entry_row is not None:
            try:
                records.append(_finish(entry))
            except ValueError as e:
                errors.append(row_error(e, entry_row.line_no, entry_row.line))
        entry = None
        entry_row = None

    for row in iter_pipe_table(block, "Port"):
        if row.continuation:
            if entry is not None:
                _extend(entry, row)
            continue
        flush()
        try:
            entry = _start(row)
            entry_row = row
        except (ValueError, KeyError) as e:
            errors.append(row_error(e, row.line_no, row.line))
    flush()

    return TableResult(tuple(records), tuple(errors))
