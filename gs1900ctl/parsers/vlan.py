"""Parser for ``show vlan``."""

from __future__ import annotations

from typing import Any

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.vlan import VlanInfo, VlanType
from gs1900ctl.parsers.base import PipeRow, is_absent, iter_pipe_table, parse_member_list, row_error

_TYPES = {t.value.lower(): t for t in VlanType}


def parse_vlan_type(text: str) -> VlanType | None:
    if is_absent(text) or not text.strip():
        return None
    vlan_type = _TYPES.get(text.strip().lower())
    if vlan_type is None:
        raise ValueError(f"invalid VLAN type {text.strip()!r}")
    return vlan_type


def _join_ports(first: str, extra: str) -> str:
    if not extra or is_absent(extra):
        return first
    if not first or is_absent(first):
        return extra
    return f"{first.rstrip(',')},{extra.lstrip(',')}"


def _finish(entry: dict[str, Any]) -> VlanInfo:
    vid = entry["vid"].strip()
    if not vid.isdigit():
        raise ValueError(f"invalid VLAN id {vid!r}")
    untagged_ports, untagged_lags = parse_member_list(entry["untagged"])
    tagged_ports, tagged_lags = parse_member_list(entry["tagged"])
    return VlanInfo(
        vlan_id=int(vid),
        name=entry["name"],
        untagged_ports=untagged_ports,
        tagged_ports=tagged_ports,
        untagged_lags=untagged_lags,
        tagged_lags=tagged_lags,
        vlan_type=parse_vlan_type(entry["type"]),
    )


def parse_vlans(block: RawBlock) -> TableResult[VlanInfo]:
    """Parse ``show vlan``.

    Expected format::

          VID  |     VLAN Name    |        Untagged Ports        |        Tagged Ports          |  Type
        -------+------------------+------------------------------+------------------------------+---------
             1 |          default |                  1-8,10-24,  |                           9  | Default
               |                  |                  26-28       |                              |
            10 |          servers |                         ---  |                         9-10 | Static

    Port lists that wrap continue on a row with an empty VID cell and are
    expanded into sorted port numbers. ``lag<N>`` members are kept apart from
    the physical ports.
    """
    records: list[VlanInfo] = []
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

    for row in iter_pipe_table(block, "VID"):
        if row.continuation:
            if entry is not None:
                entry["name"] += row.find("VLAN Name", "Name") or ""
                entry["untagged"] = _join_ports(entry["untagged"], row.find("Untagged") or "")
                entry["tagged"] = _join_ports(entry["tagged"], row.find("Tagged") or "")
            continue
        flush()
        try:
            entry = {
                "vid": row.get("VID"),
                "name": row.get("VLAN Name", "Name"),
                "untagged": row.get("Untagged"),
                "tagged": row.get("Tagged"),
                "type": row.find("Type") or "",
            }
            entry_row = row
        except KeyError as e:
            errors.append(row_error(e, row.line_no, row.line))
    flush()

    return TableResult(tuple(records), tuple(errors))
