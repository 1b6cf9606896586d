"""Parser for ``show mac address-table``."""

from __future__ import annotations

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.mac import MacEntry, MacEntryType
from gs1900ctl.parsers.base import PipeRow, iter_pipe_table, normalize_mac, parse_physical_port, row_error


def parse_entry_type(text: str) -> MacEntryType:
    try:
        return MacEntryType(text.strip().lower())
    except ValueError as e:
        raise ValueError(f"invalid MAC entry type {text.strip()!r}") from e


def _parse_row(row: PipeRow) -> MacEntry:
    vid = row.get("VID").strip()
    if not vid.isdigit():
        raise ValueError(f"invalid VLAN id {vid!r}")
    interface = row.get("Ports", "Port", "Interface").strip()
    return MacEntry(
        vlan_id=int(vid),
        mac_address=normalize_mac(row.get("MAC Address", "MAC")),
        entry_type=parse_entry_type(row.get("Type")),
        interface=interface,
        port=parse_physical_port(interface),
    )


def parse_mac_table(block: RawBlock) -> TableResult[MacEntry]:
    """Parse ``show mac address-table`` and its per-port/per-address forms.

    Expected format::

         VID  | MAC Address       | Type              | Ports
        ------+-------------------+-------------------+--------------
            1 | BC:CF:4F:11:22:33 | Management        | CPU
            1 | 00:11:22:33:44:55 | Dynamic           | 5

        Total number of entries: 2

    MAC addresses are normalized to lower-case colon notation.
    """
    records: list[MacEntry] = []
    errors: list[ParseError] = []

    for row in iter_pipe_table(block, "VID"):
        if row.continuation:
            continue
        try:
            records.append(_parse_row(row))
        except (ValueError, KeyError) as e:
            errors.append(row_error(e, row.line_no, row.line))

    return TableResult(tuple(records), tuple(errors))
