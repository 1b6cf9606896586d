"""Parser for ``show cable-diag interfaces``."""

from __future__ import annotations

from typing import Any

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.cable import CableDiagResult, CablePair, CablePairState
from gs1900ctl.models.port import PortSpeed
from gs1900ctl.parsers.base import PipeRow, is_absent, iter_pipe_table, parse_int, parse_metres, parse_speed, row_error

_STATES = {s.value.lower(): s for s in CablePairState}


def parse_pair_state(text: str) -> CablePairState | None:
    if is_absent(text) or not text.strip():
        return None
    state = _STATES.get(text.strip().lower())
    if state is None:
        raise ValueError(f"invalid cable pair state {text.strip()!r}")
    return state


def _speed(text: str) -> PortSpeed:
    # Ports without link print a placeholder instead of a speed.
    return PortSpeed() if is_absent(text) else parse_speed(text)


def _parse_pair(row: PipeRow) -> CablePair:
    label = row.get("Local pair", "Pair").strip()
    if label.lower().startswith("pair"):
        label = label[4:].strip()
    if not label:
        raise ValueError("missing pair label")
    return CablePair(
        pair=label,
        length=parse_metres(row.get("Pair length", "Length")),
        status=parse_pair_state(row.get("Pair status", "Status")),
    )


def parse_cable_diag(block: RawBlock) -> TableResult[CableDiagResult]:
    """Parse ``show cable-diag interfaces all`` (or a single port).

    Expected format::

         Port |   Speed | Local pair | Pair length | Pair status
        ------+---------+------------+-------------+-------------
            1 |   1000M |     Pair A |        2.40 | Normal
                             Pair B |        2.40 | Normal
                             Pair C |        2.40 | Open
                             Pair D |        2.40 | Normal

    The first row of a port carries port, speed and pair A; the following
    rows only carry the remaining pairs. Lengths are metres.
    """
    records: list[CableDiagResult] = []
    errors: list[ParseError] = []
    entry: dict[str, Any] | None = None

    def flush() -> None:
        nonlocal entry
        if entry is not None:
            records.append(CableDiagResult(**entry))
        entry = None

    for row in iter_pipe_table(block, "Port"):
        try:
            if row.continuation:
                if entry is None:
                    raise ValueError("pair row without a port")
                entry["pairs"] += (_parse_pair(row),)
                continue
            flush()
            port = parse_int(row.get("Port"), "port")
            if port is None:
                raise ValueError("missing port")
            entry = {
                "port": port,
                "speed": _speed(row.get("Speed")),
                "pairs": (_parse_pair(row),),
            }
        except (ValueError, KeyError) as e:
            errors.append(row_error(e, row.line_no, row.line))
    flush()

    return TableResult(tuple(records), tuple(errors))
