"""Parser for ``show fiber-transceiver interfaces``."""

from __future__ import annotations

import re
from typing import Any

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.fiber import FiberTransceiverInfo, SfpAlarm
from gs1900ctl.parsers.base import PipeRow, is_absent, iter_pipe_table, parse_int, row_error, text_or_none

_READING_RE = re.compile(r"^([-+]?\d+(?:\.\d+)?)\s*(?:\(\s*(OK|W|E|N/A)\s*\))?$", re.IGNORECASE)

# (field, header names)
_READINGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("temperature", ("Temperature",)),
    ("voltage", ("Voltage",)),
    ("current", ("Current", "Bias")),
    ("output_power", ("Output Power", "TX Power")),
    ("input_power", ("Input Power", "RX Power")),
)


def parse_reading(text: str) -> tuple[float | None, SfpAlarm | None]:
    """Split ``"35.50  (OK)"`` into value and alarm; placeholders are absent."""
    value = text.strip()
    if is_absent(value):
        return None, None
    match = _READING_RE.match(value)
    if not match:
        raise ValueError(f"invalid DDM reading {value!r}")
    status = match.group(2)
    alarm = None if status is None or status.upper() == "N/A" else SfpAlarm(status.upper())
    return float(match.group(1)), alarm


def _header_of(row: PipeRow, *names: str) -> str | None:
    for name in names:
        wanted = name.lower()
        for key in row.cells:
            if key.startswith(wanted):
                return key
    return None


def _parse_row(row: PipeRow) -> FiberTransceiverInfo:
    port = parse_int(row.get("Port"), "port")
    if port is None:
        raise ValueError("missing port")

    values: dict[str, Any] = {"port": port}
    for field, names in _READINGS:
        header = _header_of(row, *names)
        if header is None:
            continue
        reading, alarm = parse_reading(row.cells[header])
        if reading is not None and field.endswith("_power") and "dbm" in header.split():
            reading = 10 ** (reading / 10)
        values[field] = reading
        values[f"{field}_status"] = alarm

    present = row.find("OE-Present", "Present")
    if present is not None and not is_absent(present):
        values["present"] = present.lower() in ("insert", "inserted", "present", "yes")
    los = row.find("LOS")
    if los is not None and not is_absent(los):
        values["link"] = los.lower() == "normal"

    vendor = row.find("Vendor")
    if vendor is not None:
        values["vendor"] = text_or_none(vendor)
    kind = row.find("Type", "Transceiver Type")
    if kind is not None:
        values["transceiver_type"] = text_or_none(kind)
    wavelength = row.find("Wavelength")
    if wavelength is not None and not is_absent(wavelength):
        match = re.match(r"\s*(\d+)", wavelength)
        if not match:
            raise ValueError(f"invalid wavelength {wavelength.strip()!r}")
        values["wavelength"] = int(match.group(1))

    return FiberTransceiverInfo(**values)


def parse_fiber_transceivers(block: RawBlock) -> TableResult[FiberTransceiverInfo]:
    """Parse ``show fiber-transceiver interfaces``.

    Expected format::

        Port | Temperature | Voltage   | Current   | Output power | Input power | OE-Present | LOS
             | [C]         | [V]       | [mA]      | [mW]         | [mW]        |            |
        -----+-------------+-----------+-----------+--------------+-------------+------------+-------
          25 | N/A         | N/A       | N/A       | N/A          | N/A         | Remove     | Loss
          26 | 35.50  (OK) | 3.29 (OK) | 6.11 (OK) | 0.28  (OK)   | 0.25 (W)    | Insert     | Normal

    Units come from the second header row; power given in dBm is converted to
    mW. Vendor, type and wavelength columns are read when the firmware
    prints them.
    """
    records: list[FiberTransceiverInfo] = []
    errors: list[ParseError] = []

    for row in iter_pipe_table(block, "Port"):
        if row.continuation:
            continue
        try:
            records.append(_parse_row(row))
        except (ValueError, KeyError) as e:
            errors.append(row_error(e, row.line_no, row.line))

    return TableResult(tuple(records), tuple(errors))


def absent_transceiver(port: int) -> FiberTransceiverInfo:
    """Record for a port without transceiver diagnostics (e.g. copper)."""
    return FiberTransceiverInfo(port=port)
