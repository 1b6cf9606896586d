"""Parsers for the PoE commands."""

from __future__ import annotations

import re
from typing import Any

from loguru import logger

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.poe import (
    PoEClass,
    PoEConfig,
    PoEDebugInfo,
    PoEMode,
    PoEPortState,
    PoEPowerUpSequence,
    PoEPriority,
    PoEReport,
    PoEStatus,
    PoESupply,
)
from gs1900ctl.parsers.base import (
    FixedWidthTable,
    is_absent,
    is_separator,
    iter_fixed_width_tables,
    parse_int,
    parse_watts,
    row_error,
    split_key_value,
    text_or_none,
)

_LIMIT_RE = re.compile(r"^(\d+)\s*(?:\(\s*(\d+)\s*\))?$")


def _enum(enum_cls: Any, text: str, what: str) -> Any:
    value = text.strip()
    for member in enum_cls:
        if member.value.lower() == value.lower():
            return member
    raise ValueError(f"invalid {what} {value!r}")


def _enabled(text: str) -> bool:
    value = text.strip().lower()
    if value in ("enable", "enabled", "on"):
        return True
    if value in ("disable", "disabled", "off"):
        return False
    raise ValueError(f"invalid state {text.strip()!r}")


_CONFIG_KEYS: dict[str, tuple[str, Any]] = {
    "power management mode": ("management_mode", lambda v: _enum(PoEMode, v, "power management mode")),
    "pre-allocation": ("pre_allocation", _enabled),
    "power-up sequence": ("power_up_sequence", lambda v: _enum(PoEPowerUpSequence, v, "power-up sequence")),
}


def _parse_config(block: RawBlock) -> PoEConfig:
    values: dict[str, Any] = {}
    for line_no, line in block.numbered():
        if is_separator(line):
            break
        kv = split_key_value(line)
        if kv is None:
            continue
        key, raw = kv
        spec = _CONFIG_KEYS.get(" ".join(key.lower().split()))
        if spec is None:
            logger.debug(f"show power inline consumption: ignoring unknown key {key!r}")
            continue
        field_name, convert = spec
        try:
            values[field_name] = convert(raw)
        except ValueError as e:
            raise ParseError(f"line {line_no}: {key}: {e}", line_no=line_no, line=line) from e
    return PoEConfig(**values)


def _parse_supply(table: FixedWidthTable, line: str) -> PoESupply:
    cells = table.split(line)
    unit = parse_int(table.column(cells, "Unit"), "unit")
    if unit is None:
        raise ValueError("missing unit")
    return PoESupply(
        unit=unit,
        power=table.column(cells, "Power"),
        status=table.column(cells, "Status"),
        nominal_power=parse_watts(table.column(cells, "Nominal")),
        allocated_power=parse_watts(table.column(cells, "Allocated")),
        consumed_power=parse_watts(table.column(cells, "Consumed")),
        available_power=parse_watts(table.column(cells, "Available")),
    )


def parse_power_limit(text: str) -> tuple[int | None, int | None]:
    """Split ``"30000 (15400)"`` into the effective and the administrative limit."""
    if is_absent(text):
        return None, None
    match = _LIMIT_RE.match(text.strip())
    if not match:
        raise ValueError(f"invalid power limit {text.strip()!r}")
    limit = int(match.group(1))
    admin = int(match.group(2)) if match.group(2) is not None else None
    return limit, admin


def _parse_port(table: FixedWidthTable, line: str) -> PoEStatus:
    cells = table.split(line)
    port = parse_int(table.column(cells, "Port"), "port")
    if port is None:
        raise ValueError("missing port")
    limit, admin = parse_power_limit(table.column(cells, "Power Limit"))
    return PoEStatus(
        port=port,
        power_limit=limit,
        admin_power_limit=admin,
        power=parse_int(table.column(cells, "Power mW", "Power"), "power"),
        voltage=parse_int(table.column(cells, "Voltage"), "voltage"),
        current=parse_int(table.column(cells, "Current"), "current"),
    )


def parse_poe_consumption(block: RawBlock) -> PoEReport:
    """Parse ``show power inline consumption``.

    Expected format::

        Power management mode : Port limit mode
        Pre-allocation        : Disabled
        Power-up sequence     : Staggered

        Unit Power Status Nominal  Allocated       Consumed Available
                          Power    Power           Power    Power
        ---- ----- ------ -------- --------------- -------- ---------
           1 on    ok     170Watts 12Watts(7%)     5Watts   165Watts

        Port Power Limit (Admin) (mW) Power (mW) Voltage (mV) Current (mA)
        ---- ------------------------ ---------- ------------ ------------
           1            30000 (30000)       3400        53000           64

    A malformed configuration section fails the whole query; malformed
    table rows are reported in :attr:`PoEReport.errors`.
    """
    config = _parse_config(block)
    supplies: list[PoESupply] = []
    ports: list[PoEStatus] = []
    errors: list[ParseError] = []

    for table, rows in iter_fixed_width_tables(block.numbered()):
        if table.has_column("Unit"):
            parse, target = _parse_supply, supplies
        elif table.has_column("Port"):
            parse, target = _parse_port, ports
        else:
            logger.debug(f"show power inline consumption: skipping table {table.headers}")
            continue
        for line_no, line in rows:
            try:
                target.append(parse(table, line))
            except (ValueError, KeyError) as e:
                errors.append(row_error(e, line_no, line))

    return PoEReport(config=config, supplies=tuple(supplies), ports=tuple(ports), errors=tuple(errors))


def _parse_debug_row(table: FixedWidthTable, line: str) -> PoEDebugInfo:
    cells = table.split(line)
    port = parse_int(table.column(cells, "Port"), "port")
    if port is None:
        raise ValueError("missing port")
    priority = table.column(cells, "Priority")
    poe_class = table.column(cells, "Class")
    return PoEDebugInfo(
        port=port,
        enabled=_enabled(table.column(cells, "State")),
        state=_enum(PoEPortState, table.column(cells, "Status"), "PoE status"),
        priority=None if is_absent(priority) or not priority else _enum(PoEPriority, priority, "priority"),
        poe_class=None if is_absent(poe_class) or not poe_class else _enum(PoEClass, poe_class, "PoE class"),
        reason=text_or_none(table.column(cells, "Reason")) or None,
    )


def parse_poe_debug(block: RawBlock) -> TableResult[PoEDebugInfo]:
    """Parse ``debug ilpower port status``.

    Expected format::

        Port State Status     Priority Class   Reason
        ---- ----- ---------- -------- ------- ---------------------
           1 Enable on         low      class4  Power on
           2 Enable searching  low      N/A     Waiting for detection
    """
    records: list[PoEDebugInfo] = []
    errors: list[ParseError] = []

    for table, rows in iter_fixed_width_tables(block.numbered()):
        if not table.has_column("Port"):
            continue
        for line_no, line in rows:
            try:
                records.append(_parse_debug_row(table, line))
            except (ValueError, KeyError) as e:
                errors.append(row_error(e, line_no, line))

    return TableResult(tuple(records), tuple(errors))
