"""Fixed set of monitoring queries and their dispatch table.

Each :class:`QueryKind` maps to exactly one :class:`QuerySpec` in
:data:`CATALOG`: the command template, the parser for its output and how the
parsed result is narrowed and shaped. :func:`resolve` validates caller input
and produces the command text without touching the network; :func:`query`
runs it on a :class:`~gs1900ctl.session.Session`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from loguru import logger

from gs1900ctl.config import SessionSettings
from gs1900ctl.exceptions import CommandError, InvalidParameterError
from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.parsers import (
    parse_cable_diag,
    parse_fiber_transceivers,
    parse_interface_status,
    parse_interface_traffic,
    parse_lldp_neighbors,
    parse_mac_table,
    parse_poe_consumption,
    parse_poe_debug,
    parse_switch_info,
    parse_vlans,
)
from gs1900ctl.parsers.base import normalize_mac
from gs1900ctl.parsers.fiber import absent_transceiver

if TYPE_CHECKING:
    from gs1900ctl.session.driver import Session


class QueryKind(str, Enum):
    SWITCH_INFO = "switch-info"
    LLDP_NEIGHBORS = "lldp-neighbors"
    FIBER_TRANSCEIVERS = "fiber-transceivers"
    FIBER_TRANSCEIVER_PORT = "fiber-transceiver-port"
    MAC_TABLE = "mac-table"
    MAC_TABLE_PORT = "mac-table-port"
    MAC_LOOKUP = "mac-lookup"
    CABLE_DIAG = "cable-diag"
    CABLE_DIAG_PORT = "cable-diag-port"
    POE_CONSUMPTION = "poe-consumption"
    POE_DEBUG = "poe-debug"
    INTERFACE_TRAFFIC = "interface-traffic"
    INTERFACE_TRAFFIC_PORT = "interface-traffic-port"
    INTERFACE_STATUS = "interface-status"
    VLANS = "vlans"


class Param(Enum):
    NONE = "none"
    PORT = "port"
    MAC = "mac"


@dataclass(frozen=True)
class Command:
    """A fully formatted command ready to be sent."""

    text: str
    kind: QueryKind
    port: int | None = None
    mac: str | None = None


def _table(result: Any, command: Command) -> Any:
    return result


def _port_rows(result: TableResult[Any], command: Command) -> TableResult[Any]:
    return result.filter(lambda r: r.port == command.port)


def _port_first(result: TableResult[Any], command: Command) -> Any:
    return _port_rows(result, command).first()


def _port_required(result: TableResult[Any], command: Command) -> Any:
    record = _port_first(result, command)
    if record is None:
        raise CommandError(f"Switch returned no data for port {command.port}", command=command.text)
    return record


def _transceiver(result: TableResult[Any], command: Command) -> Any:
    if command.port is None:
        raise InvalidParameterError(f"Query '{command.kind.value}' requires a port")
    record = _port_first(result, command)
    return record if record is not None else absent_transceiver(command.port)


def _mac_first(result: TableResult[Any], command: Command) -> Any:
    return result.filter(lambda r: r.mac_address == command.mac).first()


@dataclass(frozen=True)
class QuerySpec:
    template: str
    parser: Callable[[RawBlock], Any]
    param: Param = Param.NONE
    # Narrows and shapes the parsed result for the requested key.
    shape: Callable[[Any, Command], Any] = _table


CATALOG: dict[QueryKind, QuerySpec] = {
    QueryKind.SWITCH_INFO: QuerySpec("show info", parse_switch_info),
    QueryKind.LLDP_NEIGHBORS: QuerySpec("show lldp neighbor", parse_lldp_neighbors),
    QueryKind.FIBER_TRANSCEIVERS: QuerySpec("show fiber-transceiver interfaces all", parse_fiber_transceivers),
    QueryKind.FIBER_TRANSCEIVER_PORT: QuerySpec(
        "show fiber-transceiver interfaces {port}", parse_fiber_transceivers, Param.PORT, _transceiver
    ),
    QueryKind.MAC_TABLE: QuerySpec("show mac address-table", parse_mac_table),
    QueryKind.MAC_TABLE_PORT: QuerySpec(
        "show mac address-table interfaces {port}", parse_mac_table, Param.PORT, _port_rows
    ),
    QueryKind.MAC_LOOKUP: QuerySpec("show mac address-table {mac}", parse_mac_table, Param.MAC, _mac_first),
    QueryKind.CABLE_DIAG: QuerySpec("show cable-diag interfaces all", parse_cable_diag),
    QueryKind.CABLE_DIAG_PORT: QuerySpec(
        "show cable-diag interfaces {port}", parse_cable_diag, Param.PORT, _port_first
    ),
    QueryKind.POE_CONSUMPTION: QuerySpec("show power inline consumption", parse_poe_consumption),
    QueryKind.POE_DEBUG: QuerySpec("debug ilpower port status", parse_poe_debug),
    QueryKind.INTERFACE_TRAFFIC: QuerySpec("show interfaces all", parse_interface_traffic),
    QueryKind.INTERFACE_TRAFFIC_PORT: QuerySpec(
        "show interfaces {port}", parse_interface_traffic, Param.PORT, _port_required
    ),
    QueryKind.INTERFACE_STATUS: QuerySpec("show interfaces all status", parse_interface_status),
    QueryKind.VLANS: QuerySpec("show vlan", parse_vlans),
}


def list_queries() -> list[str]:
    """Return the names of all known queries."""
    return [kind.value for kind in QueryKind]


def validate_port(port: Any, max_port: int) -> int:
    """Return ``port`` if it is an integer in ``1..max_port``."""
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidParameterError(f"Port must be an integer, got {port!r}")
    if not 1 <= port <= max_port:
        raise InvalidParameterError(f"Port {port} out of range 1..{max_port}")
    return port


def validate_mac(mac: Any) -> str:
    """Return ``mac`` normalized to ``aa:bb:cc:dd:ee:ff``."""
    if not isinstance(mac, str):
        raise InvalidParameterError(f"MAC address must be a string, got {mac!r}")
    try:
        return normalize_mac(mac)
    except ValueError as e:
        raise InvalidParameterError(str(e)) from e


def _kind(name: QueryKind | str) -> QueryKind:
    try:
        return QueryKind(name)
    except ValueError:
        available = ", ".join(list_queries())
        raise InvalidParameterError(f"Unknown query '{name}'. Available: {available}") from None


def resolve(
    name: QueryKind | str,
    port: int | None = None,
    mac: str | None = None,
    max_port: int = SessionSettings.model_fields["max_port"].default,
) -> Command:
    """Validate the parameters of query ``name`` and format its command.

    Raises:
        InvalidParameterError: unknown query, missing, superfluous or
            malformed parameter.
    """
    kind = _kind(name)
    spec = CATALOG[kind]

    if spec.param is Param.PORT:
        if mac is not None:
            raise InvalidParameterError(f"Query '{kind.value}' takes no MAC address")
        if port is None:
            raise InvalidParameterError(f"Query '{kind.value}' requires a port")
        port = validate_port(port, max_port)
        return Command(spec.template.format(port=port), kind, port=port)

    if spec.param is Param.MAC:
        if port is not None:
            raise InvalidParameterError(f"Query '{kind.value}' takes no port")
        if mac is None:
            raise InvalidParameterError(f"Query '{kind.value}' requires a MAC address")
        mac = validate_mac(mac)
        return Command(spec.template.format(mac=mac), kind, mac=mac)

    if port is not None or mac is not None:
        raise InvalidParameterError(f"Query '{kind.value}' takes no parameters")
    return Command(spec.template, kind)


def run(session: Session, command: Command) -> Any:
    """Execute a resolved command and shape its parsed output."""
    spec = CATALOG[command.kind]
    block = session.execute(command.text)
    result = spec.parser(block)
    errors = getattr(result, "errors", ())
    if errors:
        logger.warning(f"{command.text}: {len(errors)} row(s) could not be parsed")
    return spec.shape(result, command)


def query(session: Session, name: QueryKind | str, *, port: int | None = None, mac: str | None = None) -> Any:
    """Run the monitoring query ``name`` on ``session``.

    Parameters are validated before anything is sent. Table queries return a
    :class:`~gs1900ctl.models.TableResult`; per-port and per-address queries
    also filter the rows by the requested key, since the switch may answer
    with more than was asked for.
    """
    command = resolve(name, port=port, mac=mac, max_port=session.settings.max_port)
    logger.debug(f"query {command.kind.value}: {command.text!r}")
    return run(session, command)

