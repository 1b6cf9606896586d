"""Command line front end for GS1900 monitoring and port/PoE control.

Examples:
  # System information
  gs1900ctl --host 192.168.1.1 --password <PW> switch-info

  # MAC addresses learned on port 5
  gs1900ctl --host 192.168.1.1 --password <PW> mac-table-port 5

  # Where is a device connected?
  gs1900ctl --host 192.168.1.1 --password <PW> mac-lookup 00:11:22:33:44:55

  # Power-cycle a PoE device (web interface; resets the port's PoE settings)
  gs1900ctl --host 192.168.1.1 --password <PW> poe-disable 7
  gs1900ctl --host 192.168.1.1 --password <PW> poe-enable 7 --priority high
"""

from __future__ import annotations

import argparse
import os
import sys
from enum import Enum
from typing import Any

from pydantic import BaseModel
from tabulate import tabulate

from gs1900ctl import configure_logging, glogger
from gs1900ctl.catalog import CATALOG, Param, QueryKind
from gs1900ctl.client import GS1900Switch
from gs1900ctl.config import ENV_PREFIX, SessionSettings
from gs1900ctl.exceptions import SwitchError
from gs1900ctl.models import PoEPowerMode, PoEPriority, PoEReport, TableResult
from gs1900ctl.models.port import DuplexMode, PortSpeed
from gs1900ctl.parsers.base import parse_speed

QUERY_HELP = {
    QueryKind.SWITCH_INFO: "System information (show info)",
    QueryKind.LLDP_NEIGHBORS: "LLDP neighbors",
    QueryKind.FIBER_TRANSCEIVERS: "SFP diagnostics of all ports",
    QueryKind.FIBER_TRANSCEIVER_PORT: "SFP diagnostics of one port",
    QueryKind.MAC_TABLE: "MAC address table",
    QueryKind.MAC_TABLE_PORT: "MAC addresses learned on one port",
    QueryKind.MAC_LOOKUP: "Find the port a MAC address was learned on",
    QueryKind.CABLE_DIAG: "Cable diagnostics of all ports",
    QueryKind.CABLE_DIAG_PORT: "Cable diagnostics of one port",
    QueryKind.POE_CONSUMPTION: "PoE configuration, supplies and per-port draw",
    QueryKind.POE_DEBUG: "PoE controller state per port",
    QueryKind.INTERFACE_TRAFFIC: "Traffic counters of all ports",
    QueryKind.INTERFACE_TRAFFIC_PORT: "Traffic counters of one port",
    QueryKind.INTERFACE_STATUS: "Link status of all ports",
    QueryKind.VLANS: "VLANs and their member ports",
}

CONTROL_COMMANDS = ("port-enable", "port-disable", "poe-enable", "poe-disable")


def _cell(value: Any) -> Any:
    if value is None:
        return "-"
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (frozenset, set)):
        return ", ".join(sorted(_cell(v) for v in value)) or "-"
    if isinstance(value, tuple):
        return ", ".join(str(_cell(v)) for v in value) or "-"
    if isinstance(value, BaseModel):
        return str(value)
    return value


def _record_row(record: BaseModel, exclude: set[str] | None = None) -> dict[str, Any]:
    return {k: _cell(getattr(record, k)) for k in type(record).model_fields if not exclude or k not in exclude}


def render_table(records: Any, exclude: set[str] | None = None) -> str:
    rows = [_record_row(r, exclude) for r in records]
    if not rows:
        return "(no entries)"
    return tabulate(rows, headers="keys", tablefmt="simple")


def render_record(record: BaseModel) -> str:
    return tabulate(list(_record_row(record).items()), tablefmt="plain")


def render(result: Any) -> str:
    """Format a query result for the terminal."""
    if result is None:
        return "(not found)"
    if isinstance(result, PoEReport):
        parts = [
            render_record(result.config),
            render_table(result.supplies),
            render_table(result.ports),
        ]
        return "\n\n".join(parts)
    if isinstance(result, TableResult):
        if result.records and hasattr(result.records[0], "pairs"):
            return render_table(result, exclude={"pairs"}) + "\n\n" + _render_pairs(result)
        return render_table(result)
    if isinstance(result, BaseModel):
        return render_record(result)
    return str(result)


def _render_pairs(result: TableResult[Any]) -> str:
    rows = [
        {"port": r.port, "pair": p.pair, "length m": _cell(p.length), "status": _cell(p.status)}
        for r in result
        for p in r.pairs
    ]
    return tabulate(rows, headers="keys", tablefmt="simple") if rows else ""


def _speed_arg(text: str) -> PortSpeed:
    try:
        return parse_speed(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _errors_of(result: Any) -> tuple[Any, ...]:
    return getattr(result, "errors", ())


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gs1900ctl",
        description="Zyxel GS1900 monitoring over SSH, port/PoE control over HTTP",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", required=True, help="Switch IP address or hostname")
    parser.add_argument("--username", default="admin", help="Username (default: admin)")
    parser.add_argument(
        "--password",
        default=os.getenv(ENV_PREFIX + "PASSWORD"),
        help=f"Password (default: ${ENV_PREFIX}PASSWORD)",
    )
    parser.add_argument("--ssh-port", type=int, help="SSH port (default: 22)")
    parser.add_argument("--web-port", type=int, help="HTTP port (default: 80)")
    parser.add_argument("--timeout", type=float, help="Read timeout in seconds")
    parser.add_argument("--max-port", type=int, help="Highest port number of the model")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for kind, spec in CATALOG.items():
        sub = subparsers.add_parser(kind.value, help=QUERY_HELP[kind])
        if spec.param is Param.PORT:
            sub.add_argument("port", type=int, help="Port number")
        elif spec.param is Param.MAC:
            sub.add_argument("mac", help="MAC address (aa:bb:cc:dd:ee:ff, aa-bb-..., aabb.ccdd.eeff)")

    for name in ("port-enable", "port-disable"):
        sub = subparsers.add_parser(name, help=f"{name.split('-')[1].capitalize()} a port (web interface)")
        sub.add_argument("port", type=int, help="Port number")
        sub.add_argument("--label", default="", help="Port description")
        sub.add_argument("--speed", type=_speed_arg, default=PortSpeed(auto=True), help="auto, 10M, 100M or 1000M")
        sub.add_argument("--duplex", choices=[d.value for d in DuplexMode], default="auto")
        sub.add_argument("--flow-control", action="store_true", help="Enable flow control")

    for name in ("poe-enable", "poe-disable"):
        sub = subparsers.add_parser(name, help=f"{name.split('-')[1].capitalize()} PoE on a port (web interface)")
        sub.add_argument("port", type=int, help="Port number")
        sub.add_argument("--priority", choices=[p.value for p in PoEPriority], default="low")
        sub.add_argument("--power-mode", choices=[m.value for m in PoEPowerMode], default="802.3at")
        sub.add_argument("--range-detection", action="store_true")
        sub.add_argument("--power-limit", type=int, default=30000, help="Power limit in mW (1000-33000)")

    return parser


def _settings(parsed: argparse.Namespace) -> SessionSettings:
    return SessionSettings.from_env(read_timeout=parsed.timeout, max_port=parsed.max_port)


def run_query(switch: GS1900Switch, parsed: argparse.Namespace) -> None:
    kind = QueryKind(parsed.command)
    result = switch.query(kind, port=getattr(parsed, "port", None), mac=getattr(parsed, "mac", None))
    print(render(result))
    for error in _errors_of(result):
        glogger.warning(f"Unparsed output: {error}")


def run_control(switch: GS1900Switch, parsed: argparse.Namespace) -> None:
    enabled = parsed.command.endswith("-enable")
    if parsed.command.startswith("port-"):
        switch.set_port_state(
            parsed.port,
            enabled,
            label=parsed.label,
            speed=parsed.speed,
            duplex=DuplexMode(parsed.duplex),
            flow_control=parsed.flow_control,
        )
    else:
        switch.set_poe_state(
            parsed.port,
            enabled,
            priority=PoEPriority(parsed.priority),
            power_mode=PoEPowerMode(parsed.power_mode),
            range_detection=parsed.range_detection,
            power_limit=parsed.power_limit,
        )
    print(f"{parsed.command} applied to port {parsed.port}")


def main(args: list[str] | None = None) -> None:
    """Main entry point for the gs1900ctl CLI."""
    parser = build_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        sys.exit(1)
    if not parsed.password:
        parser.error(f"--password or ${ENV_PREFIX}PASSWORD is required")

    if parsed.verbose:
        configure_logging()
        glogger.enable("gs1900ctl")

    try:
        with GS1900Switch(
            host=parsed.host,
            username=parsed.username,
            password=parsed.password,
            ssh_port=parsed.ssh_port,
            web_port=parsed.web_port,
            settings=_settings(parsed),
        ) as switch:
            if parsed.command in CONTROL_COMMANDS:
                run_control(switch, parsed)
            else:
                run_query(switch, parsed)
    except SwitchError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
