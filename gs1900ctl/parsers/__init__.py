"""Parsers turning CLI output blocks into typed records.

Every parser is a pure function of a :class:`~gs1900ctl.models.RawBlock`.
Table parsers return a :class:`~gs1900ctl.models.TableResult` holding the
rows that parsed together with a :class:`~gs1900ctl.exceptions.ParseError`
per row that did not.
"""

from gs1900ctl.parsers.cable import parse_cable_diag
from gs1900ctl.parsers.fiber import parse_fiber_transceivers
from gs1900ctl.parsers.info import parse_switch_info
from gs1900ctl.parsers.interfaces import parse_interface_status, parse_interface_traffic
from gs1900ctl.parsers.lldp import parse_lldp_neighbors
from gs1900ctl.parsers.mac import parse_mac_table
from gs1900ctl.parsers.poe import parse_poe_consumption, parse_poe_debug
from gs1900ctl.parsers.vlan import parse_vlans

__all__ = [
    "parse_switch_info",
    "parse_lldp_neighbors",
    "parse_fiber_transceivers",
    "parse_mac_table",
    "parse_cable_diag",
    "parse_poe_consumption",
    "parse_poe_debug",
    "parse_interface_traffic",
    "parse_interface_status",
    "parse_vlans",
]
