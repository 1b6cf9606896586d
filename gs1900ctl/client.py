"""High-level client for one GS1900 switch."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Self

from loguru import logger

from gs1900ctl.catalog import QueryKind, query
from gs1900ctl.config import SessionSettings
from gs1900ctl.control.web import WebControl
from gs1900ctl.models import (
    CableDiagResult,
    FiberTransceiverInfo,
    InterfaceStatus,
    InterfaceTraffic,
    LldpNeighbor,
    MacEntry,
    PoEDebugInfo,
    PoEReport,
    SwitchInfo,
    TableResult,
    VlanInfo,
)
from gs1900ctl.session.driver import Session
from gs1900ctl.session.ssh import SSHTransport


class GS1900Switch:
    """Client for Zyxel GS1900 switch monitoring and port/PoE control.

    Reads go through the SSH command line; writes go through the web
    interface, which is only logged into on first use.

    Usage::

        with GS1900Switch(host="192.168.1.1", username="admin", password="secret") as switch:
            info = switch.switch_info()
            print(info.model, info.firmware_version)
            for neighbor in switch.lldp_neighbors():
                print(neighbor.port, neighbor.system_name)
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        ssh_port: int | None = None,
        web_port: int | None = None,
        settings: SessionSettings | None = None,
    ) -> None:
        self.host = host
        self.settings = settings or SessionSettings()
        self._ssh = SSHTransport(host=host, username=username, password=password, port=ssh_port, settings=self.settings)
        self._web = WebControl(
            host=host,
            username=username,
            password=password,
            port=web_port,
            timeout=self.settings.connect_timeout,
            max_port=self.settings.max_port,
        )

    @property
    def session(self) -> Session:
        self._ensure_ssh()
        return self._ssh.session

    def connect(self) -> None:
        """Establish the SSH session."""
        self._ssh.connect()

    def disconnect(self) -> None:
        """Close SSH and HTTP sessions."""
        if self._ssh.is_connected():
            self._ssh.disconnect()
        if self._web.is_connected():
            self._web.disconnect()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        self.disconnect()

    def query(self, name: QueryKind | str, *, port: int | None = None, mac: str | None = None) -> Any:
        return query(self.session, name, port=port, mac=mac)

    def keepalive(self) -> None:
        self.session.keepalive()

    # ── monitoring ────────────────────────────────────────────────────

    def switch_info(self) -> SwitchInfo:
        return self.query(QueryKind.SWITCH_INFO)

    def lldp_neighbors(self) -> TableResult[LldpNeighbor]:
        return self.query(QueryKind.LLDP_NEIGHBORS)

    def fiber_transceivers(self) -> TableResult[FiberTransceiverInfo]:
        return self.query(QueryKind.FIBER_TRANSCEIVERS)

    def fiber_transceiver(self, port: int) -> FiberTransceiverInfo:
        return self.query(QueryKind.FIBER_TRANSCEIVER_PORT, port=port)

    def mac_table(self, port: int | None = None) -> TableResult[MacEntry]:
        if port is None:
            return self.query(QueryKind.MAC_TABLE)
        return self.query(QueryKind.MAC_TABLE_PORT, port=port)

    def lookup_mac(self, mac: str) -> MacEntry | None:
        return self.query(QueryKind.MAC_LOOKUP, mac=mac)

    def cable_diag(self) -> TableResult[CableDiagResult]:
        return self.query(QueryKind.CABLE_DIAG)

    def cable_diag_port(self, port: int) -> CableDiagResult | None:
        return self.query(QueryKind.CABLE_DIAG_PORT, port=port)

    def poe_consumption(self) -> PoEReport:
        return self.query(QueryKind.POE_CONSUMPTION)

    def poe_debug(self) -> TableResult[PoEDebugInfo]:
        return self.query(QueryKind.POE_DEBUG)

    def interface_traffic(self) -> TableResult[InterfaceTraffic]:
        return self.query(QueryKind.INTERFACE_TRAFFIC)

    def interface_traffic_port(self, port: int) -> InterfaceTraffic:
        return self.query(QueryKind.INTERFACE_TRAFFIC_PORT, port=port)

    def interface_status(self) -> TableResult[InterfaceStatus]:
        return self.query(QueryKind.INTERFACE_STATUS)

    def vlans(self) -> TableResult[VlanInfo]:
        return self.query(QueryKind.VLANS)

    # ── control (web interface) ──────────────────────────────────────

    def set_port_state(self, port: int, enabled: bool, **kwargs: Any) -> None:
        """Enable or disable ``port``; see :meth:`WebControl.control_port`."""
        logger.info(f"{'Enabling' if enabled else 'Disabling'} port {port} on {self.host}")
        self._web.control_port(port, enabled, **kwargs)

    def set_poe_state(self, port: int, enabled: bool, **kwargs: Any) -> None:
        """Enable or disable PoE on ``port``; see :meth:`WebControl.control_poe`."""
        logger.info(f"{'Enabling' if enabled else 'Disabling'} PoE on port {port} on {self.host}")
        self._web.control_poe(port, enabled, **kwargs)

    def _ensure_ssh(self) -> None:
        if not self._ssh.is_connected():
            self._ssh.connect()
