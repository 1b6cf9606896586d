"""Port and PoE control through the GS1900 web interface.

The SSH command line of the GS1900 is read-only for these settings, so writes
go through ``/cgi-bin/dispatcher.cgi`` like the browser UI does. Note that a
submitted form replaces *all* settings of the port, so fields not passed
explicitly are reset to their defaults.
"""

from __future__ import annotations

import re
import secrets
import string
import time

import requests
from loguru import logger

from gs1900ctl.catalog import validate_port
from gs1900ctl.config import SessionSettings
from gs1900ctl.exceptions import AuthenticationError, ControlError, InvalidParameterError
from gs1900ctl.models.poe import PoELimitMode, PoEPowerMode, PoEPriority
from gs1900ctl.models.port import DuplexMode, PortSpeed
from gs1900ctl.transport import BaseTransport

DISPATCHER_PATH = "cgi-bin/dispatcher.cgi"
CMD_SESSION = "1"
CMD_PORT = "770"
CMD_POE = "775"

POWER_LIMIT_MIN = 1000  # mW
POWER_LIMIT_MAX = 33000  # mW

_XSSID_RE = re.compile(r"setCookie\(.XSSID., .(.*?).\);")
_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

_PRIORITY_CODES = {
    PoEPriority.CRITICAL: "0",
    PoEPriority.HIGH: "1",
    PoEPriority.MEDIUM: "2",
    PoEPriority.LOW: "3",
}
_POWER_MODE_CODES = {
    PoEPowerMode.IEEE_802_3AF: "0",
    PoEPowerMode.LEGACY: "1",
    PoEPowerMode.PRE_802_3AT: "2",
    PoEPowerMode.IEEE_802_3AT: "3",
}
_DUPLEX_CODES = {DuplexMode.AUTO: "0", DuplexMode.FULL: "1", DuplexMode.HALF: "2"}
# The web form takes the same code for both modes.
_LIMIT_MODE_CODES = {PoELimitMode.CLASSIFICATION: "0", PoELimitMode.USER: "0"}


def obfuscate_password(password: str) -> str:
    """Encode ``password`` the way the GS1900 login page does.

    The result is 320 random alphanumerics. Every seventh character (index
    6, 13, 20, ...) carries the password backwards, index 122 holds the tens
    digit of its length and index 288 the units digit.
    """
    chars = list(password)
    result = []
    for x in range(320):
        if x % 7 == 6 and chars:
            result.append(chars.pop())
        elif x == 122:
            result.append(str(len(password) // 10) if len(password) >= 10 else "0")
        elif x == 288:
            result.append(str(len(password) % 10))
        else:
            result.append(secrets.choice(_ALPHABET))
    return "".join(result)


def speed_code(speed: PortSpeed) -> str:
    if speed.auto or speed.mbps is None:
        return "0"
    if speed.mbps >= 1000:
        return "3"
    if speed.mbps >= 100:
        return "2"
    if speed.mbps >= 10:
        return "1"
    return "0"


class WebControl(BaseTransport):
    """HTTP session on the switch's web interface.

    :meth:`connect` logs in and fetches the XSSID session token that every
    form submission must carry.
    """

    default_port = 80

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int | None = None,
        timeout: float = 10.0,
        login_delay: float = 0.5,
        max_port: int = SessionSettings.model_fields["max_port"].default,
    ):
        super().__init__(host, username, password, port)
        self.timeout = timeout
        # The switch needs a moment between login and login check.
        self.login_delay = login_delay
        self.max_port = max_port
        self.base_url = f"http://{host}" if self.port == 80 else f"http://{host}:{self.port}"
        self._session: requests.Session | None = None
        self._xssid: str | None = None

    @property
    def url(self) -> str:
        return f"{self.base_url}/{DISPATCHER_PATH}"

    def connect(self) -> None:
        """Log in and obtain the XSSID session token."""
        self._session = requests.Session()
        dummy = f"{int(time.time())}000"

        try:
            resp = self._session.get(
                self.url,
                params={
                    "login": "1",
                    "username": self.username,
                    "password": obfuscate_password(self.password),
                    "dummy": dummy,
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()

            if self.login_delay:
                time.sleep(self.login_delay)

            resp = self._session.get(self.url, params={"login_chk": "1", "dummy": dummy}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            self.disconnect()
            raise ControlError(f"HTTP login to {self.host} failed: {e}") from e

        if resp.text.strip() != "OK":
            self.disconnect()
            raise AuthenticationError(f"HTTP login to {self.host} rejected")

        try:
            resp = self._session.get(self.url, params={"cmd": CMD_SESSION}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            self.disconnect()
            raise ControlError(f"Fetching HTTP session from {self.host} failed: {e}") from e

        match = _XSSID_RE.search(resp.text)
        if not match:
            self.disconnect()
            raise ControlError(f"No XSSID session token from {self.host}")
        self._xssid = match.group(1)
        logger.info(f"HTTP login successful to {self.host}")

    def disconnect(self) -> None:
        self._xssid = None
        if self._session is not None:
            self._session.close()
            self._session = None

    def is_connected(self) -> bool:
        return self._session is not None and self._xssid is not None

    def control_port(
        self,
        port: int,
        enabled: bool,
        label: str = "",
        speed: PortSpeed | None = None,
        duplex: DuplexMode = DuplexMode.AUTO,
        flow_control: bool = False,
    ) -> None:
        """Submit the port settings form for ``port``."""
        port = validate_port(port, self.max_port)
        self._submit(
            {
                "cmd": CMD_PORT,
                "portlist": str(port),
                "descp": label,
                "state": "1" if enabled else "0",
                "speed": speed_code(speed or PortSpeed(auto=True)),
                "duplex": _DUPLEX_CODES[duplex],
                "fc": "1" if flow_control else "0",
            }
        )

    def control_poe(
        self,
        port: int,
        enabled: bool,
        priority: PoEPriority = PoEPriority.LOW,
        power_mode: PoEPowerMode = PoEPowerMode.IEEE_802_3AT,
        range_detection: bool = False,
        limit_mode: PoELimitMode = PoELimitMode.CLASSIFICATION,
        power_limit: int = 30000,
    ) -> None:
        """Submit the PoE settings form for ``port``. ``power_limit`` is mW."""
        port = validate_port(port, self.max_port)
        if not POWER_LIMIT_MIN <= power_limit <= POWER_LIMIT_MAX:
            raise InvalidParameterError(
                f"Power limit {power_limit} mW out of range {POWER_LIMIT_MIN}..{POWER_LIMIT_MAX}"
            )
        self._submit(
            {
                "cmd": CMD_POE,
                "portlist": str(port),
                "state": "1" if enabled else "0",
                "portPriority": _PRIORITY_CODES[priority],
                "portPowerMode": _POWER_MODE_CODES[power_mode],
                "portRangeDetection": "1" if range_detection else "0",
                "portLimitMode": _LIMIT_MODE_CODES[limit_mode],
                "portPowerLimit": str(power_limit),
                "poeTimeRange": "20",
            }
        )

    def _submit(self, form: dict[str, str]) -> None:
        if not self.is_connected():
            self.connect()
        session, xssid = self._session, self._xssid
        if session is None or xssid is None:
            raise ControlError(f"No HTTP session with {self.host}")
        data = dict(form, sysSubmit="Apply", XSSID=xssid)
        try:
            resp = session.post(self.url, data=data, cookies={"XSSID": xssid}, timeout=self.timeout)
        except requests.RequestException as e:
            raise ControlError(f"POST cmd={form['cmd']} failed: {e}") from e
        if resp.status_code >= 400:
            raise ControlError(f"POST cmd={form['cmd']} failed with HTTP {resp.status_code}", status_code=resp.status_code)
        logger.info(f"Applied cmd={form['cmd']} for port {form['portlist']} on {self.host}")
