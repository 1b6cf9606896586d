"""SSH transport opening the interactive GS1900 shell."""

from __future__ import annotations

import paramiko
from loguru import logger

from gs1900ctl.config import SessionSettings
from gs1900ctl.exceptions import AuthenticationError, SwitchConnectionError
from gs1900ctl.session.driver import Session
from gs1900ctl.transport import BaseTransport

# Wide enough that the switch never wraps table rows itself.
TERMINAL_WIDTH = 511
TERMINAL_HEIGHT = 24


class SSHTransport(BaseTransport):
    """SSH transport using a paramiko interactive shell.

    The GS1900 has no exec channel, so every command goes through one
    interactive shell. :meth:`connect` authenticates, opens the shell and
    starts a :class:`Session` on it. Credentials are passed explicitly; there
    are no default credentials.
    """

    default_port = 22

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int | None = None,
        settings: SessionSettings | None = None,
    ):
        super().__init__(host, username, password, port)
        self.settings = settings or SessionSettings()
        self._client: paramiko.SSHClient | None = None
        self._shell: paramiko.Channel | None = None
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise SwitchConnectionError("Not connected. Call connect() first.")
        return self._session

    def connect(self) -> None:
        """Establish SSH connection, open the shell and wait for the prompt."""
        self._client = paramiko.SSHClient()
        self._client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        try:
            self._client.connect(
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                look_for_keys=False,
                allow_agent=False,
                timeout=self.settings.connect_timeout,
            )
            self._shell = self._client.invoke_shell(width=TERMINAL_WIDTH, height=TERMINAL_HEIGHT)
        except paramiko.AuthenticationException as e:
            self.disconnect()
            raise AuthenticationError(f"SSH authentication failed: {e}") from e
        except (paramiko.SSHException, OSError) as e:
            self.disconnect()
            raise SwitchConnectionError(f"SSH connection to {self.host} failed: {e}") from e

        self._session = Session(self._shell, self.settings)
        try:
            self._session.start()
        except Exception:
            self.disconnect()
            raise
        logger.info(f"SSH connected to {self.host}")

    def disconnect(self) -> None:
        """Close SSH shell and connection."""
        if self._session is not None:
            self._session.authenticated = False
            self._session = None
        if self._shell is not None:
            try:
                self._shell.close()
            except (paramiko.SSHException, OSError) as e:
                logger.debug(f"Closing SSH shell: {e}")
            self._shell = None
        if self._client is not None:
            self._client.close()
            self._client = None

    def is_connected(self) -> bool:
        """Check if SSH connection and shell are active."""
        if self._client is None or self._shell is None:
            return False
        transport = self._client.get_transport()
        return transport is not None and transport.is_active() and not self._shell.closed
