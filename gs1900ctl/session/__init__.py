"""Shell session layer: line reader, command session and SSH transport."""

from gs1900ctl.session.driver import Session
from gs1900ctl.session.reader import LineReader, ReaderState
from gs1900ctl.session.ssh import SSHTransport

__all__ = ["LineReader", "ReaderState", "Session", "SSHTransport"]
