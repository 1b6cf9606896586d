"""Exception hierarchy for GS1900 switch access.

Every error raised by the package derives from :class:`SwitchError`, so callers
can catch one base class, or pick the specific kind to decide whether to
reconnect, retry, re-parse or give up.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gs1900ctl.models.block import RawBlock


class SwitchError(Exception):
    """Base exception for all switch errors."""


class SwitchConnectionError(SwitchError, ConnectionError):
    """Transport lost or refused. The session must be re-established."""


class AuthenticationError(SwitchConnectionError):
    """Authentication failed (SSH or HTTP)."""


class StreamClosedError(SwitchConnectionError):
    """The shell channel terminated in the middle of a read."""


class SwitchTimeoutError(SwitchError, TimeoutError):
    """No data arrived within the read timeout.

    The session is left in an unknown state and is drained before reuse.
    """


class CommandError(SwitchError):
    """The device rejected a command. The session remains usable."""

    def __init__(self, message: str, command: str = "", block: RawBlock | None = None):
        self.command = command
        self.block = block
        super().__init__(message)

    @property
    def output(self) -> str:
        """Raw device output that triggered the error."""
        return self.block.text if self.block is not None else ""


class ParseError(SwitchError):
    """Output did not match the expected structure.

    Tabular parsers collect these per row (``line_no`` is 1-based within the
    raw block); single-record parsers raise them for the whole query.
    """

    def __init__(self, message: str, line_no: int | None = None, line: str = ""):
        self.line_no = line_no
        self.line = line
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (str(self), self.line_no, self.line) == (str(other), other.line_no, other.line)

    def __hash__(self) -> int:
        return hash((str(self), self.line_no, self.line))

    def __repr__(self) -> str:
        return f"ParseError({str(self)!r}, line_no={self.line_no!r}, line={self.line!r})"


class InvalidParameterError(SwitchError, ValueError):
    """Caller-supplied parameter rejected before any I/O."""


class ControlError(SwitchError):
    """HTTP control request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
