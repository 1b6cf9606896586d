"""Incremental line reader for the GS1900 interactive shell.

The shell is a character stream written for a terminal: lines end in CR LF,
long listings stop at a ``--More--`` pager marker until a key is pressed, the
marker is erased again with ANSI escapes or backspaces, and the command prompt
is printed without a trailing newline. :class:`LineReader` turns that stream
into the plain sequence of lines a command produced.
"""

from __future__ import annotations

import codecs
import re
from enum import Enum
from typing import Iterator, Protocol

from loguru import logger

from gs1900ctl.exceptions import StreamClosedError, SwitchTimeoutError

BUFFER_SIZE = 65535

# CSI sequences (ESC [ ... final) and two-character escapes (ESC x).
_ANSI_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b[@-Z\\-_]")
# An escape sequence or CR run cut off at the end of a chunk.
_PARTIAL_RE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*)?$|\r+$")
# CR LF, LF CR and bare CR are all one line break.
_NEWLINE_RE = re.compile(r"\r*\n\r*|\r+")


class Channel(Protocol):
    """The subset of :class:`paramiko.Channel` the reader needs."""

    closed: bool

    def recv(self, nbytes: int) -> bytes: ...

    def send(self, data: bytes) -> int: ...

    def settimeout(self, timeout: float | None) -> None: ...

    def close(self) -> None: ...


class ReaderState(Enum):
    READING = "reading"
    AWAITING_CONTINUATION = "awaiting_continuation"


class LineReader:
    """Yield the logical lines of one command's output.

    Args:
        channel: Interactive shell channel (``recv``/``send``/``settimeout``).
        pager_marker: Text the device shows when it pauses a long listing.
        continuation_key: Keystroke that resumes a paused listing.
        timeout: Seconds a single ``recv`` may block.
        encoding: Text encoding of the shell.
    """

    def __init__(
        self,
        channel: Channel,
        pager_marker: str = "--More--",
        continuation_key: str = " ",
        timeout: float = 10.0,
        encoding: str = "utf-8",
    ):
        self.channel = channel
        self.pager_marker = pager_marker
        self.continuation_key = continuation_key
        self.timeout = timeout
        self.encoding = encoding
        self.state = ReaderState.READING
        self.last_prompt: str | None = None

        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._escape = ""
        self._line = ""
        self._skip_blank = False

    def read_until(self, prompt: re.Pattern[str] | str) -> Iterator[str]:
        """Yield lines until the shell shows ``prompt``.

        ``prompt`` is a regular expression (or its source) that must match the
        whole unterminated last line. Pager stops are answered transparently,
        so the caller sees the listing as if it had never been paged. When the
        generator finishes, :attr:`last_prompt` holds the prompt text.

        Raises:
            SwitchTimeoutError: no data arrived within ``timeout``.
            StreamClosedError: the channel closed before the prompt.
        """
        pattern = re.compile(prompt) if isinstance(prompt, str) else prompt
        self._line = ""
        self._skip_blank = False
        self.state = ReaderState.READING

        while True:
            if self.state is ReaderState.AWAITING_CONTINUATION:
                logger.debug("pager stop, sending continuation key")
                self.send(self.continuation_key)
                self._line = self._line[: self._line.rfind(self.pager_marker)]
                self._skip_blank = True
                self.state = ReaderState.READING
                continue

            for line in self._feed(self._recv()):
                yield from self._emit(line)

            tail = self._line.strip()
            if self.pager_marker and tail.endswith(self.pager_marker):
                self.state = ReaderState.AWAITING_CONTINUATION
            elif pattern.fullmatch(tail):
                self.last_prompt = tail
                self._line = ""
                return

    def wait_for_prompt(self, prompt: re.Pattern[str] | str) -> str:
        """Discard output (login banner, screen clear) up to the prompt and return it."""
        for line in self.read_until(prompt):
            logger.debug(f"banner: {line}")
        if self.last_prompt is None:
            raise StreamClosedError("Shell output ended without a prompt")
        return self.last_prompt

    def _recv(self) -> str:
        if self.channel.closed:
            raise StreamClosedError("Shell channel is closed")
        self.channel.settimeout(self.timeout)
        try:
            data = self.channel.recv(BUFFER_SIZE)
        except TimeoutError as e:
            raise SwitchTimeoutError(f"No data from switch within {self.timeout}s") from e
        except (OSError, EOFError) as e:
            raise StreamClosedError(f"Shell channel failed: {e}") from e
        if not data:
            raise StreamClosedError("Shell channel closed by the switch")
        return self._decoder.decode(data)

    def send(self, text: str) -> None:
        try:
            self.channel.send(text.encode(self.encoding))
        except (OSError, EOFError) as e:
            raise StreamClosedError(f"Shell channel failed: {e}") from e

    def _feed(self, text: str) -> list[str]:
        """Clean ``text`` and return the lines it completes."""
        text = self._escape + text
        partial = _PARTIAL_RE.search(text)
        if partial:
            self._escape = text[partial.start() :]
            text = text[: partial.start()]
        else:
            self._escape = ""
        text = _NEWLINE_RE.sub("\n", _ANSI_RE.sub("", text)).replace("\x00", "")

        lines: list[str] = []
        line = self._line
        for char in text:
            if char == "\n":
                lines.append(line)
                line = ""
            elif char == "\x08":
                line = line[:-1]
            else:
                line += char
        self._line = line
        return lines

    def _emit(self, line: str) -> Iterator[str]:
        if self.pager_marker and line.strip().startswith(self.pager_marker):
            # A marker that already got its newline; keep what follows it.
            line = line[line.index(self.pager_marker) + len(self.pager_marker) :]
            if not line.strip():
                self._skip_blank = False
                return
        if self._skip_blank:
            self._skip_blank = False
            if not line.strip():
                return
        yield line.rstrip()
