"""Shared fixtures for the gs1900ctl test suite."""

from __future__ import annotations

import threading
import time
from collections import deque
from unittest.mock import MagicMock

import pytest

from gs1900ctl.config import SessionSettings
from gs1900ctl.session.driver import Session

PROMPT = "GS1900"
BANNER = "\r\n\r\nWelcome to GS1900-24HP\r\n\r\n"
INVALID_INPUT = "% Invalid input detected at '^' marker."
ERASE_MARKER = "\x08" * 8 + " " * 8 + "\x08" * 8

# Command outputs with these values do not produce a normal answer.
SILENT = object()
HANGUP = object()


class FakeShellChannel:
    """Scripted stand-in for a paramiko interactive shell on a GS1900.

    Echoes every command, answers from ``outputs`` (unknown commands get the
    device's ``% Invalid input`` error), pages long answers after
    ``page_size`` lines with a ``--More--`` marker and prints the prompt
    without a trailing newline. ``delay`` slows down every ``recv``.
    """

    def __init__(
        self,
        outputs: dict[str, object] | None = None,
        prompt: str = PROMPT + "#",
        banner: str = BANNER,
        page_size: int | None = None,
        delay: float = 0.0,
        echo: bool = True,
    ):
        self.outputs = dict(outputs or {})
        self.prompt = prompt
        self.page_size = page_size
        self.delay = delay
        self.echo = echo
        self.sent: list[str] = []
        self.closed = False
        self.timeout: float | None = None
        self.close_calls = 0
        self._queue: deque[bytes] = deque()
        self._pages: list[str] = []
        self._cond = threading.Condition()
        self.push(banner + prompt + " ")

    # ── channel API ──────────────────────────────────────────────────

    def settimeout(self, timeout: float | None) -> None:
        self.timeout = timeout

    def recv(self, nbytes: int) -> bytes:
        with self._cond:
            if not self._queue and not self.closed:
                self._cond.wait(self.timeout)
            if not self._queue:
                if self.closed:
                    return b""
                raise TimeoutError("timed out")
            data = self._queue.popleft()
        if self.delay:
            time.sleep(self.delay)
        return data[:nbytes]

    def send(self, data: bytes) -> int:
        text = data.decode()
        self.sent.append(text)
        if text == " " and self._pages:
            self.push(ERASE_MARKER + self._next_page())
            return len(data)

        command = text.rstrip("\n")
        if not command:
            self.push("\r\n" + self.prompt + " ")
            return len(data)

        output = self.outputs.get(command, INVALID_INPUT)
        echo = command + "\r\n" if self.echo else ""
        if output is SILENT:
            if echo:
                self.push(echo)
            return len(data)
        if output is HANGUP:
            self.close()
            return len(data)

        assert isinstance(output, str)
        lines = output.splitlines()
        size = self.page_size or len(lines) or 1
        self._pages = ["".join(line + "\r\n" for line in lines[i : i + size]) for i in range(0, len(lines), size)]
        self.push(echo + self._next_page())
        return len(data)

    def close(self) -> None:
        with self._cond:
            self.close_calls += 1
            self.closed = True
            self._cond.notify_all()

    # ── scripting helpers ────────────────────────────────────────────

    def push(self, data: str | bytes) -> None:
        """Queue raw shell output for the next ``recv``."""
        raw = data.encode() if isinstance(data, str) else data
        with self._cond:
            self._queue.append(raw)
            self._cond.notify_all()

    def commands(self) -> list[str]:
        """Sent command lines, without continuation keys."""
        return [s.rstrip("\n") for s in self.sent if s != " "]

    def _next_page(self) -> str:
        page = self._pages.pop(0) if self._pages else ""
        return page + ("--More--" if self._pages else self.prompt + " ")


# ── session fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def fast_settings():
    """Settings with a short read timeout so timeout paths run quickly."""
    return SessionSettings(read_timeout=0.2)


@pytest.fixture()
def make_session(fast_settings):
    """Factory fixture returning a started Session on a FakeShellChannel."""

    def _make(outputs=None, settings=None, **channel_kwargs):
        channel = FakeShellChannel(outputs, **channel_kwargs)
        session = Session(channel, settings or fast_settings)
        session.start()
        return session, channel

    return _make


@pytest.fixture()
def mock_session():
    """MagicMock of Session whose execute() returns a configurable RawBlock."""
    session = MagicMock()
    session.settings = SessionSettings()
    return session


# ── web control fixtures ─────────────────────────────────────────────


def http_response(text: str = "", status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.text = text
    resp.status_code = status_code
    resp.raise_for_status.return_value = None
    return resp


@pytest.fixture()
def mock_http_session():
    """MagicMock of requests.Session answering a successful GS1900 login."""
    http = MagicMock()
    http.get.side_effect = [
        http_response(""),
        http_response("OK\n"),
        http_response("<script>setCookie('XSSID', 'abc123XYZ');</script>"),
    ]
    http.post.return_value = http_response("")
    return http
