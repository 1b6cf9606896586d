"""Command/response session on top of the line reader."""

from __future__ import annotations

import re
import threading
from typing import Self

from loguru import logger

from gs1900ctl.config import SessionSettings
from gs1900ctl.exceptions import CommandError, SwitchConnectionError, SwitchTimeoutError
from gs1900ctl.models.block import RawBlock
from gs1900ctl.session.reader import Channel, LineReader


class Session:
    """One logged-in shell on the switch.

    Commands are strictly serialized: :meth:`execute` holds a lock for the
    whole send/read round trip, so concurrent callers queue up instead of
    interleaving their output. A round trip that ends in a timeout or an
    interruption leaves the session *dirty*; the next :meth:`execute` first
    reads the stale output away up to the prompt.
    """

    def __init__(self, channel: Channel, settings: SessionSettings | None = None):
        self.channel = channel
        self.settings = settings or SessionSettings()
        self.reader = LineReader(
            channel,
            pager_marker=self.settings.pager_marker,
            continuation_key=self.settings.continuation_key,
            timeout=self.settings.read_timeout,
            encoding=self.settings.encoding,
        )
        self.prompt: str | None = None
        self.authenticated = False
        self.busy = False
        self.dirty = False

        self._lock = threading.Lock()
        self._prompt_re: re.Pattern[str] | None = None
        self._error_res = self.settings.compiled_error_patterns

    def start(self) -> str:
        """Consume the login banner and learn the prompt.

        From here on the prompt is matched literally, so output that merely
        resembles a prompt does not end a command early.
        """
        with self._lock:
            prompt = self.reader.wait_for_prompt(self.settings.prompt_pattern)
            self.prompt = prompt
            self._prompt_re = re.compile(re.escape(prompt))
            self.authenticated = True
            logger.info(f"Session ready, prompt {prompt!r}")
            return prompt

    def execute(self, command: str) -> RawBlock:
        """Send ``command`` and return its output up to the next prompt.

        The echoed command line and the prompt are not part of the block.

        Raises:
            SwitchConnectionError: the session is not started or was closed.
            SwitchTimeoutError: the switch stopped answering.
            StreamClosedError: the channel closed mid-read.
            CommandError: the switch rejected the command.
        """
        with self._lock:
            self._ensure_ready()
            self.busy = True
            try:
                if self.dirty:
                    self._drain()
                return self._round_trip(command)
            finally:
                self.busy = False

    def keepalive(self) -> None:
        """Send a bare newline and discard the answer."""
        with self._lock:
            self._ensure_ready()
            self.busy = True
            try:
                if self.dirty:
                    self._drain()
                self._send("")
                self._read_lines()
            finally:
                self.busy = False

    def close(self) -> None:
        self.authenticated = False
        try:
            self.channel.close()
        except (OSError, EOFError) as e:
            logger.debug(f"Closing shell channel: {e}")

    def __enter__(self) -> Self:
        if not self.authenticated:
            self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _ensure_ready(self) -> None:
        if not self.authenticated or self._prompt_re is None:
            raise SwitchConnectionError("Session is not started or already closed")

    def _send(self, command: str) -> None:
        logger.debug(f"-> {command!r}")
        self.reader.send(command + "\n")

    def _read_lines(self) -> list[str]:
        """Read to the prompt; a failed or interrupted read marks the session dirty."""
        if self._prompt_re is None:
            raise SwitchConnectionError("Session is not started")
        self.dirty = True
        lines = list(self.reader.read_until(self._prompt_re))
        self.dirty = False
        return lines

    def _drain(self) -> None:
        """Read stale output of an earlier round trip away, up to the prompt.

        Nothing is sent first, so the drain does not cause an extra prompt. If
        the prompt already went by, one bare newline provokes a fresh one.
        """
        logger.warning("Session was left mid-command, draining to the prompt")
        try:
            self._read_lines()
        except SwitchTimeoutError:
            self._send("")
            self._read_lines()

    def _round_trip(self, command: str) -> RawBlock:
        self._send(command)
        lines = self._read_lines()

        if lines and command.strip() and command.strip() in lines[0]:
            lines = lines[1:]
        elif command.strip():
            logger.warning(f"No echo of {command!r} in the first output line")

        block = RawBlock(command=command, lines=tuple(lines))
        for line in block.lines:
            for pattern in self._error_res:
                if pattern.search(line):
                    raise CommandError(f"Switch rejected {command!r}: {line.strip()}", command=command, block=block)
        return block
