"""Tests for Session: round trips, device errors, draining and locking."""

import threading
import time

import pytest

from conftest import HANGUP, INVALID_INPUT, SILENT, FakeShellChannel
from gs1900ctl.config import SessionSettings
from gs1900ctl.exceptions import CommandError, StreamClosedError, SwitchConnectionError, SwitchTimeoutError
from gs1900ctl.session.driver import Session

INFO = "System Name : GS1900\nIP Address  : 192.168.1.1"
LONG = "\n".join(f"line {i}" for i in range(1, 8))


class TestStart:
    """Test Session.start()."""

    def test_learns_prompt(self, make_session):
        session, _ = make_session()
        assert session.prompt == "GS1900#"
        assert session.authenticated is True

    def test_nothing_sent_during_start(self, make_session):
        _, channel = make_session()
        assert channel.sent == []

    def test_execute_before_start_rejected(self, fast_settings):
        session = Session(FakeShellChannel({"show info": INFO}), fast_settings)
        with pytest.raises(SwitchConnectionError):
            session.execute("show info")

    def test_read_before_start_rejected(self, fast_settings):
        session = Session(FakeShellChannel({"show info": INFO}), fast_settings)
        with pytest.raises(SwitchConnectionError, match="not started"):
            session._read_lines()

    def test_context_manager_starts_and_closes(self, fast_settings):
        channel = FakeShellChannel({"show info": INFO})
        with Session(channel, fast_settings) as session:
            assert session.authenticated
        assert channel.closed
        assert not session.authenticated


class TestExecute:
    """Test the command round trip."""

    def test_block_without_echo_and_prompt(self, make_session):
        session, _ = make_session({"show info": INFO})
        block = session.execute("show info")

        assert block.command == "show info"
        assert block.lines == ("System Name : GS1900", "IP Address  : 192.168.1.1")

    def test_command_sent_once_with_newline(self, make_session):
        session, channel = make_session({"show info": INFO})
        session.execute("show info")
        assert channel.sent == ["show info\n"]

    def test_paged_output_is_complete(self, make_session):
        session, channel = make_session({"show vlan": LONG}, page_size=3)
        block = session.execute("show vlan")

        assert block.lines == tuple(LONG.splitlines())
        assert channel.sent.count(" ") == 2

    def test_paged_equals_unpaged(self, make_session):
        paged, _ = make_session({"show vlan": LONG}, page_size=2)
        unpaged, _ = make_session({"show vlan": LONG})
        assert paged.execute("show vlan") == unpaged.execute("show vlan")

    def test_empty_output(self, make_session):
        session, _ = make_session({"show lldp neighbor": ""})
        assert session.execute("show lldp neighbor").lines == ()

    def test_missing_echo_keeps_all_lines(self, make_session):
        session, _ = make_session({"show info": INFO}, echo=False)
        block = session.execute("show info")
        assert block.lines == tuple(INFO.splitlines())

    def test_prompt_bound_literally(self, fast_settings):
        """After start, another prompt-like tail does not end the output."""
        channel = FakeShellChannel({"show log": SILENT}, echo=False)
        session = Session(channel, fast_settings)
        session.start()
        channel.push("show log\r\nrouter#")
        channel.push(" rebooted\r\nGS1900# ")

        block = session.execute("show log")
        assert block.lines == ("router# rebooted",)

    def test_busy_only_during_round_trip(self, make_session):
        session, channel = make_session({"show vlan": LONG}, page_size=1, delay=0.02)
        seen = []

        worker = threading.Thread(target=session.execute, args=("show vlan",))
        worker.start()
        deadline = time.monotonic() + 2
        while not channel.sent and time.monotonic() < deadline:
            time.sleep(0.001)
        seen.append(session.busy)
        worker.join()

        assert seen == [True]
        assert session.busy is False


class TestDeviceErrors:
    """Test recognition of rejected commands."""

    def test_invalid_input_raises_command_error(self, make_session):
        session, _ = make_session()
        with pytest.raises(CommandError) as exc_info:
            session.execute("show bogus")

        assert exc_info.value.command == "show bogus"
        assert exc_info.value.block.lines == (INVALID_INPUT,)
        assert INVALID_INPUT in exc_info.value.output

    def test_session_usable_after_command_error(self, make_session):
        session, _ = make_session({"show info": INFO})
        with pytest.raises(CommandError):
            session.execute("show bogus")
        assert session.execute("show info").lines[0] == "System Name : GS1900"
        assert session.dirty is False

    def test_extra_error_pattern(self, make_session):
        settings = SessionSettings(read_timeout=0.2).with_error_patterns(r"^ERROR:")
        session, _ = make_session({"show cable-diag interfaces 3": "ERROR: port is a fiber port"}, settings=settings)
        with pytest.raises(CommandError, match="fiber port"):
            session.execute("show cable-diag interfaces 3")

    def test_normal_output_not_an_error(self, make_session):
        session, _ = make_session({"show info": "System Contact : 100% uptime"})
        assert session.execute("show info").lines == ("System Contact : 100% uptime",)


class TestTimeoutAndDrain:
    """Test the dirty flag and draining before reuse."""

    def test_timeout_marks_dirty(self, make_session):
        session, _ = make_session({"show slow": SILENT})
        with pytest.raises(SwitchTimeoutError):
            session.execute("show slow")

        assert session.dirty is True
        assert session.busy is False

    def test_late_output_drained_without_keystroke(self, make_session):
        session, channel = make_session({"show slow": SILENT, "show info": INFO})
        with pytest.raises(SwitchTimeoutError):
            session.execute("show slow")
        channel.push("late output\r\nGS1900# ")

        block = session.execute("show info")

        assert block.lines == tuple(INFO.splitlines())
        assert channel.commands() == ["show slow", "show info"]
        assert session.dirty is False

    def test_drain_provokes_prompt_when_nothing_pending(self, make_session):
        session, channel = make_session({"show slow": SILENT, "show info": INFO})
        with pytest.raises(SwitchTimeoutError):
            session.execute("show slow")

        block = session.execute("show info")

        assert block.lines == tuple(INFO.splitlines())
        assert channel.commands() == ["show slow", "", "show info"]

    def test_hangup_raises_stream_closed(self, make_session):
        session, _ = make_session({"reload": HANGUP})
        with pytest.raises(StreamClosedError):
            session.execute("reload")
        assert session.dirty is True

    def test_stream_closed_is_connection_error(self, make_session):
        session, _ = make_session({"reload": HANGUP})
        with pytest.raises(SwitchConnectionError):
            session.execute("reload")


class TestKeepaliveAndClose:
    """Test keepalive() and close()."""

    def test_keepalive_sends_bare_newline(self, make_session):
        session, channel = make_session()
        session.keepalive()
        assert channel.sent == ["\n"]
        assert session.dirty is False

    def test_close_blocks_further_commands(self, make_session):
        session, channel = make_session({"show info": INFO})
        session.close()

        assert channel.closed
        with pytest.raises(SwitchConnectionError):
            session.execute("show info")


class TestConcurrency:
    """Test that concurrent callers never interleave their round trips."""

    def test_parallel_callers_get_their_own_output(self, make_session):
        outputs = {"show a": "a1\na2\na3", "show b": "b1\nb2\nb3"}
        session, channel = make_session(outputs, page_size=1, delay=0.002)
        results: dict[str, list] = {"show a": [], "show b": []}
        errors = []

        def worker(command):
            try:
                for _ in range(5):
                    results[command].append(session.execute(command).lines)
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(c,)) for c in outputs]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert results["show a"] == [("a1", "a2", "a3")] * 5
        assert results["show b"] == [("b1", "b2", "b3")] * 5

    def test_keystrokes_not_interleaved(self, make_session):
        outputs = {"show a": "a1\na2\na3", "show b": "b1\nb2\nb3"}
        session, channel = make_session(outputs, page_size=1, delay=0.002)

        threads = [threading.Thread(target=session.execute, args=(c,)) for c in outputs for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Every command is followed by exactly its own two continuation keys.
        assert len(channel.sent) == 18
        for i in range(0, 18, 3):
            assert channel.sent[i] in ("show a\n", "show b\n")
            assert channel.sent[i + 1 : i + 3] == [" ", " "]
