"""Tests for the shared parser helpers."""

import pytest

from gs1900ctl.models import DuplexMode, MediaType, PortSpeed, RawBlock
from gs1900ctl.parsers.base import (
    LineKind,
    classify_pipe_line,
    is_absent,
    iter_fixed_width_tables,
    iter_pipe_table,
    normalize_header,
    normalize_mac,
    parse_duplex,
    parse_float,
    parse_int,
    parse_media_type,
    parse_member_list,
    parse_metres,
    parse_physical_port,
    parse_port_list,
    parse_speed,
    parse_uptime,
    parse_watts,
    split_key_value,
    text_or_none,
)


class TestAbsentValues:
    """Test placeholder recognition."""

    @pytest.mark.parametrize("text", ["N/A", "n/a", "--", "-", "---", " N/A ", None])
    def test_placeholders(self, text):
        assert is_absent(text)

    @pytest.mark.parametrize("text", ["0", "Normal", "0.0"])
    def test_values(self, text):
        assert not is_absent(text)

    def test_parse_int_absent(self):
        assert parse_int("N/A") is None
        assert parse_int(" 42 ") == 42

    def test_parse_int_invalid(self):
        with pytest.raises(ValueError, match="invalid port"):
            parse_int("x1", "port")

    def test_parse_float(self):
        assert parse_float("3.29 V") == pytest.approx(3.29)
        assert parse_float("--") is None

    def test_text_or_none(self):
        assert text_or_none(None) is None
        assert text_or_none(" N/A ") is None
        assert text_or_none("  GS1900-24HP ") == "GS1900-24HP"


class TestUnits:
    """Test unit normalization helpers."""

    @pytest.mark.parametrize(
        "text, watts",
        [("170 Watts", 170.0), ("12Watts(7%)", 12.0), ("5.2W", 5.2), ("3400 mW", 3.4), ("N/A", None)],
    )
    def test_watts(self, text, watts):
        assert parse_watts(text) == (pytest.approx(watts) if watts is not None else None)

    def test_watts_unknown_unit(self):
        with pytest.raises(ValueError, match="unit"):
            parse_watts("5 horsepower")

    def test_metres(self):
        assert parse_metres("2.40") == pytest.approx(2.4)
        assert parse_metres("12 m") == pytest.approx(12.0)
        assert parse_metres("-") is None

    def test_uptime(self):
        assert parse_uptime("3 days, 4 hours, 5 mins, 6 secs") == 3 * 86400 + 4 * 3600 + 5 * 60 + 6
        assert parse_uptime("0 days, 0 hours, 1 mins, 0 secs") == 60

    def test_uptime_invalid(self):
        with pytest.raises(ValueError):
            parse_uptime("forever")


class TestPortAttributes:
    """Test speed, duplex, media and MAC parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("auto", PortSpeed(auto=True)),
            ("a-1000M", PortSpeed(auto=True, mbps=1000)),
            ("100M", PortSpeed(mbps=100)),
            ("1000Mb/s", PortSpeed(mbps=1000)),
            ("10G", PortSpeed(mbps=10000)),
        ],
    )
    def test_speed(self, text, expected):
        assert parse_speed(text) == expected

    def test_speed_invalid(self):
        with pytest.raises(ValueError):
            parse_speed("fast")

    def test_duplex(self):
        assert parse_duplex("a-full") is DuplexMode.FULL
        assert parse_duplex("Half") is DuplexMode.HALF
        assert parse_duplex("auto") is DuplexMode.AUTO

    def test_media_type(self):
        assert parse_media_type("Fiber") is MediaType.FIBER

    def test_mac_dotted(self):
        assert normalize_mac("BCCF.4F11.2233") == "bc:cf:4f:11:22:33"

    def test_mac_invalid(self):
        with pytest.raises(ValueError):
            normalize_mac("bc:cf:4f:11:22")


class TestPortList:
    """Test port range expansion."""

    def test_ranges_and_singles(self):
        assert parse_port_list("1-4,7,9-10") == (1, 2, 3, 4, 7, 9, 10)

    def test_trailing_comma_and_duplicates(self):
        assert parse_port_list("3,1-3,") == (1, 2, 3)

    def test_absent(self):
        assert parse_port_list("---") == ()
        assert parse_port_list("") == ()

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError):
            parse_port_list("5-2")

    def test_ethernet_prefix_accepted(self):
        assert parse_port_list("gi1-gi3,GigabitEthernet8") == (1, 2, 3, 8)

    def test_lag_not_a_physical_port(self):
        with pytest.raises(ValueError):
            parse_port_list("1,lag1")

    def test_member_list_keeps_lags_apart(self):
        assert parse_member_list("1-3,lag1,LAG3-4") == ((1, 2, 3), (1, 3, 4))
        assert parse_member_list("lag2") == ((), (2,))
        assert parse_member_list("---") == ((), ())

    def test_unknown_member_rejected(self):
        with pytest.raises(ValueError):
            parse_member_list("1,trk2")


class TestPhysicalPort:
    """Test port identity of interface names."""

    @pytest.mark.parametrize(("text", "port"), [("5", 5), (" 12 ", 12), ("gi5", 5), ("GigabitEthernet24", 24)])
    def test_physical(self, text, port):
        assert parse_physical_port(text) == port

    @pytest.mark.parametrize("text", ["LAG1", "lag2", "trk1", "CPU", ""])
    def test_not_physical(self, text):
        assert parse_physical_port(text) is None


class TestKeyValue:
    """Test key/value splitting and header normalization."""

    def test_split(self):
        assert split_key_value("System Name   : GS1900") == ("System Name", "GS1900")

    def test_split_keeps_later_separators(self):
        assert split_key_value("Firmware : V2.60 | 08:27") == ("Firmware", "V2.60 | 08:27")

    def test_no_key(self):
        assert split_key_value(": value") is None
        assert split_key_value("no separator") is None

    def test_normalize_header(self):
        assert normalize_header("Power Limit [Admin]  (mW)") == "power limit admin mw"


PIPE_TABLE = """\
 Port | Name   | Power
      |        | [mW]
------+--------+-------
    1 | uplink | 30
      | -long  |
    2 | ap     | N/A"""


class TestPipeTable:
    """Test pipe-delimited table iteration."""

    def test_rows_keyed_by_merged_header(self):
        rows = list(iter_pipe_table(RawBlock.from_text("", PIPE_TABLE), "Port"))

        assert [r.continuation for r in rows] == [False, True, False]
        assert rows[0].cells == {"port": "1", "name": "uplink", "power mw": "30"}
        assert rows[0].line_no == 4
        assert rows[1].get("Name") == "-long"

    def test_get_by_prefix(self):
        rows = list(iter_pipe_table(RawBlock.from_text("", PIPE_TABLE), "Port"))
        assert rows[2].get("Power") == "N/A"
        assert rows[2].find("Missing") is None
        with pytest.raises(KeyError):
            rows[2].get("Missing")

    def test_no_header_no_rows(self):
        assert list(iter_pipe_table(RawBlock.from_text("", "a | b\n1 | 2"), "Port")) == []

    def test_classify(self):
        lines = PIPE_TABLE.splitlines()
        assert classify_pipe_line(lines[0], "Port") is LineKind.HEADER
        assert classify_pipe_line(lines[2], "Port") is LineKind.SEPARATOR
        assert classify_pipe_line(lines[3], "Port") is LineKind.DATA
        assert classify_pipe_line(lines[4], "Port") is LineKind.CONTINUATION
        assert classify_pipe_line("   ", "Port") is LineKind.BLANK


FIXED_TABLE = """\
Intro : text

Port State Reason
     Admin
---- ----- ------------
   1 on    all fine
   2 off   overload here

trailer"""


class TestFixedWidthTable:
    """Test fixed-width tables cut at the dashed separator."""

    def test_layout_and_rows(self):
        tables = list(iter_fixed_width_tables(RawBlock.from_text("", FIXED_TABLE).numbered()))

        assert len(tables) == 1
        table, rows = tables[0]
        assert table.headers == ["port", "state admin", "reason"]
        assert [n for n, _ in rows] == [6, 7]
        cells = table.split(rows[1][1])
        assert table.column(cells, "State") == "off"
        assert table.column(cells, "Reason") == "overload here"

    def test_has_column(self):
        table, _ = next(iter_fixed_width_tables(RawBlock.from_text("", FIXED_TABLE).numbered()))
        assert table.has_column("Port")
        assert not table.has_column("Unit")
