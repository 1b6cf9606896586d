"""Tests for the data model records."""

import math

import pytest
from pydantic import ValidationError

from gs1900ctl.exceptions import ParseError
from gs1900ctl.models import (
    CableDiagResult,
    CablePair,
    CablePairState,
    FiberTransceiverInfo,
    InterfaceTraffic,
    PortSpeed,
    RawBlock,
    SwitchInfo,
    TableResult,
    VlanInfo,
)
from gs1900ctl.models.fiber import mw_to_dbm


class TestRawBlock:
    """Test RawBlock."""

    def test_from_text(self):
        block = RawBlock.from_text("show vlan", "a\nb\r\nc")
        assert block.lines == ("a", "b", "c")
        assert block.text == "a\nb\nc"
        assert len(block) == 3
        assert list(block) == ["a", "b", "c"]

    def test_numbered_is_one_based(self):
        block = RawBlock.from_text("", "x\ny")
        assert list(block.numbered()) == [(1, "x"), (2, "y")]

    def test_frozen(self):
        block = RawBlock.from_text("", "x")
        with pytest.raises(AttributeError):
            block.lines = ()  # type: ignore[misc]


class TestTableResult:
    """Test TableResult."""

    def test_sequence_behavior(self):
        result = TableResult((1, 2, 3))
        assert len(result) == 3
        assert result[0] == 1
        assert list(result) == [1, 2, 3]
        assert result.ok
        assert result.first() == 1

    def test_filter_keeps_errors(self):
        error = ParseError("bad", line_no=4, line="x")
        result = TableResult((1, 2, 3), (error,)).filter(lambda r: r > 1)

        assert result.records == (2, 3)
        assert result.errors == (error,)
        assert not result.ok

    def test_first_of_empty(self):
        assert TableResult().first() is None


class TestFrozenRecords:
    """Test that records cannot be mutated."""

    def test_assignment_rejected(self):
        info = SwitchInfo(system_name="GS1900")
        with pytest.raises(ValidationError):
            info.system_name = "other"  # type: ignore[misc]

    def test_equal_records(self):
        assert SwitchInfo(system_name="a") == SwitchInfo(system_name="a")


class TestPortSpeed:
    """Test PortSpeed rendering."""

    def test_str(self):
        assert str(PortSpeed(auto=True, mbps=1000)) == "a-1000M"
        assert str(PortSpeed(mbps=100)) == "100M"
        assert str(PortSpeed(auto=True)) == "auto"
        assert str(PortSpeed()) == "-"


class TestFiberTransceiverInfo:
    """Test derived optical power values."""

    def test_dbm(self):
        info = FiberTransceiverInfo(port=25, output_power=1.0, input_power=0.1)
        assert info.output_power_dbm == pytest.approx(0.0)
        assert info.input_power_dbm == pytest.approx(-10.0)
        assert info.has_diagnostics

    def test_zero_power_is_minus_infinity(self):
        assert mw_to_dbm(0.0) == -math.inf
        assert mw_to_dbm(None) is None


class TestCableDiagResult:
    """Test cable health helpers."""

    def test_healthy(self):
        result = CableDiagResult(
            port=1,
            speed=PortSpeed(mbps=1000),
            pairs=tuple(CablePair(pair=p, length=3.0, status=CablePairState.NORMAL) for p in "ABCD"),
        )
        assert result.healthy
        assert result.fault_distance is None
        assert result.pair_info("E") is None

    def test_fault_distance_is_nearest(self):
        result = CableDiagResult(
            port=1,
            speed=PortSpeed(),
            pairs=(
                CablePair(pair="A", length=12.0, status=CablePairState.SHORT),
                CablePair(pair="B", length=4.5, status=CablePairState.OPEN),
                CablePair(pair="C", length=None, status=CablePairState.CROSSTALK),
                CablePair(pair="D", length=1.0, status=CablePairState.NORMAL),
            ),
        )
        assert not result.healthy
        assert result.fault_distance == pytest.approx(4.5)


class TestInterfaceTrafficDelta:
    """Test InterfaceTraffic.delta()."""

    def test_delta(self):
        before = InterfaceTraffic(port=1, input_bytes=1000, output_bytes=500, input_errors=1)
        after = InterfaceTraffic(port=1, input_bytes=4000, output_bytes=2500, input_errors=1)
        window = after.delta(before, 10.0)

        assert window.input_bytes == 3000
        assert window.output_bytes == 2000
        assert window.input_errors == 0
        assert window.window_seconds == 10.0
        assert window.input_bytes_per_second == pytest.approx(300.0)
        assert window.output_bytes_per_second == pytest.approx(200.0)

    def test_counter_reset_reports_current_value(self):
        before = InterfaceTraffic(port=1, input_bytes=9000)
        after = InterfaceTraffic(port=1, input_bytes=100)
        assert after.delta(before, 5).input_bytes == 100

    def test_absent_counter_stays_absent(self):
        before = InterfaceTraffic(port=1)
        after = InterfaceTraffic(port=1, input_bytes=100)
        assert after.delta(before, 5).input_bytes is None

    def test_other_port_rejected(self):
        with pytest.raises(ValueError):
            InterfaceTraffic(port=1).delta(InterfaceTraffic(port=2), 5)

    def test_no_rate_without_window(self):
        assert InterfaceTraffic(port=1, input_bytes=100).input_bytes_per_second is None


class TestVlanInfo:
    """Test VLAN membership."""

    def test_members_sorted(self):
        vlan = VlanInfo(vlan_id=10, untagged_ports=(5, 1), tagged_ports=(3,))
        assert list(vlan.members) == [1, 3, 5]
