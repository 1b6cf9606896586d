"""SFP transceiver diagnostics model."""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict


class SfpAlarm(str, Enum):
    """Alarm state the device reports next to each DDM reading."""

    OK = "OK"
    WARNING = "W"
    ERROR = "E"


def mw_to_dbm(milliwatts: float | None) -> float | None:
    """Convert optical power from mW to dBm (``-inf`` for a measured zero)."""
    if milliwatts is None:
        return None
    if milliwatts <= 0:
        return -math.inf
    return 10 * math.log10(milliwatts)


class FiberTransceiverInfo(BaseModel):
    """Digital diagnostics for one SFP port.

    Every field but ``port`` is absent (``None``) when the device prints its
    placeholder, e.g. for an empty cage or a copper port.
    """

    model_config = ConfigDict(frozen=True)

    port: int
    temperature: float | None = None  # degrees Celsius
    temperature_status: SfpAlarm | None = None
    voltage: float | None = None  # volts
    voltage_status: SfpAlarm | None = None
    current: float | None = None  # milliamperes (laser bias)
    current_status: SfpAlarm | None = None
    output_power: float | None = None  # milliwatts
    output_power_status: SfpAlarm | None = None
    input_power: float | None = None  # milliwatts
    input_power_status: SfpAlarm | None = None
    present: bool | None = None
    link: bool | None = None
    vendor: str | None = None
    transceiver_type: str | None = None
    wavelength: int | None = None  # nanometres

    @property
    def output_power_dbm(self) -> float | None:
        return mw_to_dbm(self.output_power)

    @property
    def input_power_dbm(self) -> float | None:
        return mw_to_dbm(self.input_power)

    @property
    def has_diagnostics(self) -> bool:
        return any(
            v is not None
            for v in (self.temperature, self.voltage, self.current, self.output_power, self.input_power)
        )
