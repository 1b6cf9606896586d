"""Interface status and traffic counter models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from gs1900ctl.models.port import DuplexMode, MediaType, PortSpeed

COUNTER_FIELDS: tuple[str, ...] = (
    "input_packets",
    "input_bytes",
    "input_throttles",
    "input_broadcasts",
    "input_multicasts",
    "input_runts",
    "input_giants",
    "input_errors",
    "input_crc",
    "input_frame",
    "input_overrun",
    "input_ignored",
    "input_pause",
    "input_dribble",
    "output_packets",
    "output_bytes",
    "output_underrun",
    "output_errors",
    "output_collisions",
    "output_interface_resets",
    "output_babbles",
    "output_late_collisions",
    "output_deferred",
    "output_paused",
)


class InterfaceStatus(BaseModel):
    """One row of ``show interfaces all status``."""

    model_config = ConfigDict(frozen=True)

    port: int
    name: str = ""
    link_up: bool = False
    admin_enabled: bool = True
    vlan: int | None = None
    duplex: DuplexMode | None = None
    speed: PortSpeed | None = None
    media_type: MediaType | None = None


class InterfaceTraffic(BaseModel):
    """Counters from ``show interfaces``.

    Counters are absent when the firmware did not print the corresponding
    line. ``window_seconds`` is set on the result of :meth:`delta`, whose
    counters then cover only that window.
    """

    model_config = ConfigDict(frozen=True)

    port: int
    link_up: bool = False
    admin_up: bool = True
    duplex: DuplexMode | None = None
    speed: PortSpeed | None = None
    media_type: MediaType | None = None
    flow_control: bool | None = None

    input_packets: int | None = None
    input_bytes: int | None = None
    input_throttles: int | None = None
    input_broadcasts: int | None = None
    input_multicasts: int | None = None
    input_runts: int | None = None
    input_giants: int | None = None
    input_errors: int | None = None
    input_crc: int | None = None
    input_frame: int | None = None
    input_overrun: int | None = None
    input_ignored: int | None = None
    input_pause: int | None = None
    input_dribble: int | None = None
    output_packets: int | None = None
    output_bytes: int | None = None
    output_underrun: int | None = None
    output_errors: int | None = None
    output_collisions: int | None = None
    output_interface_resets: int | None = None
    output_babbles: int | None = None
    output_late_collisions: int | None = None
    output_deferred: int | None = None
    output_paused: int | None = None

    input_rate_bps: int | None = None
    input_rate_pps: int | None = None
    output_rate_bps: int | None = None
    output_rate_pps: int | None = None

    window_seconds: float | None = None

    def delta(self, previous: InterfaceTraffic, window_seconds: float) -> InterfaceTraffic:
        """Counter differences since ``previous`` over ``window_seconds``.

        A counter that went backwards (device reboot or counter clear) is
        reported as the current value.
        """
        if previous.port != self.port:
            raise ValueError(f"Cannot diff port {self.port} against port {previous.port}")
        update: dict[str, object] = {"window_seconds": window_seconds}
        for name in COUNTER_FIELDS:
            now = getattr(self, name)
            before = getattr(previous, name)
            if now is None or before is None:
                update[name] = None
            else:
                update[name] = now - before if now >= before else now
        return self.model_copy(update=update)

    @property
    def input_bytes_per_second(self) -> float | None:
        if self.window_seconds is None or self.input_bytes is None or self.window_seconds <= 0:
            return None
        return self.input_bytes / self.window_seconds

    @property
    def output_bytes_per_second(self) -> float | None:
        if self.window_seconds is None or self.output_bytes is None or self.window_seconds <= 0:
            return None
        return self.output_bytes / self.window_seconds
