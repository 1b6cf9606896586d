"""Cable diagnostics model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from gs1900ctl.models.port import PortSpeed


class CablePairState(str, Enum):
    NORMAL = "Normal"
    OPEN = "Open"
    SHORT = "Short"
    # Connected to a powered-off device
    LINE_DRIVER = "LineDriver"
    # Impedance outside 70-130 Ohm
    IMPEDANCE_MISMATCH = "ImpedanceMis"
    CROSSTALK = "Crosstalk"
    UNKNOWN = "Unknown"


class CablePair(BaseModel):
    model_config = ConfigDict(frozen=True)

    pair: str
    length: float | None = None  # metres
    status: CablePairState | None = None


class CableDiagResult(BaseModel):
    """Result of ``show cable-diag interfaces`` for one port."""

    model_config = ConfigDict(frozen=True)

    port: int
    speed: PortSpeed
    pairs: tuple[CablePair, ...] = ()

    @property
    def healthy(self) -> bool:
        return all(p.status is CablePairState.NORMAL for p in self.pairs)

    @property
    def fault_distance(self) -> float | None:
        """Estimated distance in metres to the nearest fault, if any."""
        lengths = [
            p.length
            for p in self.pairs
            if p.status is not None and p.status is not CablePairState.NORMAL and p.length is not None
        ]
        return min(lengths) if lengths else None

    def pair_info(self, label: str) -> CablePair | None:
        for pair in self.pairs:
            if pair.pair == label:
                return pair
        return None
