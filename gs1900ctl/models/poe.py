"""Power-over-Ethernet models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from gs1900ctl.exceptions import ParseError


class PoEClass(str, Enum):
    """IEEE 802.3af/at power classification."""

    CLASS0 = "class0"  # 0.44 - 12.94 W
    CLASS1 = "class1"  # 0.44 - 3.84 W
    CLASS2 = "class2"  # 3.84 - 6.49 W
    CLASS3 = "class3"  # 6.49 - 12.95 W
    CLASS4 = "class4"  # 12.95 - 25.50 W (802.3at)


class PoEPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PoEPortState(str, Enum):
    OFF = "off"
    SEARCHING = "searching"
    ON = "on"


class PoEMode(str, Enum):
    """How the switch budgets power."""

    CLASSIFICATION = "Class limit mode"
    CONSUMPTION = "Port limit mode"


class PoEPowerUpSequence(str, Enum):
    STAGGERED = "Staggered"
    SIMULTANEOUS = "Simultaneous"


class PoEPowerMode(str, Enum):
    """Per-port power mode accepted by the web control interface."""

    IEEE_802_3AF = "802.3af"
    LEGACY = "legacy"
    PRE_802_3AT = "pre-802.3at"
    IEEE_802_3AT = "802.3at"


class PoELimitMode(str, Enum):
    CLASSIFICATION = "classification"
    USER = "user"


class PoEConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    management_mode: PoEMode | None = None
    pre_allocation: bool | None = None
    power_up_sequence: PoEPowerUpSequence | None = None


class PoESupply(BaseModel):
    """One power supply unit. Power values are watts."""

    model_config = ConfigDict(frozen=True)

    unit: int
    power: str = ""
    status: str = ""
    nominal_power: float | None = None
    allocated_power: float | None = None
    consumed_power: float | None = None
    available_power: float | None = None


class PoEStatus(BaseModel):
    """Per-port power draw from ``show power inline consumption``."""

    model_config = ConfigDict(frozen=True)

    port: int
    power_limit: int | None = None  # mW
    admin_power_limit: int | None = None  # mW
    power: int | None = None  # mW
    voltage: int | None = None  # mV
    current: int | None = None  # mA

    @property
    def drawing_power(self) -> bool:
        return bool(self.power)


class PoEReport(BaseModel):
    """Everything ``show power inline consumption`` reports."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    config: PoEConfig
    supplies: tuple[PoESupply, ...] = ()
    ports: tuple[PoEStatus, ...] = ()
    errors: tuple[ParseError, ...] = ()  # table rows that failed to parse

    def port(self, port: int) -> PoEStatus | None:
        for status in self.ports:
            if status.port == port:
                return status
        return None


class PoEDebugInfo(BaseModel):
    """Per-port controller state from ``debug ilpower port status``."""

    model_config = ConfigDict(frozen=True)

    port: int
    enabled: bool
    state: PoEPortState
    priority: PoEPriority | None = None
    poe_class: PoEClass | None = None
    reason: str | None = None
