"""Typed records produced by the output parsers."""

from gs1900ctl.models.block import RawBlock, TableResult
from gs1900ctl.models.cable import CableDiagResult, CablePair, CablePairState
from gs1900ctl.models.fiber import FiberTransceiverInfo, SfpAlarm
from gs1900ctl.models.interface import InterfaceStatus, InterfaceTraffic
from gs1900ctl.models.lldp import LldpCapability, LldpNeighbor
from gs1900ctl.models.mac import MacEntry, MacEntryType
from gs1900ctl.models.poe import (
    PoEClass,
    PoEConfig,
    PoEDebugInfo,
    PoELimitMode,
    PoEMode,
    PoEPortState,
    PoEPowerMode,
    PoEPowerUpSequence,
    PoEPriority,
    PoEReport,
    PoEStatus,
    PoESupply,
)
from gs1900ctl.models.port import DuplexMode, MediaType, PortSpeed
from gs1900ctl.models.system import SwitchInfo
from gs1900ctl.models.vlan import PortTagging, VlanInfo, VlanType

__all__ = [
    "RawBlock",
    "TableResult",
    "SwitchInfo",
    "LldpNeighbor",
    "LldpCapability",
    "FiberTransceiverInfo",
    "SfpAlarm",
    "MacEntry",
    "MacEntryType",
    "CableDiagResult",
    "CablePair",
    "CablePairState",
    "PoEReport",
    "PoEConfig",
    "PoESupply",
    "PoEStatus",
    "PoEDebugInfo",
    "PoEClass",
    "PoEPriority",
    "PoEPortState",
    "PoEMode",
    "PoEPowerUpSequence",
    "PoEPowerMode",
    "PoELimitMode",
    "InterfaceStatus",
    "InterfaceTraffic",
    "VlanInfo",
    "VlanType",
    "PortTagging",
    "DuplexMode",
    "MediaType",
    "PortSpeed",
]
