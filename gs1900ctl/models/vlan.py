"""VLAN model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class VlanType(str, Enum):
    DEFAULT = "Default"
    STATIC = "Static"
    DYNAMIC = "Dynamic"


class PortTagging(str, Enum):
    TAGGED = "tagged"
    UNTAGGED = "untagged"


class VlanInfo(BaseModel):
    """One VLAN from ``show vlan``."""

    model_config = ConfigDict(frozen=True)

    vlan_id: int
    name: str = ""
    untagged_ports: tuple[int, ...] = ()
    tagged_ports: tuple[int, ...] = ()
    # Link aggregation groups are numbered separately from physical ports.
    untagged_lags: tuple[int, ...] = ()
    tagged_lags: tuple[int, ...] = ()
    vlan_type: VlanType | None = None

    @property
    def members(self) -> dict[int, PortTagging]:
        result = {p: PortTagging.UNTAGGED for p in self.untagged_ports}
        result.update({p: PortTagging.TAGGED for p in self.tagged_ports})
        return dict(sorted(result.items()))
