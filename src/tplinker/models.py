from dataclasses import dataclass, field
from typing import Any

from .exceptions import GenericError


@dataclass
class Outlet:
    """One switchable outlet of a power strip."""

    id: str
    alias: str = ""
    state: bool = False


@dataclass
class SysInfo:
    """System information reported by a smart plug."""

    alias: str
    model: str = ""
    mac: str = ""
    device_id: str = ""
    relay_state: bool = False
    led_off: bool = False
    children: list[Outlet] = field(default_factory=list)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "SysInfo":
        """Build from a decoded ``system.get_sysinfo`` response."""
        system = data.get("system")
        info = system.get("get_sysinfo") if isinstance(system, dict) else None
        if not isinstance(info, dict):
            raise GenericError("system.get_sysinfo missing from device response")
        if not isinstance(info.get("deviceId", ""), str):
            raise GenericError("sysinfo deviceId is not a string")

        return cls(
            alias=info.get("alias", ""),
            model=info.get("model", ""),
            # Older firmware reports "mac", newer bulbs and strips "mic_mac".
            mac=info.get("mac") or info.get("mic_mac", ""),
            device_id=info.get("deviceId", ""),
            relay_state=info.get("relay_state", 0) == 1,
            led_off=info.get("led_off", 0) == 1,
            children=_parse_children(info.get("children", [])),
        )


def _parse_children(children: Any) -> list[Outlet]:
    if not isinstance(children, list):
        raise GenericError("sysinfo children is not a list")

    outlets = []
    for child in children:
        if not isinstance(child, dict) or not isinstance(child.get("id"), str):
            raise GenericError("sysinfo child entry has no string id")
        outlets.append(
            Outlet(
                id=child["id"],
                alias=child.get("alias", ""),
                state=child.get("state", 0) == 1,
            )
        )
    return outlets
