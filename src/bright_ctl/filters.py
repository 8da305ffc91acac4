from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from bright_ctl.errors import NotFoundError
from bright_ctl.system.device import Device, DeviceClass


@dataclass(frozen=True)
class DeviceFilter:
    name: str | None = None
    device_class: DeviceClass | None = None

    def matches(self, device: Device) -> bool:
        if self.name is not None and self.name != device.name:
            return False
        return self.device_class is None or self.device_class == device.device_class

    def for_state(self) -> DeviceFilter:
        """save/restore act on backlights unless told otherwise."""

        if self.name is None and self.device_class is None:
            return replace(self, device_class=DeviceClass.BACKLIGHT)
        return self


def apply_filter(devices: Iterable[Device], criteria: DeviceFilter) -> list[Device]:
    return [d for d in devices if criteria.matches(d)]


def select_devices(devices: Iterable[Device], criteria: DeviceFilter) -> list[Device]:
    """Like apply_filter, but an empty result raises NotFoundError."""

    selected = apply_filter(devices, criteria)
    if not selected:
        raise NotFoundError(criteria.name)
    return selected
