from __future__ import annotations

import enum
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from bright_ctl.errors import BrightnessError, DegenerateDeviceError
from bright_ctl.percent import clamp_percent, to_percent, to_raw
from bright_ctl.system.device import Device

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    GET = "get"
    SET = "set"
    ADD = "add"
    SUB = "sub"


@dataclass(frozen=True)
class DeviceResult:
    device: Device
    percent: float | None = None
    error: str | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    results: list[DeviceResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        if self.failures:
            return False
        # Everything skipped means nothing was done.
        return not self.results or any(r.ok for r in self.results)

    @property
    def failures(self) -> list[DeviceResult]:
        return [r for r in self.results if not r.ok and not r.skipped]

    @property
    def skipped(self) -> list[DeviceResult]:
        return [r for r in self.results if r.skipped]


def get_percent(device: Device) -> float:
    return to_percent(device.brightness, device.max_brightness)


def set_percent(device: Device, percent: float) -> float:
    """Write the raw value for ``percent`` and return the percent actually applied."""

    raw = to_raw(clamp_percent(percent), device.max_brightness)
    raw = device.write_raw(raw)
    return to_percent(raw, device.max_brightness)


def add_percent(device: Device, delta: float) -> float:
    # Relative to the live value. Another writer can still change it between
    # this read and our write; sysfs offers nothing to close that window.
    device.refresh()
    return set_percent(device, get_percent(device) + delta)


def sub_percent(device: Device, delta: float) -> float:
    return add_percent(device, -delta)


def _dispatch(op: Operation, value: float | None) -> Callable[[Device], float]:
    if op is Operation.GET:
        return get_percent
    if value is None:
        raise ValueError(f"{op.value} requires a percent value")
    if math.isnan(value):
        raise ValueError(f"{op.value} percent must be a number, got nan")
    if op is Operation.SET:
        return lambda d: set_percent(d, value)
    if op is Operation.ADD:
        return lambda d: add_percent(d, value)
    return lambda d: sub_percent(d, value)


def run(op: Operation, devices: Iterable[Device], value: float | None = None) -> BatchResult:
    """Apply ``op`` to each device independently.

    A failing device is recorded in the result and does not stop the rest.
    """

    fn = _dispatch(Operation(op), value)
    batch = BatchResult()
    for device in devices:
        try:
            percent = fn(device)
        except DegenerateDeviceError as e:
            logger.warning("skipping %s: %s", device.name, e)
            batch.results.append(DeviceResult(device=device, error=str(e), skipped=True))
            continue
        except BrightnessError as e:
            logger.warning("%s: %s", device.name, e)
            batch.results.append(DeviceResult(device=device, error=str(e)))
            continue
        logger.info("%s %s: %.2f%%", Operation(op).value, device.name, percent)
        batch.results.append(DeviceResult(device=device, percent=percent))
    return batch
