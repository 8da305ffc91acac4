from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from bright_ctl.errors import DeviceError

logger = logging.getLogger(__name__)


class DeviceClass(str, enum.Enum):
    BACKLIGHT = "backlight"
    LEDS = "leds"

    def __str__(self) -> str:
        return self.value


DEFAULT_ROOTS: dict[DeviceClass, Path] = {
    DeviceClass.BACKLIGHT: Path("/sys/class/backlight"),
    DeviceClass.LEDS: Path("/sys/class/leds"),
}


def read_raw(path: Path) -> int:
    """Read a non-negative integer from a sysfs attribute file."""

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeviceError(e.strerror or str(e), path) from e
    try:
        value = int(text.strip())
    except ValueError as e:
        raise DeviceError(f"invalid brightness value {text.strip()!r}", path) from e
    if value < 0:
        raise DeviceError(f"negative brightness value {value}", path)
    return value


@dataclass
class Device:
    name: str
    device_class: DeviceClass
    path: Path = field(compare=False)
    brightness: int = field(compare=False)
    max_brightness: int = field(compare=False)

    @property
    def _brightness(self) -> Path:
        return self.path / "brightness"

    @property
    def _max_brightness(self) -> Path:
        return self.path / "max_brightness"

    @classmethod
    def from_path(cls, path: Path, device_class: DeviceClass) -> Device:
        logger.debug("creating device from path: %s", path)
        dev = cls(
            name=path.name,
            device_class=device_class,
            path=path,
            brightness=0,
            max_brightness=0,
        )
        dev.max_brightness = read_raw(dev._max_brightness)
        dev.refresh()
        return dev

    def refresh(self) -> int:
        """Re-read the live brightness value, replacing the cached one."""

        value = read_raw(self._brightness)
        if value > self.max_brightness:
            raise DeviceError(
                f"brightness {value} exceeds max_brightness {self.max_brightness}",
                self._brightness,
            )
        self.brightness = value
        return value

    def write_raw(self, value: int) -> int:
        # One write of the final value; sysfs readers never see partial data.
        value = max(0, min(int(value), self.max_brightness))
        try:
            self._brightness.write_text(str(value), encoding="utf-8")
        except OSError as e:
            raise DeviceError(e.strerror or str(e), self._brightness) from e
        self.brightness = value
        return value


def _iter_paths(root: Path) -> list[Path]:
    try:
        entries = list(root.iterdir())
    except FileNotFoundError:
        logger.debug("device class root does not exist: %s", root)
        return []
    except OSError as e:
        logger.warning("cannot list %s: %s", root, e)
        return []
    return [p for p in entries if p.is_dir()]


def enumerate_devices(roots: Mapping[DeviceClass, Path] | None = None) -> list[Device]:
    """Return every readable device under the class roots, sorted by name.

    Devices whose attribute files cannot be read are logged and skipped.
    """

    roots = DEFAULT_ROOTS if roots is None else roots
    devices: list[Device] = []
    for device_class, root in roots.items():
        for path in _iter_paths(Path(root)):
            try:
                devices.append(Device.from_path(path, device_class))
            except DeviceError as e:
                logger.warning("skipping %s device %s: %s", device_class, path.name, e)
    devices.sort(key=lambda d: (d.name, d.device_class.value))
    return devices
