from __future__ import annotations

from pathlib import Path

import pytest

from bright_ctl.system.device import DeviceClass


def make_device(root: Path, name: str, brightness: int | str, max_brightness: int | str) -> Path:
    dev = root / name
    dev.mkdir(parents=True)
    (dev / "brightness").write_text(f"{brightness}\n", encoding="utf-8")
    (dev / "max_brightness").write_text(f"{max_brightness}\n", encoding="utf-8")
    return dev


@pytest.fixture
def sysfs(tmp_path: Path) -> dict[DeviceClass, Path]:
    roots = {
        DeviceClass.BACKLIGHT: tmp_path / "backlight",
        DeviceClass.LEDS: tmp_path / "leds",
    }
    make_device(roots[DeviceClass.BACKLIGHT], "intel_backlight", 9000, 21333)
    make_device(roots[DeviceClass.LEDS], "platform::fnlock", 0, 1)
    make_device(roots[DeviceClass.LEDS], "input3::capslock", 1, 1)
    make_device(roots[DeviceClass.LEDS], "tpacpi::kbd_backlight", 1, 2)
    return roots
