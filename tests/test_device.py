from __future__ import annotations

import logging
from pathlib import Path

import pytest

from bright_ctl.errors import DeviceError
from bright_ctl.system.device import Device, DeviceClass, enumerate_devices, read_raw
from conftest import make_device


def test_enumerate_sorted_by_name(sysfs: dict[DeviceClass, Path]) -> None:
    devices = enumerate_devices(sysfs)
    assert [d.name for d in devices] == [
        "input3::capslock",
        "intel_backlight",
        "platform::fnlock",
        "tpacpi::kbd_backlight",
    ]
    bl = devices[1]
    assert bl.device_class is DeviceClass.BACKLIGHT
    assert bl.brightness == 9000
    assert bl.max_brightness == 21333
    assert bl.path == sysfs[DeviceClass.BACKLIGHT] / "intel_backlight"


def test_enumerate_is_reproducible(sysfs: dict[DeviceClass, Path]) -> None:
    assert enumerate_devices(sysfs) == enumerate_devices(sysfs)


def test_unreadable_device_is_skipped_with_warning(
    sysfs: dict[DeviceClass, Path], caplog: pytest.LogCaptureFixture
) -> None:
    make_device(sysfs[DeviceClass.BACKLIGHT], "acpi_video0", "garbage", 15)
    broken = sysfs[DeviceClass.BACKLIGHT] / "nv_backlight"
    broken.mkdir()
    (broken / "brightness").write_text("3", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        devices = enumerate_devices(sysfs)

    names = [d.name for d in devices]
    assert "acpi_video0" not in names
    assert "nv_backlight" not in names
    assert "intel_backlight" in names
    assert "acpi_video0" in caplog.text
    assert "nv_backlight" in caplog.text


def test_brightness_above_max_is_skipped(tmp_path: Path) -> None:
    make_device(tmp_path / "backlight", "odd", 20, 10)
    assert enumerate_devices({DeviceClass.BACKLIGHT: tmp_path / "backlight"}) == []


def test_missing_root_is_empty(tmp_path: Path) -> None:
    roots = {DeviceClass.BACKLIGHT: tmp_path / "nope", DeviceClass.LEDS: tmp_path / "none"}
    assert enumerate_devices(roots) == []


def test_plain_files_in_root_are_ignored(sysfs: dict[DeviceClass, Path]) -> None:
    (sysfs[DeviceClass.LEDS] / "README").write_text("not a device", encoding="utf-8")
    assert "README" not in [d.name for d in enumerate_devices(sysfs)]


def test_write_raw_clamps_and_writes_once(tmp_path: Path) -> None:
    path = make_device(tmp_path, "bl", 5, 100)
    dev = Device.from_path(path, DeviceClass.BACKLIGHT)

    assert dev.write_raw(250) == 100
    assert (path / "brightness").read_text(encoding="utf-8") == "100"
    assert dev.brightness == 100

    assert dev.write_raw(-4) == 0
    assert (path / "brightness").read_text(encoding="utf-8") == "0"


def test_refresh_reads_live_value(tmp_path: Path) -> None:
    path = make_device(tmp_path, "bl", 5, 100)
    dev = Device.from_path(path, DeviceClass.BACKLIGHT)
    (path / "brightness").write_text("42\n", encoding="utf-8")
    assert dev.refresh() == 42
    assert dev.brightness == 42


def test_write_failure_raises_device_error(tmp_path: Path) -> None:
    path = make_device(tmp_path, "bl", 5, 100)
    dev = Device.from_path(path, DeviceClass.BACKLIGHT)
    (path / "brightness").unlink()
    (path / "brightness").mkdir()
    with pytest.raises(DeviceError) as exc:
        dev.write_raw(10)
    assert exc.value.path == path / "brightness"
    assert dev.brightness == 5


def test_read_raw_rejects_negative(tmp_path: Path) -> None:
    f = tmp_path / "brightness"
    f.write_text("-1", encoding="utf-8")
    with pytest.raises(DeviceError):
        read_raw(f)


def test_equality_by_name_and_class(tmp_path: Path) -> None:
    a = Device("x", DeviceClass.LEDS, tmp_path / "a", 1, 2)
    b = Device("x", DeviceClass.LEDS, tmp_path / "b", 0, 5)
    c = Device("x", DeviceClass.BACKLIGHT, tmp_path / "a", 1, 2)
    assert a == b
    assert a != c
