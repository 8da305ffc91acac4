from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

import yaml

from bright_ctl.errors import (
    DeviceError,
    NoSavedStateError,
    NotFoundError,
    StateCorruptError,
    StateWriteError,
)
from bright_ctl.mutator import BatchResult, DeviceResult
from bright_ctl.system.device import Device, DeviceClass

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "state.yaml"

# {"backlight": {"intel_backlight": 9000}, "leds": {...}}; names repeat across classes.
Records = dict[str, dict[str, int]]


def _parse(data: object) -> Records:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise StateCorruptError("state file must contain a mapping of device class to devices")
    valid = {c.value for c in DeviceClass}
    records: Records = {}
    for cls, devices in data.items():
        if cls not in valid:
            raise StateCorruptError(f"unknown device class in state file: {cls!r}")
        if devices is None:
            devices = {}
        if not isinstance(devices, dict):
            raise StateCorruptError(f"{cls} must map device names to brightness")
        for name, raw in devices.items():
            if not isinstance(name, str) or not name:
                raise StateCorruptError(f"invalid device name in state file: {name!r}")
            # bool is an int subclass; yaml turns "on"/"yes" into True.
            if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
                raise StateCorruptError(f"invalid brightness for {cls}/{name}: {raw!r}")
            records.setdefault(cls, {})[name] = raw
    return records


@dataclass(frozen=True)
class StateStore:
    """Raw brightness per device class and name, kept in a small YAML file."""

    path: Path

    @classmethod
    def in_dir(cls, state_dir: str | Path) -> StateStore:
        return cls(Path(state_dir) / STATE_FILE_NAME)

    def load(self) -> Records:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise StateCorruptError(f"no saved state at {self.path}") from e
        except OSError as e:
            raise StateCorruptError(f"cannot read {self.path}: {e}") from e
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise StateCorruptError(f"malformed state file {self.path}: {e}") from e
        return _parse(data)

    def _existing(self) -> Records:
        if not self.path.exists():
            return {}
        try:
            return self.load()
        except StateCorruptError as e:
            logger.warning("discarding unreadable saved state: %s", e)
            return {}

    def _write(self, records: Records) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".state-", dir=self.path.parent)
        except OSError as e:
            raise StateWriteError(f"cannot write {self.path}: {e}") from e
        # Readers see either the old file or the new one, never a partial write.
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                yaml.safe_dump(records, fh, default_flow_style=False, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException as e:
            with suppress(FileNotFoundError):
                os.unlink(tmp)
            if isinstance(e, OSError):
                raise StateWriteError(f"cannot write {self.path}: {e}") from e
            raise

    def save(self, devices: Sequence[Device]) -> Records:
        """Merge the devices' raw brightness into the state file.

        Records for devices not in ``devices`` are kept.
        """

        if not devices:
            raise NotFoundError()
        records = self._existing()
        for device in devices:
            records.setdefault(device.device_class.value, {})[device.name] = device.brightness
            logger.info("saving %s/%s = %d", device.device_class, device.name, device.brightness)
        self._write(records)
        return records

    def restore(self, devices: Sequence[Device]) -> BatchResult:
        if not devices:
            raise NotFoundError()
        records = self.load()

        present = {(d.device_class.value, d.name) for d in devices}
        for cls, saved in sorted(records.items()):
            for name in sorted(saved):
                if (cls, name) not in present:
                    logger.debug("no device for saved record %s/%s, skipping", cls, name)

        targets = [d for d in devices if d.name in records.get(d.device_class.value, {})]
        if not targets:
            raise NoSavedStateError()

        batch = BatchResult()
        for device in targets:
            raw = records[device.device_class.value][device.name]
            if raw > device.max_brightness:
                logger.warning(
                    "%s: saved brightness %d exceeds max_brightness %d, clamping",
                    device.name,
                    raw,
                    device.max_brightness,
                )
            try:
                device.write_raw(raw)
            except DeviceError as e:
                logger.warning("%s: %s", device.name, e)
                batch.results.append(DeviceResult(device=device, error=str(e)))
                continue
            logger.info("restored %s/%s = %d", device.device_class, device.name, device.brightness)
            batch.results.append(DeviceResult(device=device))
        return batch
