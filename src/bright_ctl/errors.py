from __future__ import annotations

from pathlib import Path


class BrightnessError(Exception):
    pass


class DeviceError(BrightnessError):
    """A brightness file could not be read, parsed or written."""

    def __init__(self, message: str, path: Path):
        super().__init__(f'{message}: "{path}"')
        self.path = path


class DegenerateDeviceError(BrightnessError):
    pass


class NotFoundError(BrightnessError):
    def __init__(self, name: str | None = None):
        if name:
            super().__init__(f'device with name "{name}" not found')
        else:
            super().__init__("no devices found")
        self.name = name


class StateCorruptError(BrightnessError):
    pass


class StateWriteError(BrightnessError):
    pass


class NoSavedStateError(BrightnessError):
    def __init__(self) -> None:
        super().__init__("no saved state for the selected devices")
