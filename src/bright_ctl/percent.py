"""Perceptual brightness scaling.

Perceived brightness is roughly logarithmic in emitted light, so percentages
are mapped onto the exponent rather than the raw value:

    percent = log(raw) / log(max) * 100
    raw     = max ** (percent / 100)

See https://konradstrack.ninja/blog/changing-screen-brightness-in-accordance-with-human-perception/
"""

from __future__ import annotations

import math

from bright_ctl.errors import DegenerateDeviceError


def _check_max(max_brightness: int) -> None:
    if max_brightness <= 1:
        raise DegenerateDeviceError(
            f"max_brightness {max_brightness} is too small for perceptual scaling"
        )


def _check_percent(value: float) -> float:
    value = float(value)
    # min/max pass NaN through unpredictably; there is no range to clamp it to.
    if math.isnan(value):
        raise ValueError("percent must be a number, got nan")
    return value


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, _check_percent(value)))


def to_percent(raw: int, max_brightness: int) -> float:
    _check_max(max_brightness)
    if raw <= 0:
        return 0.0
    raw = min(raw, max_brightness)
    return math.log10(raw) / math.log10(max_brightness) * 100.0


def to_raw(percent: float, max_brightness: int) -> int:
    _check_max(max_brightness)
    percent = _check_percent(percent)
    if percent <= 0:
        return 0
    if percent >= 100:
        return max_brightness
    raw = round(max_brightness ** (percent / 100.0))
    return max(0, min(raw, max_brightness))
