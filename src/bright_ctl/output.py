from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from typing import Any, TextIO

from bright_ctl.errors import DegenerateDeviceError
from bright_ctl.mutator import DeviceResult, get_percent
from bright_ctl.system.device import Device

INFO_FIELDS = ("name", "class", "path", "brightness", "max_brightness", "percent")


def _fmt_percent(value: float | None) -> str:
    return "" if value is None else f"{value:.2f}"


def device_record(device: Device) -> dict[str, Any]:
    try:
        percent: float | None = get_percent(device)
    except DegenerateDeviceError:
        percent = None
    return {
        "name": device.name,
        "class": device.device_class.value,
        "path": str(device.path),
        "brightness": device.brightness,
        "max_brightness": device.max_brightness,
        "percent": None if percent is None else round(percent, 2),
    }


def _emit(rows: Sequence[dict[str, Any]], fields: Sequence[str], fmt: str, out: TextIO) -> None:
    if fmt == "json":
        for row in rows:
            out.write(json.dumps(row) + "\n")
    elif fmt == "csv":
        writer = csv.DictWriter(out, fieldnames=list(fields), lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow({k: "" if row[k] is None else row[k] for k in fields})
    else:
        for row in rows:
            out.write(" ".join("" if row[k] is None else str(row[k]) for k in fields) + "\n")


def _status(result: DeviceResult) -> str:
    if result.ok:
        return "ok"
    return "skipped" if result.skipped else "failed"


def write_percents(results: Sequence[DeviceResult], fmt: str, out: TextIO) -> None:
    if fmt == "plain" and len(results) == 1 and results[0].ok:
        out.write(_fmt_percent(results[0].percent) + "\n")
        return
    if fmt == "plain":
        # Failed or skipped devices show their status in place of a percent.
        for r in results:
            value = _fmt_percent(r.percent) if r.ok else _status(r)
            out.write(f"{r.device.name} {value}\n")
        return
    rows = [
        {
            "name": r.device.name,
            "class": r.device.device_class.value,
            "percent": None if r.percent is None else round(r.percent, 2),
            "status": _status(r),
        }
        for r in results
    ]
    _emit(rows, ("name", "class", "percent", "status"), fmt, out)


def write_info(devices: Sequence[Device], fmt: str, out: TextIO) -> None:
    rows = [device_record(d) for d in devices]
    if fmt == "plain":
        for row in rows:
            out.write(f"{row['name']}\n")
            for key in INFO_FIELDS[1:]:
                value = "" if row[key] is None else row[key]
                out.write(f"  {key}: {value}\n")
        return
    _emit(rows, INFO_FIELDS, fmt, out)


def write_status(results: Sequence[DeviceResult], fmt: str, out: TextIO) -> None:
    rows = [
        {
            "name": r.device.name,
            "class": r.device.device_class.value,
            "status": _status(r),
        }
        for r in results
    ]
    fields = ("name", "class", "status") if fmt != "plain" else ("name", "status")
    _emit(rows, fields, fmt, out)
