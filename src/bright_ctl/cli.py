from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import Any

from bright_ctl import __version__
from bright_ctl.config import FORMATS, ConfigError, class_roots, defaults, load
from bright_ctl.errors import BrightnessError
from bright_ctl.filters import DeviceFilter, select_devices
from bright_ctl.manpage import render_manpage
from bright_ctl.mutator import DeviceResult, Operation, run
from bright_ctl.output import write_info, write_percents, write_status
from bright_ctl.paths import default_config_path, resolve_state_dir
from bright_ctl.state import StateStore
from bright_ctl.system.device import DeviceClass, enumerate_devices

logger = logging.getLogger(__name__)


def _percent(text: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid percent: {text!r}") from e
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"percent must be a finite number: {text!r}")
    return value


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-d", "--device", help="Only act on the device with this name")
    p.add_argument(
        "--class",
        dest="device_class",
        choices=[c.value for c in DeviceClass],
        help="Only act on devices of this class",
    )
    p.add_argument("-f", "--format", choices=FORMATS, help="Output format")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bright-ctl",
        description="Read and change backlight and LED brightness in perceptual percent.",
    )
    ap.add_argument("--version", action="version", version=__version__)
    ap.add_argument("-c", "--config", help="YAML config file")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="count", default=0)
    verbosity.add_argument("-q", "--quiet", action="store_true")

    sub = ap.add_subparsers(dest="cmd", required=True)

    get = sub.add_parser("get", help="Print current brightness in percent")
    _add_filter_args(get)

    for name, text in (
        ("set", "Set brightness to PERCENT"),
        ("add", "Add PERCENT to current brightness"),
        ("sub", "Subtract PERCENT from current brightness"),
    ):
        p = sub.add_parser(name, help=text)
        p.add_argument("percent", type=_percent)
        _add_filter_args(p)

    info = sub.add_parser("info", help="Print information about devices")
    _add_filter_args(info)

    for name, text in (
        ("save", "Save raw brightness to the state file"),
        ("restore", "Restore raw brightness from the state file"),
    ):
        p = sub.add_parser(name, help=text)
        _add_filter_args(p)
        p.add_argument("--state-dir", help="Directory holding the state file")

    sub.add_parser("man", help="Print the manual page in roff format")

    return ap


def _setup_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def _load_config(path: str | None) -> dict[str, Any]:
    if path:
        return load(path)
    fallback = default_config_path()
    if fallback.is_file():
        logger.debug("using config %s", fallback)
        return load(fallback)
    return defaults()


def _execute(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    fmt = args.format or cfg["format"]
    criteria = DeviceFilter(
        name=args.device,
        device_class=DeviceClass(args.device_class) if args.device_class else None,
    )
    devices = enumerate_devices(class_roots(cfg))
    out = sys.stdout

    if args.cmd in ("save", "restore"):
        selected = select_devices(devices, criteria.for_state())
        store = StateStore.in_dir(resolve_state_dir(args.state_dir, cfg["state_dir"]))
        if args.cmd == "save":
            store.save(selected)
            results = [DeviceResult(device=d) for d in selected]
            write_status(results, fmt, out)
            return 0
        batch = store.restore(selected)
        write_status(batch.results, fmt, out)
        return 0 if batch.ok else 1

    selected = select_devices(devices, criteria)
    if args.cmd == "info":
        write_info(selected, fmt, out)
        return 0

    batch = run(Operation(args.cmd), selected, getattr(args, "percent", None))
    write_percents(batch.results, fmt, out)
    return 0 if batch.ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose, args.quiet)
    if args.cmd == "man":
        sys.stdout.write(render_manpage(parser))
        return 0
    try:
        cfg = _load_config(args.config)
        return _execute(args, cfg)
    except (BrightnessError, ConfigError) as e:
        logger.error("%s", e)
        return 1
