from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from bright_ctl.system.device import DEFAULT_ROOTS, DeviceClass

FORMATS = ("plain", "csv", "json")


class ConfigError(ValueError):
    pass


def load(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config {p}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Top-level config must be a mapping")
    validate(data)
    normalize(data)
    return data


def defaults() -> dict[str, Any]:
    cfg: dict[str, Any] = {}
    normalize(cfg)
    return cfg


def validate(cfg: dict[str, Any]) -> None:
    classes = cfg.get("classes", {})
    if classes is None:
        classes = {}
    if not isinstance(classes, dict):
        raise ConfigError("classes must be a mapping of device class to directory")
    valid = {c.value for c in DeviceClass}
    for name, root in classes.items():
        if name not in valid:
            raise ConfigError(f"unknown device class: {name}")
        if not isinstance(root, str) or not root.strip():
            raise ConfigError(f"classes.{name} must be a non-empty path")

    state_dir = cfg.get("state_dir")
    if state_dir is not None and (not isinstance(state_dir, str) or not state_dir.strip()):
        raise ConfigError("state_dir must be a non-empty path")

    fmt = cfg.get("format", "plain")
    if fmt not in FORMATS:
        raise ConfigError(f"format must be one of {', '.join(FORMATS)}: {fmt}")


def normalize(cfg: dict[str, Any]) -> None:
    """Fill defaults in place and clean up user-provided paths."""

    classes = cfg.get("classes") or {}
    roots: dict[str, str] = {c.value: str(p) for c, p in DEFAULT_ROOTS.items()}
    for name, root in classes.items():
        roots[str(name)] = str(Path(str(root).strip()).expanduser())
    cfg["classes"] = roots

    state_dir = cfg.get("state_dir")
    if isinstance(state_dir, str) and state_dir.strip():
        cfg["state_dir"] = str(Path(state_dir.strip()).expanduser())
    else:
        cfg["state_dir"] = None

    cfg.setdefault("format", "plain")


def class_roots(cfg: dict[str, Any]) -> dict[DeviceClass, Path]:
    return {DeviceClass(name): Path(root) for name, root in cfg["classes"].items()}
