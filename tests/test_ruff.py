from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest


@pytest.mark.skipif(shutil.which("ruff") is None, reason="ruff not installed")
def test_ruff_check() -> None:
    # Some environments may have a non-runnable ruff binary on PATH; skip in that case.
    try:
        subprocess.run(["ruff", "--version"], check=True, capture_output=True)  # noqa: S603
    except Exception:
        pytest.skip("ruff not runnable")

    root = Path(__file__).resolve().parents[1]
    subprocess.run(["ruff", "check", "src", "tests"], check=True, cwd=root)  # noqa: S603
