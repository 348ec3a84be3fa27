"""Tests for the shared text helpers and the reporter import graph."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

import solana_exposure_scanner
from solana_exposure_scanner.reporter.text import format_date, truncate_address

SRC_DIR = Path(solana_exposure_scanner.__file__).resolve().parents[1]


class TestTextHelpers:
    def test_truncate_address(self) -> None:
        assert truncate_address("JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4") == "JUP6Lk...TaV4"
        assert truncate_address("JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4", head=4, tail=4) == (
            "JUP6...TaV4"
        )

    def test_format_date(self) -> None:
        assert format_date(-1) == "Unknown"
        assert format_date(1_700_086_400) == "2023-11-15"


class TestImportOrder:
    @pytest.mark.parametrize(
        "module",
        [
            "solana_exposure_scanner.reporter.formatter",
            "solana_exposure_scanner.reporter.narrator",
            "solana_exposure_scanner.detector.clustering",
            "solana_exposure_scanner.detector.defi",
            "solana_exposure_scanner.pipeline",
        ],
    )
    def test_imports_first_in_fresh_interpreter(self, module: str) -> None:
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            p for p in (str(SRC_DIR), env.get("PYTHONPATH", "")) if p
        )
        completed = subprocess.run(
            [sys.executable, "-c", f"import {module}"],
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
        assert completed.returncode == 0, completed.stderr
