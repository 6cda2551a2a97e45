"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def diagnostics():
    """Collecting diagnostic sink for materializer and ingest tests."""
    from materialize.diagnostics import CollectingDiagnosticSink

    return CollectingDiagnosticSink()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove STRATA_* variables so config defaults apply."""
    for variable in (
        "STRATA_CODEC",
        "STRATA_COMPRESSION_LEVEL",
        "STRATA_SYNC_INTERVAL",
        "STRATA_INPUT_ENCODING",
    ):
        monkeypatch.delenv(variable, raising=False)
    return monkeypatch
