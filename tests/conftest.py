"""Shared pytest fixtures for tallybook tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from tallybook.runtime.paths import reset_paths


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point TALLYBOOK_HOME at a per-test directory so nothing touches ~/.tallybook."""
    home = tmp_path / "tallybook-home"
    monkeypatch.setenv("TALLYBOOK_HOME", str(home))
    reset_paths()
    yield home
    reset_paths()
