from __future__ import annotations

from pathlib import Path

import pytest

from machine_setup.settings import EditorSettings


@pytest.fixture()
def auto_yes() -> EditorSettings:
    """Non-interactive settings, as used by unattended provisioning runs."""
    return EditorSettings(assume_yes=True)


@pytest.fixture()
def conf(tmp_path: Path):
    """Create a config file with the given text and return its path."""

    def _make(text: str, name: str = "test.conf") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _make
