"""Shared pytest fixtures for the Gamma test suite."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_source(tmp_path):
    """Write a .gm file into a temp dir and return its path."""

    def _write(text: str, name: str = "main.gm") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
