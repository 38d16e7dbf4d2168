"""Shared pytest fixtures for avalanche tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_inventory() -> Path:
    """Path of the sample inventory file."""
    return FIXTURES / "site.py"


@pytest.fixture
def broken_inventory(tmp_path: Path) -> Path:
    """Inventory file with one host whose options conflict."""
    path = tmp_path / "broken.py"
    path.write_text(
        "inventory = {\n"
        '    "hosts": {\n'
        '        "good": {"x": 1},\n'
        '        "bad": {"imports": [{"x": 2}], "x": [1]},\n'
        "    },\n"
        "}\n"
    )
    return path
