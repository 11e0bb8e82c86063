"""Shared pytest fixtures for the RampX test suite.

Provides reusable fixtures for:
- Temporary output directories
- A scripted chooser standing in for the interactive prompt
- Configs with git/install disabled
- Mocked external tool invocations
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from rampx.config import Config
from rampx.initializer import Choice
from rampx.registry import Pattern, ProjectType, get_pattern


# ---------------------------------------------------------------------------
# Chooser double
# ---------------------------------------------------------------------------


class ScriptedChooser:
    """Returns pre-recorded answers in order and records every prompt."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, list[Choice], str | None]] = []

    def choose(
        self, message: str, options: Sequence[Choice], default: str | None = None
    ) -> str:
        self.calls.append((message, list(options), default))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        return self.answers.pop(0)


@pytest.fixture
def make_chooser():
    """Factory for ``ScriptedChooser`` instances."""
    return ScriptedChooser


# ---------------------------------------------------------------------------
# Paths & config
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep RPX_* variables from the developer's shell out of the tests."""
    for name in ("RPX_OUTPUT_DIR", "RPX_TEMPLATE_DIR", "RPX_NO_GIT", "RPX_NO_INSTALL", "RPX_YES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory new projects are created in."""
    out = tmp_path / "workspace"
    out.mkdir()
    return out


@pytest.fixture
def offline_config(output_dir: Path) -> Config:
    """Config that never touches git or a package manager."""
    return Config(output_dir=output_dir, git_enabled=False, install_enabled=False)


@pytest.fixture
def node_simple() -> Pattern:
    pattern = get_pattern(ProjectType.NODE, "simple")
    assert pattern is not None
    return pattern


# ---------------------------------------------------------------------------
# External tools
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_tools():
    """Patch tool discovery and ``run_command`` inside the initializer.

    Yields the ``run_command`` AsyncMock; by default every command succeeds.
    """
    with patch("rampx.initializer.is_tool_available", return_value=True), patch(
        "rampx.initializer.run_command",
        new_callable=AsyncMock,
        return_value=(0, "", ""),
    ) as mock_run:
        yield mock_run

