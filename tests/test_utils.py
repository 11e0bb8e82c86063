"""Unit tests for utility functions (rampx.utils).

Tests cover:
- run_command (success, failure, timeout, cwd, capture=False)
- is_tool_available
- path_taken / remove_path
- Rich output helpers
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from rampx.utils import (
    create_progress,
    is_tool_available,
    path_taken,
    print_error,
    print_muted,
    print_success,
    print_summary_table,
    print_warning,
    remove_path,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command_list(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert "hello" in stdout

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.exit(3)"]
        )
        assert returncode == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        (tmp_path / "marker.txt").write_text("x", encoding="utf-8")
        returncode, stdout, stderr = await run_command(["ls"], cwd=tmp_path)
        assert returncode == 0
        assert "marker.txt" in stdout

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_timeout(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(10)"], timeout=1
        )
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_executable_raises(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["definitely-not-a-real-tool-xyz"])

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_returns_stderr(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom')"],
        )
        assert stderr == "boom"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_capture(self):
        returncode, stdout, stderr = await run_command(["true"], capture=False)
        assert returncode == 0
        assert stdout == ""
        assert stderr == ""


# ---------------------------------------------------------------------------
# is_tool_available
# ---------------------------------------------------------------------------


class TestIsToolAvailable:
    @pytest.mark.unit
    def test_python_is_available(self):
        assert is_tool_available(sys.executable) is True

    @pytest.mark.unit
    def test_missing_tool(self):
        assert is_tool_available("definitely-not-a-real-tool-xyz") is False


# ---------------------------------------------------------------------------
# path_taken / remove_path
# ---------------------------------------------------------------------------


class TestPathTaken:
    @pytest.mark.unit
    def test_missing(self, tmp_path: Path):
        assert path_taken(tmp_path / "nope") is False

    @pytest.mark.unit
    def test_directory(self, tmp_path: Path):
        assert path_taken(tmp_path) is True

    @pytest.mark.unit
    def test_dangling_symlink(self, tmp_path: Path):
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "gone", target_is_directory=True)
        assert link.exists() is False
        assert path_taken(link) is True


class TestRemovePath:
    @pytest.mark.unit
    def test_removes_tree(self, tmp_path: Path):
        target = tmp_path / "project"
        (target / "src" / "deep").mkdir(parents=True)
        (target / "src" / "deep" / "file.js").write_text("x", encoding="utf-8")
        remove_path(target)
        assert not target.exists()

    @pytest.mark.unit
    def test_removes_file(self, tmp_path: Path):
        target = tmp_path / "file.txt"
        target.write_text("x", encoding="utf-8")
        remove_path(target)
        assert not target.exists()

    @pytest.mark.unit
    def test_symlink_target_untouched(self, tmp_path: Path):
        real = tmp_path / "real"
        real.mkdir()
        (real / "keep.txt").write_text("x", encoding="utf-8")
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)
        remove_path(link)
        assert not link.exists()
        assert (real / "keep.txt").exists()

    @pytest.mark.unit
    def test_dangling_symlink_unlinked(self, tmp_path: Path):
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "gone", target_is_directory=True)
        remove_path(link)
        assert not link.is_symlink()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichHelpers:
    """Smoke tests -- verify the helpers run without raising."""

    @pytest.mark.unit
    def test_print_summary_table(self):
        print_summary_table({"Project": "my-app", "Type": "node"}, title="Project")

    @pytest.mark.unit
    def test_print_success(self):
        print_success("Project structure created")

    @pytest.mark.unit
    def test_print_error(self):
        print_error("Something failed")

    @pytest.mark.unit
    def test_print_warning(self):
        print_warning("Check your config")

    @pytest.mark.unit
    def test_print_muted(self):
        print_muted("Skipping git initialization")

    @pytest.mark.unit
    def test_create_progress(self):
        progress = create_progress()
        with progress:
            progress.add_task("Working...", total=None)
