"""Exception hierarchy for RampX.

Validation and generation errors are terminal and reported by the CLI.
``ToolUnavailableError`` is always caught where the tool is invoked and
downgraded to a warning.
"""

from __future__ import annotations

from collections.abc import Iterable


class RampxError(Exception):
    """Base class for every error RampX reports to the user."""


class ValidationError(RampxError):
    """Raised when the type, name or pattern argument is invalid.

    ``valid_values`` carries the accepted alternatives (if any) so the CLI can
    show them next to the error.
    """

    def __init__(self, message: str, valid_values: Iterable[str] = ()) -> None:
        self.valid_values = list(valid_values)
        super().__init__(message)


class ConflictError(RampxError):
    """Raised when the target directory exists and removal was not confirmed."""

    def __init__(self, path: str, message: str = "") -> None:
        self.path = path
        super().__init__(message or f'Directory "{path}" already exists')


class GenerationError(RampxError):
    """Raised when writing the project tree fails.

    Files and directories written before the failure are left on disk.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class ToolUnavailableError(RampxError):
    """Raised when an external tool is missing or exits non-zero."""

    def __init__(self, tool: str, message: str = "", returncode: int | None = None) -> None:
        self.tool = tool
        self.returncode = returncode
        super().__init__(message or f"{tool} not found")
