"""Project initializer -- drives one ``rpx init`` request end to end.

States::

    VALIDATING -> RESOLVING_PATTERN -> GENERATING
               -> VERSION_CONTROL (optional) -> DEPENDENCY_INSTALL (optional)
               -> DONE

Validation and generation failures end the run with a ``RampxError``.
Version control and dependency installation are best effort: a missing tool
or a failing command becomes a warning and the run still completes.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Sequence
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Protocol

from pydantic import BaseModel, Field, field_validator
from rich.prompt import Prompt

from rampx.config import Config
from rampx.errors import ConflictError, GenerationError, ToolUnavailableError, ValidationError
from rampx.registry import REGISTRY, Pattern, PatternRegistry, ProjectType, parse_project_type
from rampx.scaffolder import GeneratedProject, ProjectGenerator, seed_files_for
from rampx.scaffolder.templates import write_file
from rampx.utils import (
    console,
    create_progress,
    is_tool_available,
    path_taken,
    print_muted,
    print_success,
    print_warning,
    remove_path,
    run_command,
)

NAME_PATTERN = re.compile(r"[a-z0-9_-]+")


def validate_project_name(name: str) -> str:
    """Return *name* unchanged if it is a valid project name.

    Raises:
        ValidationError: Unless *name* consists only of lowercase letters,
            digits, hyphens and underscores.
    """
    if not NAME_PATTERN.fullmatch(name or ""):
        raise ValidationError(
            f"Invalid project name '{name}'. "
            "Use only lowercase letters, numbers, hyphens, and underscores"
        )
    return name


# ---------------------------------------------------------------------------
# Interactive selection
# ---------------------------------------------------------------------------


class Choice(NamedTuple):
    key: str
    label: str


class Chooser(Protocol):
    """Presents ordered options and blocks until one is picked."""

    def choose(
        self, message: str, options: Sequence[Choice], default: str | None = None
    ) -> str:
        """Return the ``key`` of the selected option."""
        ...


class RichChooser:
    """Terminal chooser backed by ``rich.prompt.Prompt``."""

    def choose(
        self, message: str, options: Sequence[Choice], default: str | None = None
    ) -> str:
        for option in options:
            console.print(f"  [bold cyan]{option.key}[/bold cyan] [dim]-[/dim] {option.label}")
        choices = [option.key for option in options]
        if default is None:
            return Prompt.ask(message, choices=choices, console=console)
        return Prompt.ask(message, choices=choices, default=default, console=console)


# ---------------------------------------------------------------------------
# Request / result models
# ---------------------------------------------------------------------------


class InitState(str, Enum):
    VALIDATING = "validating"
    RESOLVING_PATTERN = "resolving_pattern"
    GENERATING = "generating"
    VERSION_CONTROL = "version_control"
    DEPENDENCY_INSTALL = "dependency_install"
    DONE = "done"


class ProjectRequest(BaseModel):
    """A fully resolved ``init`` request."""

    project_type: ProjectType
    name: str
    pattern: Pattern
    target_path: Path
    skip_git: bool = False
    skip_install: bool = False

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not NAME_PATTERN.fullmatch(value):
            raise ValueError("name must match ^[a-z0-9_-]+$")
        return value

    @field_validator("target_path")
    @classmethod
    def _check_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError("target_path must be absolute")
        return value


class InitResult(BaseModel):
    """Outcome of a completed run."""

    request: ProjectRequest
    project: GeneratedProject
    git_initialized: bool = False
    dependencies_installed: bool = False
    warnings: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectInitializer:
    """Validates, generates and post-processes a single project.

    Attributes:
        config: Invocation settings (output directory, flags, overlay dir).
        chooser: Interactive selection capability; tests inject a double.
        state: The step the run is currently in.
    """

    def __init__(
        self,
        config: Config,
        chooser: Chooser | None = None,
        generator: ProjectGenerator | None = None,
        registry: PatternRegistry = REGISTRY,
    ) -> None:
        self.config = config
        self.chooser = chooser or RichChooser()
        self.generator = generator or ProjectGenerator()
        self.registry = registry
        self.state = InitState.VALIDATING

    async def run(
        self, type_name: str, name: str, pattern_key: str | None = None
    ) -> InitResult:
        """Execute the whole flow for ``init <type> <name>``."""
        self.state = InitState.VALIDATING
        project_type = parse_project_type(type_name)
        validate_project_name(name)
        if pattern_key is not None:
            self.registry.require_pattern(project_type, pattern_key)
        target_path = self.config.target_path(name)
        self._resolve_conflict(target_path, name)

        self.state = InitState.RESOLVING_PATTERN
        pattern = self.resolve_pattern(project_type, pattern_key)

        request = ProjectRequest(
            project_type=project_type,
            name=name,
            pattern=pattern,
            target_path=target_path,
            skip_git=not self.config.git_enabled,
            skip_install=not self.config.install_enabled,
        )

        self.state = InitState.GENERATING
        project = await self._generate(request)
        result = InitResult(request=request, project=project)

        self.state = InitState.VERSION_CONTROL
        if request.skip_git:
            print_muted("Skipping git initialization")
        else:
            result.git_initialized = await self._step(
                result, self.init_git(request.target_path), "Git initialized"
            )

        self.state = InitState.DEPENDENCY_INSTALL
        if request.skip_install:
            print_muted("Skipping dependency installation")
        else:
            result.dependencies_installed = await self._step(
                result,
                self.install_dependencies(request.target_path, request.project_type),
                "Dependencies installed",
            )

        result.next_steps = self.next_steps(request)
        self.state = InitState.DONE
        return result

    # -- Validating --------------------------------------------------------

    def _resolve_conflict(self, target_path: Path, name: str) -> None:
        """Ask before removing an existing target; never merge into it."""
        if not path_taken(target_path):
            return
        print_warning(f'Directory "{name}" already exists!')
        action = self.chooser.choose(
            "What would you like to do?",
            [
                Choice("cancel", "Cancel and choose a different name"),
                Choice("remove", "Remove existing directory and continue"),
            ],
            default="cancel",
        )
        if action != "remove":
            raise ConflictError(str(target_path), "Cancelled. No changes made.")
        try:
            remove_path(target_path)
        except OSError as exc:
            raise GenerationError(
                f"Could not remove existing directory: {exc}", path=str(target_path)
            ) from exc
        print_success("Directory removed")

    # -- Resolving pattern -------------------------------------------------

    def resolve_pattern(
        self, project_type: ProjectType, pattern_key: str | None = None
    ) -> Pattern:
        """Pick the pattern from the flag, the ``--yes`` default or a prompt.

        ``--yes`` takes the first pattern in registry order, not the
        recommended one.
        """
        if pattern_key is not None:
            return self.registry.require_pattern(project_type, pattern_key)

        patterns = self.registry.list_patterns(project_type)
        if not patterns:
            raise ValidationError(f"No patterns available for {project_type}")
        if self.config.assume_yes:
            return patterns[0]

        console.print(f"\n[bold blue]Available patterns for {project_type}:[/bold blue]\n")
        options = []
        for pattern in patterns:
            label = pattern.description
            if pattern.recommended:
                label += " [bold yellow](recommended)[/bold yellow]"
            options.append(Choice(pattern.key, label))
        recommended = self.registry.get_recommended(project_type)
        selected = self.chooser.choose(
            "Select a project structure pattern",
            options,
            default=recommended.key if recommended else None,
        )
        console.print()
        return self.registry.require_pattern(project_type, selected)

    # -- Generating --------------------------------------------------------

    async def _generate(self, request: ProjectRequest) -> GeneratedProject:
        overlay = self.config.overlay_path(
            request.project_type.value, request.pattern.key
        )
        with create_progress() as progress:
            progress.add_task("Creating project structure...", total=None)
            project = await self.generator.generate(
                request.target_path,
                request.project_type,
                request.pattern,
                request.name,
                overlay_dir=overlay,
            )
        print_success("Project structure created")
        return project

    # -- Version control ---------------------------------------------------

    async def init_git(self, target_path: Path) -> None:
        """``git init`` the project and write the ``.gitignore``.

        Raises:
            ToolUnavailableError: If git is missing or fails.
        """
        await _run_tool(["git", "init"], cwd=target_path)
        content = self.generator.renderer.render("common/gitignore.j2", {})
        try:
            await asyncio.to_thread(write_file, target_path / ".gitignore", content)
        except OSError as exc:
            raise ToolUnavailableError("git", f"Could not write .gitignore: {exc}") from exc

    # -- Dependency install ------------------------------------------------

    async def install_dependencies(
        self, target_path: Path, project_type: ProjectType
    ) -> None:
        """Run the ecosystem installer inside the project.

        Raises:
            ToolUnavailableError: If the installer is missing or fails.
        """
        command = list(seed_files_for(project_type).install_command)
        with create_progress() as progress:
            progress.add_task("Installing dependencies...", total=None)
            await _run_tool(command, cwd=target_path)

    # -- Done --------------------------------------------------------------

    def next_steps(self, request: ProjectRequest) -> list[str]:
        """Commands the user should run next."""
        seeds = seed_files_for(request.project_type)
        steps = [f"cd {_display_path(request.target_path)}"]
        if request.skip_install:
            steps.append(" ".join(seeds.install_command))
        steps.append(" ".join(seeds.run_command))
        return steps

    # -- Internal helpers --------------------------------------------------

    async def _step(
        self, result: InitResult, operation: Awaitable[None], success_message: str
    ) -> bool:
        """Await a best-effort step; tool failures become warnings."""
        try:
            await operation
        except ToolUnavailableError as exc:
            message = f"{exc.tool} step skipped ({exc})"
            result.warnings.append(message)
            print_warning(message)
            return False
        print_success(success_message)
        return True


def _display_path(path: Path) -> str:
    """*path* relative to the working directory when it lies below it."""
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


async def _run_tool(command: list[str], cwd: Path) -> None:
    """Run an external tool with captured output.

    Raises:
        ToolUnavailableError: If the executable is missing or exits non-zero.
    """
    tool = command[0]
    if not is_tool_available(tool):
        raise ToolUnavailableError(tool, f"{tool} not found")
    try:
        returncode, _stdout, stderr = await run_command(command, cwd=cwd)
    except OSError as exc:
        raise ToolUnavailableError(tool, f"{tool} could not be started: {exc}") from exc
    if returncode != 0:
        detail = stderr.splitlines()[-1] if stderr else f"exit code {returncode}"
        raise ToolUnavailableError(
            tool, f"{' '.join(command)} failed: {detail}", returncode=returncode
        )
