"""RampX command-line interface.

Usage::

    rpx init node my-api --pattern simple --no-git
    rpx init flutter my-app --yes
    rpx patterns laravel
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import NoReturn

from rich.panel import Panel
from rich.text import Text

from rampx import __version__
from rampx.config import Config
from rampx.errors import ConflictError, RampxError, ValidationError
from rampx.initializer import InitResult, ProjectInitializer
from rampx.registry import REGISTRY, ProjectType, valid_type_names
from rampx.utils import console, print_error, print_summary_table, print_warning

PROG = "rpx"

_EPILOG = (
    "Examples:\n"
    "  rpx init flutter my-app\n"
    "  rpx init node api-server --pattern clean\n"
    "  rpx patterns laravel\n"
)


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------


def print_banner() -> None:
    """Print the RampX banner."""
    banner = Text()
    banner.append("RampX", style="bold magenta")
    banner.append(f"  v{__version__}\n", style="cyan")
    banner.append("Ramp up your development workflow", style="dim")
    console.print(Panel(banner, border_style="magenta", expand=False))


def print_patterns(project_type: ProjectType) -> None:
    """Render one card per pattern followed by usage examples."""
    console.print(f"\n[bold blue]Available patterns for [cyan]{project_type}[/cyan]:[/bold blue]\n")
    patterns = REGISTRY.list_patterns(project_type)
    for pattern in patterns:
        body = Text()
        body.append(pattern.label, style="bold cyan")
        if pattern.recommended:
            body.append("  * RECOMMENDED", style="bold yellow")
        body.append(f"\n\n{pattern.description}\n\n")
        body.append("Usage: ", style="dim")
        body.append(f"{PROG} init {project_type} my-project --pattern={pattern.key}")
        console.print(
            Panel(
                body,
                border_style="yellow" if pattern.recommended else "cyan",
                expand=False,
            )
        )

    console.print("\n[bold blue]Examples:[/bold blue]\n")
    console.print("[dim]  Interactive selection:[/dim]")
    console.print(f"  $ {PROG} init {project_type} my-project\n")
    if patterns:
        console.print("[dim]  Direct pattern selection:[/dim]")
        console.print(f"  $ {PROG} init {project_type} my-project --pattern={patterns[0].key}\n")
    console.print("[dim]  Skip all prompts:[/dim]")
    console.print(f"  $ {PROG} init {project_type} my-project --yes --no-git\n")


def print_init_success(result: InitResult) -> None:
    """Render the project summary and the next-steps box."""
    request = result.request
    console.print()
    print_summary_table(
        {
            "Project": request.name,
            "Type": str(request.project_type),
            "Pattern": request.pattern.key,
            "Location": str(request.target_path),
            "Git": _step_status(result.git_initialized, request.skip_git),
            "Dependencies": _step_status(result.dependencies_installed, request.skip_install),
        },
        title="Project",
    )
    lines = [
        "[bold green]Project created successfully![/bold green]",
        "",
        "[bold cyan]Next steps:[/bold cyan]",
        "",
    ]
    lines.extend(f"  {step}" for step in result.next_steps)
    console.print(Panel("\n".join(lines), border_style="green", expand=False, padding=1))


def _step_status(done: bool, skipped: bool) -> str:
    if skipped:
        return "skipped"
    return "done" if done else "failed"


def report_error(exc: RampxError) -> None:
    """Print a terminal error with its valid alternatives, if any."""
    if isinstance(exc, ConflictError):
        print_warning(str(exc))
        return
    print_error(f"Error: {exc}")
    if isinstance(exc, ValidationError) and exc.valid_values:
        console.print(
            f"[yellow]Valid values:[/yellow] [cyan]{', '.join(exc.valid_values)}[/cyan]"
        )


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class RampxArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        print_error(f"Error: {message}")
        console.print(
            f"[yellow]Run[/yellow] [bold cyan]{PROG} --help[/bold cyan] "
            "[yellow]to see available commands[/yellow]"
        )
        self.exit(1)

    def print_help(self, file=None) -> None:
        if self.prog == PROG:
            print_banner()
        super().print_help(file)


class _VersionAction(argparse.Action):
    """``-V/--version``: banner plus version string, exit 0."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS,
                 help=None):
        super().__init__(option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None) -> NoReturn:
        print_banner()
        console.print(f"{PROG} {__version__}", highlight=False)
        parser.exit(0)


def build_parser() -> RampxArgumentParser:
    parser = RampxArgumentParser(
        prog=PROG,
        description="RampX -- Ramp up your development workflow",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_EPILOG,
    )
    parser.add_argument(
        "-V", "--version",
        action=_VersionAction,
        help="Output the current version",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    init = subparsers.add_parser("init", help="Initialize a new project")
    init.add_argument("type", help=f"project type ({', '.join(valid_type_names())})")
    init.add_argument("name", help="project name (lowercase letters, numbers, - and _)")
    init.add_argument("--pattern", default=None, help="Choose project structure pattern")
    init.add_argument("--no-git", action="store_true", help="Skip git initialization")
    init.add_argument("--no-install", action="store_true", help="Skip dependency installation")
    init.add_argument("--yes", action="store_true", help="Skip all prompts and use defaults")
    init.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to create the project in (default: current directory)",
    )
    init.add_argument(
        "--template-dir",
        type=Path,
        default=None,
        help="Overlay directory laid out as <type>/<pattern>/",
    )

    patterns = subparsers.add_parser(
        "patterns", help="List available project structure patterns for a framework"
    )
    patterns.add_argument("framework", help=f"framework name ({', '.join(valid_type_names())})")

    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    """Environment defaults overridden by explicit flags."""
    config = Config.from_env()
    updates: dict[str, object] = {}
    if args.no_git:
        updates["git_enabled"] = False
    if args.no_install:
        updates["install_enabled"] = False
    if args.yes:
        updates["assume_yes"] = True
    if args.output_dir is not None:
        updates["output_dir"] = args.output_dir
    if args.template_dir is not None:
        updates["template_dir"] = args.template_dir
    return config.model_copy(update=updates)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_init(args: argparse.Namespace, initializer: ProjectInitializer | None = None) -> int:
    """Handle ``rpx init``."""
    console.print("[blue]Initializing project...[/blue]\n")
    console.print(f"[dim]  Type:    [/dim][bold]{args.type}[/bold]")
    console.print(f"[dim]  Name:    [/dim][bold]{args.name}[/bold]")
    if args.pattern:
        console.print(f"[dim]  Pattern: [/dim][bold]{args.pattern}[/bold]")
    console.print()

    initializer = initializer or ProjectInitializer(_config_from_args(args))
    try:
        result = asyncio.run(initializer.run(args.type, args.name, args.pattern))
    except RampxError as exc:
        report_error(exc)
        return 1
    print_init_success(result)
    return 0


def cmd_patterns(args: argparse.Namespace) -> int:
    """Handle ``rpx patterns``."""
    try:
        project_type = ProjectType(args.framework)
    except ValueError:
        print_error(f"Error: Invalid framework '{args.framework}'")
        console.print(
            f"[yellow]Available frameworks:[/yellow] [cyan]{', '.join(valid_type_names())}[/cyan]"
        )
        return 1
    print_patterns(project_type)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``rpx`` and ``python -m rampx``."""
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    if args.command == "init":
        try:
            return cmd_init(args)
        except (KeyboardInterrupt, EOFError):
            print_warning("\nCancelled.")
            return 1
    if args.command == "patterns":
        return cmd_patterns(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
