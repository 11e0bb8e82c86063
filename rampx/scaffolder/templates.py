"""Jinja2 template rendering and placeholder substitution for scaffolding.

Provides the TemplateRenderer class which loads the packaged seed templates
from ``rampx/scaffolder/templates/`` and renders them with project-specific
context data, plus the flat ``{{PROJECT_NAME}}`` / ``{{PROJECT_TYPE}}``
substitution pass that runs over a generated tree.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

# File extensions whose contents get placeholder substitution.
PLACEHOLDER_EXTENSIONS: tuple[str, ...] = (".json", ".md", ".yaml")


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the packaged seed templates.

    Templates are ``.j2`` files laid out as ``<project type>/<file>.j2`` plus a
    ``common/`` directory shared by every type.  Undefined context variables
    raise instead of rendering as empty strings.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["dart_package"] = _dart_package_filter

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: Mapping[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"node/package.json.j2"``).
            context: Variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: Mapping[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  Returns the output path.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(write_file, out, content)
        return out

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Placeholder substitution
# ---------------------------------------------------------------------------


def substitute_placeholders(text: str, replacements: Mapping[str, str]) -> str:
    """Replace every ``{{KEY}}`` token in *text* with ``replacements[KEY]``.

    Plain substring replacement: values are inserted verbatim and are not
    scanned again for further tokens.
    """
    if not replacements:
        return text
    pattern = re.compile(
        "|".join(re.escape("{{" + key + "}}") for key in replacements)
    )
    return pattern.sub(lambda m: replacements[m.group(0)[2:-2]], text)


def apply_placeholders(
    root: str | Path,
    project_name: str,
    project_type: str,
    extensions: tuple[str, ...] = PLACEHOLDER_EXTENSIONS,
) -> list[Path]:
    """Run placeholder substitution over every matching file under *root*.

    Returns the files whose content actually changed.
    """
    replacements = {"PROJECT_NAME": project_name, "PROJECT_TYPE": project_type}
    changed: list[Path] = []
    for path in sorted(Path(root).rglob("*")):
        if not path.is_file() or path.suffix not in extensions:
            continue
        original = path.read_text(encoding="utf-8")
        updated = substitute_placeholders(original, replacements)
        if updated != original:
            path.write_text(updated, encoding="utf-8")
            changed.append(path)
    return changed


def copy_overlay(source: str | Path, destination: str | Path) -> list[Path]:
    """Copy the contents of an overlay directory into *destination*.

    Existing files are overwritten.  Returns the destination paths of the
    copied files.
    """
    src = Path(source)
    dest = Path(destination)
    copied: list[Path] = []
    for item in sorted(src.rglob("*")):
        target = dest / item.relative_to(src)
        if item.is_dir():
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, target)
            copied.append(target)
    return copied


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _dart_package_filter(value: str) -> str:
    """Dart package names allow only ``[a-z0-9_]``."""
    return re.sub(r"[^a-z0-9_]", "_", value.lower())


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
