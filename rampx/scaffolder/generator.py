"""Project tree generator.

Takes a project type, a resolved ``Pattern`` and a project name and writes
the directory skeleton plus the seed files (manifest, entry point, README,
env files) for that combination.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import TemplateError
from pydantic import BaseModel, Field

from rampx.errors import ConflictError, GenerationError
from rampx.registry import Pattern, ProjectType
from rampx.scaffolder.layouts import directories_for, seed_files_for
from rampx.scaffolder.templates import TemplateRenderer, apply_placeholders, copy_overlay
from rampx.utils import path_taken


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class GeneratedProject(BaseModel):
    """What :meth:`ProjectGenerator.generate` put on disk."""

    root: Path
    project_name: str
    project_type: ProjectType
    pattern_key: str
    directories: list[Path] = Field(default_factory=list)
    files: list[Path] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Writes a new project tree for one (type, pattern) pair.

    Generation is a single forward pass: directories first, then the seed
    files, then the optional overlay copy, then placeholder substitution.
    Nothing is rolled back if a step fails.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def generate(
        self,
        target_path: str | Path,
        project_type: ProjectType,
        pattern: Pattern,
        project_name: str,
        overlay_dir: str | Path | None = None,
    ) -> GeneratedProject:
        """Generate the project at *target_path*.

        Args:
            target_path: Project root.  Must not exist yet.
            project_type: Target ecosystem.
            pattern: Resolved structure pattern of *project_type*.
            project_name: Already-validated project name.
            overlay_dir: Optional directory whose contents are copied over the
                seed files before placeholder substitution.

        Returns:
            A ``GeneratedProject`` describing the written tree.

        Raises:
            ConflictError: If *target_path* already exists.
            GenerationError: On any I/O or template failure.
        """
        root = Path(target_path)
        if path_taken(root):
            raise ConflictError(str(root))
        if pattern.project_type is not project_type:
            raise GenerationError(
                f"Pattern '{pattern.key}' does not belong to {project_type}"
            )

        result = GeneratedProject(
            root=root,
            project_name=project_name,
            project_type=project_type,
            pattern_key=pattern.key,
        )
        context = self._build_context(project_type, pattern, project_name)

        try:
            await asyncio.to_thread(root.mkdir, parents=True)

            # 1. Directory skeleton
            result.directories = await self._create_directory_structure(
                root, project_type, pattern.key
            )

            # 2-5. Seed files
            result.files.extend(
                await self._render_seed_files(root, project_type, context)
            )

            # 6. Overlay copy
            if overlay_dir is not None:
                copied = await asyncio.to_thread(copy_overlay, overlay_dir, root)
                result.files.extend(p for p in copied if p not in result.files)

            # 7. Flat placeholder substitution
            await asyncio.to_thread(
                apply_placeholders, root, project_name, project_type.value
            )
        except TemplateError as exc:
            # TemplateNotFound is also an OSError; keep this clause first.
            raise GenerationError(
                f"Failed to render template: {exc}", path=str(root)
            ) from exc
        except OSError as exc:
            raise GenerationError(
                f"Failed to create project structure: {exc}", path=str(root)
            ) from exc
        except UnicodeDecodeError as exc:
            raise GenerationError(
                f"Cannot substitute placeholders in a non UTF-8 file: {exc}",
                path=str(root),
            ) from exc

        return result

    # -- Context building --------------------------------------------------

    def _build_context(
        self, project_type: ProjectType, pattern: Pattern, project_name: str
    ) -> dict[str, Any]:
        """Build the Jinja2 template context for the seed files."""
        return {
            "project_name": project_name,
            "project_type": project_type.value,
            "pattern_key": pattern.key,
            "pattern_label": pattern.label,
            "pattern_description": pattern.description,
            "pattern_notes": pattern.notes,
        }

    # -- Directory structure -----------------------------------------------

    async def _create_directory_structure(
        self, root: Path, project_type: ProjectType, pattern_key: str
    ) -> list[Path]:
        """Create the fixed directory list for (type, pattern)."""
        created: list[Path] = []
        for rel in directories_for(project_type, pattern_key):
            path = root / rel
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
            created.append(path)
        return created

    # -- Seed files --------------------------------------------------------

    async def _render_seed_files(
        self, root: Path, project_type: ProjectType, ctx: dict[str, Any]
    ) -> list[Path]:
        """Render manifest, entry point, README and env files."""
        seeds = seed_files_for(project_type)
        written: list[Path] = []

        manifest_template, manifest_name = seeds.manifest
        written.append(
            await self.renderer.render_to_file(manifest_template, root / manifest_name, ctx)
        )

        entry_template, entry_name = seeds.entry_point
        written.append(
            await self.renderer.render_to_file(entry_template, root / entry_name, ctx)
        )

        readme_ctx = {
            **ctx,
            "getting_started": self.renderer.render(seeds.getting_started, ctx).strip(),
        }
        written.append(
            await self.renderer.render_to_file(
                "common/README.md.j2", root / "README.md", readme_ctx
            )
        )

        for env_name in (".env.example", ".env"):
            written.append(
                await self.renderer.render_to_file(seeds.env, root / env_name, ctx)
            )

        return written
