"""RampX scaffolder -- writes project trees for a (type, pattern) pair.

Quick usage::

    from rampx.registry import ProjectType, get_pattern
    from rampx.scaffolder import ProjectGenerator

    pattern = get_pattern(ProjectType.NODE, "simple")
    generator = ProjectGenerator()
    project = await generator.generate("/tmp/my-api", ProjectType.NODE, pattern, "my-api")
"""

from rampx.scaffolder.generator import GeneratedProject, ProjectGenerator
from rampx.scaffolder.layouts import directories_for, seed_files_for
from rampx.scaffolder.templates import TemplateRenderer, apply_placeholders

__all__ = [
    "GeneratedProject",
    "ProjectGenerator",
    "TemplateRenderer",
    "apply_placeholders",
    "directories_for",
    "seed_files_for",
]
