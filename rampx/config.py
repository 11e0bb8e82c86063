"""RampX configuration.

Typed settings for a single ``rpx`` invocation.  Values come from the
environment (``Config.from_env``) and are then overridden by CLI flags.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool | None:
    """Return the boolean value of an environment flag, or ``None`` if unset."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() in _TRUTHY


class Config(BaseModel):
    """Global RampX configuration.

    ``output_dir`` is the parent directory new projects are created in;
    ``template_dir`` optionally points at an overlay tree laid out as
    ``<type>/<pattern>/`` that is copied over the generated seed files.
    """

    output_dir: Path = Field(default_factory=Path.cwd)
    template_dir: Path | None = Field(default=None)
    git_enabled: bool = Field(default=True, description="Run git init after generation")
    install_enabled: bool = Field(default=True, description="Run the ecosystem installer")
    assume_yes: bool = Field(default=False, description="Skip the pattern prompt")

    def target_path(self, project_name: str) -> Path:
        """Absolute path of the project directory for *project_name*.

        Normalised lexically; a symlink named *project_name* is not followed.
        """
        return Path(os.path.abspath(self.output_dir / project_name))

    def overlay_path(self, project_type: str, pattern_key: str) -> Path | None:
        """Return the overlay directory for (type, pattern) if one exists."""
        if self.template_dir is None:
            return None
        candidate = Path(self.template_dir) / project_type / pattern_key
        return candidate if candidate.is_dir() else None

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            RPX_OUTPUT_DIR, RPX_TEMPLATE_DIR, RPX_NO_GIT, RPX_NO_INSTALL,
            RPX_YES.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("RPX_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["RPX_OUTPUT_DIR"])
        if os.environ.get("RPX_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["RPX_TEMPLATE_DIR"])

        no_git = _env_flag("RPX_NO_GIT")
        if no_git is not None:
            kwargs["git_enabled"] = not no_git
        no_install = _env_flag("RPX_NO_INSTALL")
        if no_install is not None:
            kwargs["install_enabled"] = not no_install
        assume_yes = _env_flag("RPX_YES")
        if assume_yes is not None:
            kwargs["assume_yes"] = assume_yes

        return cls(**kwargs)
