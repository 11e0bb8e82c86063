"""Directory layouts and seed-file tables per project type and pattern."""

from __future__ import annotations

from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from rampx.registry import REGISTRY, ProjectType


class SeedFiles(BaseModel):
    """Template -> output mapping for the files every project of a type gets."""

    model_config = ConfigDict(frozen=True)

    manifest: tuple[str, str]
    entry_point: tuple[str, str]
    env: str
    getting_started: str
    install_command: tuple[str, ...]
    run_command: tuple[str, ...]


_BASE_DIRS: dict[ProjectType, tuple[str, ...]] = {
    ProjectType.NODE: (),
    ProjectType.LARAVEL: (
        "app",
        "config",
        "database",
        "public",
        "resources",
        "routes",
        "storage",
        "tests",
    ),
    ProjectType.FLUTTER: ("lib", "test", "assets"),
}

_PATTERN_DIRS: dict[tuple[ProjectType, str], tuple[str, ...]] = {
    (ProjectType.NODE, "simple"): (
        "src",
        "src/routes",
        "src/controllers",
        "src/models",
        "tests",
    ),
    (ProjectType.NODE, "modular"): (
        "src",
        "src/modules/users",
        "src/modules/users/controllers",
        "src/modules/users/services",
        "src/modules/users/models",
        "src/modules/users/routes",
        "src/shared/middleware",
        "src/shared/utils",
        "src/config",
        "tests",
    ),
    (ProjectType.NODE, "clean"): (
        "src",
        "src/domain/entities",
        "src/domain/repositories",
        "src/domain/usecases",
        "src/application/services",
        "src/application/dto",
        "src/infrastructure/database",
        "src/infrastructure/repositories",
        "src/interfaces/http/controllers",
        "src/interfaces/http/routes",
        "src/interfaces/http/middleware",
        "tests",
    ),
    (ProjectType.LARAVEL, "standard"): (
        "app/Http/Controllers",
        "app/Models",
        "app/Services",
    ),
    (ProjectType.LARAVEL, "feature"): (
        "app/Features/Auth",
        "app/Features/Users",
        "app/Support",
    ),
    (ProjectType.LARAVEL, "ddd"): (
        "src/Domain/User/Entities",
        "src/Domain/User/Repositories",
        "src/Domain/User/Services",
        "src/Application/UseCases",
        "src/Infrastructure/Persistence",
        "src/Presentation/Http/Controllers",
    ),
    (ProjectType.FLUTTER, "layered"): (
        "lib/presentation/pages",
        "lib/presentation/widgets",
        "lib/domain/models",
        "lib/domain/repositories",
        "lib/data/repositories",
        "lib/data/datasources",
    ),
    (ProjectType.FLUTTER, "feature"): (
        "lib/features/auth",
        "lib/features/home",
        "lib/core/theme",
        "lib/core/utils",
    ),
    (ProjectType.FLUTTER, "clean"): (
        "lib/core/error",
        "lib/core/usecases",
        "lib/features/domain/entities",
        "lib/features/domain/repositories",
        "lib/features/domain/usecases",
        "lib/features/data/models",
        "lib/features/data/repositories",
        "lib/features/data/datasources",
        "lib/features/presentation/pages",
        "lib/features/presentation/widgets",
        "lib/features/presentation/bloc",
    ),
}

_SEED_FILES: dict[ProjectType, SeedFiles] = {
    ProjectType.NODE: SeedFiles(
        manifest=("node/package.json.j2", "package.json"),
        entry_point=("node/index.js.j2", "src/index.js"),
        env="node/env.j2",
        getting_started="node/getting-started.md.j2",
        install_command=("npm", "install"),
        run_command=("npm", "run", "dev"),
    ),
    ProjectType.LARAVEL: SeedFiles(
        manifest=("laravel/composer.json.j2", "composer.json"),
        entry_point=("laravel/index.php.j2", "public/index.php"),
        env="laravel/env.j2",
        getting_started="laravel/getting-started.md.j2",
        install_command=("composer", "install"),
        run_command=("php", "artisan", "serve"),
    ),
    ProjectType.FLUTTER: SeedFiles(
        manifest=("flutter/pubspec.yaml.j2", "pubspec.yaml"),
        entry_point=("flutter/main.dart.j2", "lib/main.dart"),
        env="flutter/env.j2",
        getting_started="flutter/getting-started.md.j2",
        install_command=("flutter", "pub", "get"),
        run_command=("flutter", "run"),
    ),
}


def _check_tables() -> None:
    """Every project type and every registered pattern must have a layout."""
    for project_type in ProjectType:
        if project_type not in _BASE_DIRS or project_type not in _SEED_FILES:
            raise RuntimeError(f"No scaffolding layout for project type {project_type}")
        for pattern in REGISTRY.list_patterns(project_type):
            if (project_type, pattern.key) not in _PATTERN_DIRS:
                raise RuntimeError(
                    f"No directory layout for {project_type}/{pattern.key}"
                )


_check_tables()

BASE_DIRS = MappingProxyType(_BASE_DIRS)
PATTERN_DIRS = MappingProxyType(_PATTERN_DIRS)
SEED_FILES = MappingProxyType(_SEED_FILES)


def directories_for(project_type: ProjectType, pattern_key: str) -> tuple[str, ...]:
    """Return the full, de-duplicated directory list for (type, pattern).

    Raises:
        KeyError: If the pair has no layout.
    """
    dirs = BASE_DIRS[project_type] + PATTERN_DIRS[(project_type, pattern_key)]
    return tuple(dict.fromkeys(dirs))


def seed_files_for(project_type: ProjectType) -> SeedFiles:
    return SEED_FILES[project_type]
