"""Pattern registry -- the static table of project types and their layouts.

Every ``ProjectType`` offers an ordered set of structure ``Pattern``s.  The
table is built once at import time and never mutated; lookups are pure
functions over it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from rampx.errors import ValidationError


class ProjectType(str, Enum):
    """Target framework / ecosystem of a scaffolded project."""

    FLUTTER = "flutter"
    LARAVEL = "laravel"
    NODE = "node"

    def __str__(self) -> str:
        return self.value


class Pattern(BaseModel):
    """A named directory/file layout convention for one project type."""

    model_config = ConfigDict(frozen=True)

    project_type: ProjectType
    key: str = Field(..., description="Short identifier, unique within the project type")
    label: str = Field(..., description="Human-readable name")
    description: str = Field(..., description="One-line summary shown in listings")
    recommended: bool = Field(default=False)
    notes: str = Field(default="", description="Longer structure note used in the README")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class PatternRegistry:
    """Read-only lookup over an ordered ``{ProjectType: patterns}`` table."""

    def __init__(self, table: Mapping[ProjectType, Sequence[Pattern]]) -> None:
        frozen: dict[ProjectType, tuple[Pattern, ...]] = {}
        for project_type, patterns in table.items():
            patterns = tuple(patterns)
            keys = [p.key for p in patterns]
            if len(set(keys)) != len(keys):
                raise ValueError(f"Duplicate pattern keys for {project_type}: {keys}")
            if sum(1 for p in patterns if p.recommended) > 1:
                raise ValueError(f"More than one recommended pattern for {project_type}")
            if any(p.project_type is not project_type for p in patterns):
                raise ValueError(f"Pattern registered under the wrong type: {project_type}")
            frozen[project_type] = patterns
        self._table: Mapping[ProjectType, tuple[Pattern, ...]] = MappingProxyType(frozen)

    def __iter__(self) -> Iterator[ProjectType]:
        return iter(self._table)

    def project_types(self) -> list[ProjectType]:
        """Return every registered project type in registration order."""
        return list(self._table)

    def list_patterns(self, project_type: ProjectType) -> tuple[Pattern, ...]:
        """Return the patterns of *project_type* in insertion order."""
        return self._table.get(project_type, ())

    def get_pattern(self, project_type: ProjectType, key: str) -> Pattern | None:
        """Return the pattern identified by *key*, or ``None``."""
        for pattern in self.list_patterns(project_type):
            if pattern.key == key:
                return pattern
        return None

    def get_recommended(self, project_type: ProjectType) -> Pattern | None:
        """Return the recommended pattern, falling back to the first one.

        Returns ``None`` only when the type has no patterns at all.
        """
        patterns = self.list_patterns(project_type)
        for pattern in patterns:
            if pattern.recommended:
                return pattern
        return patterns[0] if patterns else None

    def is_valid(self, project_type: ProjectType, key: str) -> bool:
        return self.get_pattern(project_type, key) is not None

    def require_pattern(self, project_type: ProjectType, key: str) -> Pattern:
        """Like :meth:`get_pattern` but raises ``ValidationError`` when missing."""
        pattern = self.get_pattern(project_type, key)
        if pattern is None:
            raise ValidationError(
                f"Invalid pattern '{key}' for {project_type}",
                valid_values=[p.key for p in self.list_patterns(project_type)],
            )
        return pattern


def _pattern(project_type: ProjectType, key: str, label: str, description: str,
             notes: str, recommended: bool = False) -> Pattern:
    return Pattern(
        project_type=project_type,
        key=key,
        label=label,
        description=description,
        recommended=recommended,
        notes=notes,
    )


_L = ProjectType.LARAVEL
_F = ProjectType.FLUTTER
_N = ProjectType.NODE

REGISTRY = PatternRegistry({
    _L: (
        _pattern(_L, "standard", "Standard",
                 "Laravel default MVC structure (controllers, models, views)",
                 "Traditional Laravel MVC structure."),
        _pattern(_L, "feature", "Feature-based",
                 "Organize by features/modules for better scalability",
                 "Feature-based organization for better maintainability.",
                 recommended=True),
        _pattern(_L, "ddd", "Domain-Driven Design",
                 "DDD layers (Domain, Application, Infrastructure)",
                 "Domain-Driven Design with rich domain models."),
    ),
    _F: (
        _pattern(_F, "layered", "Layered Architecture",
                 "Presentation, Domain, Data layers separation",
                 "Clear separation between Presentation, Domain, and Data layers."),
        _pattern(_F, "feature", "Feature-first",
                 "Group by features with co-located code",
                 "Features organized by business functionality.",
                 recommended=True),
        _pattern(_F, "clean", "Clean Architecture",
                 "Uncle Bob's clean architecture with strict boundaries",
                 "Uncle Bob's Clean Architecture principles."),
    ),
    _N: (
        _pattern(_N, "simple", "Simple",
                 "Flat structure for small projects and APIs",
                 "A flat, simple structure ideal for small APIs and microservices."),
        _pattern(_N, "modular", "Modular",
                 "Module-based organization for medium projects",
                 "Feature-based modules for better organization and scalability.",
                 recommended=True),
        _pattern(_N, "clean", "Clean Architecture",
                 "Layered architecture with dependency inversion",
                 "Clean Architecture with strict separation of concerns."),
    ),
})


# ---------------------------------------------------------------------------
# Module-level helpers over the default registry
# ---------------------------------------------------------------------------


def valid_type_names() -> list[str]:
    """Sorted names of every supported project type."""
    return sorted(t.value for t in ProjectType)


def parse_project_type(value: str) -> ProjectType:
    """Convert a CLI string into a ``ProjectType``.

    Raises:
        ValidationError: If *value* is not a supported project type.
    """
    try:
        return ProjectType(value)
    except ValueError:
        raise ValidationError(
            f"Invalid project type '{value}'", valid_values=valid_type_names()
        ) from None


def list_patterns(project_type: ProjectType) -> tuple[Pattern, ...]:
    return REGISTRY.list_patterns(project_type)


def get_pattern(project_type: ProjectType, key: str) -> Pattern | None:
    return REGISTRY.get_pattern(project_type, key)


def get_recommended(project_type: ProjectType) -> Pattern | None:
    return REGISTRY.get_recommended(project_type)


def is_valid(project_type: ProjectType, key: str) -> bool:
    return REGISTRY.is_valid(project_type, key)
