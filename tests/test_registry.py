"""Unit tests for the pattern registry (rampx.registry).

Tests cover:
- Registry contents and insertion order
- get_pattern / is_valid / require_pattern lookups
- get_recommended, including the first-pattern fallback
- Table validation on construction
- parse_project_type
"""

from __future__ import annotations

import pytest

from rampx.errors import ValidationError
from rampx.registry import (
    REGISTRY,
    Pattern,
    PatternRegistry,
    ProjectType,
    get_pattern,
    get_recommended,
    is_valid,
    list_patterns,
    parse_project_type,
    valid_type_names,
)

pytestmark = pytest.mark.unit


def _p(project_type: ProjectType, key: str, recommended: bool = False) -> Pattern:
    return Pattern(
        project_type=project_type,
        key=key,
        label=key.title(),
        description=f"{key} layout",
        recommended=recommended,
    )


# ---------------------------------------------------------------------------
# Contents
# ---------------------------------------------------------------------------


class TestRegistryContents:
    def test_every_type_registered(self):
        assert set(REGISTRY.project_types()) == set(ProjectType)

    @pytest.mark.parametrize(
        "project_type,keys",
        [
            (ProjectType.LARAVEL, ["standard", "feature", "ddd"]),
            (ProjectType.FLUTTER, ["layered", "feature", "clean"]),
            (ProjectType.NODE, ["simple", "modular", "clean"]),
        ],
    )
    def test_insertion_order(self, project_type, keys):
        assert [p.key for p in list_patterns(project_type)] == keys

    def test_listing_is_restartable(self):
        first = list(list_patterns(ProjectType.NODE))
        second = list(list_patterns(ProjectType.NODE))
        assert first == second

    def test_patterns_belong_to_their_type(self):
        for project_type in ProjectType:
            for pattern in list_patterns(project_type):
                assert pattern.project_type is project_type

    def test_at_most_one_recommended(self):
        for project_type in ProjectType:
            flagged = [p for p in list_patterns(project_type) if p.recommended]
            assert len(flagged) <= 1

    def test_patterns_are_immutable(self):
        pattern = get_pattern(ProjectType.NODE, "simple")
        with pytest.raises(Exception):
            pattern.recommended = True

    def test_valid_type_names(self):
        assert valid_type_names() == ["flutter", "laravel", "node"]


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class TestLookups:
    def test_get_pattern(self):
        pattern = get_pattern(ProjectType.LARAVEL, "ddd")
        assert pattern is not None
        assert pattern.label == "Domain-Driven Design"
        assert pattern.description == "DDD layers (Domain, Application, Infrastructure)"

    def test_get_pattern_unknown_key(self):
        assert get_pattern(ProjectType.NODE, "layered") is None

    def test_is_valid(self):
        assert is_valid(ProjectType.FLUTTER, "clean") is True
        assert is_valid(ProjectType.FLUTTER, "simple") is False

    def test_require_pattern_lists_valid_keys(self):
        with pytest.raises(ValidationError) as exc_info:
            REGISTRY.require_pattern(ProjectType.NODE, "mvc")
        assert exc_info.value.valid_values == ["simple", "modular", "clean"]
        assert "mvc" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Recommended pattern
# ---------------------------------------------------------------------------


class TestRecommended:
    @pytest.mark.parametrize(
        "project_type,key",
        [
            (ProjectType.LARAVEL, "feature"),
            (ProjectType.FLUTTER, "feature"),
            (ProjectType.NODE, "modular"),
        ],
    )
    def test_flagged_pattern_wins(self, project_type, key):
        recommended = get_recommended(project_type)
        assert recommended is not None
        assert recommended.key == key
        assert recommended.recommended is True
        assert recommended.project_type is project_type

    def test_falls_back_to_first_pattern(self):
        registry = PatternRegistry({
            ProjectType.NODE: (_p(ProjectType.NODE, "alpha"), _p(ProjectType.NODE, "beta")),
        })
        assert registry.get_recommended(ProjectType.NODE).key == "alpha"

    def test_flag_later_in_order(self):
        registry = PatternRegistry({
            ProjectType.NODE: (
                _p(ProjectType.NODE, "alpha"),
                _p(ProjectType.NODE, "beta", recommended=True),
            ),
        })
        assert registry.get_recommended(ProjectType.NODE).key == "beta"

    def test_unknown_type_in_custom_registry(self):
        registry = PatternRegistry({ProjectType.NODE: (_p(ProjectType.NODE, "alpha"),)})
        assert registry.get_recommended(ProjectType.FLUTTER) is None
        assert registry.list_patterns(ProjectType.FLUTTER) == ()


# ---------------------------------------------------------------------------
# Table validation
# ---------------------------------------------------------------------------


class TestTableValidation:
    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            PatternRegistry({
                ProjectType.NODE: (_p(ProjectType.NODE, "a"), _p(ProjectType.NODE, "a")),
            })

    def test_two_recommended_rejected(self):
        with pytest.raises(ValueError, match="recommended"):
            PatternRegistry({
                ProjectType.NODE: (
                    _p(ProjectType.NODE, "a", recommended=True),
                    _p(ProjectType.NODE, "b", recommended=True),
                ),
            })

    def test_wrong_type_rejected(self):
        with pytest.raises(ValueError, match="wrong type"):
            PatternRegistry({ProjectType.NODE: (_p(ProjectType.FLUTTER, "a"),)})


# ---------------------------------------------------------------------------
# parse_project_type
# ---------------------------------------------------------------------------


class TestParseProjectType:
    def test_known_type(self):
        assert parse_project_type("laravel") is ProjectType.LARAVEL

    def test_unknown_type(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_project_type("cobol")
        assert exc_info.value.valid_values == ["flutter", "laravel", "node"]

    def test_type_is_case_sensitive(self):
        with pytest.raises(ValidationError):
            parse_project_type("Node")
