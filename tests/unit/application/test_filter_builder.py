"""Unit tests for building predicates from property filters."""

from __future__ import annotations

import pytest

from mp_persistence.application.filtering import (
    MatchType,
    PropertyFilter,
    build_criterion,
    build_from_filters,
)
from mp_persistence.kernel.errors import InvalidArgumentError
from mp_persistence.kernel.query import And, Comparison, Operator, Or

USERS = [
    {"id": 1, "status": "active", "name": "john", "login": "jsmith"},
    {"id": 2, "status": "active", "name": "mary", "login": "mjo"},
    {"id": 3, "status": "locked", "name": "joe", "login": "joe1"},
    {"id": 4, "status": "active", "name": "anna", "login": "anna"},
    {"id": 5, "status": "active", "name": "bo", "login": None},
]


class TestBuildCriterion:
    @pytest.mark.parametrize(
        ("match_type", "operator"),
        [
            (MatchType.EQ, Operator.EQ),
            (MatchType.NE, Operator.NE),
            (MatchType.GT, Operator.GT),
            (MatchType.GE, Operator.GE),
            (MatchType.LT, Operator.LT),
            (MatchType.LE, Operator.LE),
            (MatchType.LIKE, Operator.CONTAINS),
        ],
    )
    def test_every_match_type_maps(self, match_type: MatchType, operator: Operator) -> None:
        assert build_criterion("name", "x", match_type) == Comparison("name", operator, "x")

    def test_all_match_types_are_covered(self) -> None:
        for match_type in MatchType:
            build_criterion("name", "v", match_type)

    def test_like_requires_string(self) -> None:
        with pytest.raises(InvalidArgumentError):
            build_criterion("age", 30, MatchType.LIKE)

    def test_like_is_contains(self) -> None:
        predicate = build_criterion("name", "oh", MatchType.LIKE)
        assert predicate.is_satisfied_by({"name": "john"})
        assert not predicate.is_satisfied_by({"name": "mary"})


class TestBuildFromFilters:
    def test_single_property_filter(self) -> None:
        predicates = build_from_filters([PropertyFilter.parse("EQ_S_status", "active")])
        assert predicates == [Comparison("status", Operator.EQ, "active")]

    def test_multi_property_filter_is_one_or_group(self) -> None:
        predicates = build_from_filters([PropertyFilter.parse("LIKE_S_name_OR_login", "jo")])
        assert len(predicates) == 1
        assert predicates[0] == Or(
            (
                Comparison("name", Operator.CONTAINS, "jo"),
                Comparison("login", Operator.CONTAINS, "jo"),
            )
        )

    def test_empty_filters(self) -> None:
        assert build_from_filters([]) == []

    def test_cross_filter_and_intra_filter_or(self) -> None:
        filters = [
            PropertyFilter.parse("EQ_S_status", "active"),
            PropertyFilter.parse("LIKE_S_name_OR_login", "jo"),
        ]
        spec = And(tuple(build_from_filters(filters)))
        matched = [u["id"] for u in USERS if spec.is_satisfied_by(u)]
        # john by name, mary by login; joe is locked
        assert matched == [1, 2]

    def test_two_filters_narrow(self) -> None:
        filters = [
            PropertyFilter.parse("EQ_S_status", "active"),
            PropertyFilter.parse("GE_I_id", "4"),
        ]
        spec = And(tuple(build_from_filters(filters)))
        assert [u["id"] for u in USERS if spec.is_satisfied_by(u)] == [4, 5]
