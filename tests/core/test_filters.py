"""Unit tests for issue filtering and moderation threshold.

Pure function tests - no mocks needed.
"""

import math
from dataclasses import replace

import pytest

from src.core.filters import (
    ALL,
    DEFAULT_RADIUS_KM,
    FLAG_THRESHOLD,
    InvalidFilterValue,
    IssueFilter,
    category_counts,
    is_flagged,
    is_publicly_visible,
    select_flagged,
    select_visible,
    validate_filter,
)
from src.core.geo import EARTH_RADIUS_KM, GeoPoint, calculate_distance
from src.core.issue import CATEGORIES, STATUSES, Issue


ORIGIN = GeoPoint(12.34, 56.78)


def _north_of_origin(distance_km: float) -> float:
    """Latitude of the point distance_km due north of ORIGIN."""
    return ORIGIN.latitude + math.degrees(distance_km / EARTH_RADIUS_KM)


@pytest.fixture
def base_issue():
    """Create an issue at the origin."""
    return Issue(
        id="i1",
        title="Broken streetlight",
        description="Dark corner by the school",
        category="Lighting",
        status="Reported",
        latitude=ORIGIN.latitude,
        longitude=ORIGIN.longitude,
        user_id="u1",
    )


@pytest.fixture
def issues(base_issue):
    """Create a mix of statuses, categories and flag counts."""
    return [
        base_issue,
        replace(base_issue, id="i2", category="Roads", status="In Progress"),
        replace(base_issue, id="i3", category="Roads", flag_count=3),
        replace(base_issue, id="i4", category="Water Supply", status="Resolved", flag_count=2),
        replace(base_issue, id="i5", category="Lighting", flag_count=7),
        replace(base_issue, id="i6", category="Roads", latitude=_north_of_origin(20)),
    ]


class TestSpamGate:
    """Tests for is_publicly_visible() and is_flagged()."""

    @pytest.mark.parametrize("flags", [0, 1, 2])
    def test_below_threshold_is_visible(self, base_issue, flags):
        issue = replace(base_issue, flag_count=flags)
        assert is_publicly_visible(issue) is True
        assert is_flagged(issue) is False

    @pytest.mark.parametrize("flags", [3, 4, 100])
    def test_at_or_above_threshold_is_flagged(self, base_issue, flags):
        issue = replace(base_issue, flag_count=flags)
        assert is_publicly_visible(issue) is False
        assert is_flagged(issue) is True

    def test_threshold_is_three(self):
        assert FLAG_THRESHOLD == 3


class TestValidateFilter:
    """Tests for validate_filter() function."""

    def test_empty_filter_is_valid(self):
        validate_filter(IssueFilter())

    def test_all_sentinel_is_valid(self):
        validate_filter(IssueFilter(status=ALL, category=ALL))

    @pytest.mark.parametrize("status", STATUSES)
    def test_known_statuses_are_valid(self, status):
        validate_filter(IssueFilter(status=status))

    @pytest.mark.parametrize("category", CATEGORIES)
    def test_known_categories_are_valid(self, category):
        validate_filter(IssueFilter(category=category))

    def test_unknown_status_raises(self):
        with pytest.raises(InvalidFilterValue) as exc_info:
            validate_filter(IssueFilter(status="InvalidStatus"))

        assert exc_info.value.field == "status"
        assert exc_info.value.value == "InvalidStatus"

    def test_unknown_category_raises(self):
        with pytest.raises(InvalidFilterValue) as exc_info:
            validate_filter(IssueFilter(category="Parks"))

        assert exc_info.value.field == "category"

    def test_values_are_case_sensitive(self):
        with pytest.raises(InvalidFilterValue):
            validate_filter(IssueFilter(status="reported"))

    def test_invalid_filter_is_value_error(self):
        assert issubclass(InvalidFilterValue, ValueError)


class TestIssueFilterOrigin:
    """Tests for IssueFilter.origin and radius defaults."""

    def test_origin_requires_both_coordinates(self):
        assert IssueFilter(origin_latitude=1.0).origin is None
        assert IssueFilter(origin_longitude=1.0).origin is None

    def test_origin_with_both_coordinates(self):
        f = IssueFilter(origin_latitude=1.0, origin_longitude=2.0)
        assert f.origin == GeoPoint(1.0, 2.0)

    def test_zero_coordinates_are_an_origin(self):
        f = IssueFilter(origin_latitude=0.0, origin_longitude=0.0)
        assert f.origin == GeoPoint(0.0, 0.0)

    def test_default_radius(self):
        assert IssueFilter().effective_radius_km == DEFAULT_RADIUS_KM == 5.0

    def test_explicit_radius(self):
        assert IssueFilter(radius_km=12.5).effective_radius_km == 12.5


class TestSelectVisible:
    """Tests for select_visible() function."""

    def test_no_filter_applies_spam_gate_only(self, issues):
        result = select_visible(issues)
        assert [i.id for i in result] == ["i1", "i2", "i4", "i6"]

    def test_never_returns_flagged(self, issues):
        filters = [
            IssueFilter(),
            IssueFilter(category="Roads"),
            IssueFilter(status="Reported"),
            IssueFilter(origin_latitude=ORIGIN.latitude, origin_longitude=ORIGIN.longitude, radius_km=10000),
        ]
        for f in filters:
            assert all(i.flag_count < FLAG_THRESHOLD for i in select_visible(issues, f))

    def test_filters_by_status(self, issues):
        result = select_visible(issues, IssueFilter(status="In Progress"))
        assert [i.id for i in result] == ["i2"]

    def test_filters_by_category(self, issues):
        result = select_visible(issues, IssueFilter(category="Roads"))
        assert [i.id for i in result] == ["i2", "i6"]

    def test_all_sentinel_skips_predicates(self, issues):
        assert select_visible(issues, IssueFilter(status=ALL, category=ALL)) == select_visible(issues)

    def test_combines_status_and_category(self, issues):
        result = select_visible(issues, IssueFilter(status="Reported", category="Roads"))
        assert [i.id for i in result] == ["i6"]

    def test_invalid_status_raises(self, issues):
        with pytest.raises(InvalidFilterValue):
            select_visible(issues, IssueFilter(status="InvalidStatus"))

    def test_invalid_category_raises_on_empty_input(self):
        with pytest.raises(InvalidFilterValue):
            select_visible([], IssueFilter(category="Potholes"))

    def test_radius_uses_default_of_five_km(self, issues):
        f = IssueFilter(origin_latitude=ORIGIN.latitude, origin_longitude=ORIGIN.longitude)
        result = select_visible(issues, f)
        # i6 is 20 km away
        assert [i.id for i in result] == ["i1", "i2", "i4"]

    def test_radius_explicit(self, issues):
        f = IssueFilter(
            origin_latitude=ORIGIN.latitude,
            origin_longitude=ORIGIN.longitude,
            radius_km=25,
        )
        result = select_visible(issues, f)
        assert [i.id for i in result] == ["i1", "i2", "i4", "i6"]

    def test_radius_skipped_without_full_origin(self, issues):
        f = IssueFilter(origin_latitude=ORIGIN.latitude, radius_km=1)
        assert select_visible(issues, f) == select_visible(issues)

    def test_radius_boundary(self, base_issue):
        """Excludes an issue at 5.01 km, includes one at 5.00 km."""
        at_boundary = replace(base_issue, id="at", latitude=_north_of_origin(5.0))
        beyond = replace(base_issue, id="beyond", latitude=_north_of_origin(5.01))
        radius = calculate_distance(
            ORIGIN.latitude, ORIGIN.longitude,
            at_boundary.latitude, at_boundary.longitude,
        )
        assert radius == pytest.approx(5.0)

        f = IssueFilter(
            origin_latitude=ORIGIN.latitude,
            origin_longitude=ORIGIN.longitude,
            radius_km=radius,
        )
        result = select_visible([at_boundary, beyond], f)

        assert [i.id for i in result] == ["at"]

    def test_just_inside_default_radius(self, base_issue):
        near = replace(base_issue, id="near", latitude=_north_of_origin(4.999))
        far = replace(base_issue, id="far", latitude=_north_of_origin(5.01))
        f = IssueFilter(origin_latitude=ORIGIN.latitude, origin_longitude=ORIGIN.longitude)

        assert [i.id for i in select_visible([near, far], f)] == ["near"]

    def test_preserves_input_order(self, issues):
        reversed_issues = list(reversed(issues))
        result = select_visible(reversed_issues)
        assert [i.id for i in result] == ["i6", "i4", "i2", "i1"]

    def test_accepts_any_iterable(self, issues):
        result = select_visible(iter(issues))
        assert len(result) == 4

    def test_does_not_mutate_input(self, issues):
        snapshot = list(issues)
        select_visible(issues, IssueFilter(category="Roads"))
        assert issues == snapshot


class TestSelectFlagged:
    """Tests for select_flagged() function."""

    def test_returns_flagged_only(self, issues):
        result = select_flagged(issues)
        assert [i.id for i in result] == ["i3", "i5"]

    def test_empty_when_nothing_flagged(self, base_issue):
        assert select_flagged([base_issue]) == []

    def test_partitions_with_select_visible(self, issues):
        visible = select_visible(issues)
        flagged = select_flagged(issues)

        visible_ids = {i.id for i in visible}
        flagged_ids = {i.id for i in flagged}

        assert visible_ids.isdisjoint(flagged_ids)
        assert visible_ids | flagged_ids == {i.id for i in issues}
        assert len(visible) + len(flagged) == len(issues)


class TestCategoryCounts:
    """Tests for category_counts() function."""

    def test_counts_flagged_and_unflagged(self, issues):
        result = category_counts(issues)
        assert result == {"Lighting": 2, "Roads": 3, "Water Supply": 1}

    def test_sum_equals_total(self, issues):
        assert sum(category_counts(issues).values()) == len(issues)

    def test_first_seen_order(self, issues):
        assert list(category_counts(issues)) == ["Lighting", "Roads", "Water Supply"]

    def test_empty_input(self):
        assert category_counts([]) == {}
