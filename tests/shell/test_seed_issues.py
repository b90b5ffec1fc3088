"""Tests for the demo seeding script helpers."""

import importlib
from unittest.mock import patch

import pytest

import scripts.seed_issues
from scripts.seed_issues import build_demo_issues, offset_point
from src.core.geo import GeoPoint, calculate_distance
from src.core.issue import CATEGORIES, validate_new_issue


CENTER = GeoPoint(30.7333, 76.7794)


@pytest.mark.parametrize("bearing", [0, 90, 180, 270, 45])
def test_offset_point_distance(bearing):
    point = offset_point(CENTER, 3.0, bearing)

    distance = calculate_distance(
        CENTER.latitude, CENTER.longitude, point.latitude, point.longitude,
    )

    assert distance == pytest.approx(3.0, rel=1e-6)


def test_build_demo_issues_one_per_category():
    issues = build_demo_issues(CENTER, 4.0, "user-1")

    assert [i.category for i in issues] == list(CATEGORIES)
    assert all(validate_new_issue(i) == [] for i in issues)
    assert all(i.user_id == "user-1" for i in issues)


def test_import_leaves_logging_alone():
    with patch("logging.basicConfig") as basic_config:
        importlib.reload(scripts.seed_issues)

    basic_config.assert_not_called()
