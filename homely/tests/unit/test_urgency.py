"""Unit tests for urgency classification and dashboard priority scores."""

from datetime import date, timedelta

import pytest

from homely.models.enums import UrgencyStatus
from homely.services.urgency import (
    calculate_priority_score,
    calculate_urgency_status,
    days_until_due,
)

TODAY = date(2025, 3, 15)


# =============================================================================
# calculate_urgency_status
# =============================================================================


class TestCalculateUrgencyStatus:
    """Tests for the due-date bands."""

    @pytest.mark.parametrize(
        ("offset", "expected"),
        [
            (-30, UrgencyStatus.OVERDUE),
            (-1, UrgencyStatus.OVERDUE),
            (0, UrgencyStatus.TODAY),
            (1, UrgencyStatus.THIS_WEEK),
            (7, UrgencyStatus.THIS_WEEK),
            (8, UrgencyStatus.THIS_MONTH),
            (30, UrgencyStatus.THIS_MONTH),
            (31, UrgencyStatus.UPCOMING),
            (400, UrgencyStatus.UPCOMING),
        ],
    )
    def test_band_boundaries(self, offset, expected):
        assert calculate_urgency_status(TODAY + timedelta(days=offset), TODAY) == expected

    def test_same_inputs_same_label(self):
        due = TODAY + timedelta(days=5)
        assert calculate_urgency_status(due, TODAY) == calculate_urgency_status(due, TODAY)

    def test_days_until_due_is_signed(self):
        assert days_until_due(TODAY - timedelta(days=3), TODAY) == -3
        assert days_until_due(TODAY + timedelta(days=3), TODAY) == 3


# =============================================================================
# calculate_priority_score
# =============================================================================


class TestCalculatePriorityScore:
    """Tests for dashboard ordering scores."""

    def test_overdue_outranks_today_and_this_week(self):
        overdue_low = calculate_priority_score(TODAY - timedelta(days=1), "low", TODAY)
        today_high = calculate_priority_score(TODAY, "high", TODAY)
        week_high = calculate_priority_score(TODAY + timedelta(days=3), "high", TODAY)
        assert overdue_low > today_high > week_high

    def test_priority_breaks_ties_within_band(self):
        due = TODAY + timedelta(days=2)
        high = calculate_priority_score(due, "high", TODAY)
        medium = calculate_priority_score(due, "medium", TODAY)
        low = calculate_priority_score(due, "low", TODAY)
        assert high > medium > low

    def test_exact_scores(self):
        assert calculate_priority_score(TODAY - timedelta(days=5), "high", TODAY) == 1003
        assert calculate_priority_score(TODAY, "medium", TODAY) == 502
        assert calculate_priority_score(TODAY + timedelta(days=7), "low", TODAY) == 101
        assert calculate_priority_score(TODAY + timedelta(days=20), "high", TODAY) == 3

    def test_unknown_or_missing_priority_counts_as_low(self):
        assert calculate_priority_score(TODAY, None, TODAY) == 501
        assert calculate_priority_score(TODAY, "urgent", TODAY) == 501
