"""Urgency classification for events based on due-date proximity.

These helpers are pure: they only look at the due date, the priority and
the reference date passed in, so the same inputs always give the same
label. Callers pass ``today`` explicitly; ``today_utc()`` is the default
reference used by services.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

from homely.models.enums import Priority, UrgencyStatus

THIS_WEEK_DAYS = 7
THIS_MONTH_DAYS = 30

_PRIORITY_VALUES = {
    Priority.HIGH.value: 3,
    Priority.MEDIUM.value: 2,
    Priority.LOW.value: 1,
}


def today_utc() -> date:
    """Return the current date in UTC."""
    return datetime.now(UTC).date()


def days_until_due(due_date: date, today: date) -> int:
    """Signed number of days from today to the due date (negative when overdue)."""
    return (due_date - today).days


def calculate_urgency_status(due_date: date, today: date) -> UrgencyStatus:
    """Classify a due date relative to today.

    Args:
        due_date: The event's due date.
        today: Reference date.

    Returns:
        OVERDUE before today, TODAY on the day, THIS_WEEK within 7 days,
        THIS_MONTH within 30 days, UPCOMING beyond that.
    """
    delta = days_until_due(due_date, today)
    if delta < 0:
        return UrgencyStatus.OVERDUE
    if delta == 0:
        return UrgencyStatus.TODAY
    if delta <= THIS_WEEK_DAYS:
        return UrgencyStatus.THIS_WEEK
    if delta <= THIS_MONTH_DAYS:
        return UrgencyStatus.THIS_MONTH
    return UrgencyStatus.UPCOMING


def calculate_priority_score(due_date: date, priority: str | None, today: date) -> int:
    """Rank an event for dashboard ordering; higher means more pressing.

    Overdue items always outrank today's items, which outrank this week's;
    priority breaks ties within a band.
    """
    value = _PRIORITY_VALUES.get(str(priority) if priority else "", 1)
    delta = days_until_due(due_date, today)
    if delta < 0:
        return 1000 + value
    if delta == 0:
        return 500 + value
    if delta <= THIS_WEEK_DAYS:
        return 100 + value
    return value
