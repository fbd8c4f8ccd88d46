"""Calendar bucketing for the Saturday-to-Friday week."""

from datetime import datetime, timedelta

from calorie_insights.domain.stats import WeekWindow, align_to

FRIDAY = 4
DAYS_IN_WEEK = 7


def week_window(reference: datetime) -> WeekWindow:
    """Return the Saturday-to-Friday week containing the reference moment.

    Boundaries are wall-clock times in the reference's own timezone.
    """
    days_to_friday = (FRIDAY - reference.weekday()) % DAYS_IN_WEEK
    end_of_week = (reference + timedelta(days=days_to_friday)).replace(
        hour=23, minute=59, second=59, microsecond=999999
    )
    start_of_week = (end_of_week - timedelta(days=DAYS_IN_WEEK - 1)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return WeekWindow(start_of_week=start_of_week, end_of_week=end_of_week)


def slot_index(moment: datetime, window: WeekWindow) -> int | None:
    """Return the 0-6 slot for a moment, or None when it is outside the week.

    Moments are converted to the window's timezone first, so a record
    stored in UTC lands on the local calendar day. Naive moments are read as
    wall-clock time in that zone.
    """
    start = window.start_of_week
    local = align_to(moment, start)
    offset = (local.date() - start.date()).days
    if 0 <= offset < DAYS_IN_WEEK:
        return offset
    return None


def day_bounds(reference: datetime) -> tuple[datetime, datetime]:
    """Return local midnight of the reference day and of the next day."""
    start = reference.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
