# apps/communications/followups.py

"""
Overdue classification for follow-up due dates.

One policy everywhere: a contact with no due date has nothing to miss, so it
is never overdue. "Nothing scheduled" is reported separately through
``follow_up_status`` instead of being folded into "overdue".
"""

from datetime import date, datetime

from django.utils import timezone

from apps.common.enums import FollowUpStatus


def current_date() -> date:
    """Today's date in the project time zone."""
    return timezone.localdate()


def _as_date(value: date | datetime | None) -> date | None:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


def is_overdue(due_date: date | datetime | None, today: date | None = None) -> bool:
    """True when a due date exists and lies strictly before today."""
    due = _as_date(due_date)
    if due is None:
        return False
    return due < (today or current_date())


def follow_up_status(due_date: date | datetime | None, today: date | None = None) -> str:
    if due_date is None:
        return FollowUpStatus.NONE
    if is_overdue(due_date, today=today):
        return FollowUpStatus.OVERDUE
    return FollowUpStatus.SCHEDULED
