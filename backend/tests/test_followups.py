from datetime import date, datetime, timezone as dt_timezone

import pytest

from apps.common.enums import FollowUpStatus
from apps.communications.followups import follow_up_status, is_overdue
from apps.communications.services import add_communication
from apps.contacts.selectors import get_overdue_contacts
from apps.contacts.services import create_contact
from conftest import at


class TestOverdueClassifier:
    def test_past_due_is_overdue(self):
        assert is_overdue(date(2024, 1, 1), today=date(2025, 1, 1)) is True

    def test_due_today_is_not_overdue(self):
        assert is_overdue(date(2025, 1, 1), today=date(2025, 1, 1)) is False

    def test_future_is_not_overdue(self):
        assert is_overdue(date(2025, 6, 1), today=date(2025, 1, 1)) is False

    def test_missing_due_date_is_not_overdue(self):
        assert is_overdue(None, today=date(2025, 1, 1)) is False

    def test_accepts_datetimes(self):
        due = datetime(2024, 12, 31, 23, 0, tzinfo=dt_timezone.utc)
        assert is_overdue(due, today=date(2025, 1, 1)) is True

    def test_follow_up_status(self):
        today = date(2025, 1, 1)
        assert follow_up_status(None, today=today) == FollowUpStatus.NONE
        assert follow_up_status(date(2024, 1, 1), today=today) == FollowUpStatus.OVERDUE
        assert follow_up_status(date(2025, 1, 1), today=today) == FollowUpStatus.SCHEDULED


@pytest.mark.django_db
class TestOverdueContacts:
    def test_only_latest_due_date_counts(self):
        late = create_contact(name="Late", email="late@example.com")
        fine = create_contact(name="Fine", email="fine@example.com")
        caught_up = create_contact(name="Caught Up", email="caught@example.com")
        create_contact(name="Quiet", email="quiet@example.com")

        add_communication(late.id, date=at(2024, 1, 1), notes="x", contact_again_due_date=date(2024, 1, 10))
        add_communication(fine.id, date=at(2024, 1, 1), notes="x", contact_again_due_date=date(2025, 3, 1))
        add_communication(caught_up.id, date=at(2024, 1, 1), notes="x", contact_again_due_date=date(2024, 1, 10))
        add_communication(caught_up.id, date=at(2024, 2, 1), notes="y")

        overdue = get_overdue_contacts(today=date(2025, 1, 1))
        assert [c.name for c in overdue] == ["Late"]
