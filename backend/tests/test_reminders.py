"""Tests for the upcoming-payment window and reminder text."""

from datetime import date
from decimal import Decimal
from urllib.parse import unquote

from subsmart.models.subscription import BillingCycle
from subsmart.services.reminders import (
    UpcomingReminder,
    due_phrase,
    format_reminder,
    notification_candidate,
    share_links,
    upcoming_within,
)

REFERENCE = date(2025, 3, 10)


def _names(reminders):
    return [r.subscription.name for r in reminders]


class TestUpcomingWithin:
    def test_window_filter_and_order(self, make_subscription):
        subs = [
            make_subscription(name="Seven", first_bill_date=date(2024, 12, 17)),
            make_subscription(name="Eight", billing_cycle=BillingCycle.yearly, first_bill_date=date(2024, 3, 18)),
            make_subscription(name="Today", first_bill_date=date(2025, 1, 10)),
            make_subscription(name="Off", first_bill_date=date(2025, 1, 11), active=False),
            make_subscription(name="Two", billing_cycle=BillingCycle.weekly, first_bill_date=date(2025, 3, 5)),
        ]
        result = upcoming_within(subs, 7, REFERENCE)
        assert _names(result) == ["Today", "Two", "Seven"]
        assert [r.days_left for r in result] == [0, 2, 7]
        assert result[0].next_date == REFERENCE

    def test_never_outside_window(self, make_subscription):
        subs = [make_subscription(first_bill_date=date(2024, 1, day)) for day in range(1, 29)]
        result = upcoming_within(subs, 7, REFERENCE)
        assert result
        assert all(0 <= r.days_left <= 7 for r in result)
        assert [r.days_left for r in result] == sorted(r.days_left for r in result)

    def test_ties_keep_collection_order(self, make_subscription):
        subs = [
            make_subscription(name="B", first_bill_date=date(2025, 2, 12)),
            make_subscription(name="A", first_bill_date=date(2025, 1, 12)),
            make_subscription(name="C", first_bill_date=date(2025, 3, 11)),
        ]
        assert _names(upcoming_within(subs, 7, REFERENCE)) == ["C", "B", "A"]

    def test_zero_day_window(self, make_subscription):
        subs = [
            make_subscription(name="Now", first_bill_date=REFERENCE),
            make_subscription(name="Tomorrow", first_bill_date=date(2025, 3, 11)),
        ]
        assert _names(upcoming_within(subs, 0, REFERENCE)) == ["Now"]

    def test_unknown_next_date_is_excluded(self, make_subscription):
        subs = [
            make_subscription(name="Stale", billing_cycle=BillingCycle.weekly, first_bill_date=date(2000, 1, 3)),
            make_subscription(name="Today", first_bill_date=date(2025, 1, 10)),
        ]
        assert _names(upcoming_within(subs, 7, REFERENCE)) == ["Today"]

    def test_end_of_calendar_is_excluded(self, make_subscription):
        sub = make_subscription(billing_cycle=BillingCycle.weekly, first_bill_date=date(9999, 12, 25))
        assert upcoming_within([sub], 7, date(9999, 12, 31)) == []

    def test_empty(self):
        assert upcoming_within([], 7, REFERENCE) == []


class TestNotificationCandidate:
    def test_soonest_within_threshold(self, make_subscription):
        sub = make_subscription()
        reminders = [UpcomingReminder(sub, date(2025, 3, 12), 2)]
        assert notification_candidate(reminders, 3) is reminders[0]

    def test_soonest_beyond_threshold(self, make_subscription):
        sub = make_subscription()
        assert notification_candidate([UpcomingReminder(sub, date(2025, 3, 15), 5)], 3) is None

    def test_nothing_upcoming(self):
        assert notification_candidate([], 3) is None


class TestFormatReminder:
    def test_due_today(self, make_subscription):
        sub = make_subscription(name="Netflix", currency="TWD", price=Decimal("390"), first_bill_date=REFERENCE)
        message = format_reminder(sub, 0, REFERENCE)
        assert "due today" in message
        assert "0 days" not in message
        assert '"Netflix"' in message
        assert "2025-03-10" in message
        assert "TWD 390.00" in message

    def test_due_in_days(self, make_subscription):
        sub = make_subscription(first_bill_date=date(2025, 3, 13))
        message = format_reminder(sub, 3, REFERENCE)
        assert "due in 3 days (2025-03-13)" in message
        assert "USD 15.99" in message

    def test_phrases(self):
        assert due_phrase(0) == "due today"
        assert due_phrase(1) == "due in 1 day"
        assert due_phrase(12) == "due in 12 days"
        assert due_phrase(-4) == "overdue"

    def test_deterministic(self, make_subscription):
        sub = make_subscription()
        assert format_reminder(sub, 5, REFERENCE) == format_reminder(sub, 5, REFERENCE)


class TestShareLinks:
    def test_links_carry_encoded_message(self):
        message = 'Your subscription "Spotify" is due today.\nAmount: USD 9.99'
        links = share_links(message)
        assert links["clipboard"] == message
        assert links["line"].startswith("https://line.me/R/msg/text/?")
        assert unquote(links["line"].split("?", 1)[1]) == message
        assert links["email"].startswith("mailto:?subject=SubSmart%20renewal%20reminder&body=")
        assert "\n" not in links["email"]
