from dataclasses import dataclass
from datetime import date
from urllib.parse import quote

from subsmart.models.subscription import Subscription
from subsmart.services.dates import today
from subsmart.services.recurrence import days_remaining, next_billing_date, resolve_next_billing_date

REMINDER_SUBJECT = "SubSmart renewal reminder"


@dataclass(frozen=True)
class UpcomingReminder:
    subscription: Subscription
    next_date: date
    days_left: int


def upcoming_within(subs, days: int = 7, reference: date | None = None) -> list[UpcomingReminder]:
    """Active subscriptions billing within ``days`` of ``reference``, soonest first.

    Entries due today (``days_left == 0``) are included; overdue ones and ones
    whose next billing date is unknown are not. Ties keep the collection order.
    """
    reference = reference or today()
    upcoming = []
    for sub in subs:
        if not sub.active:
            continue
        next_date = resolve_next_billing_date(sub, reference)
        if next_date is None:
            continue
        days_left = days_remaining(next_date, reference)
        if 0 <= days_left <= days:
            upcoming.append(UpcomingReminder(sub, next_date, days_left))
    return sorted(upcoming, key=lambda r: r.days_left)


def notification_candidate(upcoming: list[UpcomingReminder], threshold: int = 3) -> UpcomingReminder | None:
    if upcoming and upcoming[0].days_left <= threshold:
        return upcoming[0]
    return None


def due_phrase(days_left: int) -> str:
    if days_left == 0:
        return "due today"
    if days_left < 0:
        return "overdue"
    unit = "day" if days_left == 1 else "days"
    return f"due in {days_left} {unit}"


def format_reminder(sub, days_left: int, reference: date | None = None) -> str:
    next_date = next_billing_date(sub, reference)
    return (
        f"[{REMINDER_SUBJECT}]\n"
        f'Your subscription "{sub.name}" is {due_phrase(days_left)} ({next_date.isoformat()}).\n'
        f"Amount: {sub.currency} {sub.price:,.2f}\n"
        "Please check whether you want to renew or cancel it."
    )


def share_links(message: str) -> dict[str, str]:
    return {
        "line": f"https://line.me/R/msg/text/?{quote(message)}",
        "email": f"mailto:?subject={quote(REMINDER_SUBJECT)}&body={quote(message)}",
        "clipboard": message,
    }
