"""Billing-date recurrence engine.

Every occurrence is computed from ``first_bill_date`` plus a whole number of
billing periods, never by chaining steps off a previously clamped date. A
monthly subscription that starts on the 31st therefore bills on Feb 29 and
then on Mar 31 again.
"""

import logging
from datetime import date, timedelta

from subsmart.models.subscription import BillingCycle
from subsmart.services.dates import (
    add_period,
    add_years,
    days_between,
    end_of_month,
    is_before,
    is_same_month,
    today,
)

logger = logging.getLogger(__name__)

MAX_NEXT_DATE_STEPS = 1000
MAX_MONTHLY_STEPS = 24
MAX_WEEKLY_STEPS = 10000

_WEEKS_PER_YEAR = timedelta(weeks=52)


def resolve_next_billing_date(sub, reference: date | None = None) -> date | None:
    """Earliest occurrence on or after ``reference`` (default: today), or None if unknown.

    The date is unknown when there is no first bill date, when the step cap is
    exhausted, or when the next occurrence would fall after ``date.max``.
    """
    reference = reference or today()
    start = sub.first_bill_date
    if not start:
        return None

    candidate = start
    steps = 0
    try:
        while is_before(candidate, reference) and steps < MAX_NEXT_DATE_STEPS:
            steps += 1
            candidate = add_period(start, sub.billing_cycle, steps)
    except OverflowError:
        logger.warning(f"Next billing date for {sub!r} is past the end of the calendar")
        return None

    if steps >= MAX_NEXT_DATE_STEPS:
        logger.warning(f"Gave up resolving next billing date for {sub!r} after {steps} steps")
        return None
    return candidate


def next_billing_date(sub, reference: date | None = None) -> date:
    """Like :func:`resolve_next_billing_date`, but falls back to the reference date.

    Callers should treat a fallback result as unknown rather than as a real
    billing date.
    """
    reference = reference or today()
    return resolve_next_billing_date(sub, reference) or reference


def days_remaining(target: date, reference: date | None = None) -> int:
    return days_between(target, reference or today())


def bill_dates_in_month(sub, anchor: date) -> list[date]:
    """All billing dates of ``sub`` inside the calendar month containing ``anchor``."""
    if not sub.active or not sub.first_bill_date:
        return []

    if sub.billing_cycle == BillingCycle.monthly:
        return _monthly_dates(sub.first_bill_date, anchor)
    if sub.billing_cycle == BillingCycle.yearly:
        return _yearly_dates(sub.first_bill_date, anchor)
    if sub.billing_cycle == BillingCycle.weekly:
        return _weekly_dates(sub.first_bill_date, anchor)
    raise ValueError(f"Unknown billing cycle: {sub.billing_cycle!r}")


def _in_window(d: date, start: date, anchor: date) -> bool:
    return is_same_month(d, anchor) and not is_before(d, start)


# The walks below stop on OverflowError: a step past date.max is also past
# the end of any queryable month.


def _monthly_dates(start: date, anchor: date) -> list[date]:
    month_end = end_of_month(anchor)
    # Skip whole years so the walk begins at most a year before the target month.
    offset = 12 * max(0, anchor.year - start.year - 1)

    dates: list[date] = []
    steps = 0
    try:
        candidate = add_period(start, BillingCycle.monthly, offset)
        while not is_before(month_end, candidate) and steps < MAX_MONTHLY_STEPS:
            if _in_window(candidate, start, anchor):
                dates.append(candidate)
            steps += 1
            candidate = add_period(start, BillingCycle.monthly, offset + steps)
    except OverflowError:
        pass
    return dates


def _yearly_dates(start: date, anchor: date) -> list[date]:
    month_end = end_of_month(anchor)
    dates: list[date] = []
    years = 0
    candidate = start
    try:
        while not is_before(month_end, candidate):
            if _in_window(candidate, start, anchor):
                dates.append(candidate)
            years += 1
            candidate = add_years(start, years)
    except OverflowError:
        pass
    return dates


def _weekly_dates(start: date, anchor: date) -> list[date]:
    month_end = end_of_month(anchor)
    # 52-week jumps keep the weekday of the first bill.
    candidate = start
    while candidate.year < anchor.year - 1:
        candidate += _WEEKS_PER_YEAR
    if is_before(candidate, start):
        candidate = start

    dates: list[date] = []
    steps = 0
    try:
        while not is_before(month_end, candidate) and steps < MAX_WEEKLY_STEPS:
            if _in_window(candidate, start, anchor):
                dates.append(candidate)
            steps += 1
            candidate = add_period(candidate, BillingCycle.weekly)
    except OverflowError:
        pass
    return dates
