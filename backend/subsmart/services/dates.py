"""Calendar-date arithmetic used by the recurrence engine.

All values are plain ``datetime.date`` objects: local calendar days with no
time-of-day and no timezone.
"""

import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from subsmart.models.subscription import BillingCycle


def add_period(d: date, cycle: BillingCycle, n: int = 1) -> date:
    """Shift ``d`` by ``n`` billing periods.

    Month and year steps clamp to the end of the target month, so
    2024-01-31 + 1 month is 2024-02-29 and 2024-02-29 + 1 year is 2025-02-28.

    Raises:
        OverflowError: the result would fall after ``date.max``.
        ValueError: ``cycle`` is not a known billing cycle.
    """
    if cycle == BillingCycle.weekly:
        return d + timedelta(weeks=n)
    if cycle == BillingCycle.monthly:
        step = relativedelta(months=n)
    elif cycle == BillingCycle.yearly:
        step = relativedelta(years=n)
    else:
        raise ValueError(f"Unknown billing cycle: {cycle!r}")
    try:
        return d + step
    except ValueError as e:
        # relativedelta reports years past 9999 as ValueError.
        raise OverflowError(str(e)) from e


def add_years(d: date, n: int) -> date:
    return add_period(d, BillingCycle.yearly, n)


def is_before(a: date, b: date) -> bool:
    return a < b


def is_same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def days_between(later: date, earlier: date) -> int:
    """Whole calendar days from ``earlier`` to ``later``; negative if ``later`` is in the past."""
    return (later - earlier).days


def today() -> date:
    return date.today()
