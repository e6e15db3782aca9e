from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from subsmart.db import get_db
from subsmart.models.subscription import Subscription
from subsmart.schemas.calendar import CalendarEvent, CalendarMonth
from subsmart.services.recurrence import bill_dates_in_month

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/{year}/{month}", response_model=CalendarMonth)
async def get_calendar_month(
    year: int = Path(ge=1, le=9998),
    month: int = Path(ge=1, le=12),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Subscription)
        .where(Subscription.active.is_(True))
        .order_by(Subscription.created_at, Subscription.id)
    )
    subs = result.scalars().all()
    anchor = date(year, month, 1)

    events: list[CalendarEvent] = []
    total = Decimal("0")

    for sub in subs:
        for d in bill_dates_in_month(sub, anchor):
            events.append(
                CalendarEvent(
                    subscription_id=sub.id,
                    subscription_name=sub.name,
                    amount=sub.price,
                    currency=sub.currency,
                    category=sub.category,
                    date=d.isoformat(),
                )
            )
            total += sub.price

    events.sort(key=lambda e: (e.date, e.subscription_name))

    days: dict[str, list[str]] = {}
    for e in events:
        days.setdefault(e.date, []).append(e.subscription_name)

    return CalendarMonth(year=year, month=month, events=events, days=days, total_amount=total)
