from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from subsmart.config import settings
from subsmart.db import get_db
from subsmart.models.subscription import BillingCycle, Subscription
from subsmart.schemas.assistant import InsightResponse
from subsmart.schemas.dashboard import CategorySpending, DashboardSummary, UpcomingPayment
from subsmart.services.gemini import get_spending_insights
from subsmart.services.reminders import UpcomingReminder, upcoming_within

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

WEEKS_PER_MONTH = Decimal("4.33")


def monthly_amount(sub: Subscription) -> Decimal:
    price = Decimal(sub.price)
    if sub.billing_cycle == BillingCycle.yearly:
        return price / 12
    if sub.billing_cycle == BillingCycle.weekly:
        return price * WEEKS_PER_MONTH
    return price


def _to_payment(reminder: UpcomingReminder) -> UpcomingPayment:
    s = reminder.subscription
    return UpcomingPayment(
        subscription_id=s.id,
        subscription_name=s.name,
        price=s.price,
        currency=s.currency,
        date=reminder.next_date,
        days_until=reminder.days_left,
    )


async def _all_subscriptions(db: AsyncSession) -> list[Subscription]:
    result = await db.execute(select(Subscription).order_by(Subscription.created_at, Subscription.id))
    return list(result.scalars().all())


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    reference_date: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    subs = await _all_subscriptions(db)
    active = [s for s in subs if s.active]

    total_monthly = sum((monthly_amount(s) for s in active), Decimal("0"))
    total_yearly = total_monthly * 12

    cat_map: dict = {}
    for s in active:
        cat_map[s.category] = cat_map.get(s.category, Decimal("0")) + monthly_amount(s)
    category_breakdown = [
        CategorySpending(
            category=category,
            total_amount=total.quantize(Decimal("0.01")),
            percentage=float(total / total_monthly * 100) if total_monthly else 0,
        )
        for category, total in cat_map.items()
    ]

    upcoming = upcoming_within(active, settings.REMINDER_WINDOW_DAYS, reference_date)

    return DashboardSummary(
        total_monthly_cost=total_monthly.quantize(Decimal("0.01")),
        total_yearly_cost=total_yearly.quantize(Decimal("0.01")),
        active_count=len(active),
        inactive_count=len(subs) - len(active),
        upcoming_payments=[_to_payment(r) for r in upcoming],
        category_breakdown=category_breakdown,
    )


@router.get("/upcoming", response_model=list[UpcomingPayment])
async def get_upcoming(
    days: int = Query(default=settings.REMINDER_WINDOW_DAYS, ge=0),
    reference_date: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    subs = await _all_subscriptions(db)
    return [_to_payment(r) for r in upcoming_within(subs, days, reference_date)]


@router.get("/insights", response_model=InsightResponse)
async def get_insights(db: AsyncSession = Depends(get_db)):
    subs = await _all_subscriptions(db)
    return InsightResponse(insight=await get_spending_insights(subs))
