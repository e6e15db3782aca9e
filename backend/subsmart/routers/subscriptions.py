from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from subsmart.db import get_db
from subsmart.models.subscription import Category, Subscription
from subsmart.schemas.subscription import (
    ReminderMessage, SubscriptionCreate, SubscriptionResponse, SubscriptionUpdate, SubscriptionWithSchedule,
)
from subsmart.services.dates import today
from subsmart.services.recurrence import days_remaining, resolve_next_billing_date
from subsmart.services.reminders import format_reminder, share_links
from subsmart.services.scheduler import run_reminder_check

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def with_schedule(sub: Subscription, reference: date) -> SubscriptionWithSchedule:
    data = SubscriptionResponse.model_validate(sub).model_dump()
    next_date = resolve_next_billing_date(sub, reference)
    if next_date is None:
        return SubscriptionWithSchedule(**data)
    return SubscriptionWithSchedule(
        **data,
        next_billing_date=next_date,
        days_left=days_remaining(next_date, reference),
    )


async def _get_or_404(db: AsyncSession, sub_id: str) -> Subscription:
    sub = await db.get(Subscription, sub_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return sub


@router.get("/", response_model=list[SubscriptionWithSchedule])
async def list_subscriptions(
    active: bool | None = Query(default=None),
    category: Category | None = Query(default=None),
    reference_date: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    query = select(Subscription)
    if active is not None:
        query = query.where(Subscription.active == active)
    if category is not None:
        query = query.where(Subscription.category == category)
    query = query.order_by(Subscription.created_at, Subscription.id)
    result = await db.execute(query)
    reference = reference_date or today()
    items = [with_schedule(s, reference) for s in result.scalars().all()]
    # Soonest first; subscriptions with an unknown next billing date go last.
    return sorted(items, key=lambda s: (s.days_left is None, s.days_left or 0))


@router.get("/{sub_id}", response_model=SubscriptionWithSchedule)
async def get_subscription(
    sub_id: str,
    reference_date: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    sub = await _get_or_404(db, sub_id)
    return with_schedule(sub, reference_date or today())


@router.post("/", response_model=SubscriptionResponse, status_code=201)
async def create_subscription(
    data: SubscriptionCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    sub = Subscription(**data.model_dump())
    db.add(sub)
    await db.flush()
    await db.refresh(sub)
    background_tasks.add_task(run_reminder_check)
    return sub


@router.put("/{sub_id}", response_model=SubscriptionResponse)
async def update_subscription(
    sub_id: str,
    data: SubscriptionUpdate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    sub = await _get_or_404(db, sub_id)
    for key, value in data.model_dump().items():
        setattr(sub, key, value)
    await db.flush()
    await db.refresh(sub)
    background_tasks.add_task(run_reminder_check)
    return sub


@router.post("/{sub_id}/toggle", response_model=SubscriptionResponse)
async def toggle_subscription(
    sub_id: str,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    sub = await _get_or_404(db, sub_id)
    sub.active = not sub.active
    await db.flush()
    await db.refresh(sub)
    background_tasks.add_task(run_reminder_check)
    return sub


@router.delete("/{sub_id}", status_code=204)
async def delete_subscription(
    sub_id: str,
    db: AsyncSession = Depends(get_db),
):
    sub = await _get_or_404(db, sub_id)
    await db.delete(sub)
    await db.flush()


@router.get("/{sub_id}/reminder", response_model=ReminderMessage)
async def get_reminder_message(
    sub_id: str,
    reference_date: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    sub = await _get_or_404(db, sub_id)
    reference = reference_date or today()
    next_date = resolve_next_billing_date(sub, reference)
    if next_date is None:
        raise HTTPException(status_code=422, detail="Next billing date is unknown")
    days_left = days_remaining(next_date, reference)
    message = format_reminder(sub, days_left, reference)
    return ReminderMessage(
        subscription_id=sub.id,
        next_billing_date=next_date,
        days_left=days_left,
        message=message,
        share_links=share_links(message),
    )
