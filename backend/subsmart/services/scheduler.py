import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from subsmart.config import settings
from subsmart.models.subscription import Subscription
from subsmart.services.notification import ReminderNotifier
from subsmart.services.reminders import notification_candidate, upcoming_within

logger = logging.getLogger(__name__)

reminder_notifier = ReminderNotifier()


def notifications_allowed() -> bool:
    return settings.NOTIFICATIONS_ENABLED and bool(settings.DISCORD_WEBHOOK_URL)


async def check_upcoming_payments(
    db: AsyncSession,
    webhook_url: str,
    notifier: ReminderNotifier = reminder_notifier,
    reference: date | None = None,
) -> bool:
    """Notify about the soonest payment if it falls within the alert threshold."""
    result = await db.execute(
        select(Subscription)
        .where(Subscription.active.is_(True))
        .order_by(Subscription.created_at, Subscription.id)
    )
    subs = result.scalars().all()
    upcoming = upcoming_within(subs, settings.REMINDER_WINDOW_DAYS, reference)
    candidate = notification_candidate(upcoming, settings.NOTIFY_THRESHOLD_DAYS)
    if candidate is None:
        return False
    return await notifier.notify(candidate, webhook_url)


async def run_reminder_check() -> None:
    if not notifications_allowed():
        return
    from subsmart.db import async_session

    async with async_session() as db:
        try:
            await check_upcoming_payments(db, settings.DISCORD_WEBHOOK_URL)
        except Exception:
            logger.exception("Reminder check failed")
