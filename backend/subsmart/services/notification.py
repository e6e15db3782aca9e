import logging

import httpx

from subsmart.services.reminders import UpcomingReminder, due_phrase

logger = logging.getLogger(__name__)


async def send_discord_webhook(
    webhook_url: str,
    title: str,
    description: str,
    color: int = 0x6366F1,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    if not webhook_url:
        return False
    payload = {
        "embeds": [
            {
                "title": title,
                "description": description,
                "color": color,
            }
        ]
    }
    async with httpx.AsyncClient(transport=transport) as client:
        try:
            resp = await client.post(webhook_url, json=payload)
            return resp.status_code == 204
        except httpx.HTTPError as e:
            logger.error(f"Discord webhook failed: {e}")
            return False


class ReminderNotifier:
    """Sends at most one notification per distinct upcoming-payment state."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport
        self._last_key: tuple | None = None

    def reset(self) -> None:
        self._last_key = None

    async def notify(self, reminder: UpcomingReminder | None, webhook_url: str) -> bool:
        if reminder is None or not webhook_url:
            return False

        sub = reminder.subscription
        key = (sub.id, reminder.next_date, reminder.days_left)
        if key == self._last_key:
            logger.debug(f"Reminder for {sub.name} already sent")
            return False

        sent = await send_discord_webhook(
            webhook_url,
            f"SubSmart reminder: {sub.name}",
            f"{sub.name} is {due_phrase(reminder.days_left)} "
            f"({reminder.next_date.isoformat()}): {sub.currency} {sub.price:,.2f}",
            color=0xFBBF24,
            transport=self._transport,
        )
        if sent:
            self._last_key = key
            logger.info(f"Sent payment reminder for {sub.name}")
        return sent
