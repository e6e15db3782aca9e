from decimal import Decimal

from pydantic import BaseModel

from subsmart.models.subscription import Category


class CalendarEvent(BaseModel):
    subscription_id: str
    subscription_name: str
    amount: Decimal
    currency: str
    category: Category
    date: str


class CalendarMonth(BaseModel):
    year: int
    month: int
    events: list[CalendarEvent]
    days: dict[str, list[str]]
    total_amount: Decimal
