from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from subsmart.config import settings
from subsmart.models.subscription import BillingCycle, Category

UNTITLED_NAME = "Untitled subscription"


class SubscriptionBase(BaseModel):
    name: str = UNTITLED_NAME
    price: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default_factory=lambda: settings.DEFAULT_CURRENCY, max_length=10)
    billing_cycle: BillingCycle = BillingCycle.monthly
    first_bill_date: date = Field(default_factory=date.today)
    category: Category = Category.other
    description: str | None = None
    website_url: str | None = None
    active: bool = True

    @field_validator("name")
    @classmethod
    def default_blank_name(cls, v: str) -> str:
        return v.strip() or UNTITLED_NAME

    @field_validator("currency")
    @classmethod
    def default_blank_currency(cls, v: str) -> str:
        return v.strip().upper() or settings.DEFAULT_CURRENCY


class SubscriptionCreate(SubscriptionBase):
    pass


class SubscriptionUpdate(SubscriptionBase):
    """Full replacement of a stored subscription."""


class SubscriptionResponse(BaseModel):
    id: str
    name: str
    price: Decimal
    currency: str
    billing_cycle: BillingCycle
    first_bill_date: date | None
    category: Category
    description: str | None = None
    website_url: str | None = None
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class SubscriptionWithSchedule(SubscriptionResponse):
    next_billing_date: date | None = None
    days_left: int | None = None


class ReminderMessage(BaseModel):
    subscription_id: str
    next_billing_date: date
    days_left: int
    message: str
    share_links: dict[str, str]
