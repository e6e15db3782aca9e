from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from subsmart.models.subscription import BillingCycle, Category


class ParseRequest(BaseModel):
    text: str = Field(min_length=1, max_length=1000)


class SubscriptionDraft(BaseModel):
    """Subscription fields extracted from free text, pending user confirmation."""

    name: str
    price: Decimal = Field(ge=0)
    currency: str | None = None
    billing_cycle: BillingCycle
    first_bill_date: date | None = None
    category: Category
    description: str | None = None
    website_url: str | None = None


class InsightResponse(BaseModel):
    insight: str
