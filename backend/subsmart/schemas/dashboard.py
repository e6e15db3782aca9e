from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from subsmart.models.subscription import Category


class UpcomingPayment(BaseModel):
    subscription_id: str
    subscription_name: str
    price: Decimal
    currency: str
    date: date
    days_until: int


class CategorySpending(BaseModel):
    category: Category
    total_amount: Decimal
    percentage: float


class DashboardSummary(BaseModel):
    total_monthly_cost: Decimal
    total_yearly_cost: Decimal
    active_count: int
    inactive_count: int
    upcoming_payments: list[UpcomingPayment]
    category_breakdown: list[CategorySpending]
