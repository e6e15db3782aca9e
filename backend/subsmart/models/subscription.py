import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Enum, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from subsmart.db import Base


class BillingCycle(str, enum.Enum):
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class Category(str, enum.Enum):
    entertainment = "entertainment"
    software = "software"
    utilities = "utilities"
    insurance = "insurance"
    other = "other"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(10), default="TWD")
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        Enum(BillingCycle, native_enum=False, length=20), default=BillingCycle.monthly
    )
    first_bill_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    category: Mapped[Category] = mapped_column(
        Enum(Category, native_enum=False, length=20), default=Category.other
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    website_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Python-side timestamp keeps insertion order stable below one second.
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return f"<Subscription {self.name!r} {self.billing_cycle} from {self.first_bill_date}>"
