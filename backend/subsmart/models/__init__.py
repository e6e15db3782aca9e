from subsmart.models.subscription import BillingCycle, Category, Subscription

__all__ = [
    "BillingCycle",
    "Category",
    "Subscription",
]
