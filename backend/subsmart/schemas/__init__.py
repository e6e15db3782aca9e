from subsmart.schemas.subscription import (
    SubscriptionBase, SubscriptionCreate, SubscriptionUpdate,
    SubscriptionResponse, SubscriptionWithSchedule, ReminderMessage,
)
from subsmart.schemas.dashboard import DashboardSummary, UpcomingPayment, CategorySpending
from subsmart.schemas.calendar import CalendarEvent, CalendarMonth
from subsmart.schemas.assistant import ParseRequest, SubscriptionDraft, InsightResponse
from subsmart.schemas.data_export import ExportFormat, ImportResult
