"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from wifi_billing.domain.exceptions import InvalidPeriodError

# Billing-cycle buckets: due on the 1st, 10th or 20th of the month
PAYMENT_DAYS = (1, 10, 20)


@dataclass
class Customer:
    """Subscriber registered for monthly internet service"""

    id: uuid.UUID
    name: str
    address: str
    phone: str
    monthly_fee: int  # IDR, no minor unit
    payment_day: int
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass
class Payment:
    """Payment satisfying one customer's billing period"""

    id: uuid.UUID
    customer_id: uuid.UUID
    month: int
    year: int
    amount: int
    payment_date: date
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class CustomerFields:
    """Mutable customer attributes as submitted by a form"""

    name: str
    monthly_fee: Optional[int]
    address: str = ""
    phone: str = ""
    payment_day: int = 1


@dataclass(frozen=True)
class Period:
    """Billing period identified by month and year"""

    month: int
    year: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise InvalidPeriodError(f"Month must be between 1 and 12, got {self.month}")
        if self.year < 1:
            raise InvalidPeriodError(f"Year must be positive, got {self.year}")

    @classmethod
    def containing(cls, day: date) -> "Period":
        return cls(month=day.month, year=day.year)


@dataclass
class ReconciliationRow:
    """Active customer annotated with payment status for a period"""

    customer: Customer
    has_paid: bool
    payment_id: Optional[uuid.UUID] = None
    payment_date: Optional[date] = None


@dataclass
class BucketSummary:
    """Aggregate payment status for one billing-cycle bucket"""

    payment_day: int
    paid_count: int
    total_count: int
    percentage: int


@dataclass
class ReconciliationView:
    """Filtered rows and aggregates for the selected period and bucket"""

    period: Period
    payment_day: int
    query: str
    rows: List[ReconciliationRow]
    summary: BucketSummary
    buckets: List[BucketSummary] = field(default_factory=list)

    def find_row(self, customer_id: uuid.UUID) -> Optional[ReconciliationRow]:
        return next((r for r in self.rows if r.customer.id == customer_id), None)
