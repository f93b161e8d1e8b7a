"""Payment history for a billing period"""

import uuid
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from wifi_billing.domain.models import Period
from wifi_billing.domain.store import BillingStore

UNKNOWN_CUSTOMER = "Unknown"


@dataclass
class HistoryEntry:
    payment_id: uuid.UUID
    customer_id: uuid.UUID
    customer_name: str
    payment_date: date
    month: int
    year: int
    amount: int
    notes: Optional[str] = None


@dataclass
class PaymentHistory:
    period: Period
    entries: List[HistoryEntry]

    @property
    def total_amount(self) -> int:
        return sum(e.amount for e in self.entries)

    @property
    def transaction_count(self) -> int:
        return len(self.entries)


def load_payment_history(store: BillingStore, period: Period) -> PaymentHistory:
    """Period payments, newest payment date first, with customer names resolved"""
    payments = store.list_payments(period.month, period.year)
    customer_ids = {p.customer_id for p in payments}
    names = {c.id: c.name for c in store.list_customers_by_ids(customer_ids)} if customer_ids else {}

    entries = [
        HistoryEntry(
            payment_id=p.id,
            customer_id=p.customer_id,
            customer_name=names.get(p.customer_id, UNKNOWN_CUSTOMER),
            payment_date=p.payment_date,
            month=p.month,
            year=p.year,
            amount=p.amount,
            notes=p.notes,
        )
        for p in payments
    ]
    entries.sort(key=lambda e: e.payment_date, reverse=True)
    return PaymentHistory(period=period, entries=entries)
