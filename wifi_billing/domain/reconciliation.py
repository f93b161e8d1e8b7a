"""Reconciliation engine - joins active customers to period payments"""

import logging
from typing import Dict, List, Sequence

from wifi_billing.domain.models import (
    PAYMENT_DAYS,
    BucketSummary,
    Customer,
    Payment,
    Period,
    ReconciliationRow,
    ReconciliationView,
)
from wifi_billing.domain.store import BillingStore
from wifi_billing.infrastructure.observability.metrics import (
    duplicate_payment_counter,
    record_bucket_summary,
)

logger = logging.getLogger(__name__)


def join_payments(customers: Sequence[Customer], payments: Sequence[Payment]) -> List[ReconciliationRow]:
    """
    Attach each customer's payment (if any) for the period.

    At most one payment should exist per customer and period. When the store
    holds more than one, the first in store order wins and the conflict is
    logged as a data-integrity warning.
    """
    by_customer: Dict = {}
    for payment in payments:
        if payment.customer_id in by_customer:
            duplicate_payment_counter.inc()
            logger.warning(
                "Duplicate payment for customer period",
                extra={
                    "customer_id": str(payment.customer_id),
                    "month": payment.month,
                    "year": payment.year,
                    "kept_payment_id": str(by_customer[payment.customer_id].id),
                    "ignored_payment_id": str(payment.id),
                },
            )
            continue
        by_customer[payment.customer_id] = payment

    rows = []
    for customer in customers:
        payment = by_customer.get(customer.id)
        rows.append(
            ReconciliationRow(
                customer=customer,
                has_paid=payment is not None,
                payment_id=payment.id if payment else None,
                payment_date=payment.payment_date if payment else None,
            )
        )
    return rows


def matches_query(row: ReconciliationRow, query: str) -> bool:
    """Case-insensitive substring match against name, address or phone; the text is not trimmed"""
    needle = query.lower()
    if not needle:
        return True
    customer = row.customer
    return any(
        needle in (value or "").lower()
        for value in (customer.name, customer.address, customer.phone)
    )


def filter_rows(rows: Sequence[ReconciliationRow], query: str) -> List[ReconciliationRow]:
    return [row for row in rows if matches_query(row, query)]


def rows_for_payment_day(rows: Sequence[ReconciliationRow], payment_day: int) -> List[ReconciliationRow]:
    return [row for row in rows if row.customer.payment_day == payment_day]


def paid_percentage(paid_count: int, total_count: int) -> int:
    """Rounded percentage (half up); 0 for an empty bucket"""
    if total_count == 0:
        return 0
    return (200 * paid_count + total_count) // (2 * total_count)


def summarize_bucket(rows: Sequence[ReconciliationRow], payment_day: int) -> BucketSummary:
    """Aggregate paid/total counts for one billing-cycle bucket"""
    bucket = rows_for_payment_day(rows, payment_day)
    paid_count = sum(1 for row in bucket if row.has_paid)
    total_count = len(bucket)
    return BucketSummary(
        payment_day=payment_day,
        paid_count=paid_count,
        total_count=total_count,
        percentage=paid_percentage(paid_count, total_count),
    )


class ReconciliationEngine:
    """Builds the reconciliation view for a period from the billing store"""

    def __init__(self, store: BillingStore):
        self.store = store

    def load_rows(self, period: Period) -> List[ReconciliationRow]:
        """
        Fetch active customers and the period's payments and join them.

        Raises:
            StoreError: when either fetch fails; no partial rows are returned
        """
        customers = self.store.list_active_customers()
        payments = self.store.list_payments(period.month, period.year)
        return join_payments(customers, payments)

    def load(self, period: Period, payment_day: int = PAYMENT_DAYS[0], query: str = "") -> ReconciliationView:
        """
        Produce the view for one period and bucket.

        Filtering happens before bucketing so the summary counts only what
        the user sees.
        """
        if payment_day not in PAYMENT_DAYS:
            raise ValueError(f"payment_day must be one of {PAYMENT_DAYS}, got {payment_day}")

        rows = filter_rows(self.load_rows(period), query)
        buckets = [summarize_bucket(rows, day) for day in PAYMENT_DAYS]
        for bucket in buckets:
            record_bucket_summary(bucket.payment_day, bucket.percentage)

        return ReconciliationView(
            period=period,
            payment_day=payment_day,
            query=query,
            rows=rows_for_payment_day(rows, payment_day),
            summary=next(b for b in buckets if b.payment_day == payment_day),
            buckets=buckets,
        )
