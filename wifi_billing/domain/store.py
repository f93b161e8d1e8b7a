"""Data access contract consumed by the reconciliation core"""

import uuid
from datetime import date
from typing import Iterable, List, Optional, Protocol

from wifi_billing.domain.models import Customer, CustomerFields, Payment


class BillingStore(Protocol):
    """
    Customer and payment relations backed by a remote relational store.

    Implementations raise StoreError when the store is unreachable or
    rejects a request, and DuplicatePaymentError when a payment for the same
    (customer_id, month, year) already exists.
    """

    def list_active_customers(self) -> List[Customer]:
        """Active customers ordered by name ascending"""
        ...

    def list_payments(self, month: int, year: int) -> List[Payment]:
        """Payments for the period, oldest record first"""
        ...

    def get_customer(self, customer_id: uuid.UUID) -> Optional[Customer]:
        ...

    def list_customers_by_ids(self, customer_ids: Iterable[uuid.UUID]) -> List[Customer]:
        ...

    def insert_payment(
        self,
        customer_id: uuid.UUID,
        month: int,
        year: int,
        amount: int,
        payment_date: date,
    ) -> Payment:
        ...

    def delete_payment(self, payment_id: uuid.UUID) -> bool:
        """Delete by id; returns False when nothing was deleted"""
        ...

    def insert_customer(self, fields: CustomerFields) -> Customer:
        ...

    def update_customer(self, customer_id: uuid.UUID, fields: CustomerFields) -> bool:
        """Rewrite mutable attributes; returns False when the customer is missing"""
        ...

    def delete_customer(self, customer_id: uuid.UUID) -> bool:
        ...
