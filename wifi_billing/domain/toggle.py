"""Payment toggle controller - mutations that keep one payment per customer period"""

import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import date
from typing import Callable, Iterator, Optional, Set, Tuple

from wifi_billing.domain.exceptions import (
    CustomerNotFoundError,
    CustomerValidationError,
    DuplicatePaymentError,
    OperationInProgressError,
)
from wifi_billing.domain.models import PAYMENT_DAYS, Customer, CustomerFields, Payment, Period
from wifi_billing.domain.notifications import ReloadEvent, ReloadNotifier
from wifi_billing.domain.store import BillingStore
from wifi_billing.infrastructure.observability.logging import log_payment_toggle
from wifi_billing.infrastructure.observability.metrics import record_payment_toggle

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """
    Title-case each space-delimited token, keeping the original spacing.

    "john   doe" -> "John   Doe"
    """
    return " ".join(word[:1].upper() + word[1:] for word in name.lower().split(" "))


def validate_customer_fields(fields: CustomerFields) -> None:
    """Reject incomplete forms before anything reaches the store"""
    if not fields.name or not fields.name.strip():
        raise CustomerValidationError("Customer name is required")
    if fields.monthly_fee is None:
        raise CustomerValidationError("Monthly fee is required")
    if fields.monthly_fee < 0:
        raise CustomerValidationError("Monthly fee cannot be negative")
    if fields.payment_day not in PAYMENT_DAYS:
        raise CustomerValidationError(f"Payment day must be one of {PAYMENT_DAYS}")


class ProcessingMarkers:
    """
    One in-flight marker per customer row.

    Only blocks duplicate submissions from this process; the store does not
    see it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._active: Set[uuid.UUID] = set()

    def is_processing(self, customer_id: uuid.UUID) -> bool:
        with self._lock:
            return customer_id in self._active

    @contextmanager
    def claim(self, customer_id: uuid.UUID) -> Iterator[None]:
        with self._lock:
            if customer_id in self._active:
                raise OperationInProgressError(f"Customer {customer_id} is already being processed")
            self._active.add(customer_id)
        try:
            yield
        finally:
            with self._lock:
                self._active.discard(customer_id)


class PaymentToggleController:
    """Customer and payment commands; every success publishes a reload signal"""

    def __init__(
        self,
        store: BillingStore,
        notifier: ReloadNotifier,
        markers: Optional[ProcessingMarkers] = None,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.notifier = notifier
        self.markers = markers or ProcessingMarkers()
        self.today = today

    def _current_payment(self, customer_id: uuid.UUID, period: Period) -> Optional[Payment]:
        payments = self.store.list_payments(period.month, period.year)
        return next((p for p in payments if p.customer_id == customer_id), None)

    def toggle_payment(
        self,
        customer_id: uuid.UUID,
        period: Period,
        observed_paid: bool,
        observed_payment_id: Optional[uuid.UUID] = None,
    ) -> Optional[Payment]:
        """
        Flip the payment status the caller last observed for the period.

        observed_paid=False marks the customer paid, capturing the current
        monthly fee and today's date. If another session recorded a payment
        first, that payment is kept and returned.

        observed_paid=True deletes the observed payment. Without an id the
        period's current payment is looked up. A payment already removed by
        someone else is not an error.

        Returns:
            The payment now on record, or None when the customer is unpaid

        Raises:
            CustomerNotFoundError: customer is not in the store
            OperationInProgressError: the row already has a command in flight
            StoreError: the store failed; nothing is applied
        """
        with self.markers.claim(customer_id):
            if observed_paid:
                result = None
                action = "payment_unmarked"
                self._unmark_paid(customer_id, period, observed_payment_id)
            else:
                customer = self.store.get_customer(customer_id)
                if customer is None:
                    raise CustomerNotFoundError(f"Customer {customer_id} not found")
                result, inserted = self._mark_paid(customer, period)
                action = "payment_marked" if inserted else "payment_conflict"

            if action != "payment_conflict":
                record_payment_toggle(action)
                log_payment_toggle(customer_id, period.month, period.year, action)

        self.notifier.publish(ReloadEvent(action=action, customer_id=customer_id, period=period))
        return result

    def _unmark_paid(self, customer_id: uuid.UUID, period: Period, payment_id: Optional[uuid.UUID]) -> None:
        if payment_id is None:
            existing = self._current_payment(customer_id, period)
            if existing is None:
                logger.info("No payment to remove", extra={"customer_id": str(customer_id)})
                return
            payment_id = existing.id
        if not self.store.delete_payment(payment_id):
            logger.info("Payment already removed", extra={"payment_id": str(payment_id)})

    def _mark_paid(self, customer: Customer, period: Period) -> Tuple[Optional[Payment], bool]:
        """Insert the period's payment; returns (payment on record, inserted by us)"""
        try:
            payment = self.store.insert_payment(
                customer_id=customer.id,
                month=period.month,
                year=period.year,
                amount=customer.monthly_fee,
                payment_date=self.today(),
            )
            return payment, True
        except DuplicatePaymentError:
            # Someone else marked it first; the stored payment is authoritative
            logger.warning(
                "Payment already recorded for period",
                extra={"customer_id": str(customer.id), "month": period.month, "year": period.year},
            )
            return self._current_payment(customer.id, period), False

    def register_customer(self, fields: CustomerFields) -> Customer:
        validate_customer_fields(fields)
        customer = self.store.insert_customer(fields)
        logger.info("Customer registered", extra={"customer_id": str(customer.id)})
        self.notifier.publish(ReloadEvent(action="customer_registered", customer_id=customer.id))
        return customer

    def edit_customer(self, customer_id: uuid.UUID, fields: CustomerFields) -> CustomerFields:
        """Rewrite all mutable attributes with the name normalized to title case"""
        validate_customer_fields(fields)
        normalized = CustomerFields(
            name=normalize_name(fields.name),
            monthly_fee=fields.monthly_fee,
            address=fields.address,
            phone=fields.phone,
            payment_day=fields.payment_day,
        )
        with self.markers.claim(customer_id):
            if not self.store.update_customer(customer_id, normalized):
                raise CustomerNotFoundError(f"Customer {customer_id} not found")

        logger.info("Customer edited", extra={"customer_id": str(customer_id)})
        self.notifier.publish(ReloadEvent(action="customer_edited", customer_id=customer_id))
        return normalized

    def delete_customer(self, customer_id: uuid.UUID, confirmed: bool) -> bool:
        """
        Hard-delete a customer once the user has confirmed.

        Returns False without touching the store when confirmation was
        declined.
        """
        if not confirmed:
            return False

        with self.markers.claim(customer_id):
            deleted = self.store.delete_customer(customer_id)

        if not deleted:
            logger.info("Customer already removed", extra={"customer_id": str(customer_id)})
        self.notifier.publish(ReloadEvent(action="customer_deleted", customer_id=customer_id))
        return True
