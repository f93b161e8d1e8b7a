"""Payment board - the stateful view a presentation layer drives"""

import uuid
from typing import Optional

from wifi_billing.domain.exceptions import CustomerNotFoundError
from wifi_billing.domain.models import PAYMENT_DAYS, CustomerFields, Payment, Period, ReconciliationView
from wifi_billing.domain.notifications import ReloadEvent, ReloadNotifier
from wifi_billing.domain.reconciliation import ReconciliationEngine
from wifi_billing.domain.toggle import PaymentToggleController


class PaymentBoard:
    """
    Selected period, bucket and search text plus the current view.

    Commands go through the controller; the board reloads when the notifier
    reports a change affecting its period, so the view always reflects the
    store rather than a local patch.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        controller: PaymentToggleController,
        notifier: ReloadNotifier,
        period: Period,
        payment_day: int = PAYMENT_DAYS[0],
        query: str = "",
    ):
        self.engine = engine
        self.controller = controller
        self.period = period
        self.payment_day = payment_day
        self.query = query
        self._view: Optional[ReconciliationView] = None
        self._unsubscribe = notifier.subscribe(self._on_reload)

    @property
    def view(self) -> ReconciliationView:
        if self._view is None:
            self.reload()
        return self._view

    def _load(self, period: Period, payment_day: int, query: str) -> ReconciliationView:
        # Selection and view change together, and only after a complete load
        view = self.engine.load(period, payment_day, query)
        self.period, self.payment_day, self.query = period, payment_day, query
        self._view = view
        return view

    def reload(self) -> ReconciliationView:
        return self._load(self.period, self.payment_day, self.query)

    def close(self) -> None:
        self._unsubscribe()

    def _on_reload(self, event: ReloadEvent) -> None:
        if event.affects(self.period):
            self.reload()

    def select_period(self, period: Period) -> ReconciliationView:
        return self._load(period, self.payment_day, self.query)

    def select_payment_day(self, payment_day: int) -> ReconciliationView:
        if payment_day not in PAYMENT_DAYS:
            raise ValueError(f"payment_day must be one of {PAYMENT_DAYS}, got {payment_day}")
        return self._load(self.period, payment_day, self.query)

    def search(self, query: str) -> ReconciliationView:
        return self._load(self.period, self.payment_day, query)

    def is_processing(self, customer_id: uuid.UUID) -> bool:
        return self.controller.markers.is_processing(customer_id)

    def toggle_payment(self, customer_id: uuid.UUID) -> Optional[Payment]:
        """Flip the status shown for a visible row"""
        row = self.view.find_row(customer_id)
        if row is None:
            raise CustomerNotFoundError(f"Customer {customer_id} is not on the board")
        return self.controller.toggle_payment(customer_id, self.view.period, row.has_paid, row.payment_id)

    def delete_customer(self, customer_id: uuid.UUID, confirmed: bool) -> bool:
        return self.controller.delete_customer(customer_id, confirmed)

    def edit_customer(self, customer_id: uuid.UUID, fields: CustomerFields) -> CustomerFields:
        return self.controller.edit_customer(customer_id, fields)
