"""Reload signal fan-out between commands and the views that depend on them"""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from wifi_billing.domain.models import Period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReloadEvent:
    """Emitted after every successful mutation"""

    action: str  # payment_marked | payment_unmarked | payment_conflict | customer_*
    customer_id: uuid.UUID
    period: Optional[Period] = None  # None affects every period

    def affects(self, period: Period) -> bool:
        return self.period is None or self.period == period

    def to_payload(self) -> dict:
        return {
            "event": "RELOAD",
            "action": self.action,
            "customer_id": str(self.customer_id),
            "month": self.period.month if self.period else None,
            "year": self.period.year if self.period else None,
        }


Listener = Callable[[ReloadEvent], None]


class ReloadNotifier:
    """In-process publish/subscribe for reload signals"""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: ReloadEvent) -> None:
        """
        Deliver the event to every listener.

        The mutation has already been applied, so a failing listener is
        logged and the remaining listeners still run.
        """
        logger.debug("Reload signal", extra={"action": event.action, "customer_id": str(event.customer_id)})
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Reload listener failed", extra={"action": event.action})
