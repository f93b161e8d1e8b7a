"""Dependency injection for FastAPI endpoints"""

from typing import List
from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session
from wifi_billing.domain.notifications import ReloadEvent, ReloadNotifier
from wifi_billing.domain.reconciliation import ReconciliationEngine
from wifi_billing.domain.toggle import PaymentToggleController, ProcessingMarkers
from wifi_billing.infrastructure.clients.webhook import ReloadWebhookClient
from wifi_billing.infrastructure.database.repositories import SqlBillingStore
from wifi_billing.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(db: Session = Depends(get_db)) -> SqlBillingStore:
    """Provide the billing store bound to this request's session"""
    return SqlBillingStore(db)


def get_notifier(request: Request) -> ReloadNotifier:
    """Request-scoped notifier; records every reload signal on request.state"""
    notifier = ReloadNotifier()
    events: List[ReloadEvent] = []
    request.state.reload_events = events
    notifier.subscribe(events.append)
    return notifier


def get_markers(request: Request) -> ProcessingMarkers:
    """Processing markers shared by every request"""
    return request.app.state.processing_markers


def get_engine(store: SqlBillingStore = Depends(get_store)) -> ReconciliationEngine:
    return ReconciliationEngine(store)


def get_controller(
    store: SqlBillingStore = Depends(get_store),
    notifier: ReloadNotifier = Depends(get_notifier),
    markers: ProcessingMarkers = Depends(get_markers),
) -> PaymentToggleController:
    return PaymentToggleController(store, notifier, markers)


def get_webhook_client() -> ReloadWebhookClient:
    """Provide reload webhook client instance"""
    return ReloadWebhookClient()


def forward_reload_events(
    request: Request,
    background_tasks: BackgroundTasks,
    webhook_client: ReloadWebhookClient,
) -> None:
    """Schedule webhook delivery of the reload signals raised by this request"""
    if not webhook_client.enabled:
        return
    for event in getattr(request.state, "reload_events", []):
        background_tasks.add_task(webhook_client.send_event, event.to_payload())
