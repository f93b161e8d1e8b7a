"""Customer commands: register, edit, delete and payment toggle"""

import uuid
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request

from wifi_billing.api.v1.schemas import (
    CustomerRequest,
    CustomerSchema,
    DeleteResponse,
    PeriodRequest,
    ToggleResponse,
)
from wifi_billing.api.v1.errors import to_http_exception
from wifi_billing.api.dependencies import (
    forward_reload_events,
    get_controller,
    get_engine,
    get_request_id,
    get_webhook_client,
)
from wifi_billing.domain.exceptions import DomainException
from wifi_billing.domain.models import Period
from wifi_billing.domain.reconciliation import ReconciliationEngine
from wifi_billing.domain.toggle import PaymentToggleController
from wifi_billing.infrastructure.clients.webhook import ReloadWebhookClient

router = APIRouter()


@router.post("/customers", response_model=CustomerSchema, status_code=201)
def register_customer(
    body: CustomerRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    controller: PaymentToggleController = Depends(get_controller),
    webhook_client: ReloadWebhookClient = Depends(get_webhook_client),
):
    """Register a new active customer"""
    try:
        customer = controller.register_customer(body.to_fields())
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    forward_reload_events(request, background_tasks, webhook_client)
    return CustomerSchema.from_domain(customer)


@router.put("/customers/{customer_id}", response_model=CustomerSchema)
def edit_customer(
    customer_id: uuid.UUID,
    body: CustomerRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    controller: PaymentToggleController = Depends(get_controller),
    webhook_client: ReloadWebhookClient = Depends(get_webhook_client),
):
    """Rewrite every mutable attribute; the name is stored in title case"""
    try:
        controller.edit_customer(customer_id, body.to_fields())
        customer = controller.store.get_customer(customer_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    forward_reload_events(request, background_tasks, webhook_client)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return CustomerSchema.from_domain(customer)


@router.delete("/customers/{customer_id}", response_model=DeleteResponse)
def delete_customer(
    customer_id: uuid.UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    controller: PaymentToggleController = Depends(get_controller),
    webhook_client: ReloadWebhookClient = Depends(get_webhook_client),
):
    """
    Permanently remove a customer and their payments.

    Without confirm=true nothing happens and deleted is false.
    """
    try:
        deleted = controller.delete_customer(customer_id, confirmed=confirm)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    forward_reload_events(request, background_tasks, webhook_client)
    return DeleteResponse(customer_id=customer_id, deleted=deleted)


@router.post("/customers/{customer_id}/payment-toggle", response_model=ToggleResponse)
def toggle_payment(
    customer_id: uuid.UUID,
    body: PeriodRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    controller: PaymentToggleController = Depends(get_controller),
    engine: ReconciliationEngine = Depends(get_engine),
    webhook_client: ReloadWebhookClient = Depends(get_webhook_client),
):
    """
    Flip the customer's paid status for the period.

    The flip is applied against expected_paid, the status the caller last
    saw, so a stale client never undoes someone else's payment. The
    response is read back from the store after the write, not patched
    locally.
    """
    try:
        period = Period(body.month, body.year)
        payment = controller.toggle_payment(customer_id, period, body.expected_paid, body.payment_id)
        rows = engine.load_rows(period)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    forward_reload_events(request, background_tasks, webhook_client)

    row = next((r for r in rows if r.customer.id == customer_id), None)
    return ToggleResponse(
        customer_id=customer_id,
        month=period.month,
        year=period.year,
        has_paid=row.has_paid if row else payment is not None,
        payment_id=row.payment_id if row else None,
        payment_date=row.payment_date if row else None,
        amount=payment.amount if payment else None,
    )
