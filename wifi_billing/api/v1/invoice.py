"""GET /v1/customers/{customer_id}/invoice - Nota for a customer's period"""

import uuid
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from wifi_billing.api.v1.schemas import InvoiceResponse
from wifi_billing.api.v1.errors import to_http_exception
from wifi_billing.api.dependencies import get_request_id, get_store
from wifi_billing.domain.exceptions import DomainException
from wifi_billing.domain.invoice import build_invoice
from wifi_billing.domain.models import Period
from wifi_billing.infrastructure.database.repositories import SqlBillingStore

router = APIRouter()


@router.get("/customers/{customer_id}/invoice", response_model=InvoiceResponse)
def get_invoice(
    customer_id: uuid.UUID,
    request: Request,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1),
    serial: Optional[int] = Query(None, ge=0, le=9999, description="Invoice serial; random when omitted"),
    store: SqlBillingStore = Depends(get_store),
):
    """Invoice data, plain-text receipt and WhatsApp share link"""
    try:
        customer = store.get_customer(customer_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    invoice = build_invoice(customer, Period(month, year), serial=serial)
    return InvoiceResponse.from_domain(invoice)
