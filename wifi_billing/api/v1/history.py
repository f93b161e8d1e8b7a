"""GET /v1/payments/history - Payments recorded for a period"""

from fastapi import APIRouter, Depends, Query, Request

from wifi_billing.api.v1.schemas import HistoryResponse
from wifi_billing.api.v1.errors import to_http_exception
from wifi_billing.api.dependencies import get_request_id, get_store
from wifi_billing.domain.exceptions import DomainException
from wifi_billing.domain.history import load_payment_history
from wifi_billing.domain.models import Period
from wifi_billing.infrastructure.database.repositories import SqlBillingStore

router = APIRouter()


@router.get("/payments/history", response_model=HistoryResponse)
def get_payment_history(
    request: Request,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1),
    store: SqlBillingStore = Depends(get_store),
):
    """
    Retrieve the period's payments, newest first.

    Returns:
        Payments with customer names, total amount and transaction count
    """
    try:
        history = load_payment_history(store, Period(month, year))
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return HistoryResponse.from_domain(history)
