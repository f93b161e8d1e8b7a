"""GET /v1/reconciliation - Customers annotated with payment status for a period"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from wifi_billing.api.v1.schemas import ReconciliationResponse
from wifi_billing.api.v1.errors import to_http_exception
from wifi_billing.api.dependencies import get_engine, get_request_id
from wifi_billing.domain.exceptions import DomainException
from wifi_billing.domain.models import PAYMENT_DAYS, Period
from wifi_billing.domain.reconciliation import ReconciliationEngine

router = APIRouter()


@router.get("/reconciliation", response_model=ReconciliationResponse)
def get_reconciliation(
    request: Request,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1),
    payment_day: int = Query(PAYMENT_DAYS[0], description="Billing-cycle bucket: 1, 10 or 20"),
    q: str = Query("", description="Case-insensitive search on name, address or phone"),
    engine: ReconciliationEngine = Depends(get_engine),
):
    """
    Build the reconciliation view.

    Filters by the search text first, then selects the bucket, so the
    summary counts match the rows returned.
    """
    if payment_day not in PAYMENT_DAYS:
        raise HTTPException(status_code=422, detail=f"payment_day must be one of {list(PAYMENT_DAYS)}")

    try:
        view = engine.load(Period(month, year), payment_day, q)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))
    return ReconciliationResponse.from_domain(view)
