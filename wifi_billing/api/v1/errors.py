"""Mapping of domain failures to HTTP responses"""

import logging
from fastapi import HTTPException

from wifi_billing.domain.exceptions import (
    CustomerNotFoundError,
    CustomerValidationError,
    DomainException,
    InvalidPeriodError,
    OperationInProgressError,
    StoreError,
)


def to_http_exception(error: DomainException, request_id: str) -> HTTPException:
    """Log the failure and build the response the client sees"""
    if isinstance(error, StoreError):
        logging.error(f"Store error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Operation failed")
    if isinstance(error, (CustomerValidationError, InvalidPeriodError)):
        logging.warning(f"Validation failed: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, CustomerNotFoundError):
        return HTTPException(status_code=404, detail="Customer not found")
    if isinstance(error, OperationInProgressError):
        return HTTPException(status_code=409, detail=str(error))
    logging.error(f"Unexpected domain error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
