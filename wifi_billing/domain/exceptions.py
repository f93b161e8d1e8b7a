"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class StoreError(DomainException):
    """Data store is unreachable or rejected the request"""

    pass


class DuplicatePaymentError(StoreError):
    """A payment already exists for this customer and period"""

    pass


class CustomerValidationError(DomainException):
    """Customer fields are missing or out of range"""

    pass


class InvalidPeriodError(DomainException):
    """Month/year pair does not name a billing period"""

    pass


class CustomerNotFoundError(DomainException):
    """Customer does not exist in the store"""

    pass


class OperationInProgressError(DomainException):
    """Another command for the same customer row has not finished yet"""

    pass
