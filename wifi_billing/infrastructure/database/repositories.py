"""Data access layer for customers and payments"""

import uuid
from datetime import date
from typing import Iterable, List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from wifi_billing.infrastructure.database.models import CustomerRecord, PaymentRecord
from wifi_billing.infrastructure.observability.metrics import store_failures_counter
from wifi_billing.domain.exceptions import DuplicatePaymentError, StoreError
from wifi_billing.domain.models import Customer, CustomerFields, Payment


PERIOD_CONSTRAINT = "uq_payments_customer_period"
# SQLite reports unique violations by column list rather than constraint name
SQLITE_PERIOD_CONFLICT = "UNIQUE constraint failed: payments.customer_id, payments.month, payments.year"


def is_period_conflict(error: IntegrityError) -> bool:
    """True only for the one-payment-per-customer-period unique constraint"""
    diag = getattr(error.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == PERIOD_CONSTRAINT
    message = str(error.orig)
    return PERIOD_CONSTRAINT in message or SQLITE_PERIOD_CONFLICT in message


def to_customer(record: CustomerRecord) -> Customer:
    return Customer(
        id=record.id,
        name=record.name,
        address=record.address or "",
        phone=record.phone or "",
        monthly_fee=record.monthly_fee,
        payment_day=record.payment_day,
        is_active=record.is_active,
        created_at=record.created_at,
    )


def to_payment(record: PaymentRecord) -> Payment:
    return Payment(
        id=record.id,
        customer_id=record.customer_id,
        month=record.month,
        year=record.year,
        amount=record.amount,
        payment_date=record.payment_date,
        notes=record.notes,
        created_at=record.created_at,
    )


class SqlBillingStore:
    """
    BillingStore on a SQLAlchemy session.

    Each mutation commits on its own. Any SQLAlchemy failure rolls the
    session back and surfaces as StoreError.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, error: Exception) -> StoreError:
        self.db.rollback()
        store_failures_counter.labels(operation=operation).inc()
        return StoreError(f"{operation} failed: {error}")

    def list_active_customers(self) -> List[Customer]:
        """Active customers ordered by name"""
        try:
            records = (
                self.db.query(CustomerRecord)
                .filter(CustomerRecord.is_active.is_(True))
                .order_by(CustomerRecord.name.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("list_active_customers", e) from e
        return [to_customer(r) for r in records]

    def list_payments(self, month: int, year: int) -> List[Payment]:
        """Payments for one period, oldest record first"""
        try:
            records = (
                self.db.query(PaymentRecord)
                .filter(PaymentRecord.month == month, PaymentRecord.year == year)
                .order_by(PaymentRecord.created_at.asc(), PaymentRecord.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("list_payments", e) from e
        return [to_payment(r) for r in records]

    def get_customer(self, customer_id: uuid.UUID) -> Optional[Customer]:
        try:
            record = self.db.get(CustomerRecord, customer_id)
        except SQLAlchemyError as e:
            raise self._fail("get_customer", e) from e
        return to_customer(record) if record else None

    def list_customers_by_ids(self, customer_ids: Iterable[uuid.UUID]) -> List[Customer]:
        ids = list(customer_ids)
        if not ids:
            return []
        try:
            records = self.db.query(CustomerRecord).filter(CustomerRecord.id.in_(ids)).all()
        except SQLAlchemyError as e:
            raise self._fail("list_customers_by_ids", e) from e
        return [to_customer(r) for r in records]

    def insert_payment(
        self,
        customer_id: uuid.UUID,
        month: int,
        year: int,
        amount: int,
        payment_date: date,
    ) -> Payment:
        """
        Record a payment for a customer's period.

        Raises:
            DuplicatePaymentError: the period already has a payment
            StoreError: any other store failure
        """
        record = PaymentRecord(
            customer_id=customer_id,
            month=month,
            year=year,
            amount=amount,
            payment_date=payment_date,
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except IntegrityError as e:
            if not is_period_conflict(e):
                raise self._fail("insert_payment", e) from e
            self.db.rollback()
            raise DuplicatePaymentError(
                f"Payment for customer {customer_id} in {month}/{year} already exists"
            ) from e
        except SQLAlchemyError as e:
            raise self._fail("insert_payment", e) from e
        return to_payment(record)

    def delete_payment(self, payment_id: uuid.UUID) -> bool:
        try:
            deleted = (
                self.db.query(PaymentRecord)
                .filter(PaymentRecord.id == payment_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_payment", e) from e
        return deleted > 0

    def insert_customer(self, fields: CustomerFields) -> Customer:
        record = CustomerRecord(
            name=fields.name,
            address=fields.address,
            phone=fields.phone,
            monthly_fee=fields.monthly_fee,
            payment_day=fields.payment_day,
            is_active=True,
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            raise self._fail("insert_customer", e) from e
        return to_customer(record)

    def update_customer(self, customer_id: uuid.UUID, fields: CustomerFields) -> bool:
        try:
            record = self.db.get(CustomerRecord, customer_id)
            if record is None:
                return False
            record.name = fields.name
            record.address = fields.address
            record.phone = fields.phone
            record.monthly_fee = fields.monthly_fee
            record.payment_day = fields.payment_day
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("update_customer", e) from e
        return True

    def delete_customer(self, customer_id: uuid.UUID) -> bool:
        """Hard delete; the customer's payments go with it"""
        try:
            record = self.db.get(CustomerRecord, customer_id)
            if record is None:
                return False
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_customer", e) from e
        return True
