"""SQLAlchemy ORM models for the customers and payments relations"""

import uuid
from sqlalchemy import (
    Column,
    String,
    BigInteger,
    Boolean,
    DateTime,
    Date,
    Integer,
    ForeignKey,
    Text,
    Uuid,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CustomerRecord(Base):
    """Internet subscriber"""

    __tablename__ = "customers"
    __table_args__ = (
        CheckConstraint("payment_day IN (1, 10, 20)", name="ck_customers_payment_day"),
        CheckConstraint("monthly_fee >= 0", name="ck_customers_monthly_fee"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    address = Column(Text, nullable=False, default="")
    phone = Column(String(32), nullable=False, default="")
    monthly_fee = Column(BigInteger, nullable=False)
    payment_day = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship("PaymentRecord", back_populates="customer", cascade="all, delete-orphan")


class PaymentRecord(Base):
    """Payment for one customer's billing period"""

    __tablename__ = "payments"
    __table_args__ = (
        # At most one payment per customer and period
        UniqueConstraint("customer_id", "month", "year", name="uq_payments_customer_period"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_payments_month"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(BigInteger, nullable=False)
    payment_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    customer = relationship("CustomerRecord", back_populates="payments")
