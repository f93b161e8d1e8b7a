"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, UUID4
from datetime import date
from typing import List, Optional

from wifi_billing.domain.history import PaymentHistory
from wifi_billing.domain.invoice import Invoice
from wifi_billing.domain.models import BucketSummary, Customer, CustomerFields, ReconciliationRow, ReconciliationView


class CustomerRequest(BaseModel):
    """Request body for registering or editing a customer"""

    name: str = Field("", description="Customer name (required, may not be blank)")
    address: str = ""
    phone: str = ""
    monthly_fee: Optional[int] = Field(None, description="Monthly fee in rupiah (required)")
    payment_day: int = Field(1, description="Billing-cycle bucket: 1, 10 or 20")

    def to_fields(self) -> CustomerFields:
        return CustomerFields(
            name=self.name,
            address=self.address,
            phone=self.phone,
            monthly_fee=self.monthly_fee,
            payment_day=self.payment_day,
        )


class CustomerSchema(BaseModel):
    id: UUID4
    name: str
    address: str
    phone: str
    monthly_fee: int
    payment_day: int
    is_active: bool

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerSchema":
        return cls(
            id=customer.id,
            name=customer.name,
            address=customer.address,
            phone=customer.phone,
            monthly_fee=customer.monthly_fee,
            payment_day=customer.payment_day,
            is_active=customer.is_active,
        )


class PeriodRequest(BaseModel):
    """Request body for POST /v1/customers/{id}/payment-toggle"""

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1)
    expected_paid: bool = Field(..., description="Paid status the caller saw before toggling")
    payment_id: Optional[UUID4] = Field(None, description="Payment the caller saw, when expected_paid is true")


class RowSchema(BaseModel):
    customer: CustomerSchema
    has_paid: bool
    payment_id: Optional[UUID4] = None
    payment_date: Optional[date] = None

    @classmethod
    def from_domain(cls, row: ReconciliationRow) -> "RowSchema":
        return cls(
            customer=CustomerSchema.from_domain(row.customer),
            has_paid=row.has_paid,
            payment_id=row.payment_id,
            payment_date=row.payment_date,
        )


class BucketSchema(BaseModel):
    payment_day: int
    paid_count: int
    total_count: int
    percentage: int

    @classmethod
    def from_domain(cls, summary: BucketSummary) -> "BucketSchema":
        return cls(
            payment_day=summary.payment_day,
            paid_count=summary.paid_count,
            total_count=summary.total_count,
            percentage=summary.percentage,
        )


class ReconciliationResponse(BaseModel):
    """Response for GET /v1/reconciliation"""

    month: int
    year: int
    payment_day: int
    query: str
    rows: List[RowSchema]
    summary: BucketSchema
    buckets: List[BucketSchema]

    @classmethod
    def from_domain(cls, view: ReconciliationView) -> "ReconciliationResponse":
        return cls(
            month=view.period.month,
            year=view.period.year,
            payment_day=view.payment_day,
            query=view.query,
            rows=[RowSchema.from_domain(r) for r in view.rows],
            summary=BucketSchema.from_domain(view.summary),
            buckets=[BucketSchema.from_domain(b) for b in view.buckets],
        )


class ToggleResponse(BaseModel):
    """Response for POST /v1/customers/{id}/payment-toggle"""

    customer_id: UUID4
    month: int
    year: int
    has_paid: bool
    payment_id: Optional[UUID4] = None
    payment_date: Optional[date] = None
    amount: Optional[int] = None


class DeleteResponse(BaseModel):
    customer_id: UUID4
    deleted: bool


class HistoryItem(BaseModel):
    """Single payment in history"""

    payment_id: UUID4
    customer_id: UUID4
    customer_name: str
    payment_date: date
    amount: int
    notes: Optional[str] = None


class HistoryResponse(BaseModel):
    """Response for GET /v1/payments/history"""

    month: int
    year: int
    total_amount: int
    transaction_count: int
    payments: List[HistoryItem]

    @classmethod
    def from_domain(cls, history: PaymentHistory) -> "HistoryResponse":
        return cls(
            month=history.period.month,
            year=history.period.year,
            total_amount=history.total_amount,
            transaction_count=history.transaction_count,
            payments=[
                HistoryItem(
                    payment_id=e.payment_id,
                    customer_id=e.customer_id,
                    customer_name=e.customer_name,
                    payment_date=e.payment_date,
                    amount=e.amount,
                    notes=e.notes,
                )
                for e in history.entries
            ],
        )


class InvoiceLineSchema(BaseModel):
    description: str
    detail: str
    amount: int


class InvoiceResponse(BaseModel):
    """Response for GET /v1/customers/{id}/invoice"""

    number: str
    issued_on: date
    month: int
    year: int
    business_name: str
    customer_name: str
    customer_address: str
    customer_phone: str
    lines: List[InvoiceLineSchema]
    total: int
    due_date_label: str
    filename: str
    share_message: str
    whatsapp_url: Optional[str] = None
    receipt_text: str

    @classmethod
    def from_domain(cls, invoice: Invoice) -> "InvoiceResponse":
        return cls(
            number=invoice.number,
            issued_on=invoice.issued_on,
            month=invoice.period.month,
            year=invoice.period.year,
            business_name=invoice.business_name,
            customer_name=invoice.customer_name,
            customer_address=invoice.customer_address,
            customer_phone=invoice.customer_phone,
            lines=[
                InvoiceLineSchema(description=line.description, detail=line.detail, amount=line.amount)
                for line in invoice.lines
            ],
            total=invoice.total,
            due_date_label=invoice.due_date_label,
            filename=invoice.filename,
            share_message=invoice.share_message(),
            whatsapp_url=invoice.whatsapp_url(),
            receipt_text=invoice.render_text(),
        )
