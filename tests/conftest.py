"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import uuid
import pytest
from datetime import date
from typing import Dict, Generator, Iterable, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from wifi_billing.api.main import create_app
from wifi_billing.infrastructure.database.models import Base
from wifi_billing.infrastructure.database.session import get_db
from wifi_billing.domain.exceptions import DuplicatePaymentError, StoreError
from wifi_billing.domain.models import Customer, CustomerFields, Payment, Period
from wifi_billing.domain.notifications import ReloadNotifier
from wifi_billing.domain.reconciliation import ReconciliationEngine
from wifi_billing.domain.toggle import PaymentToggleController


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2025, 3, 5)
MARCH_2025 = Period(3, 2025)


class InMemoryBillingStore:
    """BillingStore substitute that keeps rows in dicts and records calls"""

    def __init__(self):
        self.customers: Dict[uuid.UUID, Customer] = {}
        self.payments: List[Payment] = []
        self.calls: List[str] = []
        self.failing: set = set()

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failing:
            raise StoreError(f"{name} failed: connection refused")

    def add_customer(self, name: str, monthly_fee: int = 100000, payment_day: int = 1,
                     address: str = "", phone: str = "", is_active: bool = True) -> Customer:
        customer = Customer(
            id=uuid.uuid4(),
            name=name,
            address=address,
            phone=phone,
            monthly_fee=monthly_fee,
            payment_day=payment_day,
            is_active=is_active,
        )
        self.customers[customer.id] = customer
        return customer

    def add_payment(self, customer_id: uuid.UUID, period: Period, amount: int = 100000,
                    payment_date: date = TODAY) -> Payment:
        """Insert without the uniqueness check, as a store lacking the constraint would"""
        payment = Payment(
            id=uuid.uuid4(),
            customer_id=customer_id,
            month=period.month,
            year=period.year,
            amount=amount,
            payment_date=payment_date,
        )
        self.payments.append(payment)
        return payment

    def payments_for(self, customer_id: uuid.UUID, period: Period) -> List[Payment]:
        return [
            p for p in self.payments
            if p.customer_id == customer_id and p.month == period.month and p.year == period.year
        ]

    def list_active_customers(self) -> List[Customer]:
        self._call("list_active_customers")
        return sorted((c for c in self.customers.values() if c.is_active), key=lambda c: c.name)

    def list_payments(self, month: int, year: int) -> List[Payment]:
        self._call("list_payments")
        return [p for p in self.payments if p.month == month and p.year == year]

    def get_customer(self, customer_id: uuid.UUID) -> Optional[Customer]:
        self._call("get_customer")
        return self.customers.get(customer_id)

    def list_customers_by_ids(self, customer_ids: Iterable[uuid.UUID]) -> List[Customer]:
        self._call("list_customers_by_ids")
        return [self.customers[i] for i in customer_ids if i in self.customers]

    def insert_payment(self, customer_id, month, year, amount, payment_date) -> Payment:
        self._call("insert_payment")
        period = Period(month, year)
        if self.payments_for(customer_id, period):
            raise DuplicatePaymentError(f"Payment for customer {customer_id} in {month}/{year} already exists")
        return self.add_payment(customer_id, period, amount=amount, payment_date=payment_date)

    def delete_payment(self, payment_id: uuid.UUID) -> bool:
        self._call("delete_payment")
        before = len(self.payments)
        self.payments = [p for p in self.payments if p.id != payment_id]
        return len(self.payments) < before

    def insert_customer(self, fields: CustomerFields) -> Customer:
        self._call("insert_customer")
        return self.add_customer(
            fields.name,
            monthly_fee=fields.monthly_fee,
            payment_day=fields.payment_day,
            address=fields.address,
            phone=fields.phone,
        )

    def update_customer(self, customer_id: uuid.UUID, fields: CustomerFields) -> bool:
        self._call("update_customer")
        customer = self.customers.get(customer_id)
        if customer is None:
            return False
        customer.name = fields.name
        customer.address = fields.address
        customer.phone = fields.phone
        customer.monthly_fee = fields.monthly_fee
        customer.payment_day = fields.payment_day
        return True

    def delete_customer(self, customer_id: uuid.UUID) -> bool:
        self._call("delete_customer")
        self.payments = [p for p in self.payments if p.customer_id != customer_id]
        return self.customers.pop(customer_id, None) is not None


@pytest.fixture
def store() -> InMemoryBillingStore:
    return InMemoryBillingStore()


@pytest.fixture
def notifier() -> ReloadNotifier:
    return ReloadNotifier()


@pytest.fixture
def published(notifier: ReloadNotifier) -> list:
    """Every reload event published during the test"""
    events = []
    notifier.subscribe(events.append)
    return events


@pytest.fixture
def controller(store: InMemoryBillingStore, notifier: ReloadNotifier) -> PaymentToggleController:
    return PaymentToggleController(store, notifier, today=lambda: TODAY)


@pytest.fixture
def reconciliation_engine(store: InMemoryBillingStore) -> ReconciliationEngine:
    return ReconciliationEngine(store)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
