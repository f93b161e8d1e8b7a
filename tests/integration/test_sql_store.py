"""Integration tests for the SQLAlchemy billing store"""

import uuid
import pytest
from datetime import date
from wifi_billing.domain.exceptions import DuplicatePaymentError, StoreError
from wifi_billing.domain.models import CustomerFields, Period
from wifi_billing.domain.notifications import ReloadNotifier
from wifi_billing.domain.reconciliation import ReconciliationEngine
from wifi_billing.domain.toggle import PaymentToggleController
from wifi_billing.infrastructure.database.models import CustomerRecord, PaymentRecord
from wifi_billing.infrastructure.database.repositories import SqlBillingStore

pytestmark = pytest.mark.integration


@pytest.fixture
def sql_store(db) -> SqlBillingStore:
    return SqlBillingStore(db)


def register(sql_store, name, payment_day=1, fee=100000):
    return sql_store.insert_customer(CustomerFields(name=name, monthly_fee=fee, payment_day=payment_day))


def test_active_customers_sorted_by_name(sql_store, db):
    register(sql_store, "Citra")
    register(sql_store, "Andi")
    hidden = register(sql_store, "Budi")
    db.get(CustomerRecord, hidden.id).is_active = False
    db.commit()

    names = [c.name for c in sql_store.list_active_customers()]

    assert names == ["Andi", "Citra"]


def test_insert_and_list_payments(sql_store):
    andi = register(sql_store, "Andi")

    payment = sql_store.insert_payment(andi.id, 3, 2025, 100000, date(2025, 3, 5))

    assert isinstance(payment.id, uuid.UUID)
    assert payment.created_at is not None
    assert [p.id for p in sql_store.list_payments(3, 2025)] == [payment.id]
    assert sql_store.list_payments(4, 2025) == []


def test_unique_customer_period(sql_store):
    andi = register(sql_store, "Andi")
    sql_store.insert_payment(andi.id, 3, 2025, 100000, date(2025, 3, 5))

    with pytest.raises(DuplicatePaymentError):
        sql_store.insert_payment(andi.id, 3, 2025, 100000, date(2025, 3, 6))

    # Session stays usable after the conflict
    assert len(sql_store.list_payments(3, 2025)) == 1
    sql_store.insert_payment(andi.id, 4, 2025, 100000, date(2025, 4, 6))


def test_other_integrity_errors_are_store_failures(sql_store):
    andi = register(sql_store, "Andi")

    with pytest.raises(StoreError) as excinfo:
        sql_store.insert_payment(andi.id, 13, 2025, 100000, date(2025, 3, 5))

    assert not isinstance(excinfo.value, DuplicatePaymentError)
    assert sql_store.list_payments(13, 2025) == []
    sql_store.insert_payment(andi.id, 3, 2025, 100000, date(2025, 3, 5))


def test_delete_payment_is_idempotent(sql_store):
    andi = register(sql_store, "Andi")
    payment = sql_store.insert_payment(andi.id, 3, 2025, 100000, date(2025, 3, 5))

    assert sql_store.delete_payment(payment.id) is True
    assert sql_store.delete_payment(payment.id) is False


def test_update_customer(sql_store):
    andi = register(sql_store, "Andi")

    assert sql_store.update_customer(andi.id, CustomerFields(name="Andi S", monthly_fee=5, payment_day=20, phone="1"))
    saved = sql_store.get_customer(andi.id)
    assert (saved.name, saved.monthly_fee, saved.payment_day, saved.phone) == ("Andi S", 5, 20, "1")

    assert sql_store.update_customer(uuid.uuid4(), CustomerFields(name="x", monthly_fee=1)) is False


def test_delete_customer_removes_payments(sql_store, db):
    andi = register(sql_store, "Andi")
    sql_store.insert_payment(andi.id, 3, 2025, 100000, date(2025, 3, 5))

    assert sql_store.delete_customer(andi.id) is True

    assert sql_store.get_customer(andi.id) is None
    assert db.query(PaymentRecord).count() == 0
    assert sql_store.delete_customer(andi.id) is False


def test_list_customers_by_ids(sql_store):
    andi = register(sql_store, "Andi")
    register(sql_store, "Budi")

    assert [c.name for c in sql_store.list_customers_by_ids([andi.id])] == ["Andi"]
    assert sql_store.list_customers_by_ids([]) == []


def test_toggle_scenario_against_sql_store(sql_store):
    customer = register(sql_store, "Customer A", fee=100000)
    controller = PaymentToggleController(sql_store, ReloadNotifier(), today=lambda: date(2025, 3, 5))
    engine = ReconciliationEngine(sql_store)

    period = Period(3, 2025)
    payment = controller.toggle_payment(customer.id, period, False)
    assert payment.amount == 100000
    assert engine.load(period).find_row(customer.id).has_paid is True

    controller.toggle_payment(customer.id, period, True, payment.id)
    assert engine.load(period).find_row(customer.id).has_paid is False
    assert sql_store.list_payments(3, 2025) == []


def test_stale_mark_against_sql_store(sql_store):
    customer = register(sql_store, "Customer A")
    first = PaymentToggleController(sql_store, ReloadNotifier(), today=lambda: date(2025, 3, 5))
    second = PaymentToggleController(sql_store, ReloadNotifier(), today=lambda: date(2025, 3, 5))

    marked = first.toggle_payment(customer.id, Period(3, 2025), False)
    kept = second.toggle_payment(customer.id, Period(3, 2025), False)

    assert kept.id == marked.id
    assert [p.id for p in sql_store.list_payments(3, 2025)] == [marked.id]
