"""Unit tests for payment history"""

from datetime import date
from wifi_billing.domain.history import UNKNOWN_CUSTOMER, load_payment_history
from wifi_billing.domain.models import Period
from conftest import MARCH_2025


def test_history_newest_first_with_totals(store):
    andi = store.add_customer("Andi")
    budi = store.add_customer("Budi", is_active=False)
    store.add_payment(andi.id, MARCH_2025, amount=100000, payment_date=date(2025, 3, 2))
    store.add_payment(budi.id, MARCH_2025, amount=150000, payment_date=date(2025, 3, 15))
    store.add_payment(andi.id, Period(2, 2025), amount=100000)

    history = load_payment_history(store, MARCH_2025)

    assert [e.customer_name for e in history.entries] == ["Budi", "Andi"]
    assert history.total_amount == 250000
    assert history.transaction_count == 2


def test_history_unknown_customer(store):
    andi = store.add_customer("Andi")
    store.add_payment(andi.id, MARCH_2025)
    del store.customers[andi.id]

    history = load_payment_history(store, MARCH_2025)

    assert history.entries[0].customer_name == UNKNOWN_CUSTOMER


def test_empty_history_skips_customer_lookup(store):
    history = load_payment_history(store, MARCH_2025)

    assert history.entries == []
    assert history.total_amount == 0
    assert "list_customers_by_ids" not in store.calls
