from datetime import date
from decimal import Decimal

from billing_service.app.crud.billing.invoice_charges import (
    build_items, charges_for_billing_cycle, compute_totals,
)
from billing_service.app.schemas.financials.invoices_schemas import InvoiceItem
from billing_service.app.schemas.leasing_tenants.leases_schemas import AdditionalCharge
from shared.utils.enums import BillingCycle, InvoiceItemType
from conftest import make_lease

CHARGES = [
    {"name": "Service Fee", "amount": "500", "frequency": "monthly"},
    {"name": "Key Deposit", "amount": "1000", "frequency": "one-time"},
    {"name": "Insurance", "amount": "1200", "frequency": "annually"},
]


def test_full_month_items():
    lease = make_lease(additional_charges=CHARGES)

    items = build_items(lease, date(2024, 6, 1), date(2024, 6, 30))

    assert [(i.description, i.amount, i.type) for i in items] == [
        ("Monthly Rent", Decimal("5000"), InvoiceItemType.rent),
        ("Service Fee", Decimal("500"), InvoiceItemType.charge),
    ]
    totals = compute_totals(items)
    assert totals.subtotal == Decimal("5500")
    assert totals.tax == Decimal("0")
    assert totals.total == Decimal("5500")


def test_charges_follow_the_billing_cycle():
    charges = [AdditionalCharge(**c) for c in CHARGES]

    annual = charges_for_billing_cycle(charges, BillingCycle.annually)
    assert [c.name for c in annual] == ["Insurance"]
    assert charges_for_billing_cycle(charges, BillingCycle.quarterly) == []
    assert charges_for_billing_cycle(None, BillingCycle.monthly) == []


def test_partial_period_is_prorated():
    lease = make_lease(rent_amount=Decimal("3000"), start_date=date(2024, 6, 15),
                       additional_charges=[{"name": "Parking", "amount": "300", "frequency": "monthly"}])

    items = build_items(lease, date(2024, 6, 15), date(2024, 6, 30), is_partial=True)

    assert items[0].amount == Decimal("1600")
    assert items[1].amount == Decimal("160")


def test_rent_description_by_cycle():
    lease = make_lease(billing_cycle="quarterly", rent_amount=Decimal("15000"))
    items = build_items(lease, date(2024, 1, 1), date(2024, 3, 31))
    assert items[0].description == "Quarterly Rent"
    assert items[0].amount == Decimal("15000")


def test_tax_from_flat_rate():
    items = [InvoiceItem(description="Monthly Rent", amount=Decimal("5000"), type="rent")]
    totals = compute_totals(items, Decimal("15"))
    assert totals.tax == Decimal("750")
    assert totals.total == Decimal("5750")


def test_explicit_tax_wins_over_rate():
    items = [InvoiceItem(description="Monthly Rent", amount=Decimal("5000"), type="rent")]
    totals = compute_totals(items, Decimal("15"), tax=Decimal("0"))
    assert totals.total == Decimal("5000")
