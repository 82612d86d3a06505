from datetime import date
from decimal import Decimal
from typing import List, Optional

from shared.utils.enums import BillingCycle, ChargeFrequency, InvoiceItemType
from ...schemas.financials.invoices_schemas import InvoiceItem, InvoiceTotals
from ...schemas.leasing_tenants.leases_schemas import AdditionalCharge, LeaseOut
from .billing_periods import covered_days, cycle_length_days, prorate, round_amount

RENT_DESCRIPTIONS = {
    BillingCycle.monthly.value: "Monthly Rent",
    BillingCycle.quarterly.value: "Quarterly Rent",
    BillingCycle.annually.value: "Annual Rent",
}


def charges_for_billing_cycle(
    charges: Optional[List[AdditionalCharge]],
    billing_cycle: str,
) -> List[AdditionalCharge]:
    # one-time and unrecognised frequencies never recur
    return [
        charge for charge in (charges or [])
        if charge.frequency != ChargeFrequency.one_time.value
        and charge.frequency == billing_cycle
    ]


def build_items(
    lease: LeaseOut,
    period_start: date,
    period_end: date,
    is_partial: bool = False,
) -> List[InvoiceItem]:
    total_days = cycle_length_days(lease.billing_cycle, period_start)
    actual_days = covered_days(period_start, period_end)

    def amount_for(base) -> Decimal:
        if is_partial:
            return prorate(base, total_days, actual_days)
        return Decimal(base)

    items = [InvoiceItem(
        description=RENT_DESCRIPTIONS.get(lease.billing_cycle, "Rent"),
        amount=amount_for(lease.rent_amount),
        type=InvoiceItemType.rent,
    )]

    for charge in charges_for_billing_cycle(lease.additional_charges, lease.billing_cycle):
        items.append(InvoiceItem(
            description=charge.name,
            amount=amount_for(charge.amount),
            type=InvoiceItemType.charge,
        ))

    return items


def compute_totals(items: List[InvoiceItem], tax_rate_pct: Decimal = Decimal("0"), tax: Optional[Decimal] = None) -> InvoiceTotals:
    """Subtotal of all items; tax is either given or derived from the flat rate."""
    subtotal = sum((Decimal(item.amount) for item in items), Decimal("0"))
    if tax is None:
        tax = round_amount(subtotal * Decimal(tax_rate_pct) / Decimal("100"))
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)
