"""
Invoice generation from lease contracts.

Single lease:
    service.generate_invoice_for_lease(lease_id, org_id)

All active leases of an organization:
    service.generate_invoices_for_leases(org_id, period_start, period_end)

The single-lease entry point raises BillingError subclasses. The batch entry
point never raises for an individual lease; every lease yields a
GenerationResult instead.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional, Tuple, Union
from uuid import UUID

from shared.core.config import settings
from shared.utils.enums import InvoiceStatus
from ...enum.leasing_tenants_enum import LeaseStatus
from ...schemas.financials.invoice_generation_schemas import GenerationResult
from ...schemas.financials.invoices_schemas import InvoiceCreate, InvoiceItem, InvoiceOut
from ...schemas.leasing_tenants.leases_schemas import LeaseOut
from .billing_errors import (
    BillingError, CrossOrgError, DuplicateInvoiceError, InactiveLeaseError,
    LeaseNotActiveForPeriodError, NotFoundError, ValidationError,
)
from .billing_interfaces import InvoiceStore, LeaseRepository
from .billing_periods import BillingPeriod, aligned_period, parse_period_date, resolve_due_date
from .invoice_charges import build_items, compute_totals

logger = logging.getLogger(__name__)

DateInput = Union[date, str, None]

UNEXPECTED_ERROR_KIND = "unexpected"


class InvoiceGenerationService:

    def __init__(
        self,
        leases: LeaseRepository,
        invoices: InvoiceStore,
        tax_rate_pct: Optional[Decimal] = None,
        today: Callable[[], date] = date.today,
    ):
        self.leases = leases
        self.invoices = invoices
        self.tax_rate_pct = settings.INVOICE_TAX_RATE_PCT if tax_rate_pct is None else tax_rate_pct
        self.today = today

    # ------------------------------------------------------------------
    # Idempotency guard
    # ------------------------------------------------------------------
    def exists_for_period(self, lease_id: UUID, period_start: date, period_end: date, organization_id: UUID) -> bool:
        """Exact (start, end) match against the lease's invoices, not overlap."""
        return any(
            invoice.period_start == period_start and invoice.period_end == period_end
            for invoice in self.invoices.find_invoices_by_lease(lease_id, organization_id)
        )

    # ------------------------------------------------------------------
    # Single lease
    # ------------------------------------------------------------------
    def generate_invoice_for_lease(
        self,
        lease_id: UUID,
        organization_id: UUID,
        period_start: DateInput = None,
        period_end: DateInput = None,
        custom_items: Optional[List[InvoiceItem]] = None,
    ) -> InvoiceOut:
        lease = self.leases.find_lease_by_id(lease_id, organization_id)
        if lease is None:
            raise NotFoundError("Lease not found")
        self._check_lease(lease, organization_id)

        if custom_items:
            return self._create_custom_invoice(lease, organization_id, period_start, period_end, custom_items)

        period = self._resolve_period(lease, period_start, period_end)
        return self._generate(lease, organization_id, period, force_regenerate=False)

    # ------------------------------------------------------------------
    # All active leases of one organization
    # ------------------------------------------------------------------
    def generate_invoices_for_leases(
        self,
        organization_id: UUID,
        period_start: DateInput,
        period_end: DateInput,
        force_regenerate: bool = False,
    ) -> List[GenerationResult]:
        start = parse_period_date(period_start, "period start date")
        end = parse_period_date(period_end, "period end date")
        if end <= start:
            raise ValidationError("Period end date must be after period start date")

        period = BillingPeriod(period_start=start, period_end=end)
        active_leases = self.leases.list_active_leases(organization_id)

        return [
            self._generation_result(lease, organization_id, period, force_regenerate)
            for lease in active_leases
        ]

    def _generation_result(
        self,
        lease: LeaseOut,
        organization_id: UUID,
        period: BillingPeriod,
        force_regenerate: bool,
    ) -> GenerationResult:
        try:
            self._check_lease(lease, organization_id)
            invoice = self._generate(lease, organization_id, period, force_regenerate)
        except BillingError as e:
            return GenerationResult(
                lease_id=lease.id, success=False, error=e.message, error_kind=e.kind.value)
        except Exception as e:
            logger.exception("Unexpected error generating invoice for lease %s", lease.id)
            return GenerationResult(
                lease_id=lease.id, success=False, error=str(e) or "Unknown error",
                error_kind=UNEXPECTED_ERROR_KIND)

        return GenerationResult(lease_id=lease.id, invoice_id=invoice.id, success=True)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _check_lease(self, lease: LeaseOut, organization_id: UUID):
        if lease.org_id != organization_id:
            raise CrossOrgError("Lease does not belong to the same organization")
        if lease.status != LeaseStatus.active:
            raise InactiveLeaseError(f"Lease is not active (status: {lease.status})")

    def _resolve_period(self, lease: LeaseOut, period_start: DateInput, period_end: DateInput) -> BillingPeriod:
        if period_start is None and period_end is None:
            return aligned_period(lease.billing_cycle, self.today())
        if period_start is None or period_end is None:
            raise ValidationError("Both period start and period end are required")

        start = parse_period_date(period_start, "period start date")
        end = parse_period_date(period_end, "period end date")
        if end < start:
            raise ValidationError("Period end date must be after period start date")
        return BillingPeriod(period_start=start, period_end=end)

    def _lease_window(self, lease: LeaseOut, period: BillingPeriod) -> Tuple[BillingPeriod, bool]:
        """Cut the period down to the days the lease actually runs."""
        start, end = period.period_start, period.period_end
        is_partial = False

        if lease.start_date > start:
            start = lease.start_date
            is_partial = True
        if lease.end_date and lease.end_date < end:
            end = lease.end_date
            is_partial = True

        if lease.end_date and lease.end_date < period.period_start:
            raise LeaseNotActiveForPeriodError(
                f"Lease has already ended ({lease.end_date.isoformat()})")
        if lease.start_date > period.period_end:
            raise LeaseNotActiveForPeriodError(
                f"Lease hasn't started yet ({lease.start_date.isoformat()})")
        if end < start:
            raise LeaseNotActiveForPeriodError("Lease is not active during the requested period")

        return BillingPeriod(period_start=start, period_end=end), is_partial

    def _ensure_not_invoiced(self, lease: LeaseOut, period: BillingPeriod, organization_id: UUID):
        if self.exists_for_period(lease.id, period.period_start, period.period_end, organization_id):
            raise DuplicateInvoiceError(
                f"Invoice already exists for period "
                f"{period.period_start.isoformat()} to {period.period_end.isoformat()}")

    def _generate(
        self,
        lease: LeaseOut,
        organization_id: UUID,
        period: BillingPeriod,
        force_regenerate: bool,
    ) -> InvoiceOut:
        if not force_regenerate:
            self._ensure_not_invoiced(lease, period, organization_id)

        effective, is_partial = self._lease_window(lease, period)
        # partial invoices are stored with the truncated window
        if is_partial and not force_regenerate:
            self._ensure_not_invoiced(lease, effective, organization_id)

        items = build_items(lease, effective.period_start, effective.period_end, is_partial)
        totals = compute_totals(items, self.tax_rate_pct)
        issue_date = self.today()

        invoice = self.invoices.create_invoice(
            InvoiceCreate(
                org_id=organization_id,
                lease_id=lease.id,
                tenant_id=lease.tenant_id,
                space_id=lease.space_id,
                issue_date=issue_date,
                due_date=resolve_due_date(issue_date, lease.due_day),
                period_start=effective.period_start,
                period_end=effective.period_end,
                items=items,
                tax=totals.tax,
                status=InvoiceStatus.draft,
            ),
            regenerate=force_regenerate,
        )
        logger.info(
            "Generated invoice %s for lease %s (%s to %s)",
            invoice.invoice_no, lease.id, effective.period_start, effective.period_end)
        return invoice

    def _create_custom_invoice(
        self,
        lease: LeaseOut,
        organization_id: UUID,
        period_start: DateInput,
        period_end: DateInput,
        custom_items: List[InvoiceItem],
    ) -> InvoiceOut:
        issue_date = self.today()
        start = parse_period_date(period_start, "period start date") if period_start else issue_date
        end = parse_period_date(period_end, "period end date") if period_end else issue_date
        if end < start:
            raise ValidationError("Period end date must be after period start date")

        # ad-hoc invoices may share a period with the regular one
        return self.invoices.create_invoice(
            InvoiceCreate(
                org_id=organization_id,
                lease_id=lease.id,
                tenant_id=lease.tenant_id,
                space_id=lease.space_id,
                issue_date=issue_date,
                due_date=resolve_due_date(issue_date, lease.due_day),
                period_start=start,
                period_end=end,
                items=custom_items,
                tax=Decimal("0"),
                status=InvoiceStatus.draft,
            ),
            regenerate=True,
        )
