import logging
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple
from uuid import UUID

from shared.core.config import settings
from ...schemas.financials.invoice_generation_schemas import (
    GenerationResult, GenerationSummary, InvoiceSendRequest, MonthlyInvoiceGenerationOptions,
    OrgGenerationSummary, OrganizationRef,
)
from .billing_errors import OrganizationRegistryError
from .billing_interfaces import InvoiceStore, NotificationDispatcher, OrganizationRegistry
from .billing_periods import BillingPeriod, current_month_period
from .invoice_generation import InvoiceGenerationService

logger = logging.getLogger(__name__)


class ScheduledInvoiceGenerator:
    """Runs lease invoice generation for one or every active organization and
    hands the new invoices to the notification dispatcher."""

    def __init__(
        self,
        generation: InvoiceGenerationService,
        organizations: OrganizationRegistry,
        invoices: InvoiceStore,
        dispatcher: Optional[NotificationDispatcher] = None,
        channels: Optional[Sequence[str]] = None,
        today: Callable[[], date] = date.today,
    ):
        self.generation = generation
        self.organizations = organizations
        self.invoices = invoices
        self.dispatcher = dispatcher
        self.channels = list(channels) if channels is not None else list(settings.INVOICE_SEND_CHANNELS)
        self.today = today

    def generate_monthly_invoices(
        self, options: Optional[MonthlyInvoiceGenerationOptions] = None
    ) -> List[OrgGenerationSummary]:
        options = options or MonthlyInvoiceGenerationOptions()

        default_period = current_month_period(self.today())
        period = BillingPeriod(
            period_start=options.period_start or default_period.period_start,
            period_end=options.period_end or default_period.period_end,
        )

        return [
            self._process_organization(org, period, options)
            for org in self._target_organizations(options.organization_id)
        ]

    def _target_organizations(self, organization_id: Optional[UUID]) -> List[OrganizationRef]:
        try:
            if organization_id:
                org = self.organizations.find_organization_by_id(organization_id)
                return [org] if org else []
            return self.organizations.list_active_organizations()
        except Exception as e:
            logger.exception("Unable to resolve organizations for invoice generation")
            raise OrganizationRegistryError(str(e)) from e

    def _process_organization(
        self,
        org: OrganizationRef,
        period: BillingPeriod,
        options: MonthlyInvoiceGenerationOptions,
    ) -> OrgGenerationSummary:
        logger.info("[Scheduled Invoice Generation] Processing organization: %s", org.id)

        try:
            results = self.generation.generate_invoices_for_leases(
                org.id, period.period_start, period.period_end, options.force_regenerate)

            sent_count, sent_errors = (0, 0)
            if options.auto_send:
                sent_count, sent_errors = self._send_invoices(org.id, results)
        except Exception as e:
            logger.exception(
                "[Scheduled Invoice Generation] Error processing organization %s", org.id)
            return OrgGenerationSummary(
                organization_id=org.id,
                organization_name=org.name,
                period_start=period.period_start,
                period_end=period.period_end,
                summary=GenerationSummary(total=0, successful=0, failed=1),
                error=str(e) or "Unknown error",
            )

        successful = sum(1 for r in results if r.success)
        logger.info(
            "[Scheduled Invoice Generation] Completed for organization %s: %s invoices generated, %s sent",
            org.id, successful, sent_count)

        return OrgGenerationSummary(
            organization_id=org.id,
            organization_name=org.name,
            period_start=period.period_start,
            period_end=period.period_end,
            results=results,
            summary=GenerationSummary(
                total=len(results),
                successful=successful,
                failed=len(results) - successful,
            ),
            sent_count=sent_count,
            sent_errors=sent_errors,
        )

    def _send_invoices(self, organization_id: UUID, results: List[GenerationResult]) -> Tuple[int, int]:
        if self.dispatcher is None:
            logger.warning("No notification dispatcher configured, skipping invoice delivery")
            return 0, 0

        outcomes = [
            self._send_invoice(organization_id, result.invoice_id)
            for result in results
            if result.success and result.invoice_id
        ]
        sent = sum(1 for ok in outcomes if ok)
        return sent, len(outcomes) - sent

    def _send_invoice(self, organization_id: UUID, invoice_id: UUID) -> bool:
        try:
            invoice = self.invoices.find_invoice_by_id(invoice_id, organization_id)
            if invoice is None:
                logger.warning(
                    "[Scheduled Invoice Generation] Invoice %s vanished before delivery", invoice_id)
                return False

            send_result = self.dispatcher.send_invoice_to_tenant(InvoiceSendRequest(
                invoice_id=invoice_id,
                organization_id=organization_id,
                tenant_id=invoice.tenant_id,
                channels=self.channels,
            ))
        except Exception:
            logger.exception(
                "[Scheduled Invoice Generation] Error sending invoice %s", invoice_id)
            return False

        if not send_result.success:
            logger.warning(
                "[Scheduled Invoice Generation] Failed to send invoice %s: %s",
                invoice_id, send_result.errors)
        return send_result.success
