import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.core.database import FacilitySessionLocal
from ...schemas.financials.invoice_generation_schemas import MonthlyInvoiceGenerationOptions, OrgGenerationSummary
from ..billing.billing_interfaces import NotificationDispatcher
from ..billing.billing_services import build_scheduled_invoice_generator

logger = logging.getLogger(__name__)


def process_scheduled_invoices(
    db: Session,
    options: Optional[MonthlyInvoiceGenerationOptions] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> List[OrgGenerationSummary]:
    """Monthly invoice run over every active organization."""
    try:
        summaries = build_scheduled_invoice_generator(db, dispatcher).generate_monthly_invoices(options)
    except Exception:
        db.rollback()
        logger.exception("Scheduled invoice generation failed")
        raise

    for item in summaries:
        logger.info(
            "Org %s: %s/%s invoices generated, %s sent, %s send errors",
            item.organization_id, item.summary.successful, item.summary.total,
            item.sent_count, item.sent_errors)
    return summaries


def run_scheduled_invoices() -> List[OrgGenerationSummary]:
    # entry point for cron / job runners
    db = FacilitySessionLocal()
    try:
        return process_scheduled_invoices(db)
    finally:
        db.close()
