import logging
import re
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.utils.email_client import EmailClient
from shared.utils.enums import NotificationChannel
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.financials.invoice_generation_schemas import InvoiceSendRequest, SendResult
from ...schemas.financials.invoices_schemas import InvoiceOut
from ..space_sites.orgs_crud import get_org_by_id
from .invoices_crud import get_invoice_by_id, invoice_to_out

logger = logging.getLogger(__name__)

INVOICE_EMAIL_TEMPLATE = """
<p>Dear {customer_name},</p>
<p>Invoice <b>{invoice_no}</b> from {organization_name} covers
{period_start} to {period_end}.</p>
<p>Amount due: <b>{total} {currency}</b><br>Due date: {due_date}</p>
<p>Thank you.</p>
"""


class InvoiceEmailService:
    """Notification dispatcher delivering invoices to tenants by e-mail."""

    def __init__(self, db: Session, email_client: Optional[EmailClient] = None):
        self.db = db
        self.email_client = email_client or EmailClient.from_settings()

    def send_invoice_to_tenant(self, request: InvoiceSendRequest) -> SendResult:
        invoice = get_invoice_by_id(self.db, request.invoice_id, request.organization_id)
        if not invoice:
            return SendResult(success=False, errors=["Invoice not found"])

        tenant = (
            self.db.query(Tenant)
            .filter(Tenant.id == request.tenant_id, Tenant.is_deleted == False)
            .first()
        )
        if not tenant:
            return SendResult(success=False, errors=["Tenant not found"])

        errors: List[str] = []
        for channel in request.channels:
            if channel == NotificationChannel.email.value:
                error = self._send_email(invoice_to_out(invoice), tenant)
            else:
                error = f"Channel '{channel}' is not supported"
            if error:
                errors.append(error)

        return SendResult(success=not errors, errors=errors)

    def _send_email(self, invoice: InvoiceOut, tenant: Tenant) -> Optional[str]:
        if not tenant.email:
            return "Tenant has no email address"

        organization = get_org_by_id(self.db, invoice.org_id)
        organization_name = organization.name if organization else "Organization"

        html_body = INVOICE_EMAIL_TEMPLATE.format(
            customer_name=tenant.name or "Tenant",
            invoice_no=invoice.invoice_no,
            organization_name=organization_name,
            period_start=invoice.period_start.isoformat(),
            period_end=invoice.period_end.isoformat(),
            total=invoice.total,
            currency=invoice.currency or settings.INVOICE_CURRENCY,
            due_date=invoice.due_date.isoformat(),
        )
        sent = self.email_client.send_email(
            sender=settings.EMAIL_SENDER,
            recipients=[tenant.email],
            subject=f"Invoice {invoice.invoice_no} from {organization_name}",
            text_body=self._strip_html_tags(html_body),
            html_body=html_body,
        )
        if not sent:
            logger.warning("Invoice %s email to %s failed", invoice.invoice_no, tenant.email)
            return "Email delivery failed"
        return None

    @staticmethod
    def _strip_html_tags(html: str) -> str:
        """Basic HTML to plain text converter."""
        return re.sub("<.*?>", "", html or "")
