from typing import Optional
from sqlalchemy.orm import Session

from ..financials.invoice_email_service import InvoiceEmailService
from ..financials.invoices_crud import InvoiceCrudStore
from ..leasing_tenants.leases_crud import LeaseCrudRepository
from ..space_sites.orgs_crud import OrgCrudRegistry
from .billing_interfaces import NotificationDispatcher
from .invoice_generation import InvoiceGenerationService
from .scheduled_invoice_generation import ScheduledInvoiceGenerator


def build_invoice_generation_service(db: Session) -> InvoiceGenerationService:
    return InvoiceGenerationService(
        leases=LeaseCrudRepository(db),
        invoices=InvoiceCrudStore(db),
    )


def build_scheduled_invoice_generator(
    db: Session,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> ScheduledInvoiceGenerator:
    return ScheduledInvoiceGenerator(
        generation=build_invoice_generation_service(db),
        organizations=OrgCrudRegistry(db),
        invoices=InvoiceCrudStore(db),
        dispatcher=dispatcher or InvoiceEmailService(db),
    )
