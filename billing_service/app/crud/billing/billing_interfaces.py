"""Collaborators the invoice generation engine is built against."""
from typing import List, Optional, Protocol
from uuid import UUID

from ...schemas.financials.invoice_generation_schemas import InvoiceSendRequest, OrganizationRef, SendResult
from ...schemas.financials.invoices_schemas import InvoiceCreate, InvoiceOut
from ...schemas.leasing_tenants.leases_schemas import LeaseOut


class LeaseRepository(Protocol):
    def list_active_leases(self, organization_id: UUID) -> List[LeaseOut]: ...

    def find_lease_by_id(self, lease_id: UUID, organization_id: UUID) -> Optional[LeaseOut]: ...


class InvoiceStore(Protocol):
    def create_invoice(self, data: InvoiceCreate, regenerate: bool = False) -> InvoiceOut:
        """Persist an invoice. Raises DuplicateInvoiceError when the lease
        period is already taken and ``regenerate`` is false."""
        ...

    def find_invoices_by_lease(self, lease_id: UUID, organization_id: UUID) -> List[InvoiceOut]: ...

    def find_invoice_by_id(self, invoice_id: UUID, organization_id: UUID) -> Optional[InvoiceOut]: ...


class OrganizationRegistry(Protocol):
    def list_active_organizations(self) -> List[OrganizationRef]: ...

    def find_organization_by_id(self, organization_id: UUID) -> Optional[OrganizationRef]: ...


class NotificationDispatcher(Protocol):
    def send_invoice_to_tenant(self, request: InvoiceSendRequest) -> SendResult: ...
