import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.database import Base
from billing_service.app.crud.billing.billing_errors import DuplicateInvoiceError
from billing_service.app.models.financials.invoices import Invoice, InvoiceLine  # noqa: F401
from billing_service.app.models.leasing_tenants.leases import Lease
from billing_service.app.models.leasing_tenants.tenants import Tenant
from billing_service.app.models.space_sites.orgs import Org
from billing_service.app.schemas.financials.invoice_generation_schemas import OrganizationRef, SendResult
from billing_service.app.schemas.financials.invoices_schemas import InvoiceOut
from billing_service.app.schemas.leasing_tenants.leases_schemas import LeaseOut

TODAY = date(2024, 6, 10)
ORG_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
OTHER_ORG_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


def fixed_today():
    return TODAY


def make_lease(**overrides) -> LeaseOut:
    data = dict(
        id=uuid.uuid4(),
        org_id=ORG_ID,
        tenant_id=uuid.uuid4(),
        space_id=uuid.uuid4(),
        billing_cycle="monthly",
        due_day=5,
        rent_amount=Decimal("5000"),
        additional_charges=None,
        start_date=date(2024, 1, 1),
        end_date=None,
        status="active",
    )
    data.update(overrides)
    return LeaseOut(**data)


# ----------------------------------------------------------------------
# In-memory collaborators
# ----------------------------------------------------------------------

class FakeLeaseRepository:

    def __init__(self, leases=None, failing_orgs=None):
        self.leases = {lease.id: lease for lease in (leases or [])}
        self.failing_orgs = set(failing_orgs or [])

    def list_active_leases(self, organization_id):
        if organization_id in self.failing_orgs:
            raise RuntimeError("lease lookup failed")
        return [
            lease for lease in self.leases.values()
            if lease.org_id == organization_id and lease.status == "active"
        ]

    def find_lease_by_id(self, lease_id, organization_id):
        # not org-scoped so cross-organization checks stay reachable
        return self.leases.get(lease_id)


class FakeInvoiceStore:

    def __init__(self, failing_leases=None):
        self.invoices = []
        self.failing_leases = set(failing_leases or [])

    def _same_period(self, data):
        return [
            invoice for invoice in self.invoices
            if invoice.lease_id == data.lease_id
            and invoice.period_start == data.period_start
            and invoice.period_end == data.period_end
        ]

    def create_invoice(self, data, regenerate=False):
        if data.lease_id in self.failing_leases:
            raise RuntimeError("database unavailable")

        taken = self._same_period(data)
        if taken and not regenerate:
            raise DuplicateInvoiceError("Invoice already exists for period")

        invoice = InvoiceOut(
            id=uuid.uuid4(),
            org_id=data.org_id,
            lease_id=data.lease_id,
            tenant_id=data.tenant_id,
            space_id=data.space_id,
            invoice_no=f"INV-{data.issue_date.year}-{len(self.invoices) + 1:03d}",
            issue_date=data.issue_date,
            due_date=data.due_date,
            period_start=data.period_start,
            period_end=data.period_end,
            revision=len(taken),
            items=data.items,
            subtotal=sum((item.amount for item in data.items), Decimal("0")),
            tax=data.tax,
            total=sum((item.amount for item in data.items), Decimal("0")) + data.tax,
            status=data.status.value,
        )
        self.invoices.append(invoice)
        return invoice

    def find_invoices_by_lease(self, lease_id, organization_id):
        return [i for i in self.invoices if i.lease_id == lease_id and i.org_id == organization_id]

    def find_invoice_by_id(self, invoice_id, organization_id):
        for invoice in self.invoices:
            if invoice.id == invoice_id and invoice.org_id == organization_id:
                return invoice
        return None


class FakeOrganizationRegistry:

    def __init__(self, orgs=None, fail=False):
        self.orgs = [OrganizationRef(id=org_id, name=name) for org_id, name in (orgs or [])]
        self.fail = fail

    def list_active_organizations(self):
        if self.fail:
            raise RuntimeError("registry offline")
        return list(self.orgs)

    def find_organization_by_id(self, organization_id):
        if self.fail:
            raise RuntimeError("registry offline")
        return next((org for org in self.orgs if org.id == organization_id), None)


class FakeDispatcher:

    def __init__(self, failing_tenants=None):
        self.requests = []
        self.failing_tenants = set(failing_tenants or [])

    def send_invoice_to_tenant(self, request):
        self.requests.append(request)
        if request.tenant_id in self.failing_tenants:
            return SendResult(success=False, errors=["Email delivery failed"])
        return SendResult(success=True)


class FakeEmailClient:

    def __init__(self, succeed=True):
        self.sent = []
        self.succeed = succeed

    def send_email(self, sender, recipients, subject, text_body, html_body=None):
        self.sent.append(dict(sender=sender, recipients=recipients, subject=subject,
                              text_body=text_body, html_body=html_body))
        return self.succeed


# ----------------------------------------------------------------------
# SQLite database
# ----------------------------------------------------------------------

@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def seeded(db):
    """One active organization with a tenant and an active monthly lease."""
    org = Org(id=ORG_ID, name="Bole Plaza", status="active")
    tenant = Tenant(org_id=ORG_ID, name="Abebe Kebede", email="abebe@example.com")
    db.add_all([org, tenant])
    db.flush()

    lease = Lease(
        org_id=ORG_ID,
        tenant_id=tenant.id,
        space_id=uuid.uuid4(),
        start_date=date(2024, 1, 1),
        rent_amount=Decimal("5000"),
        billing_cycle="monthly",
        due_day=5,
        additional_charges=[
            {"name": "Service Fee", "amount": "500", "frequency": "monthly"},
            {"name": "Key Deposit", "amount": "1000", "frequency": "one-time"},
        ],
        status="active",
    )
    db.add(lease)
    db.commit()
    return {"org": org, "tenant": tenant, "lease": lease}
