import logging
import re
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from shared.core.config import settings
from ...models.financials.invoices import Invoice, InvoiceLine
from ...schemas.financials.invoices_schemas import InvoiceCreate, InvoiceItem, InvoiceOut, InvoicesResponse
from ..billing.billing_errors import DuplicateInvoiceError, NotFoundError, ValidationError
from ..billing.invoice_charges import compute_totals
from ..leasing_tenants import leases_crud

logger = logging.getLogger(__name__)

INVOICE_NUMBER_ATTEMPTS = 3


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def invoice_to_out(invoice: Invoice) -> InvoiceOut:
    data = {column.name: getattr(invoice, column.name) for column in Invoice.__table__.columns}
    data["items"] = [
        InvoiceItem(description=line.description, amount=line.amount, type=line.item_type)
        for line in invoice.lines
    ]
    return InvoiceOut.model_validate(data)


def generate_invoice_number(db: Session, org_id: UUID, year: int) -> str:
    """Next "INV-YYYY-NNN" for the organization; the sequence restarts every year."""
    prefix = f"{settings.INVOICE_NUMBER_PREFIX}-{year}-"
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    numbers = (
        db.query(Invoice.invoice_no)
        .filter(Invoice.org_id == org_id, Invoice.invoice_no.like(f"{prefix}%"))
        .all()
    )
    next_sequence = 1
    for (invoice_no,) in numbers:
        match = pattern.match(invoice_no)
        if match:
            next_sequence = max(next_sequence, int(match.group(1)) + 1)

    return f"{prefix}{next_sequence:03d}"


def next_period_revision(db: Session, request: InvoiceCreate) -> int:
    current = (
        db.query(func.max(Invoice.revision))
        .filter(
            Invoice.lease_id == request.lease_id,
            Invoice.period_start == request.period_start,
            Invoice.period_end == request.period_end,
        )
        .scalar()
    )
    return 0 if current is None else current + 1


def period_taken(db: Session, request: InvoiceCreate) -> bool:
    """A live (not soft-deleted) invoice already covers this lease period."""
    return db.query(Invoice.id).filter(
        Invoice.lease_id == request.lease_id,
        Invoice.period_start == request.period_start,
        Invoice.period_end == request.period_end,
        Invoice.is_deleted == False,
    ).first() is not None


def duplicate_period_error(request: InvoiceCreate) -> DuplicateInvoiceError:
    return DuplicateInvoiceError(
        f"Invoice already exists for period "
        f"{request.period_start.isoformat()} to {request.period_end.isoformat()}")


def validate_invoice_request(db: Session, request: InvoiceCreate):
    lease = leases_crud.get_by_id(db, request.lease_id, request.org_id)
    if not lease:
        raise NotFoundError("Lease not found")
    if lease.tenant_id != request.tenant_id:
        raise ValidationError("Tenant ID does not match the lease")
    if lease.space_id != request.space_id:
        raise ValidationError("Unit ID does not match the lease")
    if not request.items:
        raise ValidationError("Invoice must have at least one item")
    if request.period_end < request.period_start:
        raise ValidationError("Period end date must be after period start date")


# ----------------------------------------------------------------------
# CRUD OPERATIONS
# ----------------------------------------------------------------------

def create_invoice(db: Session, request: InvoiceCreate, regenerate: bool = False) -> Invoice:
    try:
        return _insert_invoice(db, request, regenerate)
    except SQLAlchemyError:
        # the session is shared by every lease of a billing run
        db.rollback()
        raise


def _insert_invoice(db: Session, request: InvoiceCreate, regenerate: bool) -> Invoice:
    validate_invoice_request(db, request)
    if not regenerate and period_taken(db, request):
        raise duplicate_period_error(request)
    totals = compute_totals(request.items, tax=Decimal(request.tax or 0))

    for attempt in range(1, INVOICE_NUMBER_ATTEMPTS + 1):
        # soft-deleted invoices keep their revision slot
        revision = next_period_revision(db, request)
        db_invoice = Invoice(
            org_id=request.org_id,
            lease_id=request.lease_id,
            tenant_id=request.tenant_id,
            space_id=request.space_id,
            invoice_no=request.invoice_no or generate_invoice_number(
                db, request.org_id, request.issue_date.year),
            issue_date=request.issue_date,
            due_date=request.due_date,
            period_start=request.period_start,
            period_end=request.period_end,
            revision=revision,
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            currency=request.currency or settings.INVOICE_CURRENCY,
            status=request.status.value,
            notes=request.notes,
            lines=[
                InvoiceLine(
                    position=position,
                    item_type=item.type.value,
                    description=item.description,
                    amount=item.amount,
                )
                for position, item in enumerate(request.items)
            ],
        )
        db.add(db_invoice)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if not regenerate and period_taken(db, request):
                raise duplicate_period_error(request)
            if request.invoice_no or attempt == INVOICE_NUMBER_ATTEMPTS:
                raise
            logger.warning("Invoice number or revision clash for org %s, retrying (%s)", request.org_id, attempt)
            continue

        db.refresh(db_invoice)
        return db_invoice


def get_invoice_by_id(db: Session, invoice_id: UUID, org_id: Optional[UUID] = None) -> Optional[Invoice]:
    query = (
        db.query(Invoice)
        .options(selectinload(Invoice.lines))
        .filter(Invoice.id == invoice_id, Invoice.is_deleted == False)
    )
    if org_id:
        query = query.filter(Invoice.org_id == org_id)
    return query.first()


def get_invoices_by_lease(db: Session, lease_id: UUID, org_id: Optional[UUID] = None) -> List[Invoice]:
    query = (
        db.query(Invoice)
        .options(selectinload(Invoice.lines))
        .filter(Invoice.lease_id == lease_id, Invoice.is_deleted == False)
    )
    if org_id:
        query = query.filter(Invoice.org_id == org_id)
    return query.order_by(Invoice.issue_date.desc(), Invoice.created_at.desc()).all()


def get_lease_invoices(db: Session, lease_id: UUID, org_id: UUID) -> InvoicesResponse:
    invoices = [invoice_to_out(invoice) for invoice in get_invoices_by_lease(db, lease_id, org_id)]
    return InvoicesResponse(invoices=invoices, total=len(invoices))


# ----------------------------------------------------------------------
# Invoice store used by invoice generation
# ----------------------------------------------------------------------

class InvoiceCrudStore:

    def __init__(self, db: Session):
        self.db = db

    def create_invoice(self, data: InvoiceCreate, regenerate: bool = False) -> InvoiceOut:
        return invoice_to_out(create_invoice(self.db, data, regenerate))

    def find_invoices_by_lease(self, lease_id: UUID, organization_id: UUID) -> List[InvoiceOut]:
        return [invoice_to_out(invoice) for invoice in get_invoices_by_lease(self.db, lease_id, organization_id)]

    def find_invoice_by_id(self, invoice_id: UUID, organization_id: UUID) -> Optional[InvoiceOut]:
        invoice = get_invoice_by_id(self.db, invoice_id, organization_id)
        return invoice_to_out(invoice) if invoice else None
