from datetime import date
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, Field
from typing import List, Optional

from shared.utils.enums import InvoiceItemType, InvoiceStatus
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class InvoiceItem(BaseModel):
    description: str
    amount: Decimal
    type: InvoiceItemType

    model_config = {"from_attributes": True}


class InvoiceTotals(BaseModel):
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class InvoiceCreate(BaseModel):
    org_id: UUID
    lease_id: UUID
    tenant_id: UUID
    space_id: UUID
    invoice_no: Optional[str] = None  # generated when missing
    issue_date: date
    due_date: date
    period_start: date
    period_end: date
    items: List[InvoiceItem]
    tax: Decimal = Decimal("0")
    status: InvoiceStatus = InvoiceStatus.draft
    currency: Optional[str] = None
    notes: Optional[str] = None


class InvoiceOut(BaseModel):
    id: UUID
    org_id: UUID
    lease_id: UUID
    tenant_id: UUID
    space_id: UUID
    invoice_no: str
    issue_date: date
    due_date: date
    period_start: date
    period_end: date
    revision: int = 0
    items: List[InvoiceItem] = Field(default_factory=list)
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    currency: Optional[str] = None
    status: str
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class InvoicesResponse(BaseModel):
    invoices: List[InvoiceOut]
    total: int

    model_config = {"from_attributes": True}


class InvoiceGenerateRequest(EmptyStringModel):
    lease_id: UUID
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    # ad-hoc items skip proration and the duplicate-period check
    items: Optional[List[InvoiceItem]] = None
