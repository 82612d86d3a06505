from datetime import date
from uuid import UUID
from pydantic import BaseModel, Field
from typing import List, Optional

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class GenerationResult(BaseModel):
    lease_id: UUID
    invoice_id: Optional[UUID] = None
    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None


class GenerationSummary(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0


class OrgGenerationSummary(BaseModel):
    organization_id: UUID
    organization_name: Optional[str] = None
    period_start: date
    period_end: date
    results: List[GenerationResult] = Field(default_factory=list)
    summary: GenerationSummary = Field(default_factory=GenerationSummary)
    sent_count: int = 0
    sent_errors: int = 0
    error: Optional[str] = None


class OrganizationRef(BaseModel):
    id: UUID
    name: Optional[str] = None

    model_config = {"from_attributes": True}


class BatchGenerateRequest(EmptyStringModel):
    period_start: date
    period_end: date
    force_regenerate: bool = False


class MonthlyInvoiceGenerationOptions(EmptyStringModel):
    organization_id: Optional[UUID] = None  # all active organizations when missing
    period_start: Optional[date] = None  # defaults to the current month
    period_end: Optional[date] = None
    auto_send: bool = True
    force_regenerate: bool = False


class InvoiceSendRequest(BaseModel):
    invoice_id: UUID
    organization_id: UUID
    tenant_id: UUID
    channels: List[str]


class SendResult(BaseModel):
    success: bool
    errors: List[str] = Field(default_factory=list)
