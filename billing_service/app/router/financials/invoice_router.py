from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_facility_db as get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import error_response, success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.billing.billing_interfaces import NotificationDispatcher
from ...crud.billing.billing_services import build_invoice_generation_service, build_scheduled_invoice_generator
from ...crud.billing.invoice_generation import InvoiceGenerationService
from ...crud.financials import invoices_crud as crud
from ...crud.financials.invoice_email_service import InvoiceEmailService
from ...schemas.financials.invoice_generation_schemas import (
    BatchGenerateRequest, GenerationResult, MonthlyInvoiceGenerationOptions, OrgGenerationSummary,
)
from ...schemas.financials.invoices_schemas import InvoiceGenerateRequest, InvoiceOut, InvoicesResponse

router = APIRouter(
    prefix="/api/invoices",
    tags=["invoices"],
    dependencies=[Depends(validate_current_token)]
)


def get_generation_service(db: Session = Depends(get_db)) -> InvoiceGenerationService:
    return build_invoice_generation_service(db)


def get_notification_dispatcher(db: Session = Depends(get_db)) -> NotificationDispatcher:
    return InvoiceEmailService(db)


#-----------------------------------------------------------------
@router.post("/generate", response_model=InvoiceOut)
def generate_invoice(
    request: InvoiceGenerateRequest,
    service: InvoiceGenerationService = Depends(get_generation_service),
    current_user: UserToken = Depends(validate_current_token)):
    return service.generate_invoice_for_lease(
        lease_id=request.lease_id,
        organization_id=current_user.org_id,
        period_start=request.period_start,
        period_end=request.period_end,
        custom_items=request.items,
    )


@router.post("/generate/batch", response_model=List[GenerationResult])
def generate_invoices_for_leases(
    request: BatchGenerateRequest,
    service: InvoiceGenerationService = Depends(get_generation_service),
    current_user: UserToken = Depends(validate_current_token)):
    return service.generate_invoices_for_leases(
        organization_id=current_user.org_id,
        period_start=request.period_start,
        period_end=request.period_end,
        force_regenerate=request.force_regenerate,
    )


@router.post("/generate/monthly", response_model=JsonOutResult[List[OrgGenerationSummary]])
def generate_monthly_invoices(
    options: MonthlyInvoiceGenerationOptions,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: UserToken = Depends(validate_current_token)):
    # callers only ever run their own organization
    options = options.model_copy(update={"organization_id": current_user.org_id})
    summaries = build_scheduled_invoice_generator(db, dispatcher).generate_monthly_invoices(options)
    return success_response(
        data=summaries,
        message="Monthly invoice generation completed",
        status_code=AppStatusCode.INVOICE_GENERATED
    )


@router.get("/lease/{lease_id}", response_model=InvoicesResponse)
def get_lease_invoices(
    lease_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)):
    return crud.get_lease_invoices(db, lease_id, current_user.org_id)


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)):
    invoice = crud.get_invoice_by_id(db, invoice_id, current_user.org_id)
    if not invoice:
        return error_response(
            message="Invoice not found",
            status_code=AppStatusCode.RECORD_NOT_FOUND,
            http_status=404
        )
    return crud.invoice_to_out(invoice)
