from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.helpers.json_response_helper import failure_payload
from shared.utils.app_status_code import AppStatusCode
from .crud.billing.billing_errors import BillingError, BillingErrorKind

# kind -> (http status, app status code)
BILLING_ERROR_STATUS = {
    BillingErrorKind.validation: (400, AppStatusCode.INVALID_INPUT),
    BillingErrorKind.not_found: (404, AppStatusCode.RECORD_NOT_FOUND),
    BillingErrorKind.cross_org: (403, AppStatusCode.UNAUTHORIZED_ACTION),
    BillingErrorKind.inactive_lease: (409, AppStatusCode.LEASE_NOT_ACTIVE),
    BillingErrorKind.duplicate_invoice: (409, AppStatusCode.INVOICE_DUPLICATE_PERIOD),
    BillingErrorKind.lease_not_active_for_period: (422, AppStatusCode.LEASE_OUTSIDE_PERIOD),
}


def setup_billing_exception_handlers(app: FastAPI):

    @app.exception_handler(BillingError)
    async def billing_exception_handler(request: Request, exc: BillingError):
        http_status, status_code = BILLING_ERROR_STATUS.get(
            exc.kind, (400, AppStatusCode.OPERATION_FAILED))
        return JSONResponse(
            content=failure_payload(exc.message, status_code, data={"kind": exc.kind.value}),
            status_code=http_status
        )
