from typing import Any, Optional

from fastapi import HTTPException

from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode


def failure_payload(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, data: Optional[Any] = None) -> dict:
    """Envelope body for a failed request, ready for a JSONResponse."""
    return JsonOutResult(
        data=data,
        status="Failure",
        status_code=status_code,
        message=message
    ).model_dump(mode="json")


def is_failure_payload(detail: Any) -> bool:
    return isinstance(detail, dict) and detail.get("status") == "Failure" and "status_code" in detail


def success_response(data: Any, message: str = "Success", status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY):
    return JsonOutResult(
        data=data,
        status="Success",
        status_code=status_code,
        message=message
    )


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400):
    # exception_handler passes the envelope through untouched
    raise HTTPException(
        status_code=http_status,
        detail=failure_payload(message, status_code)
    )
