import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from shared.helpers.json_response_helper import failure_payload, is_failure_payload
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        if is_failure_payload(exc.detail):
            return JSONResponse(content=exc.detail, status_code=exc.status_code or 400)

        return JSONResponse(
            content=failure_payload(str(exc.detail)),
            status_code=exc.status_code or 400,
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in error.get("loc", [])), "message": error.get("msg")}
            for error in exc.errors()
        ]
        return JSONResponse(
            content=failure_payload("Invalid request", AppStatusCode.INVALID_INPUT, data=errors),
            status_code=422
        )

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s", request.url.path)
        return JSONResponse(content=failure_payload("Unexpected error"), status_code=500)
