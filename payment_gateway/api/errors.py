"""Plain error envelopes for failures raised outside the payment pipeline"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payment_gateway.domain.exceptions import AdminAuthenticationError
from payment_gateway.domain.models import Failure
from payment_gateway.domain.responses import render_plain_error


def plain_error_response(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    """JSONResponse carrying a {httpCode, httpMessage, moreInformation} envelope"""
    failure = Failure.plain(status_code, message, detail=detail)
    return JSONResponse(status_code=status_code, content=render_plain_error(failure))


async def admin_auth_error_handler(request: Request, exc: AdminAuthenticationError) -> JSONResponse:
    logging.warning(
        "Admin authentication failed",
        extra={"request_id": getattr(request.state, "request_id", "unknown"), "path": request.url.path},
    )
    return plain_error_response(401, str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return plain_error_response(400, "Request validation failed", detail=details)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AdminAuthenticationError, admin_auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
