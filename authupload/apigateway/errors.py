from __future__ import annotations
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..database.errors import translate_db_error
from ..errors import ServiceError

log = logging.getLogger("authupload.apigateway.errors")


def error_body(status_code: int, message: Union[str, List[str]], path: str) -> dict:
    return {
        "statusCode": status_code,
        "message": message,
        "error": HTTPStatus(status_code).phrase,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": path,
    }


def _render(request: Request, status_code: int, message: Any, error: Optional[str] = None) -> JSONResponse:
    body = error_body(status_code, message, request.url.path)
    if error:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


def _format_validation(err: dict) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


def install_exception_handlers(app: FastAPI, *, production: bool = False) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            log.error("error.service code=%s path=%s", exc.code, request.url.path, exc_info=exc)
        else:
            log.warning("error.service code=%s status=%s path=%s", exc.code, exc.status_code, request.url.path)
        return _render(request, exc.status_code, exc.message, exc.error)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        messages = [_format_validation(e) for e in exc.errors()]
        log.warning("error.validation path=%s errors=%s", request.url.path, messages)
        return _render(request, 400, messages)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        response = _render(request, exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(SQLAlchemyError)
    async def _db_error(request: Request, exc: SQLAlchemyError):
        log.error("error.database path=%s", request.url.path, exc_info=exc)
        mapped = translate_db_error(exc)
        return _render(request, mapped.status_code, mapped.message, mapped.error)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log.error("error.unhandled path=%s", request.url.path, exc_info=exc)
        message = "Internal server error" if production else (str(exc) or "Internal server error")
        return _render(request, 500, message)
