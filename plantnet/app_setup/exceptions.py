"""
Gestionnaires d’exceptions: enveloppe JSON unique {"message", "error", "request_id"}.
- AppError (plantnet.errors): statut et code portés par l'exception.
- RequestValidationError (Pydantic): rendue comme validation_error (400).
- HTTPException (429 rate limit, 404/405 de routage): statut conservé.
- Toute autre exception: 500 internal_error, journalisée avec la trace.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from plantnet.errors import AppError, ValidationError
from .log_config import request_id_var
from .middlewares import REQUEST_ID_HEADER

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> str:
    rid = getattr(request.state, "request_id", None)
    return rid or request.headers.get(REQUEST_ID_HEADER) or request_id_var.get()


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    rid = get_request_id(request)
    content: Dict[str, Any] = {"message": message, "error": code, "request_id": rid}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers={REQUEST_ID_HEADER: rid})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
        return error_response(request, exc.status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]
        return error_response(request, ValidationError.status_code, ValidationError.code, ValidationError.message, details)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(request, exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return error_response(request, 500, AppError.code, AppError.message)
