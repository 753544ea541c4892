from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.core import get_logger

logger = get_logger(__name__)

class ApiError(HTTPException):
    """HTTPException rendered as the storefront's ``{ok: false, ...}`` body."""

    def __init__(self, status_code: int, error: Optional[str] = None, **fields: Any):
        body: Dict[str, Any] = {"ok": False}
        if error is not None:
            body["error"] = error
        body.update(fields)
        self.body = body
        super().__init__(status_code=status_code, detail=error)

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.body, headers=exc.headers)

async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": str(exc.detail)},
        headers=exc.headers,
    )

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, "error": "Invalid request body"})

async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc) or "Internal server error"})

def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
