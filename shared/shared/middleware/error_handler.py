import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_envelope(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {"code": code, "message": message},
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


async def domain_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Render an HTTPException that carries a machine ``code`` into the envelope.

    Services register this for their own exception base class so every business
    outcome keeps a distinct status and code on the wire.
    """
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_envelope(
        request,
        exc.status_code,
        getattr(exc, "code", "http_error"),
        message,
        headers=getattr(exc, "headers", None),
    )


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except StarletteHTTPException as exc:
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return error_envelope(
            request,
            exc.status_code,
            getattr(exc, "code", "http_error"),
            message,
        )
    except Exception:
        logger.exception("Unhandled exception")
        return error_envelope(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_error",
            "An unexpected error occurred",
        )
