"""Request ID middleware."""

import re
from contextvars import ContextVar
from time import perf_counter

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from quackchat.core.logging import get_logger
from quackchat.core.security import generate_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")

request_id_context: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: str | None) -> str:
    """Use the client's request ID when it is well-formed, else generate one."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return generate_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with an ID.

    The ID is echoed in the ``X-Request-ID`` response header, stored on
    ``request.state`` and picked up by the logging filter.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        req_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = req_id
        token = request_id_context.set(req_id)

        start = perf_counter()
        logger.debug(
            "Request started",
            extra={"method": request.method, "path": request.url.path},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"method": request.method, "path": request.url.path, "error": str(exc)},
                exc_info=True,
            )
            raise
        finally:
            request_id_context.reset(token)

        response.headers[REQUEST_ID_HEADER] = req_id
        logger.info(
            "Request completed",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((perf_counter() - start) * 1000, 2),
            },
        )
        return response


def get_request_id() -> str:
    """
    Get the current request ID from context.

    Returns:
        Current request ID or empty string if not in request context
    """
    return request_id_context.get()
