"""Request correlation for structured logs."""

import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware:
    """Binds a correlation id to every log line emitted for a request.

    The caller's ``X-Request-ID`` is reused when present, otherwise a UUID4
    is generated.  The id is also exposed as ``request.correlation_id`` and
    returned in the response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.path,
        )

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - started) * 1000, 2)

        log = logger.warning if response.status_code >= 500 else logger.info
        log("http.request", status_code=response.status_code, duration_ms=duration_ms)

        response[REQUEST_ID_HEADER] = correlation_id
        return response
