"""
Request context middleware for the holdings endpoints.

Binds a request id into the structlog context and reports request duration.
"""

import time
import uuid
from collections.abc import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

import structlog

logger = structlog.get_logger(__name__)


class RequestContextMiddleware:
    """
    Tags every request with an id and times it.

    The id comes from an upstream ``X-Request-ID`` header when present and is
    otherwise generated. It is stored as ``request.id``, bound into structlog
    contextvars for every log line of the request, and echoed back on the
    response. ``X-Request-Duration`` is always set; requests slower than
    ``settings.SLOW_REQUEST_THRESHOLD`` seconds are logged as warnings.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response
        self.slow_threshold = float(getattr(settings, "SLOW_REQUEST_THRESHOLD", 1.0))

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.id = request_id  # type: ignore

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        try:
            response = self.get_response(request)
            duration = time.perf_counter() - start
            if duration > self.slow_threshold:
                logger.warning(
                    "slow_request_detected",
                    duration=round(duration, 3),
                    path=request.path,
                    method=request.method,
                    threshold=self.slow_threshold,
                )
        finally:
            structlog.contextvars.clear_contextvars()

        response["X-Request-ID"] = request_id
        response["X-Request-Duration"] = f"{duration:.3f}s"
        return response
