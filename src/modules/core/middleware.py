import uuid
from contextvars import ContextVar
from typing import Callable, Optional

import structlog
from django.core.exceptions import BadRequest, PermissionDenied, SuspiciousOperation
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger()


class CorrelationIdMiddleware:
    """Middleware that extracts or generates a correlation ID for each request.

    Reads X-Request-ID header from the incoming request. If absent,
    generates a new UUID4. The ID is stored in a ContextVar so structlog
    processors can inject it into every log line, and is returned to the
    client via the X-Request-ID response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        logger.info(
            "request_started",
            method=request.method,
            path=request.get_full_path(),
        )

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.get_full_path(),
            status_code=response.status_code,
        )

        response["X-Request-ID"] = cid
        return response


class ErrorHandlingMiddleware:
    """Last-resort handler for exceptions that escape a view.

    Views translate domain exceptions themselves; anything reaching this
    middleware is unexpected, except for Django's own HTTP exceptions
    (404, 403, 400) which are left to the default handler.  The rest is
    logged with its traceback and the client receives a JSON 500 whose
    ``detail`` carries the message of the underlying cause when there is one.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_exception(
        self, request: HttpRequest, exception: Exception
    ) -> Optional[JsonResponse]:
        if isinstance(
            exception, (Http404, PermissionDenied, BadRequest, SuspiciousOperation)
        ):
            return None

        cause = exception.__cause__ or exception
        logger.exception(
            "request_failed",
            method=request.method,
            path=request.get_full_path(),
            error_type=type(exception).__name__,
        )
        return JsonResponse(
            {
                "status_code": 500,
                "message": "An unexpected error occurred.",
                "detail": str(cause),
            },
            status=500,
        )
