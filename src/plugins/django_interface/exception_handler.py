import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from clinic_records.core.domain.events.exceptions import (
    NotFoundError,
    UnknownEntityError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnknownEntityError, status.HTTP_404_NOT_FOUND),
)


def domain_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER: renders domain errors as
    {"detail", "code", "errors"} and leaves everything else to DRF.
    """
    for exc_type, http_status in _STATUS:
        if isinstance(exc, exc_type):
            view = context.get("view")
            logger.warning(
                "http.domain_error",
                view=type(view).__name__ if view else None,
                code=exc.code,
                detail=exc.message,
                status=http_status,
            )
            body = {"detail": exc.message, "code": exc.code}
            if isinstance(exc, ValidationError):
                body["errors"] = exc.errors
            return Response(body, status=http_status)

    response = drf_exception_handler(exc, context)
    if response is not None and response.status_code >= 400:
        logger.warning("http.api_error", status=response.status_code, detail=str(getattr(exc, "detail", exc)))
    return response
