import time
from functools import wraps

import structlog

from clinic_records.adapters.observability.metrics import HTTP_REQUEST_DURATION

logger = structlog.get_logger(__name__)


def track_http(view_name):
    """
    Wraps a ViewSet action: logs latency and status, feeds the
    request-duration histogram. Exceptions are re-raised untouched so the
    DRF exception handler still renders them.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(self, request, *args, **kwargs):
            start = time.perf_counter()
            status = 500
            try:
                resp = fn(self, request, *args, **kwargs)
                status = resp.status_code
                return resp
            except Exception as exc:
                status = getattr(exc, "status_code", "error")
                raise
            finally:
                elapsed = time.perf_counter() - start
                HTTP_REQUEST_DURATION.labels(view_name, request.method, str(status)).observe(elapsed)
                logger.info(
                    "http.handled",
                    view=view_name,
                    status=status,
                    duration_ms=round(elapsed * 1000, 2),
                )
        return wrapper
    return decorator
