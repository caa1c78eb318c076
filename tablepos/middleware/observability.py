from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from tablepos.core.request_context import clear_request_context, set_request_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Staff tablets and customer phones identify themselves so log lines can be
# grouped per device
DEVICE_ID_HEADER = "X-Device-ID"


def _path_ids(request: Request) -> dict:
    params = request.path_params
    return {key: params[key] for key in ("order_id", "table_id") if params.get(key)}


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        device_id = request.headers.get(DEVICE_ID_HEADER)
        request.state.request_id = request_id
        set_request_context(request_id=request_id, device_id=device_id)

        response = None
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            status_code = response.status_code if response is not None else 500
            log = logger.warning if status_code >= 500 else logger.info
            log(
                "%s %s -> %s",
                request.method,
                request.url.path,
                status_code,
                extra={
                    "method": request.method,
                    "endpoint": request.url.path,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    **_path_ids(request),
                },
            )
            clear_request_context()
