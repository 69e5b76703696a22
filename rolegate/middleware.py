"""
Transaction ID middleware.

Takes the transaction ID from X-Transaction-ID, falling back to
X-Correlation-ID, or generates one. The ID is stored in the request context
for logging and token issuance, echoed in the X-Transaction-ID response header
(error responses included), and cleared once the response is produced.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from rolegate.api.errors import unexpected_error_response
from rolegate.core.transaction import (
    MAX_TRANSACTION_ID_LENGTH,
    clear_transaction_id,
    generate_transaction_id,
    set_transaction_id,
)

TRANSACTION_ID_HEADER = "X-Transaction-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"

logger = logging.getLogger(__name__)


def resolve_transaction_id(request: Request) -> tuple[str, bool]:
    """
    Return (transaction_id, provided_by_client).

    Blank header values count as absent. Values longer than the stored column
    width are ignored, and the next header or a generated ID is used instead.
    """
    for header in (TRANSACTION_ID_HEADER, CORRELATION_ID_HEADER):
        value = request.headers.get(header)
        if not value or not value.strip():
            continue
        if len(value) > MAX_TRANSACTION_ID_LENGTH:
            logger.warning(
                "Ignoring %s header longer than %s characters",
                header,
                MAX_TRANSACTION_ID_LENGTH,
            )
            continue
        return value, True
    return generate_transaction_id(), False


class TransactionIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        transaction_id, provided = resolve_transaction_id(request)
        set_transaction_id(transaction_id)
        request.state.transaction_id = transaction_id
        if provided:
            logger.debug("Using provided transaction ID")
        else:
            logger.debug("Generated new transaction ID")

        start_time = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = unexpected_error_response(request, exc)
            response.headers[TRANSACTION_ID_HEADER] = transaction_id
            logger.info(
                "%s %s completed with status %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "status_code": response.status_code,
                    "latency_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
            )
            return response
        finally:
            clear_transaction_id()
