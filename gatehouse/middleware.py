import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from .logging_utils import log_api_request

REQUEST_ID_HEADER = "X-Request-ID"


async def log_requests_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Time each request, tag it with a request id and log the outcome.

    A caller-supplied ``X-Request-ID`` is reused, otherwise a fresh one is
    generated. The id is echoed back on the response.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    start_time = time.perf_counter()

    response = await call_next(request)

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    response.headers[REQUEST_ID_HEADER] = request_id

    log_api_request(
        request=request,
        response_status=response.status_code,
        process_time_ms=elapsed_ms,
        request_id=request_id,
    )

    return response
