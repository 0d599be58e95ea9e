"""Request correlation ID middleware."""

import re

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from filegen.core.logging import generate_request_id, request_id_ctx

REQUEST_ID_HEADER = "X-Request-ID"

# Client supplied IDs are echoed into logs and headers
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to each request's logs and response.

    A well-formed ``X-Request-ID`` from the client is reused; otherwise a
    new ID is generated.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = incoming if _VALID_REQUEST_ID.match(incoming) else generate_request_id()

        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
