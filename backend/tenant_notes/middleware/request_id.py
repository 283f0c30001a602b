"""
Tenant Notes Backend — Request ID Middleware
============================================

What:  Tags each request with a correlation ID that appears in every log
       line, in error bodies (`request_id`) and in the X-Request-ID header.
How:   A client-supplied X-Request-ID is reused only if it is a short token
       of letters, digits, '.', '_' or '-'; anything else (log-injection
       attempts, oversized values) is replaced by a fresh ID.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(candidate: Optional[str]) -> str:
    """The client's ID if it is safe to log and echo, otherwise a new one."""
    if candidate and _CLIENT_ID_PATTERN.fullmatch(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
