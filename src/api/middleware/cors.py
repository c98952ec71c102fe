"""Unconditional cross-origin header middleware."""

from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class AllowAnyOriginMiddleware(BaseHTTPMiddleware):
    """Set ``Access-Control-Allow-Origin: *`` on every response.

    Starlette's CORSMiddleware only answers requests that carry an Origin
    header; the gallery is public, so the header is sent regardless.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
        return response
