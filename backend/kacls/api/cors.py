"""CORS/Preflight Gate: cross-origin headers for the browser-embedded CSE client.

Invariants:
    - Runs before every route; headers attached to every routed response, errors included
    - Unhandled exceptions rendered as the generic 500 here, inside the gate
    - Allow-Origin echoes the request Origin, else the configured default origin
    - Vary: Origin always set (allow-origin is request dependent)
    - OPTIONS and HEAD answered 204 with an empty body, never routed

Design Decisions:
    - Custom middleware over fastapi CORSMiddleware: the CSE client needs
      origin echo with credentials, verbatim header echo and HEAD short-circuit
"""

from collections.abc import Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from kacls.api.error_handlers import internal_error_response

ALLOWED_METHODS = "GET,POST,OPTIONS,HEAD"
MAX_AGE_SECONDS = 86400
DEFAULT_ALLOWED_HEADERS = (
    "Content-Type, Authorization, X-Requested-With, X-Goog-AuthAssertion, "
    "X-Goog-Api-Client, X-Client-Data"
)
PREFLIGHT_METHODS = frozenset({"OPTIONS", "HEAD"})


def cors_headers(
    request_headers: Mapping[str, str], default_origin: str,
) -> dict[str, str]:
    """Compute the CORS response headers for one request."""
    return {
        "Access-Control-Allow-Origin": request_headers.get("origin") or default_origin,
        "Access-Control-Allow-Credentials": "true",
        "Vary": "Origin",
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": (
            request_headers.get("access-control-request-headers")
            or DEFAULT_ALLOWED_HEADERS
        ),
        "Access-Control-Max-Age": str(MAX_AGE_SECONDS),
    }


class PreflightCORSMiddleware(BaseHTTPMiddleware):
    """Attaches CORS headers and terminates preflight requests."""

    def __init__(self, app: ASGIApp, default_origin: str):
        super().__init__(app)
        self.default_origin = default_origin

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        headers = cors_headers(request.headers, self.default_origin)
        if request.method in PREFLIGHT_METHODS:
            return Response(status_code=204, headers=headers)
        try:
            response = await call_next(request)
        except Exception as e:
            # handlers for bare Exception run outside this middleware
            response = internal_error_response(request, e)
        response.headers.update(headers)
        return response
