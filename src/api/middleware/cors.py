"""Single-origin CORS policy for the admin panel.

The allow-origin header echoes the request Origin only when it exactly
matches the configured admin origin; any other origin gets an empty value.
Methods and headers are fixed, never reflected from the request. Preflight
(OPTIONS on any path) is answered here, before routing.
"""

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOWED_METHODS = "GET, POST, PATCH, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def cors_headers(origin: str, admin_origin: str) -> dict[str, str]:
    allowed_origin = admin_origin if origin == admin_origin else ''
    return {
        'Access-Control-Allow-Origin': allowed_origin,
        'Access-Control-Allow-Methods': ALLOWED_METHODS,
        'Access-Control-Allow-Headers': ALLOWED_HEADERS,
    }


class AdminOriginCORSMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, admin_origin: Callable[[], str]):
        super().__init__(app)
        self._admin_origin = admin_origin

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        headers = cors_headers(request.headers.get('origin', ''), self._admin_origin())

        if request.method == 'OPTIONS':
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
