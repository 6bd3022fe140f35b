"""HTTP Middleware - CORS policy, trace-id propagation, JSON content type.

Invariants:
    - Order (outermost first): CORS -> trace id -> content type -> routes
    - OPTIONS short-circuits in CORS with 200 and an empty body; nothing inner runs
    - Every non-OPTIONS response carries X-Trace-Id, echoing the client's value verbatim
    - Unexpected exceptions become an empty 500 inside the trace layer, logged with the trace id
    - Every response passing the content-type layer declares application/json

Design Decisions:
    - Starlette BaseHTTPMiddleware: headers are set on the response after call_next
    - CORS is hand-rolled: Starlette's CORSMiddleware only answers real preflights
      (Origin + Access-Control-Request-Method) and only decorates cross-origin requests
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from user_api.core.request_context import (
    TRACE_ID_HEADER, RequestContext, resolve_trace_id,
)
from user_api.infrastructure.observability import ServiceLogger


class CORSPolicyMiddleware(BaseHTTPMiddleware):
    """Attach permissive CORS headers to every response; answer OPTIONS directly."""

    def __init__(
        self,
        app: ASGIApp,
        allow_origin: str,
        allow_methods: list[str],
        allow_headers: list[str],
    ):
        super().__init__(app)
        self._headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ", ".join(allow_methods),
            "Access-Control-Allow-Headers": ", ".join(allow_headers),
        }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(self._headers)
        return response


class TraceIdMiddleware(BaseHTTPMiddleware):
    """Assign the request's trace id and bind it into a RequestContext."""

    def __init__(self, app: ASGIApp, logger: ServiceLogger):
        super().__init__(app)
        self._logger = logger

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        trace_id = resolve_trace_id(request.headers.get(TRACE_ID_HEADER))
        context = RequestContext(
            trace_id=trace_id, logger=self._logger.bind(trace_id=trace_id),
        )
        request.state.context = context
        try:
            response = await call_next(request)
        except Exception as exc:
            context.logger.error(
                f"Unhandled exception on {request.url.path}: {exc}",
                exc_info=True,
                extra={"path": request.url.path, "method": request.method},
            )
            # never reached the content-type layer
            response = Response(
                status_code=500, headers={"Content-Type": "application/json"},
            )
        response.headers[TRACE_ID_HEADER] = trace_id
        return response


class JSONContentTypeMiddleware(BaseHTTPMiddleware):
    """Force Content-Type: application/json on every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers["Content-Type"] = "application/json"
        return response
