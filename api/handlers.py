"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import StreamingResponse

from core.config import Config
from core.request_types import RequestContext, declares_body
from core.stubs import scim_error
from ui.log_utils import write_incoming_log

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB


async def _read_context(request: Request) -> RequestContext | Response:
    """Read the body once (only if declared) and build the request context."""
    headers = dict(request.headers)
    body: bytes | None = None
    if declares_body(headers):
        body = await request.body()
        if len(body) > MAX_BODY_SIZE:
            return scim_error(413, "Request body too large")

    # Keep percent-encoding intact so %2F or %3F reach upstream unchanged
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path

    return RequestContext(
        method=request.method,
        path=path,
        query=request.url.query,
        headers=headers,
        body=body,
    )


async def handle_scim(
    request: Request,
    config: Config,
) -> Response | StreamingResponse:
    """Handle every SCIM request: intercept by rule or forward upstream."""
    result = await _read_context(request)
    if isinstance(result, Response):
        return result
    ctx = result

    if config.server.debug:
        write_incoming_log(ctx.method, ctx.path, ctx.headers, ctx.body_text)

    routing_service = request.app.state.routing_service
    return await routing_service.handle(ctx, request)
