"""HTTP proxying to the upstream SCIM directory."""

import httpx
from fastapi import Request, Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.config import UpstreamSettings
from core.headers import HeaderBuilder
from core.paths import strip_base_path
from core.protocols import RequestLogger
from core.request_types import RequestContext, declares_body
from core.stubs import scim_error

ROUTE_NAME = "upstream"


class UpstreamClient:
    """Relay requests upstream and stream the response back untouched."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: UpstreamSettings,
        base_path: str | None = None,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._base_path = base_path
        self._headers = header_builder or HeaderBuilder(settings.bearer_token)

    def upstream_url(self, path: str, query: str = "") -> str:
        """Upstream base URL + path without the base path + query string."""
        url = self._settings.url.rstrip("/") + strip_base_path(path, self._base_path)
        if query:
            url += f"?{query}"
        return url

    async def forward(
        self,
        ctx: RequestContext,
        logger: RequestLogger,
        request: Request | None = None,
    ) -> Response | StreamingResponse:
        """Forward the request; transport failures become a SCIM 502.

        The captured body is sent when present. Otherwise the inbound stream is
        relayed if the request declared a body.
        """
        if ctx.body is not None:
            content = ctx.body
        elif request is not None and declares_body(ctx.headers):
            content = request.stream()
        else:
            content = None

        req = self._client.build_request(
            ctx.method,
            self.upstream_url(ctx.path, ctx.query),
            headers=self._headers.build_upstream_headers(ctx.headers),
            content=content,
        )

        try:
            response = await self._client.send(req, stream=True)
        except httpx.RequestError as e:
            message = str(e) or type(e).__name__
            logger.log_error(ROUTE_NAME, 502, message)
            return scim_error(502, f"Upstream error: {message}")

        logger.log_proxy(ctx.method, ctx.path, response.status_code)

        relayed = StreamingResponse(
            response.aiter_raw(),
            status_code=response.status_code,
            background=BackgroundTask(self._cleanup_streaming, response),
        )
        relayed.raw_headers = [
            (key.encode("latin-1"), value.encode("latin-1"))
            for key, value in self._headers.build_response_headers(response.headers.multi_items())
        ]
        return relayed

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()
