"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_scim
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger, StubSource
from core.router import RuleEngine
from core.stubs import ResponseSynthesizer
from core.transform import BodyTransformer
from services.routing_service import RoutingService
from services.upstream import UpstreamClient

PROXIED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_app(
    config: Config,
    logger: RequestLogger,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    stub_source: StubSource | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        # Raw upstream bytes are relayed, so never ask for an encoding the caller didn't
        client = httpx.AsyncClient(
            headers={"Accept-Encoding": "identity"},
            timeout=config.upstream.timeout,
            limits=limits,
            transport=transport,
        )
        upstream = UpstreamClient(
            client,
            config.upstream,
            base_path=config.server.base_path,
            header_builder=HeaderBuilder(config.upstream.bearer_token),
        )
        app.state.routing_service = RoutingService(
            config=config,
            logger=logger,
            upstream=upstream,
            engine=RuleEngine(config.rules, config.server.base_path),
            synthesizer=ResponseSynthesizer(stub_source),
            transformer=BodyTransformer(config.transforms),
        )
        try:
            yield
        finally:
            await client.aclose()

    # Every path belongs to the proxied SCIM API, so no docs routes
    app = FastAPI(
        title="SCIM Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route("/{path:path}", methods=PROXIED_METHODS)
    async def proxy_scim(request: Request):
        return await handle_scim(request, config)

    return app
