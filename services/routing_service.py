"""Per-request orchestration: match, intercept or forward."""

from dataclasses import replace

from fastapi import Request, Response
from fastapi.responses import StreamingResponse

from core.config import Config
from core.protocols import RequestLogger
from core.request_types import RequestContext, decode_json
from core.router import RuleEngine
from core.stubs import ResponseSynthesizer, scim_error
from core.transform import BodyTransformer
from services.upstream import UpstreamClient


class RoutingService:
    """Dispatch a request to the reject, silent, empty or forward path."""

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        upstream: UpstreamClient,
        engine: RuleEngine | None = None,
        synthesizer: ResponseSynthesizer | None = None,
        transformer: BodyTransformer | None = None,
    ) -> None:
        self._logger = logger
        self._upstream = upstream
        self._engine = engine or RuleEngine(config.rules, config.server.base_path)
        self._synthesizer = synthesizer or ResponseSynthesizer()
        self._transformer = transformer or BodyTransformer(config.transforms)

    async def handle(
        self,
        ctx: RequestContext,
        request: Request | None = None,
    ) -> Response | StreamingResponse:
        """Produce the response for one request.

        A matched rule short-circuits: the body is never transformed and the
        upstream is never contacted.
        """
        decision = self._engine.decide(ctx.path, ctx.method)
        rule = decision.rule

        if rule is None:
            if ctx.body is not None:
                ctx = replace(ctx, body=self._transformer.apply_bytes(ctx.body))
            return await self._upstream.forward(ctx, self._logger, request)

        method = ctx.method.upper()
        if rule.action == "reject":
            response = scim_error(403, f"Operation {method} {rule.resource} is not permitted")
        elif rule.action == "silent":
            response = self._synthesizer.silent(method, decode_json(ctx.body_text), decision.path)
        else:
            response = self._synthesizer.empty(method, decode_json(ctx.body_text), decision.path)

        self._logger.log_decision(rule.action, method, ctx.path, response.status_code)
        return response
