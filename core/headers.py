"""Header construction for upstream requests and relayed responses."""

from collections.abc import Iterable, Mapping

HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)

# The body is sent buffered, so framing headers are recomputed by the client
REQUEST_STRIP = HOP_BY_HOP | {"host", "content-length"}


class HeaderBuilder:
    """Build outbound and relayed header sets."""

    def __init__(self, bearer_token: str | None = None) -> None:
        self.bearer_token = bearer_token

    def build_upstream_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Copy inbound headers, dropping connection-scoped ones and setting auth."""
        upstream: dict[str, str] = {}
        for key, value in headers.items():
            key_lower = key.lower()
            if key_lower in REQUEST_STRIP:
                continue
            if self.bearer_token and key_lower == "authorization":
                continue
            upstream[key] = str(value)

        if self.bearer_token:
            upstream["Authorization"] = f"Bearer {self.bearer_token}"
        return upstream

    def build_response_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Relay upstream headers verbatim except hop-by-hop ones."""
        return [(key, value) for key, value in headers if key.lower() not in HOP_BY_HOP]
