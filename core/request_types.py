"""Shared request data types."""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RequestContext:
    """Per-request data; the body is read at most once and reused."""

    method: str
    path: str
    query: str
    headers: dict[str, str]
    body: bytes | None = None

    @property
    def body_text(self) -> str | None:
        if self.body is None:
            return None
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class DecodedBody:
    """A successfully decoded JSON document."""

    value: Any

    def as_object(self) -> dict[str, Any]:
        return self.value if isinstance(self.value, dict) else {}


def decode_json(text: str | None) -> DecodedBody | None:
    """Best-effort JSON decode; None means absent or not valid JSON."""
    if not text:
        return None
    try:
        return DecodedBody(json.loads(text))
    except ValueError:
        return None


def declares_body(headers: Mapping[str, str]) -> bool:
    """Whether the request announces a body (avoids reading bodyless requests)."""
    if "transfer-encoding" in headers:
        return True
    length = headers.get("content-length", "")
    return length.isdigit() and int(length) > 0
