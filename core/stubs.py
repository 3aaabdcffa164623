"""Synthesized SCIM responses for intercepted requests.

Two families exist:

* ``silent`` pretends the operation succeeded without contacting upstream.
* ``empty`` pretends the resource type holds no data; writes still succeed
  but a GET for a single member returns 404.
"""

import json
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from fastapi import Response

from core.paths import ParsedPath
from core.protocols import StubSource
from core.request_types import DecodedBody

SCIM_JSON = "application/scim+json"
ERROR_SCHEMA = "urn:ietf:params:scim:api:messages:2.0:Error"
LIST_SCHEMA = "urn:ietf:params:scim:api:messages:2.0:ListResponse"
USER_SCHEMA = "urn:ietf:params:scim:schemas:core:2.0:User"

WRITE_METHODS = ("POST", "PUT", "PATCH")


class SystemStubSource:
    """Wall clock and random UUIDs."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def new_id(self) -> str:
        return str(uuid4())


def scim_json(payload: dict[str, Any], status_code: int = 200) -> Response:
    """Serialize payload compactly as application/scim+json."""
    return Response(
        content=json.dumps(payload, separators=(",", ":"), ensure_ascii=False),
        status_code=status_code,
        media_type=SCIM_JSON,
    )


def scim_error(status: int, detail: str) -> Response:
    """Build an RFC 7644 SCIM error response."""
    return scim_json(
        {"schemas": [ERROR_SCHEMA], "status": str(status), "detail": detail},
        status_code=status,
    )


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _empty_list() -> Response:
    return scim_json({"schemas": [LIST_SCHEMA], "totalResults": 0, "Resources": []})


class ResponseSynthesizer:
    """Build stub responses for the silent and empty rule actions."""

    def __init__(self, source: StubSource | None = None) -> None:
        self._source = source or SystemStubSource()

    def silent(self, method: str, body: DecodedBody | None, path: ParsedPath) -> Response:
        """Plausible success response for a voided request."""
        upper = method.upper()

        if upper == "DELETE":
            return Response(status_code=204)

        if upper == "POST":
            timestamp = format_timestamp(self._source.now())
            meta = {
                "resourceType": "User",
                "created": timestamp,
                "lastModified": timestamp,
                "location": "",
            }
            return scim_json(self._echo(body, meta), status_code=201)

        if upper in ("PUT", "PATCH"):
            meta = {
                "resourceType": "User",
                "lastModified": format_timestamp(self._source.now()),
            }
            return scim_json(self._echo(body, meta))

        # GET and anything else
        if path.is_collection:
            return _empty_list()

        # Claims existence so callers that only check for 200 carry on
        return scim_json({"schemas": [USER_SCHEMA], "id": self._source.new_id()})

    def empty(self, method: str, body: DecodedBody | None, path: ParsedPath) -> Response:
        """Response implying the resource type has no data."""
        upper = method.upper()

        if upper == "DELETE":
            return Response(status_code=204)

        if upper in WRITE_METHODS:
            return self.silent(method, body, path)

        if path.is_collection:
            return _empty_list()

        return scim_error(404, "Resource not found")

    def _echo(self, body: DecodedBody | None, meta: dict[str, Any]) -> dict[str, Any]:
        """Merge caller fields over a fresh stub; meta always wins."""
        fields = body.as_object() if body is not None else {}
        return {
            "schemas": [USER_SCHEMA],
            "id": self._source.new_id(),
            **fields,
            "meta": meta,
        }
