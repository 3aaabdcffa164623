"""Resource extraction from SCIM request paths.

Paths look like ``/Users`` (collection) or ``/Users/abc-123`` (singleton),
optionally behind a literal base path such as ``/scim/v2``.
"""

import re
from dataclasses import dataclass

_RESOURCE_RE = re.compile(r"^(/[^/]+)")


@dataclass(frozen=True)
class ParsedPath:
    """Resource and shape of a request path."""

    resource: str | None
    is_collection: bool


def _relative(path: str, base_path: str | None) -> str | None:
    if not base_path:
        return path
    if not path.startswith(base_path):
        return None
    return path[len(base_path):]


def strip_base_path(path: str, base_path: str | None) -> str:
    """Remove the base path prefix if present, otherwise return path as-is."""
    relative = _relative(path, base_path)
    return path if relative is None else relative


def extract_resource(path: str, base_path: str | None = None) -> str | None:
    """Return the resource segment, e.g. "/Users/abc-123" -> "/Users"."""
    relative = _relative(path, base_path)
    if relative is None:
        return None
    match = _RESOURCE_RE.match(relative)
    return match.group(1) if match else None


def is_collection(path: str, base_path: str | None = None) -> bool:
    """True for "/Users", False for "/Users/abc"."""
    segments = [s for s in strip_base_path(path, base_path).split("/") if s]
    return len(segments) <= 1


def parse_path(path: str, base_path: str | None = None) -> ParsedPath:
    return ParsedPath(
        resource=extract_resource(path, base_path),
        is_collection=is_collection(path, base_path),
    )
