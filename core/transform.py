"""Request body transformations for upstream compatibility."""

import json

from core.config import Config, TransformSettings
from core.request_types import decode_json


class BodyTransformer:
    """Apply configured, idempotent mutations to forwarded bodies."""

    def __init__(self, settings: TransformSettings | None = None) -> None:
        self.settings = settings or TransformSettings()

    @property
    def enabled(self) -> bool:
        return bool(self.settings.inject_email_type)

    def apply(self, body_text: str) -> str:
        """Return the transformed body, or body_text itself when nothing changes."""
        email_type = self.settings.inject_email_type
        if not email_type:
            return body_text

        decoded = decode_json(body_text)
        if decoded is None or not isinstance(decoded.value, dict):
            return body_text
        parsed = decoded.value

        emails = parsed.get("emails")
        if not isinstance(emails, list) or not emails:
            return body_text

        # Some directories (Passbolt among them) require emails[type eq "work"]
        first = emails[0]
        if isinstance(first, dict) and not first.get("type"):
            first["type"] = email_type
            return json.dumps(parsed, separators=(",", ":"), ensure_ascii=False)

        return body_text

    def apply_bytes(self, raw: bytes) -> bytes:
        """Byte-level wrapper; returns raw unchanged unless a mutation applied."""
        if not self.enabled:
            return raw
        text = raw.decode("utf-8", errors="replace")
        transformed = self.apply(text)
        if transformed is text:
            return raw
        return transformed.encode("utf-8")


def apply_transforms(body_text: str, config: Config) -> str:
    return BodyTransformer(config.transforms).apply(body_text)
