"""Configuration models and loading."""

import os
import tomllib
from pathlib import Path
from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError

DEFAULT_CONFIG_FILE = Path("scim-proxy.toml")
CONFIG_PATH_ENV = "CONFIG_PATH"

RuleAction = Literal["reject", "silent", "empty"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class UpstreamSettings(_Frozen):
    url: str
    bearer_token: str | None = None
    timeout: float | None = 30.0

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        parsed = urlsplit(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"upstream url must be an absolute http(s) URL, got {value!r}")
        return value


class ServerSettings(_Frozen):
    host: str = "127.0.0.1"
    port: int = 8080
    base_path: str | None = None
    debug: bool = False


class TransformSettings(_Frozen):
    inject_email_type: str | None = None


class Rule(_Frozen):
    """A single interception rule; evaluated in configuration order."""

    resource: str
    methods: frozenset[str] = frozenset({"*"})
    action: RuleAction = "reject"

    @field_validator("resource")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        if not value.startswith("/") or len(value) < 2 or "/" in value[1:]:
            raise ValueError(f"resource must look like '/Users', got {value!r}")
        return value

    @field_validator("methods", mode="before")
    @classmethod
    def _upper_methods(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(m).upper() for m in value)
        return value


class Config(_Frozen):
    upstream: UpstreamSettings
    server: ServerSettings = Field(default_factory=ServerSettings)
    rules: tuple[Rule, ...] = ()
    transforms: TransformSettings = Field(default_factory=TransformSettings)


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit path, then $CONFIG_PATH, then ./scim-proxy.toml."""
    if path:
        return Path(path)
    return Path(os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_FILE)


def load_config(path: str | Path | None = None) -> Config:
    """Load and validate the TOML configuration file.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid.
    """
    config_file = resolve_config_path(path)
    try:
        raw = tomllib.loads(config_file.read_text())
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {config_file}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Config file {config_file} is not valid TOML: {e}") from e

    return parse_config(raw)


def parse_config(raw: dict) -> Config:
    """Validate an already-parsed configuration mapping."""
    upstream = raw.get("upstream")
    if not isinstance(upstream, dict) or not isinstance(upstream.get("url"), str):
        raise ConfigurationError("Config: [upstream] url is required")

    for i, rule in enumerate(raw.get("rules", [])):
        if not isinstance(rule, dict) or not isinstance(rule.get("resource"), str):
            raise ConfigurationError(f"Config: rules[{i}] resource is required")
        action = rule.get("action", "reject")
        if action not in ("reject", "silent", "empty"):
            raise ConfigurationError(
                f'Config: rules[{i}] action must be "reject", "silent", or "empty"'
            )

    try:
        return Config.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Config: {e}") from e
