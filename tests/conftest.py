"""Shared fixtures for SCIM proxy tests."""

from datetime import UTC, datetime
from itertools import count

import pytest

from core.config import parse_config

UPSTREAM_URL = "https://directory.test/scim"


class RecordingLogger:
    """RequestLogger that remembers every call."""

    def __init__(self):
        self.decisions = []
        self.proxied = []
        self.errors = []

    def log_decision(self, action, method, path, status):
        self.decisions.append((action, method, path, status))

    def log_proxy(self, method, path, status):
        self.proxied.append((method, path, status))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class FixedStubSource:
    """Deterministic clock and sequential ids."""

    def __init__(self, moment=None):
        self.moment = moment or datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=UTC)
        self._ids = count(1)

    def now(self):
        return self.moment

    def new_id(self):
        return f"stub-{next(self._ids)}"


@pytest.fixture(autouse=True)
def isolated_cli_log(tmp_path, monkeypatch):
    """Keep the rolling CLI log out of the working directory."""
    monkeypatch.setattr("ui.log_utils.CLI_LOG_FILE", tmp_path / "proxy.log")
    return tmp_path / "proxy.log"


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def stub_source():
    return FixedStubSource()


@pytest.fixture
def make_config():
    """Build a validated Config from keyword overrides."""

    def _make(rules=(), base_path=None, inject_email_type=None, bearer_token=None, **server):
        raw = {
            "upstream": {"url": UPSTREAM_URL},
            "server": {**server},
            "rules": list(rules),
            "transforms": {},
        }
        if base_path is not None:
            raw["server"]["base_path"] = base_path
        if inject_email_type is not None:
            raw["transforms"]["inject_email_type"] = inject_email_type
        if bearer_token is not None:
            raw["upstream"]["bearer_token"] = bearer_token
        return parse_config(raw)

    return _make
