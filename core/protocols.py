"""Shared protocol definitions."""

from datetime import datetime
from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLogger)."""

    def log_decision(self, action: str, method: str, path: str, status: int) -> None: ...
    def log_proxy(self, method: str, path: str, status: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...


class StubSource(Protocol):
    """Clock and identifier source for synthesized responses."""

    def now(self) -> datetime: ...
    def new_id(self) -> str: ...
