"""Line-oriented request logger for non-interactive runs."""

from rich.console import Console
from rich.markup import escape

from ui.log_utils import write_cli_log

console = Console()

_STYLES = {
    "REJECT": "red",
    "SILENT": "yellow",
    "EMPTY": "magenta",
    "PROXY": "blue",
    "ERROR": "bold red",
}


class ConsoleLogger:
    """Print one line per request, e.g. ``[REJECT] DELETE /Users/abc -> 403``."""

    def __init__(self, out: Console | None = None) -> None:
        self._console = out or console

    def log_decision(self, action: str, method: str, path: str, status: int) -> None:
        self._emit(action.upper(), f"{method} {path} -> {status}")
        write_cli_log(action.upper(), f"{method} {path}", status=status)

    def log_proxy(self, method: str, path: str, status: int) -> None:
        self._emit("PROXY", f"{method} {path} -> upstream {status}")
        write_cli_log("PROXY", f"{method} {path}", status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        self._emit("ERROR", f"{route} {status}: {message[:200]}")
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def _emit(self, level: str, message: str) -> None:
        style = _STYLES.get(level, "white")
        self._console.print(f"[{style}][{level}][/{style}] {escape(message)}", highlight=False)
