"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()

ACTION_STYLES = {
    "reject": "red",
    "silent": "yellow",
    "empty": "magenta",
    "proxy": "blue",
}


class RequestInfo:
    """Info about a single handled request."""

    def __init__(self, action: str, method: str, path: str, status: int, timestamp: datetime):
        self.action = action
        self.method = method
        self.path = path[:60] + "..." if len(path) > 60 else path
        self.status = status
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing intercepted and forwarded requests."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 12
        self._request_count = {action: 0 for action in ACTION_STYLES}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_decision(self, action: str, method: str, path: str, status: int) -> None:
        """Log a request answered by a rule (reject, silent or empty)."""
        self._record(action, method, path, status)
        write_cli_log(action.upper(), f"{method} {path}", status=status)

    def log_proxy(self, method: str, path: str, status: int) -> None:
        """Log a request forwarded upstream."""
        self._record("proxy", method, path, status)
        write_cli_log("PROXY", f"{method} {path}", status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def _record(self, action: str, method: str, path: str, status: int) -> None:
        with self._lock:
            self._request_count[action] = self._request_count.get(action, 0) + 1
            info = RequestInfo(action, method, path, status, datetime.now())
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]
            self._refresh()

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["body"].split_row(
            Layout(name="rules", ratio=1),
            Layout(name="recent", ratio=2),
        )

        layout["header"].update(self._build_header())
        layout["rules"].update(self._build_rules_panel())
        layout["recent"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("SCIM Proxy", style="bold cyan")
        for action, style in ACTION_STYLES.items():
            stats.append("  |  ")
            stats.append(f"{action.capitalize()}: {self._request_count.get(action, 0)}", style=style)
        stats.append("  |  ")
        stats.append(f"Port: {self.config.server.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_rules_panel(self) -> Panel:
        """Build panel listing configured rules."""
        if self.config.rules:
            table = Table.grid(padding=(0, 1))
            table.add_column()
            table.add_column()
            table.add_column()
            for rule in self.config.rules:
                table.add_row(
                    f"[bold]{rule.resource}[/bold]",
                    ",".join(sorted(rule.methods)),
                    f"[{ACTION_STYLES[rule.action]}]{rule.action}[/]",
                )
            content = table
        else:
            content = Text("No rules - everything is forwarded", style="dim")

        return Panel(content, title="[cyan]Rules[/cyan]", border_style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Action", width=7)
            table.add_column("Method", width=7)
            table.add_column("Path", ratio=2)
            table.add_column("Status", width=6)

            for info in self._recent:
                style = ACTION_STYLES.get(info.action, "white")
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    f"[{style}]{info.action}[/]",
                    info.method,
                    info.path,
                    str(info.status),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Upstream: {self.config.upstream.url}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
