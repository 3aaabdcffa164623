"""CLI entry point for scim-proxy."""

import sys
from datetime import datetime

from rich.console import Console
from rich.markup import escape

from app import create_app
from core.config import CONFIG_PATH_ENV, Config, load_config, resolve_config_path
from core.exceptions import ConfigurationError
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    args = sys.argv[1:]

    if any(arg in ("--help", "-h") for arg in args):
        _print_help()
        return

    flags = {arg for arg in args if arg.startswith("--")}
    positional = [arg for arg in args if not arg.startswith("-")]
    config_path = resolve_config_path(positional[0] if positional else None)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {escape(str(e))}")
        console.print(f"[dim]Set {CONFIG_PATH_ENV} or pass the config file path[/dim]")
        sys.exit(1)

    if "--check" in flags:
        console.print(f"[bold]Config:[/bold] {config_path}")
        _print_summary(config)
        return

    import uvicorn

    plain = "--plain" in flags
    if plain:
        logger = ConsoleLogger(console)
        console.print("[bold cyan]SCIM Proxy starting[/bold cyan]")
        _print_summary(config)
    else:
        logger = Dashboard(config)

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if not plain:
        logger.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.server.port, rules=len(config.rules))
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if not plain:
            logger.stop()


def _print_summary(config: Config):
    """Print upstream, port, base path and rules."""
    console.print(f"  Upstream:  {config.upstream.url}")
    console.print(f"  Port:      {config.server.port}")
    if config.server.base_path:
        console.print(f"  Base path: {config.server.base_path}")
    console.print(f"  Rules:     {len(config.rules)}")
    for rule in config.rules:
        methods = ",".join(sorted(rule.methods))
        console.print(f"    {rule.resource:<24} {methods:<28} {rule.action}", highlight=False)
    if config.transforms.inject_email_type:
        console.print(f"  Email type injection: {config.transforms.inject_email_type}")


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]SCIM Proxy[/bold cyan]

Sits between an identity provider and a SCIM directory. Requests matching a
rule are rejected or answered locally; everything else is forwarded.

[bold]Usage:[/bold]
    scim-proxy [CONFIG]            Start with live dashboard
    scim-proxy [CONFIG] --plain    Start with line-per-request logging
    scim-proxy [CONFIG] --check    Validate config and print a summary
    scim-proxy --help              Show this help

[bold]Configuration:[/bold]
    TOML file given as CONFIG, else $CONFIG_PATH, else ./scim-proxy.toml
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
