"""Configuration CLI commands."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from apihelper.core.config import load_config

console = Console()
config_app = typer.Typer(name="config", help="Inspect the resolved configuration.")


def _mask(token: str) -> str:
    if not token:
        return "[dim]not set[/dim]"
    return token[:4] + "…" if len(token) > 8 else "****"


@config_app.command("show")
def show(
    config: Optional[str] = typer.Option(None, "-c", "--config", help="Path to a YAML config file"),
) -> None:
    """Show the configuration after YAML, .env and environment overrides."""
    cfg = load_config(config)

    table = Table(title="apihelper configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    h = cfg.helper
    table.add_row("timeout", str(h.timeout) if h.timeout else "[dim]none[/dim]")
    table.add_row("retry", str(h.retry))
    table.add_row("retry_delay", f"{h.retry_delay}s")
    table.add_row("auth_header", h.auth_header)
    table.add_row("auth_token", _mask(cfg.auth_token))

    c = cfg.client
    table.add_row("base_url", c.base_url or "[dim]none[/dim]")
    table.add_row("verify", str(c.verify))
    table.add_row("follow_redirects", str(c.follow_redirects))
    for name, value in c.headers.items():
        table.add_row(f"header {name}", value)

    console.print(table)
