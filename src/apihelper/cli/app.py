"""Root CLI application: send requests through the helper from the shell."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer
from rich.console import Console

from apihelper.cli.config_cmd import config_app
from apihelper.client import create_api_helper
from apihelper.core.config import load_config
from apihelper.core.models import RequestOptions, Result

console = Console()
app = typer.Typer(
    name="apihelper",
    help="Send HTTP requests with auth injection, token refresh and retry-with-backoff.",
    no_args_is_help=True,
)

app.add_typer(config_app)

# Shared options
_DATA = typer.Option(None, "-d", "--data", help="Request body (JSON, or sent as raw text)")
_HEADER = typer.Option(None, "-H", "--header", help="Extra header as Name:Value (repeatable)")
_RETRY = typer.Option(None, "--retry", help="Retry budget for network/5xx failures")
_RETRY_DELAY = typer.Option(None, "--retry-delay", help="Base backoff delay in seconds")
_TIMEOUT = typer.Option(None, "--timeout", help="Request timeout in seconds")
_TOKEN = typer.Option(None, "--token", help="Bearer token (overrides APIHELPER_AUTH_TOKEN)")
_CONFIG = typer.Option(None, "-c", "--config", help="Path to a YAML config file")


def _parse_headers(values: Optional[list[str]]) -> Optional[dict[str, str]]:
    if not values:
        return None
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Header must look like Name:Value, got {raw!r}")
        headers[name.strip()] = value.strip()
    return headers


def _parse_data(raw: Optional[str]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _print_result(result: Result) -> None:
    if result.ok:
        value, label = result.data, "[bold green]OK[/bold green]"
    else:
        value, label = result.error, "[bold red]Error[/bold red]"
    console.print(label)
    if isinstance(value, (dict, list)):
        console.print_json(data=value)
    elif value not in (None, ""):
        console.print(str(value), markup=False)


def _run(
    method: str,
    url: str,
    data: Optional[str] = None,
    header: Optional[list[str]] = None,
    retry: Optional[int] = None,
    retry_delay: Optional[float] = None,
    timeout: Optional[float] = None,
    token: Optional[str] = None,
    config: Optional[str] = None,
) -> None:
    cfg = load_config(config)
    if token:
        cfg.auth_token = token
    options = RequestOptions(
        retry=retry,
        retry_delay=retry_delay,
        timeout=timeout,
        headers=_parse_headers(header),
    )
    payload = _parse_data(data)

    async def _call() -> Result:
        async with create_api_helper(cfg) as helper:
            return await helper.request(method, url, payload, options)

    result = asyncio.run(_call())
    _print_result(result)
    if not result.ok:
        raise typer.Exit(1)


@app.command()
def request(
    method: str = typer.Argument(..., help="HTTP method"),
    url: str = typer.Argument(..., help="Absolute URL or path relative to base_url"),
    data: Optional[str] = _DATA,
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """Send a request with an arbitrary method."""
    _run(method, url, data, header, retry, retry_delay, timeout, token, config)


@app.command()
def get(
    url: str = typer.Argument(...),
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """GET a URL."""
    _run("get", url, None, header, retry, retry_delay, timeout, token, config)


@app.command()
def head(
    url: str = typer.Argument(...),
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """HEAD a URL."""
    _run("head", url, None, header, retry, retry_delay, timeout, token, config)


@app.command()
def options(
    url: str = typer.Argument(...),
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """OPTIONS a URL."""
    _run("options", url, None, header, retry, retry_delay, timeout, token, config)


@app.command()
def delete(
    url: str = typer.Argument(...),
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """DELETE a URL."""
    _run("delete", url, None, header, retry, retry_delay, timeout, token, config)


@app.command()
def post(
    url: str = typer.Argument(...),
    data: Optional[str] = _DATA,
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """POST a body to a URL."""
    _run("post", url, data, header, retry, retry_delay, timeout, token, config)


@app.command()
def put(
    url: str = typer.Argument(...),
    data: Optional[str] = _DATA,
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """PUT a body to a URL."""
    _run("put", url, data, header, retry, retry_delay, timeout, token, config)


@app.command()
def patch(
    url: str = typer.Argument(...),
    data: Optional[str] = _DATA,
    header: Optional[list[str]] = _HEADER,
    retry: Optional[int] = _RETRY,
    retry_delay: Optional[float] = _RETRY_DELAY,
    timeout: Optional[float] = _TIMEOUT,
    token: Optional[str] = _TOKEN,
    config: Optional[str] = _CONFIG,
) -> None:
    """PATCH a URL."""
    _run("patch", url, data, header, retry, retry_delay, timeout, token, config)
