"""Shared httpx plumbing: client construction and body parsing."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from apihelper.core.models import ClientConfig

_DEFAULT_HEADERS = {
    "User-Agent": "apihelper/0.1 (+https://github.com/apihelper/apihelper)"
}


def get_client(
    config: ClientConfig,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a configured httpx.AsyncClient.

    A falsy *timeout* leaves the client without a timeout.
    """
    limits = httpx.Limits(
        max_connections=config.max_connections,
        max_keepalive_connections=config.max_keepalive_connections,
    )
    return httpx.AsyncClient(
        base_url=config.base_url,
        headers={**_DEFAULT_HEADERS, **config.headers},
        params=config.params,
        cookies=config.cookies,
        verify=config.verify,
        follow_redirects=config.follow_redirects,
        trust_env=config.trust_env,
        timeout=timeout if timeout else None,
        limits=limits,
        transport=transport,
    )


def body_kwargs(data: Any) -> dict[str, Any]:
    """Map a request payload onto httpx's content/json arguments."""
    if data is None:
        return {}
    if isinstance(data, (str, bytes)):
        return {"content": data}
    return {"json": data}


def parse_body(resp: httpx.Response) -> Any:
    """Decode a response body: JSON when it parses, text otherwise."""
    if not resp.content:
        return ""
    try:
        return resp.json()
    except ValueError:
        return resp.text
