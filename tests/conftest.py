"""Shared fixtures: scripted mock transports and a no-wait backoff."""

from __future__ import annotations

import httpx
import pytest

from apihelper.client import ApiHelper
from apihelper.core.models import ClientConfig, HelperConfig

_ENV_VARS = (
    "APIHELPER_BASE_URL",
    "APIHELPER_TIMEOUT",
    "APIHELPER_RETRY",
    "APIHELPER_RETRY_DELAY",
    "APIHELPER_AUTH_HEADER",
    "APIHELPER_AUTH_TOKEN",
)


class Script:
    """MockTransport handler that replays a list of steps, repeating the last one.

    A step is an int status, a ``(status, body)`` tuple, or an httpx exception class.
    """

    def __init__(self, *steps) -> None:
        self.steps = steps
        self.calls: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        step = self.steps[min(len(self.calls), len(self.steps)) - 1]
        if isinstance(step, type) and issubclass(step, Exception):
            raise step("boom", request=request)
        if isinstance(step, tuple):
            status, body = step
        else:
            status, body = step, None
        if body is None:
            return httpx.Response(status)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record backoff delays instead of waiting."""
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr("apihelper.client._sleep", fake_sleep)
    return delays


@pytest.fixture
def make_helper(sleeps):
    def _make(handler, client_config: ClientConfig | None = None, **kwargs) -> ApiHelper:
        hooks = {
            name: kwargs.pop(name)
            for name in ("get_auth_token", "refresh_auth_token", "error_formatter")
            if name in kwargs
        }
        return ApiHelper(
            HelperConfig(**kwargs),
            client_config or ClientConfig(base_url="https://api.test"),
            transport=httpx.MockTransport(handler),
            **hooks,
        )

    return _make


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no APIHELPER_* variables set."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
