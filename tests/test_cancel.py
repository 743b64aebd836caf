"""Tests for cancellation handles."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from apihelper.cancel import CancelTokenSource, is_cancel
from apihelper.exceptions import RequestCancelled

from conftest import Script


def test_first_reason_wins():
    source = CancelTokenSource()
    source.cancel("first")
    source.cancel("second")

    assert source.token.cancelled
    assert source.token.reason == "first"


def test_raise_if_cancelled_uses_default_reason():
    source = CancelTokenSource()
    source.token.raise_if_cancelled()
    source.cancel()

    with pytest.raises(RequestCancelled, match="Request cancelled"):
        source.token.raise_if_cancelled()


def test_is_cancel():
    assert is_cancel(RequestCancelled("stop"))
    assert not is_cancel(RuntimeError("stop"))
    assert not is_cancel(None)


@pytest.mark.asyncio
async def test_cancel_before_send_resolves_with_error(make_helper):
    script = Script(200)
    api = make_helper(script)
    source = api.get_cancel_token_source()
    source.cancel("user abort")

    result = await api.get("/x", {"cancel_token": source.token})

    assert result.data is None
    assert result.error == "user abort"
    assert script.count == 0


@pytest.mark.asyncio
async def test_cancel_in_flight_resolves_with_error(make_helper):
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(30)
        return httpx.Response(200)

    api = make_helper(handler)
    source = api.get_cancel_token_source()

    task = asyncio.create_task(api.get("/slow", {"cancel_token": source.token}))
    await started.wait()
    source.cancel("took too long")
    result = await asyncio.wait_for(task, timeout=5)

    assert result.data is None
    assert result.error == "took too long"


@pytest.mark.asyncio
async def test_formatter_can_detect_cancellation(make_helper):
    api = make_helper(
        Script(200),
        error_formatter=lambda err: "cancelled" if is_cancel(err) else "failed",
    )
    source = api.get_cancel_token_source()
    source.cancel()

    result = await api.get("/x", {"cancel_token": source.token})

    assert result.error == "cancelled"


@pytest.mark.asyncio
async def test_uncancelled_token_does_not_interfere(make_helper):
    api = make_helper(Script((200, {"ok": True})))
    source = api.get_cancel_token_source()

    result = await api.get("/x", {"cancel_token": source.token})

    assert result.data == {"ok": True}
