"""Cancellation handles for in-flight requests."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

from apihelper.exceptions import RequestCancelled

_DEFAULT_REASON = "Request cancelled"


class CancelToken:
    """Read side of a cancellation handle; pass it in a request's options."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled(self.reason or _DEFAULT_REASON)

    async def wait(self) -> None:
        await self._event.wait()

    def _cancel(self, reason: Optional[str]) -> None:
        # First reason wins, later cancels are no-ops
        if self.cancelled:
            return
        self.reason = reason
        self._event.set()


class CancelTokenSource:
    """Pairs a token with the cancel() call that trips it."""

    def __init__(self) -> None:
        self.token = CancelToken()

    def cancel(self, reason: Optional[str] = None) -> None:
        self.token._cancel(reason)


def is_cancel(error: object) -> bool:
    """Return True when *error* came from a cancelled request."""
    return isinstance(error, RequestCancelled)


async def run_cancellable(coro, token: Optional[CancelToken]):
    """Await *coro*, aborting it with RequestCancelled if *token* is cancelled."""
    if token is None:
        return await coro
    if token.cancelled:
        coro.close()
        token.raise_if_cancelled()

    send = asyncio.ensure_future(coro)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait({send, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except BaseException:
        send.cancel()
        waiter.cancel()
        raise

    if send in done:
        waiter.cancel()
        return send.result()

    send.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await send
    token.raise_if_cancelled()
