"""Exceptions raised by the API helper."""

from __future__ import annotations

from typing import Any


class RequestCancelled(Exception):
    """An in-flight request was aborted through its cancel token."""

    def __init__(self, reason: str = "Request cancelled") -> None:
        super().__init__(reason)
        self.reason = reason


class ResultError(Exception):
    """Raised by Result.unwrap() when the call failed."""

    def __init__(self, error: Any) -> None:
        super().__init__(error if isinstance(error, str) else repr(error))
        self.error = error
