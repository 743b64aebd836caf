"""Pydantic models for the API helper."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from apihelper.cancel import CancelToken
from apihelper.exceptions import ResultError


# --- Construction-time configuration ---

class HelperConfig(BaseModel):
    """Options owned by the orchestrator itself. Durations are in seconds."""

    timeout: Optional[float] = None
    retry: int = Field(default=0, ge=0)
    retry_delay: float = Field(default=0.3, ge=0)
    auth_header: str = "Authorization"


class ClientConfig(BaseModel):
    """Options forwarded to the httpx.AsyncClient constructor."""

    base_url: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)
    cookies: dict[str, str] = Field(default_factory=dict)
    verify: bool = True
    follow_redirects: bool = True
    trust_env: bool = True
    max_connections: Optional[int] = 100
    max_keepalive_connections: Optional[int] = 20


class AppConfig(BaseModel):
    helper: HelperConfig = Field(default_factory=HelperConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    auth_token: str = ""


# --- Per-call overrides ---

class RequestOptions(BaseModel):
    """Overrides for a single call. Unset fields fall back to the helper's config."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    timeout: Optional[float] = None
    retry: Optional[int] = Field(default=None, ge=0)
    retry_delay: Optional[float] = Field(default=None, ge=0)
    cancel_token: Optional[CancelToken] = None

    # httpx pass-through
    params: Optional[dict[str, Any]] = None
    headers: Optional[dict[str, str]] = None
    cookies: Optional[dict[str, str]] = None
    follow_redirects: Optional[bool] = None
    extensions: Optional[dict[str, Any]] = None

    def transport_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for httpx.AsyncClient.request, unset ones omitted."""
        kwargs = self.model_dump(
            include={"params", "headers", "cookies", "follow_redirects", "extensions"},
            exclude_none=True,
        )
        # Per-call timeout only applies when truthy
        if self.timeout:
            kwargs["timeout"] = self.timeout
        return kwargs


# --- Result envelope ---

class Result(BaseModel):
    """Outcome of a call: ``data`` on success, ``error`` on failure."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    error: Any = None
    _ok: Optional[bool] = PrivateAttr(default=None)

    @classmethod
    def success(cls, data: Any) -> "Result":
        result = cls(data=data, error=None)
        result._ok = True
        return result

    @classmethod
    def failure(cls, error: Any) -> "Result":
        # error may be None here when a formatter returns None
        result = cls(data=None, error=error)
        result._ok = False
        return result

    @property
    def ok(self) -> bool:
        if self._ok is not None:
            return self._ok
        return self.error is None

    def unwrap(self) -> Any:
        if not self.ok:
            raise ResultError(self.error)
        return self.data
