"""Request orchestrator: auth injection, one-shot token refresh, retry with backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import httpx

from apihelper.cancel import CancelTokenSource, run_cancellable
from apihelper.core.models import AppConfig, ClientConfig, HelperConfig, RequestOptions, Result
from apihelper.exceptions import RequestCancelled
from apihelper.utils.http import body_kwargs, get_client, parse_body

logger = logging.getLogger(__name__)

TokenGetter = Callable[[], Awaitable[Optional[str]]]
TokenRefresher = Callable[[], Awaitable[Any]]
ErrorFormatter = Callable[[BaseException], Any]
Options = Union[RequestOptions, Mapping[str, Any], None]

# Failures the retry loop absorbs; anything else propagates to the caller.
_REQUEST_ERRORS = (httpx.HTTPError, RequestCancelled)


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


def _response_of(error: BaseException) -> Optional[httpx.Response]:
    return getattr(error, "response", None)


def _format_default(error: BaseException) -> Any:
    resp = _response_of(error)
    if resp is not None:
        return parse_body(resp)
    return str(error) or "Unknown error"


class ApiHelper:
    """Async HTTP helper whose calls resolve to a ``Result`` instead of raising."""

    def __init__(
        self,
        config: Optional[HelperConfig] = None,
        client_config: Optional[ClientConfig] = None,
        *,
        get_auth_token: Optional[TokenGetter] = None,
        refresh_auth_token: Optional[TokenRefresher] = None,
        error_formatter: Optional[ErrorFormatter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or HelperConfig()
        self.get_auth_token = get_auth_token
        self.refresh_auth_token = refresh_auth_token
        self.error_formatter = error_formatter

        self._static_auth_token: Optional[str] = None
        self._custom_auth_headers: dict[str, str] = {}

        self._client = get_client(
            client_config or ClientConfig(),
            timeout=self.config.timeout,
            transport=transport,
        )

    # ---- Auth state ----

    def set_auth_token(self, token: Optional[str]) -> None:
        self._static_auth_token = token

    def set_auth_headers(self, headers: Mapping[str, Any]) -> None:
        """Replace (not merge) the custom headers sent with every request."""
        self._custom_auth_headers = {str(k): str(v) for k, v in headers.items()}

    async def _inject_auth(self, request: httpx.Request) -> None:
        # Runs once per attempt, before redirects; httpx strips the header on cross-origin hops.
        header = self.config.auth_header
        if self._static_auth_token:
            request.headers[header] = f"Bearer {self._static_auth_token}"
        if self.get_auth_token is not None:
            token = await self.get_auth_token()
            if token:
                request.headers[header] = f"Bearer {token}"
        for key, value in self._custom_auth_headers.items():
            request.headers[key] = value

    async def _send(self, method: str, url: str, kwargs: dict[str, Any]) -> httpx.Response:
        send_kwargs = {}
        if "follow_redirects" in kwargs:
            send_kwargs["follow_redirects"] = kwargs["follow_redirects"]
        build_kwargs = {k: v for k, v in kwargs.items() if k != "follow_redirects"}
        request = self._client.build_request(method, url, **build_kwargs)
        await self._inject_auth(request)
        return await self._client.send(request, **send_kwargs)

    # ---- Cancellation ----

    def get_cancel_token_source(self) -> CancelTokenSource:
        return CancelTokenSource()

    # ---- Core ----

    async def request(
        self,
        method: str,
        url: str,
        data: Any = None,
        config: Options = None,
    ) -> Result:
        """Send a request, retrying per the helper's policy.

        Network failures and 5xx responses are retried up to ``retry`` times
        with a delay of ``retry_delay * 2**attempt``. A 401 triggers at most one
        ``refresh_auth_token`` call followed by an immediate retry that does not
        count against the budget. Transport failures are reported in
        ``Result.error``; exceptions from ``get_auth_token`` or
        ``error_formatter`` propagate.
        """
        if isinstance(config, RequestOptions):
            options = config
        else:
            options = RequestOptions.model_validate(dict(config or {}))
        retry = self.config.retry if options.retry is None else options.retry
        retry_delay = self.config.retry_delay if options.retry_delay is None else options.retry_delay
        kwargs = {**body_kwargs(data), **options.transport_kwargs()}
        method = method.upper()

        attempt = 0
        tried_refresh = False
        last_error: Optional[BaseException] = None

        while attempt <= retry:
            try:
                logger.debug("%s %s (attempt %d)", method, url, attempt + 1)
                resp = await run_cancellable(
                    self._send(method, url, kwargs), options.cancel_token
                )
                resp.raise_for_status()
                return Result.success(parse_body(resp))
            except _REQUEST_ERRORS as exc:
                last_error = exc
                resp = _response_of(exc)
                status = resp.status_code if resp is not None else None

                if status == 401 and self.refresh_auth_token is not None and not tried_refresh:
                    tried_refresh = True
                    logger.info("%s %s returned 401, refreshing auth token", method, url)
                    try:
                        await self.refresh_auth_token()
                    except Exception as refresh_exc:
                        logger.warning("Auth token refresh failed: %s", refresh_exc)
                        last_error = refresh_exc
                        break
                    continue

                retryable = resp is None or 500 <= status < 600
                if not (retryable and attempt < retry):
                    break

                delay = retry_delay * 2 ** attempt
                logger.warning(
                    "%s %s failed (%s), retrying in %.2fs (%d/%d)",
                    method, url, status or exc, delay, attempt + 1, retry,
                )
                await _sleep(delay)
                attempt += 1

        return Result.failure(self._format_error(last_error))

    def _format_error(self, error: BaseException) -> Any:
        if self.error_formatter is not None:
            return self.error_formatter(error)
        return _format_default(error)

    # ---- Verb shortcuts ----

    async def get(self, url: str, config: Options = None) -> Result:
        return await self.request("get", url, None, config)

    async def post(self, url: str, data: Any = None, config: Options = None) -> Result:
        return await self.request("post", url, data, config)

    async def put(self, url: str, data: Any = None, config: Options = None) -> Result:
        return await self.request("put", url, data, config)

    async def patch(self, url: str, data: Any = None, config: Options = None) -> Result:
        return await self.request("patch", url, data, config)

    async def delete(self, url: str, config: Options = None) -> Result:
        return await self.request("delete", url, None, config)

    async def head(self, url: str, config: Options = None) -> Result:
        return await self.request("head", url, None, config)

    async def options(self, url: str, config: Options = None) -> Result:
        return await self.request("options", url, None, config)

    # ---- Lifecycle ----

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiHelper":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_api_helper(
    config: Optional[AppConfig] = None,
    *,
    get_auth_token: Optional[TokenGetter] = None,
    refresh_auth_token: Optional[TokenRefresher] = None,
    error_formatter: Optional[ErrorFormatter] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ApiHelper:
    """Build an ApiHelper from an AppConfig, seeding the static token if one is set."""
    cfg = config or AppConfig()
    helper = ApiHelper(
        cfg.helper,
        cfg.client,
        get_auth_token=get_auth_token,
        refresh_auth_token=refresh_auth_token,
        error_formatter=error_formatter,
        transport=transport,
    )
    if cfg.auth_token:
        helper.set_auth_token(cfg.auth_token)
    return helper
