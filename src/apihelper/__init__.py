"""Async HTTP helper with auth injection, token refresh and retry-with-backoff."""

from apihelper.cancel import CancelToken, CancelTokenSource, is_cancel
from apihelper.client import ApiHelper, create_api_helper
from apihelper.core.config import load_config
from apihelper.core.models import AppConfig, ClientConfig, HelperConfig, RequestOptions, Result
from apihelper.exceptions import RequestCancelled, ResultError

__all__ = [
    "ApiHelper",
    "AppConfig",
    "CancelToken",
    "CancelTokenSource",
    "ClientConfig",
    "HelperConfig",
    "RequestCancelled",
    "RequestOptions",
    "Result",
    "ResultError",
    "create_api_helper",
    "is_cancel",
    "load_config",
]
