"""Configuration loader: YAML files + environment variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from apihelper.core.models import AppConfig, ClientConfig, HelperConfig

_DEFAULT_CONFIG_NAME = "apihelper.yaml"


def _find_project_root() -> Path:
    """Walk up from cwd to find a directory containing pyproject.toml."""
    cwd = Path.cwd()
    for p in [cwd, *cwd.parents]:
        if (p / "pyproject.toml").exists():
            return p
    return cwd


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML + environment variables.

    Priority: env vars > .env file > YAML defaults.
    """
    root = _find_project_root()
    load_dotenv(root / ".env")

    yaml_path = Path(config_path) if config_path else root / "config" / _DEFAULT_CONFIG_NAME
    yaml_data: dict = {}
    if yaml_path.exists():
        with open(yaml_path) as f:
            yaml_data = yaml.safe_load(f) or {}

    # Orchestrator options with env overrides
    h_data = yaml_data.get("helper") or {}
    timeout = os.getenv("APIHELPER_TIMEOUT", h_data.get("timeout"))
    helper = HelperConfig(
        timeout=float(timeout) if timeout not in (None, "") else None,
        retry=int(os.getenv("APIHELPER_RETRY", h_data.get("retry", 0))),
        retry_delay=float(os.getenv("APIHELPER_RETRY_DELAY", h_data.get("retry_delay", 0.3))),
        auth_header=os.getenv("APIHELPER_AUTH_HEADER", h_data.get("auth_header", "Authorization")),
    )

    # httpx client options
    c_data = dict(yaml_data.get("client") or {})
    base_url = os.getenv("APIHELPER_BASE_URL")
    if base_url:
        c_data["base_url"] = base_url
    client = ClientConfig(**c_data)

    return AppConfig(
        helper=helper,
        client=client,
        auth_token=os.getenv("APIHELPER_AUTH_TOKEN", yaml_data.get("auth_token", "")),
    )
