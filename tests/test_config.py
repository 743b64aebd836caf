"""Tests for the YAML + environment configuration loader."""

from __future__ import annotations

import os

from apihelper.core.config import load_config


def test_defaults_without_config_file(clean_env):
    cfg = load_config()

    assert cfg.helper.retry == 0
    assert cfg.helper.retry_delay == 0.3
    assert cfg.helper.timeout is None
    assert cfg.client.base_url == ""
    assert cfg.auth_token == ""


def test_yaml_values(clean_env):
    path = clean_env / "api.yaml"
    path.write_text(
        "helper:\n"
        "  timeout: 12\n"
        "  retry: 4\n"
        "  retry_delay: 0.5\n"
        "  auth_header: X-Auth\n"
        "client:\n"
        "  base_url: https://api.example.com\n"
        "  headers:\n"
        "    Accept: application/json\n"
        "auth_token: from-yaml\n"
    )

    cfg = load_config(str(path))

    assert cfg.helper.timeout == 12
    assert cfg.helper.retry == 4
    assert cfg.helper.retry_delay == 0.5
    assert cfg.helper.auth_header == "X-Auth"
    assert cfg.client.base_url == "https://api.example.com"
    assert cfg.client.headers == {"Accept": "application/json"}
    assert cfg.auth_token == "from-yaml"


def test_env_overrides_yaml(clean_env, monkeypatch):
    path = clean_env / "api.yaml"
    path.write_text("helper:\n  retry: 1\nclient:\n  base_url: https://yaml.example.com\n")
    monkeypatch.setenv("APIHELPER_RETRY", "5")
    monkeypatch.setenv("APIHELPER_TIMEOUT", "2.5")
    monkeypatch.setenv("APIHELPER_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("APIHELPER_AUTH_TOKEN", "from-env")

    cfg = load_config(str(path))

    assert cfg.helper.retry == 5
    assert cfg.helper.timeout == 2.5
    assert cfg.client.base_url == "https://env.example.com"
    assert cfg.auth_token == "from-env"


def test_dotenv_file_is_loaded(clean_env):
    (clean_env / "pyproject.toml").write_text("[project]\nname = 'x'\n")
    (clean_env / ".env").write_text("APIHELPER_RETRY_DELAY=1.5\n")

    try:
        cfg = load_config()
    finally:
        os.environ.pop("APIHELPER_RETRY_DELAY", None)

    assert cfg.helper.retry_delay == 1.5


def test_empty_sections_fall_back_to_defaults(clean_env):
    path = clean_env / "api.yaml"
    path.write_text("helper:\nclient:\n")

    cfg = load_config(str(path))

    assert cfg.helper.retry == 0
    assert cfg.client.follow_redirects is True
