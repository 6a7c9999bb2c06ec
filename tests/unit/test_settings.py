from __future__ import annotations

import ssl
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from pdfdesk.exceptions import SettingsError
from pdfdesk.settings import (
    Settings,
    build_httpx_client_kwargs,
    build_ssl_context,
    ensure_env_file_exists,
    get_settings,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "APP_ENV=test\n"
        "LOG_LEVEL=DEBUG\n"
        "LOG_JSON=false\n"
        "TIMEOUT=12\n"
        "FONT_DIR=/opt/fonts\n"
        "OUTPUT_PREFIX=Desk\n"
        "REDACTION_PREVIEW_SCALE=2\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.timeout == 12
    assert settings.font_dir == "/opt/fonts"
    assert settings.output_prefix == "Desk"
    assert settings.redaction_preview_scale == 2


def test_settings_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.output_prefix == "PdfDesk"
    assert settings.builtin_font_fallback is True
    assert settings.font_base_url is None


def test_settings_rejects_plain_http_font_base_url_outside_localhost(monkeypatch) -> None:
    monkeypatch.setenv("FONT_BASE_URL", "http://fonts.example.com/")
    with pytest.raises(ValidationError, match="must use https outside local development"):
        Settings()


def test_settings_allows_plain_http_font_base_url_for_localhost(monkeypatch) -> None:
    monkeypatch.setenv("FONT_BASE_URL", "http://localhost:8000/fonts")
    settings = Settings()
    assert settings.font_base_url == "http://localhost:8000/fonts/"


def test_settings_rejects_non_http_font_base_url(monkeypatch) -> None:
    monkeypatch.setenv("FONT_BASE_URL", "file:///usr/share/fonts")
    with pytest.raises(ValidationError, match=r"must be an http\(s\) URL"):
        Settings()


def test_settings_rejects_non_positive_preview_scale(monkeypatch) -> None:
    monkeypatch.setenv("REDACTION_PREVIEW_SCALE", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_uses_environment(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("APP_ENV", "ci")

    settings = get_settings()
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_retries_after_env_template_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    attempts = {"count": 0}

    class _DummySettings:
        app_env = "ci"

    def _fake_settings():
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ValueError("missing")
        return _DummySettings()

    copied = {"done": 0}

    def _mark_env_copied(**kwargs: object) -> None:
        _ = kwargs
        copied["done"] += 1

    monkeypatch.setattr("pdfdesk.settings.Settings", _fake_settings)
    monkeypatch.setattr("pdfdesk.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("pdfdesk.settings.ensure_env_file_exists", _mark_env_copied)

    settings = get_settings()
    assert copied["done"] == 1
    assert attempts["count"] == 2
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_does_not_copy_env_on_non_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _raise_runtime_error():
        raise RuntimeError("boom")

    def _raise_assertion_error(**kwargs: object) -> None:
        _ = kwargs
        raise AssertionError("should not copy env")

    monkeypatch.setattr("pdfdesk.settings.Settings", _raise_runtime_error)
    monkeypatch.setattr("pdfdesk.settings._is_missing_settings_error", lambda exc: False)
    monkeypatch.setattr("pdfdesk.settings.ensure_env_file_exists", _raise_assertion_error)

    with pytest.raises(SettingsError, match="boom"):
        get_settings()

    get_settings.cache_clear()


def test_ensure_env_file_exists_copies_template(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("FONT_DIR=fonts\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert "FONT_DIR" in env_file.read_text(encoding="utf-8")


def test_ensure_env_file_exists_keeps_existing_file(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("FONT_DIR=fonts\n", encoding="utf-8")
    env_file.write_text("APP_ENV=prod\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.read_text(encoding="utf-8") == "APP_ENV=prod\n"


def test_build_ssl_context_enforces_tls() -> None:
    context = build_ssl_context(Settings())
    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.minimum_version == ssl.TLSVersion.TLSv1_2


def test_build_httpx_client_kwargs_uses_proxy(monkeypatch) -> None:
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.local:8080")
    settings = Settings()

    kwargs = build_httpx_client_kwargs(settings)

    assert kwargs["timeout"] == settings.timeout
    assert kwargs["follow_redirects"] is True
    assert kwargs["proxy"] == "http://proxy.local:8080"


def test_build_httpx_client_kwargs_respects_no_proxy(monkeypatch) -> None:
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.local:8080")
    monkeypatch.setenv("NO_PROXY", ".internal.local,localhost")
    settings = Settings()

    subdomain_kwargs = build_httpx_client_kwargs(settings, target_url="https://fonts.internal.local/Noto.ttf")
    local_kwargs = build_httpx_client_kwargs(settings, target_url="http://localhost:8000/Noto.ttf")
    external_kwargs = build_httpx_client_kwargs(settings, target_url="https://fonts.example.com/Noto.ttf")

    assert "proxy" not in subdomain_kwargs
    assert "proxy" not in local_kwargs
    assert external_kwargs["proxy"] == "http://proxy.local:8080"


def test_settings_should_bypass_proxy_wildcard(monkeypatch) -> None:
    monkeypatch.setenv("NO_PROXY", "*")
    settings = Settings()

    assert settings.should_bypass_proxy("https://anywhere.example/x")
    assert not settings.should_bypass_proxy(None)
