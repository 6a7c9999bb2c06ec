"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
import ssl
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pdfdesk.exceptions import SettingsError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "pdfdesk"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )
    http_proxy: str | None = Field(default=None, validation_alias="HTTP_PROXY", description="HTTP proxy URL.")
    https_proxy: str | None = Field(
        default=None,
        validation_alias="HTTPS_PROXY",
        description="HTTPS proxy URL.",
    )
    no_proxy: str | None = Field(
        default=None,
        validation_alias="NO_PROXY",
        description="Comma-separated list of hosts to bypass proxy.",
    )
    cert_path: str | None = Field(
        default=None,
        validation_alias="CERT_PATH",
        description="Path to SSL certificate.",
    )
    timeout: float = Field(
        default=30.0,
        validation_alias="TIMEOUT",
        description="Font download timeout in seconds.",
    )

    font_dir: str = Field(
        default="fonts",
        validation_alias="FONT_DIR",
        description="Directory searched first for TrueType font files.",
    )
    font_base_url: str | None = Field(
        default=None,
        validation_alias="FONT_BASE_URL",
        description="Base URL font files are downloaded from when missing locally.",
    )
    builtin_font_fallback: bool = Field(
        default=True,
        validation_alias="BUILTIN_FONT_FALLBACK",
        description="Use PyMuPDF built-in Helvetica when regular/bold faces are unavailable.",
    )

    output_dir: str = Field(
        default="results",
        validation_alias="OUTPUT_DIR",
        description="Directory exported files are written to.",
    )
    output_prefix: str = Field(
        default="PdfDesk",
        validation_alias="OUTPUT_PREFIX",
        description="Prefix of every exported file name.",
    )
    redaction_preview_scale: float = Field(
        default=1.5,
        gt=0,
        validation_alias="REDACTION_PREVIEW_SCALE",
        description="Zoom used when rendering pages for redaction boxes.",
    )

    @field_validator("font_base_url")
    @classmethod
    def _validate_font_base_url(cls, value: str | None) -> str | None:
        """Require https for remote font sources outside localhost.

        Args:
            value (str | None): Raw base URL.

        Raises:
            ValueError: If the URL is plain http on a non-local host.

        Returns:
            str | None: Normalized base URL with a trailing slash.
        """
        if value is None:
            return None
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            message = f"FONT_BASE_URL must be an http(s) URL, got '{value}'"
            raise ValueError(message)
        if parsed.scheme == "http" and parsed.hostname not in {"localhost", "127.0.0.1", "::1"}:
            message = "FONT_BASE_URL must use https outside local development"
            raise ValueError(message)
        return value if value.endswith("/") else f"{value}/"

    def should_bypass_proxy(self, target_url: str | None) -> bool:
        """Return whether the URL should bypass proxies."""
        return _is_no_proxy_target(target_url, self.no_proxy)


def build_ssl_context(settings: Settings) -> ssl.SSLContext:
    """Build a strict SSL context from settings.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ssl.SSLContext: Configured TLS context.
    """
    ssl_context = ssl.create_default_context(cafile=settings.cert_path)
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    return ssl_context


def _iter_no_proxy_entries(no_proxy: str | None) -> list[str]:
    """Split NO_PROXY into normalized host entries.

    Args:
        no_proxy (str | None): Raw NO_PROXY value.

    Returns:
        list[str]: Lower-cased entries without leading dots.
    """
    if not no_proxy:
        return []
    return [entry.strip().lower().removeprefix(".") for entry in no_proxy.split(",") if entry.strip()]


def _is_no_proxy_target(target_url: str | None, no_proxy: str | None) -> bool:
    """Return whether the target URL matches a NO_PROXY entry.

    Args:
        target_url (str | None): Target request URL.
        no_proxy (str | None): Raw NO_PROXY value.

    Returns:
        bool: True when proxy must be bypassed.
    """
    if not target_url:
        return False
    hostname = urlparse(target_url).hostname
    if not hostname:
        return False

    host = hostname.lower().strip("[]")
    for entry in _iter_no_proxy_entries(no_proxy):
        if entry == "*" or host == entry or host.endswith(f".{entry}"):
            return True
    return False


def build_httpx_client_kwargs(
    settings: Settings,
    *,
    target_url: str | None = None,
) -> dict[str, Any]:
    """Build kwargs used for `httpx.Client` and `httpx.AsyncClient`.

    Args:
        settings (Settings): Runtime settings.
        target_url (str | None): Optional target URL used for NO_PROXY evaluation.

    Returns:
        dict[str, Any]: Arguments for client constructors.
    """
    proxy_url = settings.https_proxy or settings.http_proxy

    kwargs: dict[str, Any] = {
        "verify": build_ssl_context(settings),
        "timeout": settings.timeout,
        "follow_redirects": True,
    }
    if proxy_url and not settings.should_bypass_proxy(target_url):
        kwargs["proxy"] = proxy_url
    return kwargs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            try:
                ensure_env_file_exists()
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values."""
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
