"""pdfdesk package."""

from pdfdesk.async_runner import run_async
from pdfdesk.exceptions import (
    AsyncExecutionError,
    DependencyError,
    FontLoadError,
    OperationError,
    PackageError,
    SessionStateError,
    SettingsError,
    UserInputError,
)
from pdfdesk.logging import configure_logging, get_logger
from pdfdesk.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("pdfdesk")

__all__ = [
    "AsyncExecutionError",
    "DependencyError",
    "FontLoadError",
    "OperationError",
    "PackageError",
    "SessionStateError",
    "Settings",
    "SettingsError",
    "UserInputError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
