"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class UserInputError(PackageError):
    """Raised when user input is missing or invalid.

    The message is a short status line meant to be shown as-is.
    """

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class FontLoadError(PackageError):
    """Raised when a required font face cannot be loaded from any source."""

    font_name: str
    message: str = "Failed to load font"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.font_name}"


@dataclass(frozen=True)
class OperationError(PackageError):
    """Raised when a document operation fails while processing."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class SessionStateError(PackageError):
    """Raised when the redaction session is used in an invalid state."""

    message: str = "Load a PDF first."

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
