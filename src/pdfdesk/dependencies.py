"""Runtime dependency checks for CLI commands."""

from __future__ import annotations

import importlib.util

from pdfdesk.exceptions import DependencyError

_DOCUMENT_MODULES = {"pymupdf": "fitz"}
_FONT_MODULES = {"pymupdf": "fitz", "httpx": "httpx"}

# Commands that typeset text need fonts, possibly downloaded.
TEXT_COMMANDS = frozenset({"note", "text", "number", "watermark"})


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _collect_missing_dependencies(modules_by_package: dict[str, str]) -> list[str]:
    """Collect missing distribution names for a package -> import module mapping."""
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_cli_dependencies(command: str) -> None:
    """Validate runtime dependencies needed by one CLI command.

    Args:
        command (str): Sub-command name.

    Raises:
        DependencyError: If one or more required modules are missing.
    """
    modules = _FONT_MODULES if command in TEXT_COMMANDS else _DOCUMENT_MODULES
    missing = _collect_missing_dependencies(modules)
    if missing:
        raise DependencyError(missing_package=missing, message=command)
