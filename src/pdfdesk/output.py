"""Exported file naming and persistence."""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.exceptions import OperationError
from pdfdesk.typing.models import ExportedFile

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pdfdesk.typing.enums import OutputKind

PDF_MEDIA_TYPE = "application/pdf"
ZIP_MEDIA_TYPE = "application/zip"


def timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


def build_output_name(
    prefix: str,
    kind: OutputKind,
    extension: str = "pdf",
    *,
    detail: str | None = None,
    stamp: int | None = None,
) -> str:
    """Build ``{prefix}_{Label}[_{detail}]_{epoch_ms}.{extension}``.

    Args:
        prefix (str): Project-wide prefix.
        kind (OutputKind): Feature that produced the file.
        extension (str): File extension without dot.
        detail (str | None): Optional qualifier, e.g. ``"2-4"`` for a split part.
        stamp (int | None): Epoch milliseconds; current time when omitted.

    Returns:
        str: File name.
    """
    parts = [prefix, kind.label]
    if detail:
        parts.append(detail)
    parts.append(str(stamp if stamp is not None else timestamp_ms()))
    return f"{'_'.join(parts)}.{extension}"


def pdf_export(data: bytes, prefix: str, kind: OutputKind, *, detail: str | None = None) -> ExportedFile:
    return ExportedFile(
        filename=build_output_name(prefix, kind, detail=detail),
        media_type=PDF_MEDIA_TYPE,
        data=data,
    )


def persist_exports(exports: Iterable[ExportedFile], output_dir: Path) -> list[Path]:
    """Write exported files into `output_dir`.

    Args:
        exports (Iterable[ExportedFile]): Files to write.
        output_dir (Path): Target directory, created when missing.

    Raises:
        OperationError: If the directory or a file cannot be written.

    Returns:
        list[Path]: Written paths in input order.
    """
    written: list[Path] = []
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for export in exports:
            path = output_dir / export.filename
            path.write_bytes(export.data)
            written.append(path)
    except OSError as exc:
        raise OperationError(message=f"Could not write to {output_dir}.") from exc
    logger.info("Exports written", extra={"count": len(written), "output_dir": str(output_dir)})
    return written
