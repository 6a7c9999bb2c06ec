"""Helpers shared by the document operation drivers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.exceptions import OperationError, PackageError, UserInputError
from pdfdesk.pdf_document import PdfDocument
from pdfdesk.processing.ranges import parse_ranges

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from pdfdesk.typing.models import RangeSpec, SourceFile

NO_PDF = "Choose a PDF."
INVALID_RANGES = "Enter valid ranges."


@contextmanager
def processing_errors(status: str, *, operation: str) -> Iterator[None]:
    """Turn unexpected failures into an `OperationError` carrying `status`.

    Package errors raised inside the block pass through unchanged.
    """
    try:
        yield
    except PackageError:
        raise
    except Exception as exc:
        logger.exception("Document operation failed", extra={"operation": operation})
        raise OperationError(message=status) from exc


def require_pdf(source: SourceFile | None) -> SourceFile:
    """Return `source` or raise the 'no file' user error."""
    if source is None or not source.data:
        raise UserInputError(message=NO_PDF)
    return source


def require_ranges(text: str | None) -> RangeSpec:
    """Parse range text, rejecting input where no token survives."""
    spec = parse_ranges(text)
    if not spec:
        raise UserInputError(message=INVALID_RANGES)
    return spec


def copy_into_new(source: PdfDocument, indices: Sequence[int]) -> bytes:
    """Copy `indices` of `source` into a fresh document and serialize it."""
    with PdfDocument.create() as out:
        out.copy_pages(source, indices)
        return out.save()
