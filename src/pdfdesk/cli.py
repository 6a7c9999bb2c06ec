"""CLI entry point for pdfdesk."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pdfdesk import __version__, logger
from pdfdesk.dependencies import ensure_cli_dependencies
from pdfdesk.exceptions import PackageError, UserInputError
from pdfdesk.logging import configure_logging
from pdfdesk.output import persist_exports
from pdfdesk.settings import get_settings
from pdfdesk.typing.enums import ImageFormat, NumberPosition
from pdfdesk.typing.models import RasterRect, SourceFile

if TYPE_CHECKING:
    from collections.abc import Callable

    from pdfdesk.settings import Settings
    from pdfdesk.typing.models import ExportedFile


def _image_format_from_cli(value: str) -> ImageFormat:
    """Convert `--format` CLI value into an image format.

    Raises:
        argparse.ArgumentTypeError: If value is not supported.
    """
    try:
        return ImageFormat.from_str("jpeg" if value.lower() == "jpg" else value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _position_from_cli(value: str) -> NumberPosition:
    """Convert `--position` CLI value into a page-number anchor.

    Raises:
        argparse.ArgumentTypeError: If value is not supported.
    """
    try:
        return NumberPosition.from_str(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _order_from_cli(value: str) -> list[int]:
    """Parse a comma-separated 1-based page order.

    Raises:
        argparse.ArgumentTypeError: If an entry is not an integer.
    """
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--order must be comma-separated page numbers") from exc  # noqa: TRY003


def _box_from_cli(value: str) -> tuple[int, RasterRect]:
    """Parse ``PAGE:X,Y,W,H`` into a page number and a preview rectangle.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed.
    """
    page_part, _, rect_part = value.partition(":")
    try:
        page_number = int(page_part)
        x, y, w, h = (float(part) for part in rect_part.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--box must look like PAGE:X,Y,W,H") from exc  # noqa: TRY003
    return page_number, RasterRect(x=x, y=y, w=w, h=h)


def _add_input(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", required=True, type=Path, dest="input_path")


def build_parser() -> argparse.ArgumentParser:  # noqa: PLR0915
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="pdfdesk", description="Assemble, reorganize and annotate PDFs locally.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--output-dir", type=Path, default=None, dest="output_dir")

    subparsers = parser.add_subparsers(dest="command")

    note = subparsers.add_parser("note", help="Typeset a note into a PDF")
    source = note.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", default=None)
    source.add_argument("--input", type=Path, default=None, dest="input_path")
    note.add_argument("--title", default=None)

    text = subparsers.add_parser("text", help="Typeset .txt/.md files into a PDF")
    text.add_argument("inputs", nargs="+", type=Path)

    images = subparsers.add_parser("images", help="Put PNG/JPEG images on A4 pages")
    images.add_argument("inputs", nargs="+", type=Path)

    pdf2img = subparsers.add_parser("pdf2img", help="Export every page as an image inside a ZIP")
    _add_input(pdf2img)
    pdf2img.add_argument("--format", type=_image_format_from_cli, default=ImageFormat.PNG, dest="image_format")
    pdf2img.add_argument("--scale", type=float, default=1.0)

    compress = subparsers.add_parser("compress", help="Shrink a PDF by rasterizing its pages")
    _add_input(compress)
    compress.add_argument("--scale", type=float, default=1.0)
    compress.add_argument("--quality", type=float, default=0.8)
    compress.add_argument("--format", type=_image_format_from_cli, default=ImageFormat.JPEG, dest="image_format")

    merge = subparsers.add_parser("merge", help="Concatenate PDFs")
    merge.add_argument("inputs", nargs="+", type=Path)

    split = subparsers.add_parser("split", help="Write one PDF per page range")
    _add_input(split)
    split.add_argument("--ranges", required=True)

    reorder = subparsers.add_parser("reorder", help="Rebuild a PDF in a new page order")
    _add_input(reorder)
    reorder.add_argument("--order", type=_order_from_cli, default=[])

    for name, help_text in (("delete", "Delete pages"), ("extract", "Extract pages into a new PDF")):
        ranged = subparsers.add_parser(name, help=help_text)
        _add_input(ranged)
        ranged.add_argument("--ranges", required=True)

    rotate = subparsers.add_parser("rotate", help="Rotate pages")
    _add_input(rotate)
    rotate.add_argument("--ranges", required=True)
    rotate.add_argument("--angle", type=int, required=True)

    number = subparsers.add_parser("number", help="Add 'i / n' page numbers")
    _add_input(number)
    number.add_argument("--position", type=_position_from_cli, default=NumberPosition.BOTTOM_RIGHT)
    number.add_argument("--margin", type=float, default=24.0)

    watermark = subparsers.add_parser("watermark", help="Stamp text across every page")
    _add_input(watermark)
    watermark.add_argument("--text", default=None)
    watermark.add_argument("--size", type=int, default=64)
    watermark.add_argument("--angle", type=float, default=45.0)
    watermark.add_argument("--opacity", type=float, default=0.15)

    strip = subparsers.add_parser("strip", help="Remove document metadata")
    _add_input(strip)

    redact = subparsers.add_parser(
        "redact",
        help="Paint black boxes over page regions (visual only: text underneath is kept)",
    )
    _add_input(redact)
    redact.add_argument("--box", type=_box_from_cli, action="append", default=[], dest="boxes")
    redact.add_argument("--preview-scale", type=float, default=None, dest="preview_scale")

    return parser


def _read_source(path: Path) -> SourceFile:
    """Read an input file.

    Raises:
        UserInputError: If the file does not exist.
    """
    if not path.is_file():
        raise UserInputError(message=f"File not found: {path}")
    return SourceFile(name=path.name, data=path.read_bytes())


def _redact(args: argparse.Namespace, settings: Settings) -> list[ExportedFile]:
    """Replay `--box` arguments through a redaction workspace."""
    from pdfdesk.operations import RedactionWorkspace  # noqa: PLC0415

    if not args.boxes:
        raise UserInputError(message="Add at least one --box.")
    workspace = RedactionWorkspace(settings=settings)
    try:
        workspace.open(_read_source(args.input_path))
        for page_number, rect in args.boxes:
            if not 1 <= page_number <= workspace.session.page_count:
                raise UserInputError(message=f"Page {page_number} is not in the PDF.")
            workspace.go_to(page_number, scale=args.preview_scale)
            workspace.draw((rect.x, rect.y), (rect.x + rect.w, rect.y + rect.h))
        return [workspace.export()]
    finally:
        workspace.close()


def _run_command(args: argparse.Namespace, settings: Settings) -> list[ExportedFile]:  # noqa: C901, PLR0911
    """Dispatch one parsed sub-command to its driver."""
    from pdfdesk import operations  # noqa: PLC0415

    command = args.command
    if command == "note":
        note_text = args.text if args.text is not None else _read_source(args.input_path).data.decode("utf-8")
        return [operations.create_note_pdf(note_text, title=args.title, settings=settings)]
    if command in {"text", "images", "merge"}:
        sources = [_read_source(path) for path in args.inputs]
        handlers: dict[str, Callable[..., ExportedFile]] = {
            "text": operations.text_files_to_pdf,
            "images": operations.images_to_pdf,
            "merge": operations.merge_pdfs,
        }
        return [handlers[command](sources, settings=settings)]
    if command == "redact":
        return _redact(args, settings)

    source = _read_source(args.input_path)
    if command == "pdf2img":
        return [operations.pdf_to_images(source, image_format=args.image_format, scale=args.scale, settings=settings)]
    if command == "compress":
        return [
            operations.compress_pdf(
                source,
                scale=args.scale,
                quality=args.quality,
                image_format=args.image_format,
                settings=settings,
            ),
        ]
    if command == "split":
        return operations.split_pdf(source, args.ranges, settings=settings)
    if command == "reorder":
        return [operations.reorder_pages(source, args.order, settings=settings)]
    if command == "delete":
        return [operations.delete_pages(source, args.ranges, settings=settings)]
    if command == "extract":
        return [operations.extract_pages(source, args.ranges, settings=settings)]
    if command == "rotate":
        return [operations.rotate_pages(source, args.ranges, args.angle, settings=settings)]
    if command == "number":
        return [operations.add_page_numbers(source, position=args.position, margin=args.margin, settings=settings)]
    if command == "watermark":
        return [
            operations.add_watermark(
                source,
                text=args.text,
                size=args.size,
                angle=args.angle,
                opacity=args.opacity,
                settings=settings,
            ),
        ]
    return [operations.strip_metadata(source, settings=settings)]


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error, 130 when interrupted).
    """
    settings = get_settings()
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(settings=settings, command=args.command)

    if not args.command:
        parser.print_help()
        return 0

    try:
        ensure_cli_dependencies(args.command)
        exports = _run_command(args, settings)
        written = persist_exports(exports, args.output_dir or Path(settings.output_dir))
    except PackageError as exc:
        logger.exception("Command failed")
        print(str(exc), file=sys.stderr)  # noqa: T201
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error")
        print("Something went wrong.", file=sys.stderr)  # noqa: T201
        return 1

    for path in written:
        print(path)  # noqa: T201
    logger.info("Command completed", extra={"files": len(written)})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
