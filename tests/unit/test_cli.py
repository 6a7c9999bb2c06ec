from __future__ import annotations

import argparse
from typing import TYPE_CHECKING

import pytest

from pdfdesk import cli
from pdfdesk.typing.enums import ImageFormat, NumberPosition
from pdfdesk.typing.models import ExportedFile, RasterRect

if TYPE_CHECKING:
    from pathlib import Path

    from pdfdesk.settings import Settings


@pytest.fixture
def patched_cli(mocker, settings: Settings) -> None:
    mocker.patch("pdfdesk.cli.get_settings", return_value=settings)
    mocker.patch("pdfdesk.cli.ensure_cli_dependencies")


def test_build_parser_supports_version_flag(capsys) -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["--version"])
    assert exc_info.value.code == 0

    captured = capsys.readouterr()
    assert "0.1.0" in captured.out


def test_build_parser_converts_option_types() -> None:
    parser = cli.build_parser()

    pdf2img = parser.parse_args(["pdf2img", "--input", "a.pdf", "--format", "jpg"])
    number = parser.parse_args(["number", "--input", "a.pdf", "--position", "TL"])
    reorder = parser.parse_args(["reorder", "--input", "a.pdf", "--order", "3, 1,2"])

    assert pdf2img.image_format is ImageFormat.JPEG
    assert number.position is NumberPosition.TOP_LEFT
    assert reorder.order == [3, 1, 2]


def test_box_argument_parses_page_and_rectangle() -> None:
    assert cli._box_from_cli("2:10,20,30.5,40") == (2, RasterRect(x=10, y=20, w=30.5, h=40))

    with pytest.raises(argparse.ArgumentTypeError, match="PAGE:X,Y,W,H"):
        cli._box_from_cli("2:10,20")


def test_main_without_command_prints_help(patched_cli, capsys) -> None:
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_main_reports_missing_input(patched_cli, tmp_path: Path, capsys) -> None:
    missing = tmp_path / "missing.pdf"

    result = cli.main(["extract", "--input", str(missing), "--ranges", "1"])

    assert result == 1
    assert f"File not found: {missing}" in capsys.readouterr().err


def test_main_runs_split_flow(patched_cli, mocker, tmp_path: Path, capsys) -> None:
    source = tmp_path / "in.pdf"
    source.write_bytes(b"%PDF-1.7")
    parts = [
        ExportedFile(filename="Test_Split_1-1_1.pdf", media_type="application/pdf", data=b"a"),
        ExportedFile(filename="Test_Split_2-3_1.pdf", media_type="application/pdf", data=b"b"),
    ]
    mock_split = mocker.patch("pdfdesk.operations.split_pdf", return_value=parts)
    out_dir = tmp_path / "exports"

    result = cli.main(["--output-dir", str(out_dir), "split", "--input", str(source), "--ranges", "1,2-3"])

    assert result == 0
    assert mock_split.call_args.args[1] == "1,2-3"
    assert (out_dir / "Test_Split_2-3_1.pdf").read_bytes() == b"b"
    assert str(out_dir / "Test_Split_1-1_1.pdf") in capsys.readouterr().out


def test_main_redact_requires_a_box(patched_cli, tmp_path: Path, capsys) -> None:
    source = tmp_path / "in.pdf"
    source.write_bytes(b"%PDF-1.7")

    assert cli.main(["redact", "--input", str(source)]) == 1
    assert "Add at least one --box." in capsys.readouterr().err


def test_main_hides_unexpected_errors(patched_cli, mocker, tmp_path: Path, capsys) -> None:
    source = tmp_path / "in.pdf"
    source.write_bytes(b"%PDF-1.7")
    mocker.patch("pdfdesk.operations.strip_metadata", side_effect=RuntimeError("boom"))

    assert cli.main(["strip", "--input", str(source)]) == 1
    assert "Something went wrong." in capsys.readouterr().err


def test_main_reports_unwritable_output_dir(patched_cli, mocker, tmp_path: Path, capsys) -> None:
    source = tmp_path / "in.pdf"
    source.write_bytes(b"%PDF-1.7")
    blocker = tmp_path / "exports"
    blocker.write_bytes(b"")
    export = ExportedFile(filename="Test_Clean_1.pdf", media_type="application/pdf", data=b"a")
    mocker.patch("pdfdesk.operations.strip_metadata", return_value=export)

    result = cli.main(["--output-dir", str(blocker), "strip", "--input", str(source)])

    assert result == 1
    assert f"Could not write to {blocker}." in capsys.readouterr().err
