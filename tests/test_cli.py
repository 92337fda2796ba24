"""Tests for the inkpatch command line"""

import fitz
import pytest

from inkpatch.__main__ import build_parser, main


@pytest.fixture
def hello_file(tmp_path, hello_pdf):
    path = tmp_path / "hello.pdf"
    path.write_bytes(hello_pdf)
    return path


def detected_ids(capsys, path):
    assert main([str(path), "--list"]) == 0
    out = capsys.readouterr().out
    return [line.split()[0] for line in out.splitlines() if line.strip()]


def test_list_prints_detected_lines(capsys, hello_file):
    assert main([str(hello_file), "--list"]) == 0

    out = capsys.readouterr().out
    assert "Hello" in out
    assert out.split()[0].startswith("line-")


def test_replace_and_export(capsys, hello_file, tmp_path):
    line_id = detected_ids(capsys, hello_file)[0]
    output = tmp_path / "out.pdf"

    code = main([
        str(hello_file), "-o", str(output),
        "--replace", f"{line_id}=Goodbye",
        "--rect", "10,10,50,20",
    ])

    assert code == 0
    doc = fitz.open(output)
    page = doc[0]
    assert "Goodbye" in page.get_text()
    assert page.get_drawings()
    doc.close()


def test_unknown_line(capsys, hello_file):
    assert main([str(hello_file), "--replace", "line-99-0=x"]) == 2
    assert "no detected line" in capsys.readouterr().err


def test_replace_needs_separator(capsys, hello_file):
    assert main([str(hello_file), "--replace", "line-0-0"]) == 2


def test_corrupt_input(capsys, tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf document")

    assert main([str(path)]) == 1
    assert "Showing native PDF preview instead." in capsys.readouterr().err


def test_rect_argument_validation():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["in.pdf", "--rect", "1,2,3"])
