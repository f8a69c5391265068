"""Tests for the public API module."""

import io
import json
from pathlib import Path

import jsonschema
import pytest

from risio import (
    ParseError,
    RisRecord,
    RisType,
    build_lines,
    export,
    iter_file,
    iter_records,
    parse_file,
    parse_lines,
    parse_stream,
    read_jsonl,
    write_jsonl,
)
from risio.api import read_lines
from risio.parse import DiagnosticKind, ParseDiagnostic

# ---------------------------------------------------------------------------
# Line-level entry points
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_parse_lines_and_build_lines_are_inverse() -> None:
    """Test the list-returning pair round-trips a simple record."""
    lines = ["TY  - JOUR", "TI  - X", "ER  - "]

    records = parse_lines(lines)

    assert build_lines(records) == lines


@pytest.mark.unit
def test_iter_records_collects_diagnostics() -> None:
    """Test the lazy form fills a caller-owned diagnostics list."""
    diagnostics: list[ParseDiagnostic] = []

    records = list(iter_records(["TY  - JOUR", "ZZ  - ?", "ER  - "], diagnostics=diagnostics))

    assert len(records) == 1
    assert diagnostics[0].kind is DiagnosticKind.UNKNOWN_TAG


@pytest.mark.unit
def test_parse_lines_reports_lenient_diagnostics() -> None:
    """Test lenient parsing returns the records and fills the diagnostics list."""
    diagnostics: list[ParseDiagnostic] = []

    records = parse_lines(
        ["ER  - ", "TY  - JOUR", "TI  - Kept", "stray text", "ER  - "],
        diagnostics=diagnostics,
    )

    assert [r.title for r in records] == ["Kept"]
    assert [(d.line_number, d.kind) for d in diagnostics] == [
        (1, DiagnosticKind.STRUCTURAL),
        (4, DiagnosticKind.UNRECOGNIZED_LINE),
    ]


@pytest.mark.unit
def test_build_lines_with_sort() -> None:
    """Test the sort preference is honoured."""
    record = RisRecord.create(type="JOUR", title="T", publication_year="2001")

    assert build_lines([record], sort=["PY"]) == ["TY  - JOUR", "PY  - 2001", "TI  - T", "ER  - "]


# ---------------------------------------------------------------------------
# parse_file
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_parse_file_returns_records(sample_ris_file: Path) -> None:
    """Test parse_file reads every record of the sample file."""
    records = parse_file(sample_ris_file)

    assert [r.type for r in records] == [RisType.JOUR, RisType.BOOK, RisType.CHAP]
    first = records[0]
    assert first.authors == ("Smith, John", "Doe, Jane")
    assert first.keywords == ("machine learning", "systematic review")
    assert first.abstr == "Background: screening is slow.\n      Methods: we trained a classifier."
    assert records[2].pdf_links == ("https://example.org/chapter/7.pdf",)


@pytest.mark.unit
def test_parse_file_accepts_str_path(sample_ris_file: Path) -> None:
    """Test string paths are accepted."""
    assert len(parse_file(str(sample_ris_file))) == 3


@pytest.mark.unit
def test_parse_file_not_found(tmp_path: Path) -> None:
    """Test a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        parse_file(tmp_path / "missing.ris")


@pytest.mark.unit
def test_parse_file_strict_raises_parse_error(malformed_ris_file: Path) -> None:
    """Test strict parse_file aggregates diagnostics in ParseError."""
    with pytest.raises(ParseError, match="malformed.ris") as exc_info:
        parse_file(malformed_ris_file)

    error = exc_info.value
    assert error.file == str(malformed_ris_file)
    assert len(error.diagnostics) == 5
    assert "Line 3" in str(error)


@pytest.mark.unit
def test_parse_file_lenient_returns_good_records(malformed_ris_file: Path) -> None:
    """Test strict=False keeps whatever could be parsed."""
    records = parse_file(malformed_ris_file, strict=False)

    assert [r.title for r in records] == ["Good first record", "Good second record"]


@pytest.mark.unit
def test_parse_file_detects_bom_and_crlf(tmp_path: Path) -> None:
    """Test a UTF-8 BOM and CRLF endings are handled transparently."""
    path = tmp_path / "bom.ris"
    path.write_bytes(b"\xef\xbb\xbfTY  - JOUR\r\nTI  - Caf\xc3\xa9\r\nER  - \r\n")

    (record,) = parse_file(path)

    assert record.type is RisType.JOUR
    assert record.title == "Café"


@pytest.mark.unit
def test_parse_file_latin1_fallback(tmp_path: Path) -> None:
    """Test bytes that are not UTF-8 decode as latin-1."""
    path = tmp_path / "latin1.ris"
    path.write_bytes("TY  - JOUR\nTI  - Café\nER  - \n".encode("latin-1"))

    (record,) = parse_file(path)

    assert record.title == "Café"


@pytest.mark.unit
def test_read_lines_explicit_encoding_errors_propagate(tmp_path: Path) -> None:
    """Test decoding failures are not wrapped."""
    path = tmp_path / "bad.ris"
    path.write_bytes(b"TI  - \xff\n")

    with pytest.raises(UnicodeDecodeError):
        read_lines(path, encoding="utf-8")


# ---------------------------------------------------------------------------
# Streams and lazy files
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_parse_stream() -> None:
    """Test parsing from an open text stream leaves it open."""
    stream = io.StringIO("TY  - JOUR\r\nTI  - From stream\r\nER  - \r\n")

    records = parse_stream(stream)

    assert records[0].title == "From stream"
    assert not stream.closed


@pytest.mark.unit
def test_parse_stream_reports_lenient_diagnostics(malformed_ris_file: Path) -> None:
    """Test skipped lines in a stream are reported with their line numbers."""
    diagnostics: list[ParseDiagnostic] = []

    with malformed_ris_file.open(encoding="utf-8") as stream:
        records = parse_stream(stream, diagnostics=diagnostics)

    assert len(records) == 2
    assert [d.line_number for d in diagnostics][:4] == [3, 6, 8, 14]
    assert len(diagnostics) == 5


@pytest.mark.unit
def test_iter_file_is_lazy(sample_ris_file: Path) -> None:
    """Test iter_file yields records one by one."""
    iterator = iter_file(sample_ris_file)

    first = next(iterator)
    rest = list(iterator)

    assert first.type is RisType.JOUR
    assert len(rest) == 2


@pytest.mark.unit
def test_iter_file_strict(malformed_ris_file: Path) -> None:
    """Test strict iter_file raises at the first problem."""
    with pytest.raises(Exception, match="Line 3"):
        list(iter_file(malformed_ris_file, strict=True))


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_export_to_path_roundtrips(sample_ris_file: Path, tmp_path: Path) -> None:
    """Test exporting parsed records and reparsing gives the same records."""
    records = parse_file(sample_ris_file)
    target = tmp_path / "out" / "export.ris"

    export(records, str(target))

    assert parse_file(target) == records


@pytest.mark.unit
def test_export_to_stream_with_sort() -> None:
    """Test export writes to a stream using the given order and ending."""
    buffer = io.StringIO()
    record = RisRecord.create(type="JOUR", title="T", authors=["A"])

    count = export([record], buffer, sort=["AU"], line_ending="\r\n")

    assert count == 4
    assert buffer.getvalue() == "TY  - JOUR\r\nAU  - A\r\nTI  - T\r\nER  - \r\n"


# ---------------------------------------------------------------------------
# JSONL
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_write_jsonl_deterministic(sample_ris_file: Path, tmp_path: Path) -> None:
    """Test JSONL output is identical across runs and one line per record."""
    records = parse_file(sample_ris_file)
    first = tmp_path / "a.jsonl"
    second = tmp_path / "b.jsonl"

    assert write_jsonl(records, first) == 3
    write_jsonl(records, second)

    assert first.read_bytes() == second.read_bytes()
    lines = first.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert json.loads(lines[0])["type"] == "JOUR"


@pytest.mark.unit
def test_read_jsonl_inverts_write_jsonl(sample_ris_file: Path, tmp_path: Path) -> None:
    """Test records survive a JSONL round trip."""
    records = parse_file(sample_ris_file)
    path = tmp_path / "records.jsonl"
    write_jsonl(records, path)

    assert read_jsonl(path) == records


@pytest.mark.unit
def test_read_jsonl_accepts_partial_mappings(tmp_path: Path) -> None:
    """Test omitted keys fall back to field defaults."""
    path = tmp_path / "partial.jsonl"
    path.write_text('{"type": "BOOK", "title": "Only title"}\n\n', encoding="utf-8")

    (record,) = read_jsonl(path)

    assert record == RisRecord.create(type="BOOK", title="Only title")


@pytest.mark.unit
def test_read_jsonl_validates_against_schema(tmp_path: Path) -> None:
    """Test malformed mappings are rejected before construction."""
    path = tmp_path / "bad.jsonl"
    path.write_text('{"title": "T", "authors": "not a list"}\n', encoding="utf-8")

    with pytest.raises(jsonschema.ValidationError):
        read_jsonl(path)


@pytest.mark.unit
def test_read_jsonl_not_found(tmp_path: Path) -> None:
    """Test a missing JSONL file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        read_jsonl(tmp_path / "missing.jsonl")
