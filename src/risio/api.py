"""Public API for converting RIS text.

This module provides the main public API for risio, enabling:
- Parsing RIS lines, streams and files into RisRecord objects
- Building RIS lines from records and exporting them to paths or streams
- Exporting records to and reading them back from JSONL
"""

import json
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import TextIO

from risio.build import iter_ris_lines, write_ris
from risio.errors import ParseError
from risio.models import RisRecord
from risio.parse import ParseDiagnostic, iter_ris_records, parse_ris
from risio.parse.base import detect_encoding, normalize_line_endings
from risio.schemas import validate_record_dict

__all__ = [
    "read_lines",
    "parse_lines",
    "iter_records",
    "build_lines",
    "parse_file",
    "iter_file",
    "parse_stream",
    "export",
    "write_jsonl",
    "read_jsonl",
]


def read_lines(path: str | Path, *, encoding: str | None = None) -> list[str]:
    """Read a RIS file into lines without terminators.

    Parameters
    ----------
    path : str | Path
        Path to the file.
    encoding : str | None, optional
        File encoding. If None, detected from the bytes (UTF-8 BOM, UTF-8,
        then latin-1).

    Returns
    -------
    list[str]
        Lines with mixed line endings normalized.
    """
    file_bytes = Path(path).read_bytes()
    content = file_bytes.decode(encoding or detect_encoding(file_bytes))
    return normalize_line_endings(content).split("\n")


def iter_records(
    lines: Iterable[str],
    *,
    strict: bool = False,
    diagnostics: list[ParseDiagnostic] | None = None,
) -> Iterator[RisRecord]:
    """Lazily parse RIS lines into records.

    Parameters
    ----------
    lines : Iterable[str]
        Lines without terminators.
    strict : bool, optional
        Raise on the first problem, by default False.
    diagnostics : list[ParseDiagnostic] | None, optional
        Collects skipped-line diagnostics in lenient mode.

    Returns
    -------
    Iterator[RisRecord]
        Records in encounter order.
    """
    return iter_ris_records(lines, strict=strict, diagnostics=diagnostics)


def parse_lines(
    lines: Iterable[str],
    *,
    strict: bool = False,
    diagnostics: list[ParseDiagnostic] | None = None,
) -> list[RisRecord]:
    """Parse RIS lines into a list of records.

    In lenient mode, pass a ``diagnostics`` list to receive the lines that
    were skipped and the records that were discarded.

    Examples
    --------
        >>> records = parse_lines(["TY  - JOUR", "TI  - A Study", "ER  - "])
        >>> records[0].title
        'A Study'
    """
    return list(iter_ris_records(lines, strict=strict, diagnostics=diagnostics))


def build_lines(records: Iterable[RisRecord], sort: Sequence[str] | None = None) -> list[str]:
    """Build RIS lines for records.

    Parameters
    ----------
    records : Iterable[RisRecord]
        Records to serialize.
    sort : Sequence[str] | None, optional
        Preferred tag order.

    Returns
    -------
    list[str]
        Lines without terminators; records separated by one blank line.

    Examples
    --------
        >>> from risio import RisRecord
        >>> build_lines([RisRecord.create(type="JOUR", title="X")])
        ['TY  - JOUR', 'TI  - X', 'ER  - ']
    """
    return list(iter_ris_lines(records, sort))


def parse_file(
    path: str | Path,
    *,
    strict: bool = True,
    encoding: str | None = None,
) -> list[RisRecord]:
    """Parse a RIS file.

    Parameters
    ----------
    path : str | Path
        Path to file to parse.
    strict : bool, optional
        If True, raise ParseError when any line had to be skipped or any
        record discarded. If False, return whatever records could be parsed,
        by default True.
    encoding : str | None, optional
        File encoding. If None, detected from the file bytes.

    Returns
    -------
    list[RisRecord]
        Parsed records.

    Raises
    ------
    ParseError
        If parsing reported problems and strict=True.
    FileNotFoundError
        If file does not exist.

    Examples
    --------
        >>> from risio import parse_file
        >>> records = parse_file("references.ris")
        >>> for record in records:
        ...     print(record.title)
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    records, diagnostics = parse_ris(read_lines(file_path, encoding=encoding))

    if diagnostics and strict:
        details = "; ".join(str(d) for d in diagnostics[:3])
        raise ParseError(
            f"Failed to parse {file_path.name}: {details}",
            file=str(file_path),
            diagnostics=diagnostics,
        )

    return records


def iter_file(
    path: str | Path,
    *,
    strict: bool = False,
    encoding: str = "utf-8-sig",
    diagnostics: list[ParseDiagnostic] | None = None,
) -> Iterator[RisRecord]:
    """Lazily parse a RIS file without loading it into memory.

    The file stays open until the iterator is exhausted or closed.

    Parameters
    ----------
    path : str | Path
        Path to file to parse.
    strict : bool, optional
        Raise on the first problem, by default False.
    encoding : str, optional
        File encoding, by default "utf-8-sig" (UTF-8 with optional BOM).
    diagnostics : list[ParseDiagnostic] | None, optional
        Collects skipped-line diagnostics in lenient mode.

    Yields
    ------
    RisRecord
        Records in file order.
    """
    with Path(path).open("r", encoding=encoding) as f:
        yield from iter_ris_records(
            (line.rstrip("\n") for line in f),
            strict=strict,
            diagnostics=diagnostics,
        )


def parse_stream(
    stream: TextIO,
    *,
    strict: bool = False,
    diagnostics: list[ParseDiagnostic] | None = None,
) -> list[RisRecord]:
    """Parse RIS text from an open text stream.

    The stream is read to the end but not closed. Lenient-mode diagnostics
    are appended to ``diagnostics`` when given.
    """
    lines = (line.rstrip("\r\n") for line in stream)
    return list(iter_ris_records(lines, strict=strict, diagnostics=diagnostics))


def export(
    records: Iterable[RisRecord],
    sink: str | Path | TextIO,
    *,
    sort: Sequence[str] | None = None,
    line_ending: str = "\n",
) -> int:
    """Write records as RIS to a path or text stream.

    Parameters
    ----------
    records : Iterable[RisRecord]
        Records to write.
    sink : str | Path | TextIO
        Output file path or writable text stream. Parent directories of a
        path are created; streams are left open.
    sort : Sequence[str] | None, optional
        Preferred tag order.
    line_ending : str, optional
        Line ending written after every line, by default "\\n".

    Returns
    -------
    int
        Number of lines written.

    Examples
    --------
        >>> from risio import export, parse_file
        >>> export(parse_file("in.ris"), "out.ris", sort=["TI", "AU"])
    """
    if isinstance(sink, str):
        sink = Path(sink)
    return write_ris(records, sink, sort, line_ending)


def write_jsonl(
    records: Iterable[RisRecord],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> int:
    """Write records to JSONL file (one JSON object per line).

    Output is deterministic with consistent field ordering and UTF-8 encoding.

    Parameters
    ----------
    records : Iterable[RisRecord]
        Records to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.

    Returns
    -------
    int
        Number of records written.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            json_str = json.dumps(
                record.to_dict(),
                ensure_ascii=False,
                sort_keys=sort_keys,
            )
            f.write(json_str + "\n")
            count += 1
    return count


def read_jsonl(path: str | Path, *, validate: bool = True) -> list[RisRecord]:
    """Read records written by ``write_jsonl``.

    Parameters
    ----------
    path : str | Path
        JSONL file path.
    validate : bool, optional
        Check every line against the bundled record schema, by default True.

    Returns
    -------
    list[RisRecord]
        Records in file order.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    jsonschema.ValidationError
        If a line does not describe a record and validate=True.
    InvalidTypeCodeError
        If a record carries an unknown type code.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    records: list[RisRecord] = []
    with file_path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            data = json.loads(line)
            if validate:
                validate_record_dict(data)
            records.append(RisRecord.from_dict(data))
    return records
