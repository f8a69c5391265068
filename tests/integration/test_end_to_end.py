"""Integration tests chaining file, stream and async adapters.

Each test pushes the sample library through several adapters and checks
that the records survive unchanged.
"""

import asyncio
import io
from pathlib import Path

import pytest

from risio import (
    ConversionConfig,
    export,
    iter_file,
    parse_file,
    parse_stream,
    read_jsonl,
    write_jsonl,
)
from risio.streaming import aiter_lines, aiter_records

_FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def sample_ris_file() -> Path:
    """Path to the sample RIS library."""
    return _FIXTURES_DIR / "sample.ris"


@pytest.mark.integration
def test_file_to_jsonl_to_crlf_file(sample_ris_file: Path, tmp_path: Path) -> None:
    """Test RIS -> JSONL -> CRLF RIS -> records is lossless."""
    config = ConversionConfig(sort=["TI", "AU"], line_ending="\r\n")
    records = parse_file(sample_ris_file)

    jsonl = tmp_path / "records.jsonl"
    write_jsonl(records, jsonl)
    restored = read_jsonl(jsonl)

    out = tmp_path / "library.ris"
    export(restored, out, sort=config.sort, line_ending=config.line_ending)

    raw = out.read_bytes()
    assert b"\r\n\r\nTY  - BOOK\r\n" in raw
    assert raw.startswith(b"TY  - JOUR\r\nTI  - ")
    assert parse_file(out) == records
    assert list(iter_file(out)) == records


@pytest.mark.integration
def test_async_pipeline_matches_sync(sample_ris_file: Path) -> None:
    """Test async parse -> async build -> stream parse reproduces the records."""
    records = parse_file(sample_ris_file)

    async def pipeline() -> list[str]:
        lines = sample_ris_file.read_text(encoding="utf-8").split("\n")
        parsed = aiter_records(lines, buffer_size=2)
        return [line async for line in aiter_lines(parsed, buffer_size=2)]

    built = asyncio.run(pipeline())
    stream = io.StringIO("\n".join(built) + "\n")

    assert parse_stream(stream, strict=True) == records
