"""Conversion between RIS bibliographic text and structured records.

This package provides:
- Data models (risio.models): records, reference types and the tag table
- Parsing (risio.parse): RIS lines to records
- Building (risio.build): records to RIS lines
- Streaming (risio.streaming): async adapters with bounded buffering
- Audit (risio.audit): structured JSONL event logging
- CLI (risio.cli): command-line interface
- Public API (risio.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from risio.api import (
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
from risio.config import ConversionConfig
from risio.errors import (
    InvalidTypeCodeError,
    ParseError,
    RisBuildError,
    RisError,
    StructuralError,
    UnknownTagError,
)
from risio.models import RisRecord, RisRecordBuilder, RisType
from risio.parse import ParseDiagnostic, ParseResult, parse_ris

__all__ = [
    "__version__",
    "__license__",
    # Models
    "RisRecord",
    "RisRecordBuilder",
    "RisType",
    # Core transform
    "parse_ris",
    "iter_records",
    "parse_lines",
    "build_lines",
    "ParseDiagnostic",
    "ParseResult",
    # Adapters
    "parse_file",
    "iter_file",
    "parse_stream",
    "export",
    "write_jsonl",
    "read_jsonl",
    "ConversionConfig",
    # Errors
    "RisError",
    "StructuralError",
    "UnknownTagError",
    "InvalidTypeCodeError",
    "RisBuildError",
    "ParseError",
]
