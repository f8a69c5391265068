"""Base types and utilities for the RIS parser."""

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple

from risio.errors import InvalidTypeCodeError, RisError, StructuralError, UnknownTagError
from risio.models import RisRecord

__all__ = [
    "TAG_DELIMITER",
    "TAG_PATTERN",
    "LineKind",
    "DiagnosticKind",
    "ParseDiagnostic",
    "ParseResult",
    "classify_line",
    "detect_encoding",
    "normalize_line_endings",
]

TAG_DELIMITER = "  - "

# The space after the dash is optional so that a bare "ER  -" is accepted
TAG_PATTERN = re.compile(r"^([A-Z0-9]{2})  - ?(.*)$")


class LineKind(StrEnum):
    """Classification of one input line."""

    TAG = "tag"
    CONTINUATION = "continuation"
    BLANK = "blank"


class DiagnosticKind(StrEnum):
    """Kind of problem found while parsing."""

    STRUCTURAL = "structural"
    UNKNOWN_TAG = "unknown_tag"
    INVALID_TYPE = "invalid_type"
    UNRECOGNIZED_LINE = "unrecognized_line"


_EXCEPTIONS: dict[DiagnosticKind, type[RisError]] = {
    DiagnosticKind.STRUCTURAL: StructuralError,
    DiagnosticKind.UNKNOWN_TAG: UnknownTagError,
    DiagnosticKind.INVALID_TYPE: InvalidTypeCodeError,
    DiagnosticKind.UNRECOGNIZED_LINE: StructuralError,
}


@dataclass(frozen=True)
class ParseDiagnostic:
    """A problem attributed to one input line.

    Attributes
    ----------
    line_number : int
        1-based line number in the source.
    kind : DiagnosticKind
        Kind of problem.
    message : str
        Human-readable description.
    tag : str | None
        Tag involved, if the line was a tag line.
    """

    line_number: int
    kind: DiagnosticKind
    message: str
    tag: str | None = None

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.message}"

    def to_exception(self) -> RisError:
        """Return the exception raised for this diagnostic in strict mode."""
        return _EXCEPTIONS[self.kind](self.message, line_number=self.line_number, tag=self.tag)

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "line_number": self.line_number,
            "kind": self.kind.value,
            "message": self.message,
            "tag": self.tag,
        }


class ParseResult(NamedTuple):
    """Result of parsing RIS lines.

    Supports tuple unpacking: ``records, diagnostics = parse_ris(...)``.

    Attributes
    ----------
    records : list[RisRecord]
        Successfully parsed records, in encounter order.
    diagnostics : list[ParseDiagnostic]
        Skipped lines and discarded records.
    """

    records: list[RisRecord]
    diagnostics: list[ParseDiagnostic]

    @property
    def warnings(self) -> list[str]:
        """Diagnostics rendered as messages."""
        return [str(d) for d in self.diagnostics]


def classify_line(line: str) -> tuple[LineKind, str | None, str]:
    """Classify a raw line.

    Parameters
    ----------
    line : str
        Line without its terminator.

    Returns
    -------
    tuple[LineKind, str | None, str]
        Kind, tag (tag lines only) and payload. For continuation and blank
        lines the payload is the line itself.
    """
    match = TAG_PATTERN.match(line)
    if match:
        tag, value = match.groups()
        return LineKind.TAG, tag, value
    if not line.strip():
        return LineKind.BLANK, None, line
    return LineKind.CONTINUATION, None, line


def detect_encoding(file_bytes: bytes) -> str:
    """Detect encoding of file bytes using deterministic strategy.

    Parameters
    ----------
    file_bytes : bytes
        Complete file content as bytes.

    Returns
    -------
    str
        Detected encoding (utf-8-sig, utf-8 or latin-1).
    """
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"


def normalize_line_endings(content: str) -> str:
    """Normalize line endings to LF.

    Parameters
    ----------
    content : str
        Text content with potentially mixed line endings.

    Returns
    -------
    str
        Text with normalized line endings (\\n only).
    """
    content = content.replace("\r\n", "\n")
    return content.replace("\r", "\n")
