"""RIS format parser.

Two-letter tags, "TY  - " starts record, "ER  - " ends it.
Reference: https://refdb.sourceforge.net/manual-0.9.6/sect1-ris-format.html

The parser is a sequential fold over lines with three states: idle (between
records), in a record, and skipping (the current record was discarded and
the parser waits for its ``ER``). Untagged lines are only accepted as
continuation of the ``AB`` field.
"""

from collections.abc import Iterable, Iterator
from enum import StrEnum

from risio.models import CONTINUATION_TAG, RisRecord, RisRecordBuilder, RisType, lookup
from risio.parse.base import (
    DiagnosticKind,
    LineKind,
    ParseDiagnostic,
    ParseResult,
    classify_line,
)

__all__ = ["PARSER_VERSION", "RisLineParser", "iter_ris_records", "parse_ris"]

PARSER_VERSION = "1.0.0"

CONTINUATION_FIELD = lookup(CONTINUATION_TAG).field


class ParserState(StrEnum):
    """State of the record state machine."""

    IDLE = "idle"
    IN_RECORD = "in_record"
    SKIPPING = "skipping"


class RisLineParser:
    """Push-style RIS parser.

    Feed lines one at a time; ``feed`` returns a record whenever an ``ER``
    line completes one. Call ``finish`` once the source is exhausted.

    Parameters
    ----------
    strict : bool, optional
        If True, raise on the first problem. If False, skip offending lines,
        discard broken records and collect diagnostics, by default False.
    diagnostics : list[ParseDiagnostic] | None, optional
        List that collects diagnostics in lenient mode.

    Attributes
    ----------
    state : ParserState
        Current state.
    line_number : int
        Number of lines fed so far.
    diagnostics : list[ParseDiagnostic]
        Problems collected in lenient mode.
    """

    def __init__(
        self,
        *,
        strict: bool = False,
        diagnostics: list[ParseDiagnostic] | None = None,
    ) -> None:
        self.strict = strict
        self.diagnostics = diagnostics if diagnostics is not None else []
        self.state = ParserState.IDLE
        self.line_number = 0
        self._builder = RisRecordBuilder()
        self._record_start = 0
        self._continuation_open = False

    def _report(self, kind: DiagnosticKind, message: str, tag: str | None = None) -> None:
        diagnostic = ParseDiagnostic(self.line_number, kind, message, tag)
        if self.strict:
            raise diagnostic.to_exception()
        self.diagnostics.append(diagnostic)

    def feed(self, line: str) -> RisRecord | None:
        """Consume one line.

        Parameters
        ----------
        line : str
            Line without its terminator.

        Returns
        -------
        RisRecord | None
            The completed record if this line was its ``ER``, else None.

        Raises
        ------
        StructuralError
            Strict mode: marker out of place, duplicate scalar tag or stray line.
        UnknownTagError
            Strict mode: tag not in the tag table.
        InvalidTypeCodeError
            Strict mode: ``TY`` value is not a known reference type.
        """
        self.line_number += 1
        kind, tag, value = classify_line(line.rstrip("\r\n"))

        if kind is not LineKind.TAG:
            if self.state is ParserState.IN_RECORD and self._continuation_open:
                self._builder.continue_value(CONTINUATION_FIELD, value)
            elif kind is LineKind.CONTINUATION and self.state is not ParserState.SKIPPING:
                self._report(DiagnosticKind.UNRECOGNIZED_LINE, f"Unrecognized line: {value[:50]}")
            return None

        self._continuation_open = False
        binding = lookup(tag)

        if binding is None:
            if self.state is not ParserState.SKIPPING:
                self._report(DiagnosticKind.UNKNOWN_TAG, f"Unknown tag '{tag}'", tag)
            return None

        if binding.is_type_marker:
            self._open_record(tag, value)
            return None

        if binding.is_terminator:
            return self._close_record(tag)

        if self.state is ParserState.IDLE:
            self._report(DiagnosticKind.STRUCTURAL, f"Tag '{tag}' outside of a record", tag)
        elif self.state is ParserState.IN_RECORD:
            if binding.is_list:
                self._builder.append(binding.field, value)
            elif self._builder.has(binding.field):
                self.state = ParserState.SKIPPING
                self._report(
                    DiagnosticKind.STRUCTURAL,
                    f"Duplicate tag '{tag}' in record started at line {self._record_start}",
                    tag,
                )
            else:
                self._builder.set(binding.field, value)
                self._continuation_open = binding.is_continuation
        return None

    def _open_record(self, tag: str, value: str) -> None:
        if self.state is ParserState.IN_RECORD:
            self.state = ParserState.SKIPPING
            self._report(
                DiagnosticKind.STRUCTURAL,
                f"Found TY without closing ER for record started at line {self._record_start}",
                tag,
            )

        self._builder = RisRecordBuilder()
        self._record_start = self.line_number
        ris_type = RisType.from_code(value)
        if ris_type is None:
            self.state = ParserState.SKIPPING
            self._report(DiagnosticKind.INVALID_TYPE, f"Unknown type code '{value}'", tag)
        else:
            self._builder.set("type", ris_type)
            self.state = ParserState.IN_RECORD

    def _close_record(self, tag: str) -> RisRecord | None:
        previous, self.state = self.state, ParserState.IDLE
        if previous is ParserState.IN_RECORD:
            return self._builder.build()
        if previous is ParserState.IDLE:
            self._report(DiagnosticKind.STRUCTURAL, "Found ER without opening TY", tag)
        return None

    def finish(self) -> None:
        """Signal end of input.

        Raises
        ------
        StructuralError
            Strict mode: a record is still open. In lenient mode the
            truncated record is discarded with a diagnostic.
        """
        if self.state is ParserState.IN_RECORD:
            self.state = ParserState.IDLE
            self._report(
                DiagnosticKind.STRUCTURAL,
                "End of input reached without closing ER for record started at line "
                f"{self._record_start}",
            )
        self.state = ParserState.IDLE


def iter_ris_records(
    lines: Iterable[str],
    *,
    strict: bool = False,
    diagnostics: list[ParseDiagnostic] | None = None,
) -> Iterator[RisRecord]:
    """Lazily parse RIS lines into records.

    Parameters
    ----------
    lines : Iterable[str]
        Source lines without line terminators. May be unbounded.
    strict : bool, optional
        If True, raise on the first problem, by default False.
    diagnostics : list[ParseDiagnostic] | None, optional
        List that collects diagnostics in lenient mode.

    Yields
    ------
    RisRecord
        Each record as soon as its ``ER`` line has been read.
    """
    parser = RisLineParser(strict=strict, diagnostics=diagnostics)
    for line in lines:
        record = parser.feed(line)
        if record is not None:
            yield record
    parser.finish()


def parse_ris(lines: Iterable[str], *, strict: bool = False) -> ParseResult:
    """Parse RIS lines and return all records with their diagnostics.

    Parameters
    ----------
    lines : Iterable[str]
        Source lines without line terminators.
    strict : bool, optional
        If True, raise on the first problem, by default False.

    Returns
    -------
    ParseResult
        Records and diagnostics.
    """
    diagnostics: list[ParseDiagnostic] = []
    records = list(iter_ris_records(lines, strict=strict, diagnostics=diagnostics))
    return ParseResult(records, diagnostics)
