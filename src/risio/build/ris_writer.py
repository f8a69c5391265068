"""RIS format writer.

Serializes records into RIS tag lines. Fields are emitted in canonical tag
order unless the caller supplies a sort preference; ``TY`` always comes
first and ``ER`` always last. Records are separated by one blank line.
"""

from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import TextIO

from risio.errors import RisBuildError
from risio.models import (
    CANONICAL_ORDER,
    LINE_BREAK,
    TERMINATOR_TAG,
    TYPE_TAG,
    FieldBinding,
    RisRecord,
    RisType,
    lookup,
)
from risio.parse.base import TAG_DELIMITER, LineKind, classify_line

__all__ = [
    "resolve_tag_order",
    "format_tag_lines",
    "record_to_lines",
    "RisLineBuilder",
    "iter_ris_lines",
    "format_ris_record",
    "write_ris",
]

TERMINATOR_LINE = f"{TERMINATOR_TAG}{TAG_DELIMITER}"


def resolve_tag_order(sort: Sequence[str] | None = None) -> tuple[str, ...]:
    """Resolve the tag emission order for a sort preference.

    Parameters
    ----------
    sort : Sequence[str] | None, optional
        Preferred tag codes. Named tags are emitted first, in this order;
        unknown codes, repeats and the ``TY``/``ER`` markers are ignored.

    Returns
    -------
    tuple[str, ...]
        Every tag code except ``ER``, starting with ``TY``.
    """
    preferred: list[str] = []
    for tag in sort or ():
        if tag in (TYPE_TAG, TERMINATOR_TAG) or tag in preferred or lookup(tag) is None:
            continue
        preferred.append(tag)

    rest = [t for t in CANONICAL_ORDER if t not in preferred and t not in (TYPE_TAG, TERMINATOR_TAG)]
    return (TYPE_TAG, *preferred, *rest)


def format_tag_lines(tag: str, value: str) -> list[str]:
    """Format one tag value as RIS lines.

    A value holding line breaks (accumulated from continuation lines) is
    written across the same physical lines it was read from.

    Parameters
    ----------
    tag : str
        Two-character tag code.
    value : str
        Field value.

    Returns
    -------
    list[str]
        ``"<tag>  - <first line>"`` followed by any continuation lines.
    """
    first, *rest = value.split(LINE_BREAK)
    return [f"{tag}{TAG_DELIMITER}{first}", *rest]


def record_to_lines(
    record: RisRecord,
    order: Sequence[str] = CANONICAL_ORDER,
    record_index: int = 0,
) -> list[str]:
    """Serialize one record, terminator included.

    Parameters
    ----------
    record : RisRecord
        Record to serialize. Never mutated.
    order : Sequence[str], optional
        Resolved tag order (see ``resolve_tag_order``).
    record_index : int, optional
        Position of the record, used in error messages.

    Returns
    -------
    list[str]
        Lines of the record, ending with the ``ER`` line.

    Raises
    ------
    RisBuildError
        If the record would not read back as written: it has no type, a type
        outside the RisType enumeration, a value that is not a string, a line
        break outside ``AB``, or an ``AB`` line that reads as a tag line.
    """
    lines: list[str] = []

    for tag in order:
        binding = lookup(tag)
        if binding is None or binding.field is None:
            continue
        value = record.get(tag)

        if binding.is_type_marker:
            if value is None:
                raise RisBuildError("Record has no type", record_index, tag)
            if not isinstance(value, RisType):
                raise RisBuildError(f"Invalid type code {value!r}", record_index, tag)
            lines.append(f"{tag}{TAG_DELIMITER}{value.code}")

        elif binding.is_list:
            for item in value:
                lines.extend(_value_lines(binding, item, record_index))

        elif value:
            lines.extend(_value_lines(binding, value, record_index))

    lines.append(TERMINATOR_LINE)
    return lines


def _value_lines(binding: FieldBinding, value: object, record_index: int) -> list[str]:
    tag = binding.tag
    if not isinstance(value, str):
        raise RisBuildError(
            f"Value for tag '{tag}' must be a string, got {type(value).__name__}",
            record_index,
            tag,
        )
    if not binding.is_continuation and LINE_BREAK in value:
        raise RisBuildError(f"Value for tag '{tag}' contains a line break", record_index, tag)

    first, *rest = format_tag_lines(tag, value)
    for line in rest:
        if classify_line(line)[0] is LineKind.TAG:
            raise RisBuildError(
                f"Continuation line of tag '{tag}' reads as a tag line: {line[:50]}",
                record_index,
                tag,
            )
    return [first, *rest]


class RisLineBuilder:
    """Push-style RIS builder, the counterpart of ``RisLineParser``.

    Feed records one at a time; ``feed`` returns the lines for that record,
    preceded by the blank separator line when it is not the first record
    written.

    Parameters
    ----------
    sort : Sequence[str] | None, optional
        Preferred tag order, see ``resolve_tag_order``.
    errors : list[RisBuildError] | None, optional
        If given, malformed records are skipped and their errors appended
        here. If None, the first malformed record raises.

    Attributes
    ----------
    record_count : int
        Number of records fed so far, malformed ones included.
    """

    def __init__(
        self,
        sort: Sequence[str] | None = None,
        *,
        errors: list[RisBuildError] | None = None,
    ) -> None:
        self.order = resolve_tag_order(sort)
        self.errors = errors
        self.record_count = 0
        self._written = 0

    def feed(self, record: RisRecord) -> list[str]:
        """Serialize one record.

        Returns
        -------
        list[str]
            Lines to write; empty when the record was skipped.

        Raises
        ------
        RisBuildError
            If the record is malformed and no ``errors`` list was given.
        """
        index = self.record_count
        self.record_count += 1
        try:
            lines = record_to_lines(record, self.order, index)
        except RisBuildError as e:
            if self.errors is None:
                raise
            self.errors.append(e)
            return []

        self._written += 1
        if self._written > 1:
            lines.insert(0, "")
        return lines


def iter_ris_lines(
    records: Iterable[RisRecord],
    sort: Sequence[str] | None = None,
    *,
    errors: list[RisBuildError] | None = None,
) -> Iterator[str]:
    """Lazily serialize records into RIS lines.

    Parameters
    ----------
    records : Iterable[RisRecord]
        Records to serialize. May be unbounded.
    sort : Sequence[str] | None, optional
        Preferred tag order, see ``resolve_tag_order``.
    errors : list[RisBuildError] | None, optional
        If given, malformed records are skipped and their errors appended
        here. If None, the first malformed record raises.

    Yields
    ------
    str
        Lines without terminators; a blank line separates records.

    Raises
    ------
    RisBuildError
        If a record is malformed and ``errors`` is None.
    """
    builder = RisLineBuilder(sort, errors=errors)
    for record in records:
        yield from builder.feed(record)


def format_ris_record(record: RisRecord, sort: Sequence[str] | None = None) -> str:
    """Format a record as a single RIS string.

    Parameters
    ----------
    record : RisRecord
        Record to format.
    sort : Sequence[str] | None, optional
        Preferred tag order.

    Returns
    -------
    str
        RIS-formatted record string joined with ``\\n``.
    """
    return "\n".join(record_to_lines(record, resolve_tag_order(sort)))


def write_ris(
    records: Iterable[RisRecord],
    sink: Path | TextIO,
    sort: Sequence[str] | None = None,
    line_ending: str = "\n",
) -> int:
    """Write records as RIS to a file path or an open text stream.

    Parameters
    ----------
    records : Iterable[RisRecord]
        Records to write.
    sink : Path | TextIO
        Output file path or writable text stream. Streams are not closed.
    sort : Sequence[str] | None, optional
        Preferred tag order.
    line_ending : str, optional
        Line ending written after every line, by default "\\n".

    Returns
    -------
    int
        Number of lines written.
    """
    if isinstance(sink, Path):
        sink.parent.mkdir(parents=True, exist_ok=True)
        with sink.open("w", encoding="utf-8", newline="") as f:
            return _write_lines(iter_ris_lines(records, sort), f, line_ending)
    return _write_lines(iter_ris_lines(records, sort), sink, line_ending)


def _write_lines(lines: Iterable[str], f: TextIO, line_ending: str) -> int:
    count = 0
    for line in lines:
        f.write(line)
        f.write(line_ending)
        count += 1
    return count
