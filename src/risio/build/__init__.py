"""RIS text building.

Main entry points:
- iter_ris_lines: Lazily turn records into RIS lines
- RisLineBuilder: Push-style builder fed one record at a time
- write_ris: Write records to a path or text stream
"""

from risio.build.ris_writer import (
    RisLineBuilder,
    format_ris_record,
    iter_ris_lines,
    record_to_lines,
    resolve_tag_order,
    write_ris,
)

__all__ = [
    "RisLineBuilder",
    "format_ris_record",
    "iter_ris_lines",
    "record_to_lines",
    "resolve_tag_order",
    "write_ris",
]
