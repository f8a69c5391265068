"""RIS text parsing.

Main entry points:
- iter_ris_records: Lazily turn RIS lines into records
- parse_ris: Parse all lines and collect diagnostics
- RisLineParser: Push-style parser fed one line at a time
"""

from risio.parse.base import DiagnosticKind, ParseDiagnostic, ParseResult
from risio.parse.ris import RisLineParser, iter_ris_records, parse_ris

__all__ = [
    "DiagnosticKind",
    "ParseDiagnostic",
    "ParseResult",
    "RisLineParser",
    "iter_ris_records",
    "parse_ris",
]
