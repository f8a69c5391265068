"""Exceptions raised while converting RIS text.

Failures of the underlying line source or sink (``OSError``,
``UnicodeDecodeError``) are never wrapped; they propagate unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from risio.parse.base import ParseDiagnostic

__all__ = [
    "RisError",
    "StructuralError",
    "UnknownTagError",
    "InvalidTypeCodeError",
    "RisBuildError",
    "ParseError",
]


class RisError(Exception):
    """Base class for RIS conversion errors."""

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        tag: str | None = None,
    ) -> None:
        """Initialize RIS error.

        Parameters
        ----------
        message : str
            Error message.
        line_number : int | None, optional
            1-based number of the offending input line.
        tag : str | None, optional
            Tag code involved in the error.
        """
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.tag = tag


class StructuralError(RisError):
    """Record marker out of place, truncated record, or duplicate scalar tag."""


class UnknownTagError(RisError):
    """Tag line whose tag is not part of the tag table."""


class InvalidTypeCodeError(RisError, ValueError):
    """TY value that is not a known RIS reference type."""


class RisBuildError(RisError):
    """Record that cannot be serialized to RIS lines."""

    def __init__(self, message: str, record_index: int, tag: str | None = None) -> None:
        super().__init__(f"Record {record_index}: {message}", tag=tag)
        self.record_index = record_index


class ParseError(RisError):
    """Raised when a whole source fails to parse in strict mode."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
        diagnostics: list[ParseDiagnostic] | None = None,
    ) -> None:
        """Initialize parse error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        diagnostics : list[ParseDiagnostic] | None, optional
            Diagnostics collected before failing.
        """
        super().__init__(message)
        self.file = file
        self.diagnostics = diagnostics or []
