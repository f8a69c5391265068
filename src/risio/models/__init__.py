"""Shared data types for risio.

This package contains the record model, the RIS reference type codes and
the declarative tag table consumed by both the parser and the builder.
"""

from risio.models.records import LEGACY_ALIASES, LINE_BREAK, RisRecord, RisRecordBuilder
from risio.models.tags import (
    CANONICAL_ORDER,
    CONTINUATION_TAG,
    TAG_TABLE,
    TERMINATOR_TAG,
    TYPE_TAG,
    Cardinality,
    FieldBinding,
    TagRole,
    binding_for_field,
    lookup,
)
from risio.models.types import RisType

__all__ = [
    # Record models
    "RisRecord",
    "RisRecordBuilder",
    "RisType",
    "LEGACY_ALIASES",
    "LINE_BREAK",
    # Tag table
    "TAG_TABLE",
    "CANONICAL_ORDER",
    "TYPE_TAG",
    "TERMINATOR_TAG",
    "CONTINUATION_TAG",
    "Cardinality",
    "FieldBinding",
    "TagRole",
    "binding_for_field",
    "lookup",
]
