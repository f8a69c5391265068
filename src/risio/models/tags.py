"""Declarative RIS tag table.

Maps every two-letter RIS tag to the RisRecord field it populates. Both the
parser and the builder query this table, so adding a tag requires only a new
entry in ``_TABLE``. Declaration order is the canonical emission order.
"""

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

__all__ = [
    "Cardinality",
    "TagRole",
    "FieldBinding",
    "TAG_TABLE",
    "FIELD_BINDINGS",
    "CANONICAL_ORDER",
    "TYPE_TAG",
    "TERMINATOR_TAG",
    "CONTINUATION_TAG",
    "lookup",
    "binding_for_field",
]


class Cardinality(StrEnum):
    """Whether a field holds one value or an ordered list of values."""

    SCALAR = "scalar"
    LIST = "list"


class TagRole(StrEnum):
    """Structural role of a tag in the record state machine."""

    FIELD = "field"
    TYPE_MARKER = "type_marker"
    TERMINATOR = "terminator"
    CONTINUATION = "continuation"


@dataclass(frozen=True)
class FieldBinding:
    """Binding of one RIS tag to a record field.

    Attributes
    ----------
    tag : str
        Two-character tag code (e.g., 'AU').
    field : str | None
        RisRecord attribute name. None for the terminator.
    cardinality : Cardinality
        Scalar or list.
    role : TagRole
        Structural role of the tag.
    """

    tag: str
    field: str | None
    cardinality: Cardinality = Cardinality.SCALAR
    role: TagRole = TagRole.FIELD

    @property
    def is_list(self) -> bool:
        return self.cardinality is Cardinality.LIST

    @property
    def is_type_marker(self) -> bool:
        return self.role is TagRole.TYPE_MARKER

    @property
    def is_terminator(self) -> bool:
        return self.role is TagRole.TERMINATOR

    @property
    def is_continuation(self) -> bool:
        return self.role is TagRole.CONTINUATION


def _scalar(tag: str, field: str) -> FieldBinding:
    return FieldBinding(tag, field)


def _list(tag: str, field: str) -> FieldBinding:
    return FieldBinding(tag, field, Cardinality.LIST)


_TABLE: tuple[FieldBinding, ...] = (
    FieldBinding("TY", "type", role=TagRole.TYPE_MARKER),
    _list("A1", "first_authors"),
    _list("A2", "secondary_authors"),
    _list("A3", "tertiary_authors"),
    _list("A4", "subsidiary_authors"),
    FieldBinding("AB", "abstr", role=TagRole.CONTINUATION),
    _scalar("AD", "author_address"),
    _scalar("AN", "accession_number"),
    _list("AU", "authors"),
    _scalar("AV", "archives_location"),
    _scalar("BT", "bt"),
    _scalar("C1", "custom1"),
    _scalar("C2", "custom2"),
    _scalar("C3", "custom3"),
    _scalar("C4", "custom4"),
    _scalar("C5", "custom5"),
    _scalar("C6", "custom6"),
    _scalar("C7", "custom7"),
    _scalar("C8", "custom8"),
    _scalar("CA", "caption"),
    _scalar("CN", "call_number"),
    _scalar("CP", "cp"),
    _scalar("CT", "unpublished_reference_title"),
    _scalar("CY", "place_published"),
    _scalar("DA", "date"),
    _scalar("DB", "database_name"),
    _scalar("DO", "doi"),
    _scalar("DP", "database_provider"),
    _scalar("ED", "editor"),
    _scalar("EP", "end_page"),
    _scalar("ET", "edition"),
    _scalar("ID", "reference_id"),
    _scalar("IS", "issue"),
    _scalar("J1", "periodical_name_user_abbreviation"),
    _scalar("J2", "alternative_title"),
    _scalar("JA", "periodical_name_standard_abbreviation"),
    _scalar("JF", "periodical_name_full_format_jf"),
    _scalar("JO", "periodical_name_full_format_jo"),
    _list("KW", "keywords"),
    _list("L1", "pdf_links"),
    _list("L2", "full_text_links"),
    _list("L3", "related_records"),
    _list("L4", "images"),
    _scalar("LA", "language"),
    _scalar("LB", "label"),
    _scalar("LK", "website_link"),
    _scalar("M1", "miscellaneous1"),
    _scalar("M2", "miscellaneous2"),
    _scalar("M3", "miscellaneous3"),
    _scalar("N1", "notes"),
    _scalar("N2", "abstr2"),
    _scalar("NV", "number_of_volumes"),
    _scalar("OP", "original_publication"),
    _scalar("PB", "publisher"),
    _scalar("PP", "publishing_place"),
    _scalar("PY", "publication_year"),
    _scalar("RI", "reviewed_item"),
    _scalar("RN", "research_notes"),
    _scalar("RP", "reprint_edition"),
    _scalar("SE", "section"),
    _scalar("SN", "isbn_issn"),
    _scalar("SP", "start_page"),
    _scalar("ST", "short_title"),
    _scalar("T1", "primary_title"),
    _scalar("T2", "secondary_title"),
    _scalar("T3", "tertiary_title"),
    _scalar("TA", "translated_author"),
    _scalar("TI", "title"),
    _scalar("TT", "translated_title"),
    _scalar("U1", "user_definable1"),
    _scalar("U2", "user_definable2"),
    _scalar("U3", "user_definable3"),
    _scalar("U4", "user_definable4"),
    _scalar("U5", "user_definable5"),
    _scalar("UR", "url"),
    _scalar("VL", "volume_number"),
    _scalar("VO", "publisher_standard_number"),
    _scalar("Y1", "primary_date"),
    _scalar("Y2", "access_date"),
    FieldBinding("ER", None, role=TagRole.TERMINATOR),
)

TAG_TABLE: MappingProxyType[str, FieldBinding] = MappingProxyType({b.tag: b for b in _TABLE})

FIELD_BINDINGS: MappingProxyType[str, FieldBinding] = MappingProxyType(
    {b.field: b for b in _TABLE if b.field is not None}
)

CANONICAL_ORDER: tuple[str, ...] = tuple(b.tag for b in _TABLE)

TYPE_TAG = "TY"
TERMINATOR_TAG = "ER"
CONTINUATION_TAG = "AB"


def lookup(tag: str) -> FieldBinding | None:
    """Look up the binding for a tag code.

    Parameters
    ----------
    tag : str
        Two-character tag code.

    Returns
    -------
    FieldBinding | None
        Binding, or None if the tag is not part of the table.
    """
    return TAG_TABLE.get(tag)


def binding_for_field(field: str) -> FieldBinding:
    """Return the binding of a RisRecord field.

    Parameters
    ----------
    field : str
        RisRecord attribute name.

    Returns
    -------
    FieldBinding
        Binding for the field.

    Raises
    ------
    KeyError
        If no tag maps to the field.
    """
    try:
        return FIELD_BINDINGS[field]
    except KeyError:
        raise KeyError(f"No RIS tag is bound to field '{field}'") from None
