"""Tests for the RIS tag table and reference type codes."""

from dataclasses import fields

import pytest

from risio.models import (
    CANONICAL_ORDER,
    CONTINUATION_TAG,
    TAG_TABLE,
    TERMINATOR_TAG,
    TYPE_TAG,
    Cardinality,
    RisRecord,
    RisType,
    TagRole,
    binding_for_field,
    lookup,
)

LIST_TAGS = {"A1", "A2", "A3", "A4", "AU", "KW", "L1", "L2", "L3", "L4"}


# ---------------------------------------------------------------------------
# Tag table
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_table_covers_every_record_field() -> None:
    """Test every RisRecord field is bound to exactly one tag."""
    bound = [b.field for b in TAG_TABLE.values() if b.field is not None]

    assert sorted(bound) == sorted(f.name for f in fields(RisRecord))
    assert len(bound) == len(set(bound))


@pytest.mark.unit
def test_canonical_order_starts_with_type_and_ends_with_terminator() -> None:
    """Test canonical order has TY first and ER last."""
    assert len(CANONICAL_ORDER) == 80
    assert CANONICAL_ORDER[0] == TYPE_TAG == "TY"
    assert CANONICAL_ORDER[-1] == TERMINATOR_TAG == "ER"
    assert list(CANONICAL_ORDER) == list(TAG_TABLE)


@pytest.mark.unit
def test_list_tags_are_exactly_the_repeatable_ones() -> None:
    """Test only the author, keyword and link tags are lists."""
    list_tags = {tag for tag, b in TAG_TABLE.items() if b.cardinality is Cardinality.LIST}

    assert list_tags == LIST_TAGS


@pytest.mark.unit
def test_special_roles() -> None:
    """Test the type marker, terminator and continuation field bindings."""
    ty = lookup("TY")
    er = lookup("ER")
    ab = lookup(CONTINUATION_TAG)

    assert ty.is_type_marker and ty.field == "type"
    assert er.is_terminator and er.field is None
    assert ab.is_continuation and ab.field == "abstr"
    assert not ab.is_list

    continuation = [b for b in TAG_TABLE.values() if b.role is TagRole.CONTINUATION]
    assert continuation == [ab]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("tag", "field"),
    [
        ("AU", "authors"),
        ("TI", "title"),
        ("PY", "publication_year"),
        ("M1", "miscellaneous1"),
        ("M3", "miscellaneous3"),
        ("JF", "periodical_name_full_format_jf"),
        ("SN", "isbn_issn"),
        ("Y2", "access_date"),
    ],
)
def test_lookup_known_tags(tag: str, field: str) -> None:
    """Test lookup returns the bound field."""
    assert lookup(tag).field == field


@pytest.mark.unit
@pytest.mark.parametrize("tag", ["XX", "ti", "", "TITLE", "Z9"])
def test_lookup_unknown_tag_returns_none(tag: str) -> None:
    """Test unknown tags yield no binding instead of raising."""
    assert lookup(tag) is None


@pytest.mark.unit
def test_binding_for_field() -> None:
    """Test reverse lookup from field name to tag."""
    assert binding_for_field("keywords").tag == "KW"

    with pytest.raises(KeyError, match="no_such_field"):
        binding_for_field("no_such_field")


@pytest.mark.unit
def test_table_is_read_only() -> None:
    """Test the tag table cannot be mutated at runtime."""
    with pytest.raises(TypeError):
        TAG_TABLE["XX"] = TAG_TABLE["TI"]  # type: ignore[index]


# ---------------------------------------------------------------------------
# Reference types
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_ris_type_members() -> None:
    """Test the enumeration holds the standard reference types."""
    assert len(RisType) == 56
    assert RisType.JOUR.code == "JOUR"
    assert RisType.JOUR.description == "Journal"
    assert str(RisType.BOOK) == "BOOK"
    assert RisType.BOOK == "BOOK"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("JOUR", RisType.JOUR),
        (" CHAP ", RisType.CHAP),
        ("jour", None),
        ("WHAT", None),
        ("", None),
        (None, None),
    ],
)
def test_ris_type_from_code(code: str | None, expected: RisType | None) -> None:
    """Test from_code never guesses a type for unknown codes."""
    assert RisType.from_code(code) is expected
