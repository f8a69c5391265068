"""RIS record data model.

A RisRecord is one bibliographic entry. Field names and cardinality come
from the tag table in ``risio.models.tags``: a field is a tuple if and only
if its tag is repeatable, every other field is an optional string.

RisRecordBuilder is the canonical way to construct records; ``RisRecord.create``
and ``RisRecord.from_dict`` are thin conveniences over it.
"""

import warnings
from dataclasses import InitVar, dataclass, fields
from typing import Any, ClassVar

from risio.errors import InvalidTypeCodeError
from risio.models.tags import FIELD_BINDINGS, lookup
from risio.models.types import RisType

__all__ = ["RisRecord", "RisRecordBuilder", "LEGACY_ALIASES", "LINE_BREAK"]

# Internal line-break convention for values accumulated from continuation lines
LINE_BREAK = "\n"

# Deprecated public names -> storage slot they are a view over
LEGACY_ALIASES: dict[str, str] = {
    "number": "miscellaneous1",
    "type_of_work": "miscellaneous3",
}


class _SharedSlot:
    """Storage slot that also backs a legacy alias.

    Reads through the current field name return None when the slot was
    populated under its legacy alias, so the two names never both report a
    value for one record.
    """

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return None
        if self.name in obj._legacy_names:
            return None
        return obj.__dict__.get(self.name)

    def __set__(self, obj: Any, value: Any) -> None:
        obj.__dict__[self.name] = value


@dataclass(frozen=True, eq=False)
class RisRecord:
    """One bibliographic entry.

    All scalar fields default to None, all list fields default to an empty
    tuple. Attribute order follows the canonical RIS tag order.

    The deprecated properties ``number`` and ``type_of_work`` share their
    storage slot with ``miscellaneous1`` and ``miscellaneous3``. Only the
    name the slot was populated under reports its value; ``get(tag)`` and
    ``to_dict`` read the slot whichever name filled it.
    """

    _legacy_names: ClassVar[frozenset[str]] = frozenset()

    type: RisType | None = None
    first_authors: tuple[str, ...] = ()
    secondary_authors: tuple[str, ...] = ()
    tertiary_authors: tuple[str, ...] = ()
    subsidiary_authors: tuple[str, ...] = ()
    abstr: str | None = None
    author_address: str | None = None
    accession_number: str | None = None
    authors: tuple[str, ...] = ()
    archives_location: str | None = None
    bt: str | None = None
    custom1: str | None = None
    custom2: str | None = None
    custom3: str | None = None
    custom4: str | None = None
    custom5: str | None = None
    custom6: str | None = None
    custom7: str | None = None
    custom8: str | None = None
    caption: str | None = None
    call_number: str | None = None
    cp: str | None = None
    unpublished_reference_title: str | None = None
    place_published: str | None = None
    date: str | None = None
    database_name: str | None = None
    doi: str | None = None
    database_provider: str | None = None
    editor: str | None = None
    end_page: str | None = None
    edition: str | None = None
    reference_id: str | None = None
    issue: str | None = None
    periodical_name_user_abbreviation: str | None = None
    alternative_title: str | None = None
    periodical_name_standard_abbreviation: str | None = None
    periodical_name_full_format_jf: str | None = None
    periodical_name_full_format_jo: str | None = None
    keywords: tuple[str, ...] = ()
    pdf_links: tuple[str, ...] = ()
    full_text_links: tuple[str, ...] = ()
    related_records: tuple[str, ...] = ()
    images: tuple[str, ...] = ()
    language: str | None = None
    label: str | None = None
    website_link: str | None = None
    miscellaneous1: str | None = _SharedSlot()  # type: ignore[assignment]
    miscellaneous2: str | None = None
    miscellaneous3: str | None = _SharedSlot()  # type: ignore[assignment]
    notes: str | None = None
    abstr2: str | None = None
    number_of_volumes: str | None = None
    original_publication: str | None = None
    publisher: str | None = None
    publishing_place: str | None = None
    publication_year: str | None = None
    reviewed_item: str | None = None
    research_notes: str | None = None
    reprint_edition: str | None = None
    section: str | None = None
    isbn_issn: str | None = None
    start_page: str | None = None
    short_title: str | None = None
    primary_title: str | None = None
    secondary_title: str | None = None
    tertiary_title: str | None = None
    translated_author: str | None = None
    title: str | None = None
    translated_title: str | None = None
    user_definable1: str | None = None
    user_definable2: str | None = None
    user_definable3: str | None = None
    user_definable4: str | None = None
    user_definable5: str | None = None
    url: str | None = None
    volume_number: str | None = None
    publisher_standard_number: str | None = None
    primary_date: str | None = None
    access_date: str | None = None
    legacy_names: InitVar[frozenset[str]] = frozenset()

    def __post_init__(self, legacy_names: frozenset[str]) -> None:
        # Slots populated under their legacy alias, see LEGACY_ALIASES
        object.__setattr__(self, "_legacy_names", frozenset(legacy_names))
        # List fields are stored as tuples so records stay hashable and immutable
        for name, binding in FIELD_BINDINGS.items():
            if not binding.is_list:
                continue
            value = getattr(self, name)
            if value is None:
                object.__setattr__(self, name, ())
            elif not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash(tuple(vars(self).values()))

    def _legacy_value(self, alias: str) -> Any:
        slot = LEGACY_ALIASES[alias]
        if slot not in self._legacy_names:
            return None
        return vars(self)[slot]

    @property
    def number(self) -> int | None:
        """Deprecated integer view over the ``miscellaneous1`` slot.

        None unless the record was built with ``number``.
        """
        warnings.warn(
            "RisRecord.number is deprecated, use miscellaneous1",
            DeprecationWarning,
            stacklevel=2,
        )
        value = self._legacy_value("number")
        if value is not None and value.strip().isdigit():
            return int(value)
        return None

    @property
    def type_of_work(self) -> str | None:
        """Deprecated view over the ``miscellaneous3`` slot.

        None unless the record was built with ``type_of_work``.
        """
        warnings.warn(
            "RisRecord.type_of_work is deprecated, use miscellaneous3",
            DeprecationWarning,
            stacklevel=2,
        )
        return self._legacy_value("type_of_work")

    @classmethod
    def create(cls, **values: Any) -> "RisRecord":
        """Construct a validated record from keyword arguments.

        Accepts every field name plus the legacy aliases ``number`` and
        ``type_of_work``.

        Examples
        --------
            >>> rec = RisRecord.create(type="JOUR", title="A Study", authors=["Smith, J"])
            >>> rec.authors
            ('Smith, J',)
        """
        return RisRecordBuilder(**values).build()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RisRecord":
        """Create a record from a mapping produced by ``to_dict``.

        Keys with a None value or an empty list are ignored.
        """
        builder = RisRecordBuilder()
        for name, value in data.items():
            if value is None or value == []:
                continue
            if _is_list_field(name):
                builder.extend(name, value)
            else:
                builder.set(name, value)
        return builder.build()

    def to_dict(self) -> dict[str, Any]:
        """Convert record to a JSON-serializable dictionary.

        Returns
        -------
        dict[str, Any]
            Every field keyed by name; the type is rendered as its code and
            list fields as lists. Values stored under a legacy alias appear
            under the current field name.
        """
        result: dict[str, Any] = {}
        slots = vars(self)
        for f in fields(self):
            value = slots[f.name]
            if f.name == "type":
                result[f.name] = str(value) if value is not None else None
            elif isinstance(value, tuple):
                result[f.name] = list(value)
            else:
                result[f.name] = value
        return result

    def get(self, tag: str) -> Any:
        """Return the value stored under a RIS tag code.

        The slot is read whichever name populated it, so ``M1`` returns a
        value set through the legacy ``number`` alias.

        Raises
        ------
        KeyError
            If the tag is unknown or does not map to a field.
        """
        binding = lookup(tag)
        if binding is None or binding.field is None:
            raise KeyError(f"Tag '{tag}' does not map to a record field")
        return vars(self)[binding.field]


def _is_list_field(name: str) -> bool:
    binding = FIELD_BINDINGS.get(LEGACY_ALIASES.get(name, name))
    return binding is not None and binding.is_list


class RisRecordBuilder:
    """Step-by-step accumulator for RisRecord.

    Scalar fields are set with ``set``, list fields grow with ``append`` or
    ``extend``. Calls can be chained::

        record = RisRecordBuilder().set("type", "JOUR").append("authors", "Doe, A").build()

    Legacy aliases resolve to their storage slot. Populating one slot through
    both its current and its legacy name raises ValueError.
    """

    def __init__(self, **values: Any) -> None:
        self._scalars: dict[str, Any] = {}
        self._lists: dict[str, list[str]] = {}
        self._slot_names: dict[str, str] = {}

        for name, value in values.items():
            if _is_list_field(name):
                self.extend(name, value or ())
            elif value is not None:
                self.set(name, value)

    def _resolve(self, name: str) -> str:
        slot = LEGACY_ALIASES.get(name, name)
        if slot not in FIELD_BINDINGS:
            raise KeyError(f"RisRecord has no field '{name}'")

        previous = self._slot_names.get(slot)
        if previous is not None and previous != name:
            raise ValueError(
                f"Field '{slot}' cannot be populated as both '{previous}' and '{name}'"
            )
        self._slot_names[slot] = name
        return slot

    def set(self, name: str, value: Any) -> "RisRecordBuilder":
        """Set a scalar field (or the record type).

        Parameters
        ----------
        name : str
            Field name or legacy alias.
        value : Any
            Field value. ``type`` accepts a RisType or its code; the legacy
            ``number`` alias accepts an int.

        Raises
        ------
        InvalidTypeCodeError
            If ``type`` is not a known RIS type code.
        ValueError
            If ``name`` is a list field.
        """
        slot = self._resolve(name)
        if FIELD_BINDINGS[slot].is_list:
            raise ValueError(f"Field '{slot}' is a list; use append() or extend()")

        if slot == "type":
            value = _coerce_type(value)
        elif value is not None:
            value = str(value)

        self._scalars[slot] = value
        return self

    def append(self, name: str, value: str) -> "RisRecordBuilder":
        """Append one element to a list field."""
        slot = self._resolve(name)
        if not FIELD_BINDINGS[slot].is_list:
            raise ValueError(f"Field '{slot}' is a scalar; use set()")
        self._lists.setdefault(slot, []).append(str(value))
        return self

    def extend(self, name: str, values: Any) -> "RisRecordBuilder":
        """Append every element of ``values`` to a list field."""
        if isinstance(values, str):
            raise TypeError(f"Field '{name}' expects a sequence of strings, got a string")
        for value in values:
            self.append(name, value)
        return self

    def continue_value(self, name: str, text: str) -> "RisRecordBuilder":
        """Append a continuation line to a scalar field's value."""
        slot = self._resolve(name)
        current = self._scalars.get(slot)
        self._scalars[slot] = text if current is None else f"{current}{LINE_BREAK}{text}"
        return self

    def has(self, name: str) -> bool:
        """Return True if the field already holds a value."""
        slot = LEGACY_ALIASES.get(name, name)
        return self._scalars.get(slot) is not None or bool(self._lists.get(slot))

    def build(self) -> RisRecord:
        """Return the immutable record."""
        values: dict[str, Any] = dict(self._scalars)
        values.update({name: tuple(items) for name, items in self._lists.items()})
        legacy = frozenset(slot for slot, name in self._slot_names.items() if name != slot)
        return RisRecord(**values, legacy_names=legacy)


def _coerce_type(value: Any) -> RisType | None:
    if value is None or isinstance(value, RisType):
        return value
    ris_type = RisType.from_code(str(value))
    if ris_type is None:
        raise InvalidTypeCodeError(f"Unknown RIS type code: {value!r}", tag="TY")
    return ris_type
