"""Conversion configuration dataclass."""

import codecs
from dataclasses import asdict, dataclass
from typing import Any

from risio.models import TERMINATOR_TAG, TYPE_TAG, lookup

__all__ = ["ConversionConfig", "LINE_ENDINGS"]

LINE_ENDINGS = ("\n", "\r\n")


@dataclass
class ConversionConfig:
    """Configuration for converting between RIS text and records.

    Attributes
    ----------
    strict : bool
        Raise on the first parse problem instead of collecting diagnostics.
    sort : list[str] | None
        Preferred tag order when building. ``TY`` and ``ER`` cannot be
        reordered and are rejected here.
    encoding : str | None
        Encoding of RIS input files. If None, detected from the bytes.
    line_ending : str
        Line ending written after every built line ("\\n" or "\\r\\n").
    buffer_size : int
        Capacity of the bounded buffer used by the async adapters.
    """

    strict: bool = False
    sort: list[str] | None = None
    encoding: str | None = None
    line_ending: str = "\n"
    buffer_size: int = 256

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.sort is not None:
            self.sort = [tag.strip().upper() for tag in self.sort if tag.strip()]
            for tag in self.sort:
                if tag in (TYPE_TAG, TERMINATOR_TAG):
                    raise ValueError(f"Tag '{tag}' has a fixed position and cannot be sorted")
                if lookup(tag) is None:
                    raise ValueError(f"Unknown tag in sort order: '{tag}'")

        if self.encoding is not None:
            try:
                codecs.lookup(self.encoding)
            except LookupError:
                raise ValueError(f"Unknown encoding: {self.encoding}") from None

        if self.line_ending not in LINE_ENDINGS:
            raise ValueError(f"line_ending must be one of {LINE_ENDINGS!r}, got {self.line_ending!r}")

        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")

    @classmethod
    def from_order_string(cls, order: str | None, **kwargs: Any) -> "ConversionConfig":
        """Create a config from a comma-separated tag order such as "TI,AU,PY"."""
        sort = order.split(",") if order else None
        return cls(sort=sort, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
