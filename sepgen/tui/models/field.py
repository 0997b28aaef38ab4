"""Form field with option set and visibility flag."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, NamedTuple, Optional


class FieldKind(str, Enum):
    """How a field behaves in the form."""

    MANDATORY = "mandatory"  # Must be filled in before saving
    OPTIONAL = "optional"  # Can be left blank
    HEADER = "header"  # Section title, carries no value


class Option(NamedTuple):
    """One dropdown choice: what the operator sees vs. what gets written."""

    label: str
    value: str


@dataclass
class Field:
    """Represents one configurable setting or section header.

    Free-text fields keep their text in ``value``. Dropdown fields keep the
    selected option's display label in ``value`` so that rendering code never
    has to special-case the field type; the serialized value is reached
    through :attr:`selected_value`.

    Attributes:
        label: Text shown to the operator (e.g., "Primary PBX IP")
        tag: Unique lookup key, also the XML element name for most fields
        kind: Mandatory, optional or header
        help_text: Explanation shown below the form
        value: Current text, or the selected option's label
        options: Ordered (label, value) pairs; empty for free text
        selected_index: Index into options
        hidden: Set by the visibility resolver only
        group: Button number for per-line fields, None otherwise
        normalizer: Applied to text when the operator commits a value
    """

    label: str
    tag: str = ""
    kind: FieldKind = FieldKind.OPTIONAL
    help_text: str = ""
    value: str = ""
    options: tuple[Option, ...] = ()
    selected_index: int = 0
    hidden: bool = False
    group: Optional[int] = None
    normalizer: Optional[Callable[[str], str]] = field(default=None, repr=False)

    @property
    def is_header(self) -> bool:
        return self.kind == FieldKind.HEADER

    @property
    def is_dropdown(self) -> bool:
        return bool(self.options)

    @property
    def is_required(self) -> bool:
        return self.kind == FieldKind.MANDATORY

    @property
    def selected_value(self) -> str:
        """Serialized value of the selected option ("" for free text)."""
        if not self.options:
            return ""
        return self.options[self.selected_index].value

    def select(self, index: int) -> None:
        """Select an option and keep ``value`` in sync with its label."""
        if not self.options:
            raise ValueError(f"{self.label!r} is not a dropdown field")
        if not 0 <= index < len(self.options):
            raise ValueError(
                f"Option index {index} out of range for {self.label!r} "
                f"(0..{len(self.options) - 1})"
            )
        self.selected_index = index
        self.value = self.options[index].label

    def set_text(self, text: str) -> None:
        """Set a free-text value, applying the field's normalizer."""
        if self.is_header:
            raise ValueError(f"Header {self.label!r} carries no value")
        if self.options:
            raise ValueError(f"{self.label!r} is a dropdown; select an option instead")
        self.value = self.normalizer(text) if self.normalizer else text

    def index_of(self, choice: str) -> int:
        """Find an option by serialized value, then by display label."""
        for attr in ("value", "label"):
            for i, option in enumerate(self.options):
                if getattr(option, attr) == choice:
                    return i
        raise ValueError(f"{choice!r} is not an option of {self.label!r}")

    def __str__(self) -> str:
        """String representation showing tag and value."""
        if self.is_header:
            return self.label
        marker = " (hidden)" if self.hidden else ""
        return f"{self.tag}={self.value!r}{marker}"


class FieldRow(NamedTuple):
    """Read-only projection of a field for rendering."""

    index: int
    label: str
    value: str
    hidden: bool
    kind: FieldKind
