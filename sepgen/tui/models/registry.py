"""Ordered field registry: the single source of truth for form state.

Fields are appended once while the form template is built and are never
reordered afterwards. Everything else (visibility rules, the XML
serializer, the form) addresses fields by tag or by group number.
"""

from __future__ import annotations

from typing import Callable, Iterator, Optional, Sequence, Union

from sepgen.lib.errors import UnknownTagError
from sepgen.tui.models.field import Field, FieldKind, FieldRow, Option

FieldKey = Union[str, int]


class FieldRegistry:
    """Ordered collection of :class:`Field` objects with tag lookup."""

    def __init__(self) -> None:
        self._fields: list[Field] = []
        self._by_tag: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add(self, field: Field) -> int:
        """Append a field and return its stable index."""
        if not field.is_header:
            if not field.tag:
                raise ValueError(f"Field {field.label!r} needs a tag")
            if field.tag in self._by_tag:
                raise ValueError(f"Duplicate field tag {field.tag!r}")
        if field.options:
            # Rejects an out-of-range index and re-syncs value with the label
            field.select(field.selected_index)
        index = len(self._fields)
        self._fields.append(field)
        if not field.is_header:
            self._by_tag[field.tag] = index
        return index

    def add_header(self, label: str, help_text: str = "") -> int:
        return self.add(Field(label=label, kind=FieldKind.HEADER, help_text=help_text))

    def add_field(
        self,
        label: str,
        tag: str,
        kind: FieldKind = FieldKind.OPTIONAL,
        help_text: str = "",
        *,
        group: Optional[int] = None,
        normalizer: Optional[Callable[[str], str]] = None,
    ) -> int:
        """Append a free-text field."""
        return self.add(
            Field(
                label=label,
                tag=tag,
                kind=kind,
                help_text=help_text,
                group=group,
                normalizer=normalizer,
            )
        )

    def add_dropdown(
        self,
        label: str,
        tag: str,
        help_text: str,
        options: Sequence[Option],
        default_index: int = 0,
        *,
        group: Optional[int] = None,
    ) -> int:
        """Append a dropdown field with ``options[default_index]`` selected."""
        if not options:
            raise ValueError(f"Dropdown {label!r} needs at least one option")
        field = Field(
            label=label,
            tag=tag,
            kind=FieldKind.OPTIONAL,
            help_text=help_text,
            options=tuple(Option(*opt) for opt in options),
            group=group,
        )
        field.select(default_index)
        return self.add(field)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, tag: str) -> Optional[Field]:
        """Get a field by tag, or None if no field has that tag."""
        index = self._by_tag.get(tag)
        return self._fields[index] if index is not None else None

    def require(self, tag: str) -> Field:
        """Get a field by tag; a missing tag is a schema bug."""
        field = self.lookup(tag)
        if field is None:
            raise UnknownTagError(tag)
        return field

    def index_of(self, tag: str) -> int:
        if tag not in self._by_tag:
            raise UnknownTagError(tag)
        return self._by_tag[tag]

    def resolve(self, key: FieldKey) -> Field:
        """Get a field by tag or by registry index."""
        if isinstance(key, int):
            if not 0 <= key < len(self._fields):
                raise IndexError(f"Field index {key} out of range")
            return self._fields[key]
        return self.require(key)

    def value(self, tag: str) -> str:
        """Current text of a field ("" for unknown tags)."""
        field = self.lookup(tag)
        return field.value if field else ""

    def selected_serialized_value(self, tag: str) -> str:
        """Serialized value of a dropdown's selection.

        Returns "" if the tag is unknown or the field is not a dropdown.
        """
        field = self.lookup(tag)
        return field.selected_value if field else ""

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_value(self, key: FieldKey, text: str) -> Field:
        """Set a free-text field's value (normalizer applied)."""
        field = self.resolve(key)
        field.set_text(text)
        return field

    def set_selected(self, key: FieldKey, index: int) -> Field:
        """Select a dropdown option by index."""
        field = self.resolve(key)
        field.select(index)
        return field

    # ------------------------------------------------------------------
    # Groups and projections
    # ------------------------------------------------------------------

    def groups(self) -> list[int]:
        """Group numbers in declaration order."""
        seen: list[int] = []
        for field in self._fields:
            if field.group is not None and field.group not in seen:
                seen.append(field.group)
        return seen

    def group_fields(self, group: int) -> list[Field]:
        return [f for f in self._fields if f.group == group and not f.is_header]

    def rows(self) -> list[FieldRow]:
        """(label, value, hidden, kind) projection of every field."""
        return [
            FieldRow(i, f.label, f.value, f.hidden, f.kind)
            for i, f in enumerate(self._fields)
        ]

    def visible_rows(self) -> list[FieldRow]:
        return [row for row in self.rows() if not row.hidden]

    @property
    def tags(self) -> list[str]:
        return list(self._by_tag)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __getitem__(self, index: int) -> Field:
        return self._fields[index]

    def __contains__(self, tag: object) -> bool:
        return tag in self._by_tag
