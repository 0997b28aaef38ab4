"""Cursor stepping over the selectable fields of a registry.

Pure functions: the only state is the index the caller passes in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sepgen.tui.models.field import Field
    from sepgen.tui.models.registry import FieldRegistry


def is_selectable(field: "Field") -> bool:
    """Headers and hidden fields are never cursor targets."""
    return not field.is_header and not field.hidden


def _scan(registry: "FieldRegistry", start: int, step: int) -> Optional[int]:
    i = start
    while 0 <= i < len(registry):
        if is_selectable(registry[i]):
            return i
        i += step
    return None


def first_selectable(registry: "FieldRegistry") -> int:
    index = _scan(registry, 0, 1)
    if index is None:
        raise LookupError("Registry has no selectable fields")
    return index


def last_selectable(registry: "FieldRegistry") -> int:
    index = _scan(registry, len(registry) - 1, -1)
    if index is None:
        raise LookupError("Registry has no selectable fields")
    return index


def settle(registry: "FieldRegistry", current: int) -> int:
    """Nearest selectable index to ``current``.

    Used after a visibility change hides the field under the cursor:
    prefer the field itself, then the closest one above, then below.
    """
    current = max(0, min(current, len(registry) - 1))
    index = _scan(registry, current, -1)
    if index is None:
        index = _scan(registry, current, 1)
    if index is None:
        raise LookupError("Registry has no selectable fields")
    return index


def next_index(registry: "FieldRegistry", current: int) -> int:
    """Next selectable field after ``current``; holds at the last one."""
    index = _scan(registry, current + 1, 1)
    if index is None:
        return settle(registry, current)
    return index


def prev_index(registry: "FieldRegistry", current: int) -> int:
    """Previous selectable field before ``current``; holds at the first one."""
    index = _scan(registry, current - 1, -1)
    if index is None:
        # Nothing above: stay put, or drop to the first selectable field
        # if the current one just disappeared.
        if 0 <= current < len(registry) and is_selectable(registry[current]):
            return current
        return first_selectable(registry)
    return index
