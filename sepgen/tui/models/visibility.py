"""Conditional visibility rules.

Some fields only make sense when another field holds a particular value
(the NAT address only matters when NAT is enabled, a disabled button has
no extension). Each rule names its controller and dependents by tag;
:func:`recompute` re-derives every field's ``hidden`` flag from scratch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence, Union

if TYPE_CHECKING:
    from sepgen.tui.models.registry import FieldRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupRule:
    """A key-function controller governing a block of sibling fields.

    Attributes:
        controller: Tag of the key-function dropdown
        members: Dependent tag -> option indices under which it is shown
    """

    controller: str
    members: Mapping[str, frozenset[int]]

    def __post_init__(self) -> None:
        if self.controller in self.members:
            raise ValueError(f"{self.controller!r} cannot control its own visibility")

    def dependents(self) -> list[str]:
        return list(self.members)

    def apply(self, registry: "FieldRegistry") -> None:
        selected = registry.require(self.controller).selected_index
        for tag, shown_for in self.members.items():
            registry.require(tag).hidden = selected not in shown_for


@dataclass(frozen=True)
class SingleDependentRule:
    """Hide one dependent while a two-way controller sits at its "off" index."""

    controller: str
    dependent: str
    off_index: int = 0

    def __post_init__(self) -> None:
        if self.controller == self.dependent:
            raise ValueError(f"{self.controller!r} cannot control its own visibility")

    def dependents(self) -> list[str]:
        return [self.dependent]

    def apply(self, registry: "FieldRegistry") -> None:
        selected = registry.require(self.controller).selected_index
        registry.require(self.dependent).hidden = selected == self.off_index


@dataclass(frozen=True)
class ModeDependentRule:
    """Show one dependent only when a multi-way controller equals one index."""

    controller: str
    dependent: str
    target_index: int

    def __post_init__(self) -> None:
        if self.controller == self.dependent:
            raise ValueError(f"{self.controller!r} cannot control its own visibility")

    def dependents(self) -> list[str]:
        return [self.dependent]

    def apply(self, registry: "FieldRegistry") -> None:
        selected = registry.require(self.controller).selected_index
        registry.require(self.dependent).hidden = selected != self.target_index


VisibilityRule = Union[GroupRule, SingleDependentRule, ModeDependentRule]


def group_rule(
    controller: str,
    shown_unless: Mapping[str, int] | None = None,
    shown_only_for: Mapping[str, int] | None = None,
    option_count: int = 4,
) -> GroupRule:
    """Build a GroupRule from the two shapes the form actually uses.

    Args:
        controller: Key-function tag
        shown_unless: Dependent tag -> index that hides it (e.g. Disabled)
        shown_only_for: Dependent tag -> the only index that shows it
        option_count: Number of options on the controller
    """
    every = frozenset(range(option_count))
    members: dict[str, frozenset[int]] = {}
    for tag, off in (shown_unless or {}).items():
        members[tag] = every - {off}
    for tag, only in (shown_only_for or {}).items():
        members[tag] = frozenset({only})
    return GroupRule(controller=controller, members=members)


def validate_rules(registry: "FieldRegistry", rules: Iterable[VisibilityRule]) -> None:
    """Check that every tag a rule touches exists (raises UnknownTagError)."""
    for rule in rules:
        controller = registry.require(rule.controller)
        if not controller.is_dropdown:
            raise ValueError(f"Controller {rule.controller!r} must be a dropdown")
        for tag in rule.dependents():
            registry.require(tag)


def recompute(registry: "FieldRegistry", rules: Sequence[VisibilityRule]) -> int:
    """Assign ``hidden`` for every field from the current selections.

    Every field starts visible, then rules run in declaration order; a later
    rule touching the same dependent wins. Safe to call any number of times.

    Returns:
        Number of hidden fields after the pass
    """
    for field in registry:
        field.hidden = False

    for rule in rules:
        rule.apply(registry)

    hidden = sum(1 for field in registry if field.hidden)
    logger.debug("Visibility recomputed: %d of %d fields hidden", hidden, len(registry))
    return hidden


def hidden_tags(registry: "FieldRegistry") -> set[str]:
    """Tags of the fields currently hidden."""
    return {field.tag for field in registry if field.hidden and not field.is_header}
