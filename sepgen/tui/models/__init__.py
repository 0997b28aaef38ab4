"""UI-agnostic form state for the TUI.

This package provides testable state classes that can be used without
prompt_toolkit: the field registry, visibility rules, cursor navigation
and the session object that ties them together.
"""

from sepgen.tui.models.field import Field, FieldKind, FieldRow, Option
from sepgen.tui.models.registry import FieldRegistry
from sepgen.tui.models.visibility import (
    GroupRule,
    ModeDependentRule,
    SingleDependentRule,
    recompute,
)

__all__ = [
    "Field",
    "FieldKind",
    "FieldRow",
    "Option",
    "FieldRegistry",
    "GroupRule",
    "SingleDependentRule",
    "ModeDependentRule",
    "recompute",
    "ConfigSession",
    "build_registry",
    "default_rules",
]


def __getattr__(name: str):
    """Lazy import of modules that depend on the shared constants."""
    if name == "ConfigSession":
        from sepgen.tui.models.session import ConfigSession
        return ConfigSession
    if name in ("build_registry", "default_rules"):
        from sepgen.tui.models import schema
        return getattr(schema, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
