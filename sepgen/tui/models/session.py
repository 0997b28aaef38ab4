"""Form session: one registry, its visibility rules and the cursor.

This class provides a UI-agnostic representation of one editing run that
can be tested without a terminal. Every mutation goes through the session
so visibility and the cursor are always consistent with the selections.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from sepgen.lib.errors import ProvisioningError
from sepgen.tui.models import navigation
from sepgen.tui.models.field import Field, FieldRow
from sepgen.tui.models.registry import FieldKey, FieldRegistry
from sepgen.tui.models.schema import build_registry, default_rules
from sepgen.tui.models.visibility import VisibilityRule, recompute, validate_rules
from sepgen.tui.settings import TUISettings
from sepgen.tui.utils.xml_generator import generate_xml, write_document

logger = logging.getLogger(__name__)


@dataclass
class ConfigSession:
    """UI-agnostic state for one provisioning form.

    Attributes:
        registry: Every field of the form in display order
        rules: Visibility rules evaluated after each change
        settings: Output directory and default SIP port
        cursor: Registry index of the field under the cursor
        dirty: True when there are changes not yet written to disk
        last_saved: Path of the most recent successful save
    """

    registry: FieldRegistry
    rules: list[VisibilityRule]
    settings: TUISettings = field(default_factory=TUISettings)
    cursor: int = 0
    dirty: bool = False
    last_saved: Optional[Path] = None

    @classmethod
    def create(cls, settings: Optional[TUISettings] = None) -> "ConfigSession":
        """Create a session holding the default form.

        Visibility is computed once and the cursor starts on the first
        field the operator can edit.
        """
        registry = build_registry()
        rules = default_rules()
        validate_rules(registry, rules)

        session = cls(registry=registry, rules=rules, settings=settings or TUISettings())
        recompute(registry, rules)
        session.cursor = navigation.first_selectable(registry)
        return session

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_value(self, key: FieldKey, text: str) -> Field:
        """Set a free-text field (normalizer applied) and refresh the form."""
        field = self.registry.set_value(key, text)
        self._changed()
        return field

    def set_selected(self, key: FieldKey, index: int) -> Field:
        """Select a dropdown option and refresh the form."""
        field = self.registry.set_selected(key, index)
        self._changed()
        return field

    def apply_overrides(self, values: Mapping[str, str]) -> None:
        """Apply ``tag -> text`` pairs, as given on the command line.

        A dropdown accepts an option's serialized value, its display label
        or its integer index. Raises UnknownTagError for undeclared tags and
        ValueError for values a dropdown does not offer.
        """
        for tag, text in values.items():
            field = self.registry.require(tag)
            if field.is_header:
                raise ValueError(f"{tag!r} is a section header")
            if field.is_dropdown:
                self.registry.set_selected(tag, _option_index(field, text))
            else:
                self.registry.set_value(tag, text)
            logger.debug("Override %s", field)
        if values:
            self._changed()

    def _changed(self) -> None:
        recompute(self.registry, self.rules)
        self.cursor = navigation.settle(self.registry, self.cursor)
        self.dirty = True

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def current_field(self) -> Field:
        return self.registry[self.cursor]

    def move_next(self) -> int:
        self.cursor = navigation.next_index(self.registry, self.cursor)
        return self.cursor

    def move_prev(self) -> int:
        self.cursor = navigation.prev_index(self.registry, self.cursor)
        return self.cursor

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def rows(self) -> list[FieldRow]:
        return self.registry.rows()

    def visible_rows(self) -> list[FieldRow]:
        return self.registry.visible_rows()

    def missing_required(self) -> list[str]:
        """Labels of visible mandatory fields that are still empty."""
        return [
            f.label
            for f in self.registry
            if f.is_required and not f.hidden and not f.value
        ]

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def preview(self) -> str:
        """Render the document without writing it."""
        return generate_xml(self.registry, default_port=self.settings.default_sip_port)

    def save(self, output_dir: Union[str, Path, None] = None) -> Path:
        """Write ``SEP<MAC>.cnf.xml`` and clear the dirty flag.

        Args:
            output_dir: Destination directory; defaults to the settings value

        Raises:
            ShapeError: If the MAC address is not 12 hex characters
            DestinationError: If the file cannot be written
        """
        target = Path(output_dir) if output_dir is not None else self.settings.get_output_dir()
        try:
            path = write_document(
                self.registry, target, default_port=self.settings.default_sip_port
            )
        except ProvisioningError as e:
            logger.warning("Save refused: %s", e.headline, extra={"error": e.to_dict()})
            raise

        self.dirty = False
        self.last_saved = path
        return path


def _option_index(field: Field, text: str) -> int:
    try:
        return field.index_of(text)
    except ValueError:
        if text.strip().isdigit() and int(text) < len(field.options):
            return int(text)
        raise
