"""TUI utility modules."""

from __future__ import annotations

from sepgen.tui.utils.xml_generator import generate_xml, render_xml, serialize, write_document

__all__ = [
    "generate_xml",
    "render_xml",
    "serialize",
    "write_document",
]
