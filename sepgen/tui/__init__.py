"""prompt_toolkit TUI for phone provisioning.

This package provides a Terminal User Interface for building a phone's
SEP<MAC>.cnf.xml file, with dependent fields shown only when they apply
and a live preview of the document.

Usage:
    python -m sepgen.tui              # Open the form
    python -m sepgen.tui --output-dir ./tftpboot
"""

from __future__ import annotations

__all__ = [
    "ProvisioningApp",
    "run_form",
]


def __getattr__(name: str):
    """Lazy import of TUI components."""
    if name == "ProvisioningApp":
        from sepgen.tui.app import ProvisioningApp
        return ProvisioningApp
    if name == "run_form":
        from sepgen.tui.app import run_form
        return run_form
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
