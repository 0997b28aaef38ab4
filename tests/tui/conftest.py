"""Shared fixtures for TUI tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from sepgen.tui.models.registry import FieldRegistry
from sepgen.tui.models.schema import build_registry, default_rules
from sepgen.tui.models.session import ConfigSession
from sepgen.tui.models.visibility import recompute
from sepgen.tui.settings import TUISettings


@pytest.fixture
def registry() -> FieldRegistry:
    """Default form with visibility already computed."""
    reg = build_registry()
    recompute(reg, default_rules())
    return reg


@pytest.fixture
def settings(tmp_path: Path) -> TUISettings:
    """Settings writing into a temporary directory."""
    return TUISettings(output_dir=str(tmp_path))


@pytest.fixture
def session(settings: TUISettings) -> ConfigSession:
    """Fresh session with default selections."""
    return ConfigSession.create(settings)


@pytest.fixture
def filled_session(session: ConfigSession) -> ConfigSession:
    """Session with a valid MAC and a primary server."""
    session.set_value("device", "00:11:22:AA:BB:CC")
    session.set_value("processNodeName1", "192.168.1.10")
    return session


@pytest.fixture
def mini_registry() -> FieldRegistry:
    """Small hand-built registry for navigation and rule tests.

    Layout (index: field):
        0: header
        1: mode (dropdown Off/On)
        2: detail (text)
        3: header
        4: other (text)
    """
    reg = FieldRegistry()
    reg.add_header("=== FIRST ===")
    reg.add_dropdown("Mode", "mode", "", [("Off", "0"), ("On", "1")], 0)
    reg.add_field("Detail", "detail")
    reg.add_header("=== SECOND ===")
    reg.add_field("Other", "other")
    return reg
