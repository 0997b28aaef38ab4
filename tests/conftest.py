"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
from typing import Generator

import pytest

from sepgen.tui import settings as settings_module


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test loads .sepgen.yaml afresh."""
    monkeypatch.setattr(settings_module, "_settings", None)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
