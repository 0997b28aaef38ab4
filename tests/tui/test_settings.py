"""Tests for TUI project settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from sepgen.tui.settings import SETTINGS_FILENAME, TUISettings, get_settings


class TestTUISettings:
    """Tests for loading .sepgen.yaml."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        settings = TUISettings.load(tmp_path)

        assert settings.output_dir == "."
        assert settings.default_sip_port == "5060"
        assert settings.log_file is None

    def test_load_values(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text(
            """
tui:
  output_dir: ./tftpboot
  default_sip_port: 5080
  log_file: ./sepgen.log
""",
            encoding="utf-8",
        )
        settings = TUISettings.load(tmp_path)

        assert settings.output_dir == "./tftpboot"
        assert settings.default_sip_port == "5080"
        assert settings.log_file == "./sepgen.log"

    def test_partial_file_keeps_defaults(self, tmp_path: Path) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text("tui:\n  output_dir: out\n", encoding="utf-8")
        settings = TUISettings.load(tmp_path)

        assert settings.output_dir == "out"
        assert settings.default_sip_port == "5060"

    @pytest.mark.parametrize("content", ["tui: [unclosed", "- just\n- a list\n", "tui: 42\n"])
    def test_malformed_file_uses_defaults(self, tmp_path: Path, content: str) -> None:
        (tmp_path / SETTINGS_FILENAME).write_text(content, encoding="utf-8")
        assert TUISettings.load(tmp_path) == TUISettings()

    def test_get_output_dir(self, tmp_path: Path) -> None:
        settings = TUISettings(output_dir="tftpboot")
        assert settings.get_output_dir(tmp_path) == (tmp_path / "tftpboot").resolve()

    def test_get_settings_caches(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """get_settings loads once from the working directory until reload."""
        monkeypatch.chdir(tmp_path)
        first = get_settings()
        assert get_settings() is first

        (tmp_path / SETTINGS_FILENAME).write_text("tui:\n  output_dir: out\n", encoding="utf-8")
        assert get_settings().output_dir == "."
        assert get_settings(reload=True).output_dir == "out"
