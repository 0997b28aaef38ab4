"""TUI project settings loader.

Reads per-site configuration from .sepgen.yaml in the project root, so a
team can keep provisioning files in one place and pin the SIP port its
PBX listens on.

Example .sepgen.yaml:
    tui:
      output_dir: ./tftpboot        # Where SEP<MAC>.cnf.xml files are written
      default_sip_port: "5060"      # Used when the form leaves the port blank
      log_file: ./sepgen.log        # Optional; the form never logs to the screen
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from sepgen.tui.constants import DEFAULT_SIP_PORT

SETTINGS_FILENAME = ".sepgen.yaml"


@dataclass
class TUISettings:
    """TUI configuration settings."""

    # Where to write generated provisioning files
    output_dir: str = "."

    # SIP port written when the form's port field is empty
    default_sip_port: str = DEFAULT_SIP_PORT

    # Log file for the interactive form (None disables file logging)
    log_file: Optional[str] = None

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> "TUISettings":
        """Load settings from .sepgen.yaml in project root.

        Args:
            project_root: Project root directory. Defaults to cwd.

        Returns:
            TUISettings with values from config file or defaults.
        """
        root = project_root or Path.cwd()
        config_path = root / SETTINGS_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}

            tui_config = config.get("tui") or {}
            log_file = tui_config.get("log_file", cls.log_file)
            return cls(
                output_dir=str(tui_config.get("output_dir", cls.output_dir)),
                default_sip_port=str(
                    tui_config.get("default_sip_port", cls.default_sip_port)
                ),
                log_file=str(log_file) if log_file else None,
            )
        except (OSError, yaml.YAMLError, AttributeError):
            # If config file is malformed, use defaults
            return cls()

    def get_output_dir(self, project_root: Optional[Path] = None) -> Path:
        """Get absolute path to the output directory."""
        root = project_root or Path.cwd()
        return (root / self.output_dir).resolve()


# Global settings instance (loaded on first access)
_settings: Optional[TUISettings] = None


def get_settings(reload: bool = False) -> TUISettings:
    """Get the global TUI settings.

    Args:
        reload: Force reload from config file.

    Returns:
        TUISettings instance.
    """
    global _settings
    if _settings is None or reload:
        _settings = TUISettings.load()
    return _settings
