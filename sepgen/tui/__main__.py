"""Entry point for running the form as a module.

Usage:
    python -m sepgen.tui                      # Write into the configured directory
    python -m sepgen.tui --output-dir DIR     # Write into DIR
"""

from __future__ import annotations

import sys

from sepgen.lib.logging import setup_logging
from sepgen.tui.app import run_form
from sepgen.tui.settings import get_settings


def main() -> None:
    """Run the TUI application."""
    args = sys.argv[1:]
    settings = get_settings()

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--output-dir" and i + 1 < len(args):
            settings.output_dir = args[i + 1]
            i += 2
        elif arg == "--help" or arg == "-h":
            print(__doc__)
            sys.exit(0)
        else:
            print(f"Unknown argument: {arg}")
            print(__doc__)
            sys.exit(1)

    # The form owns the terminal: log to a file or nowhere
    setup_logging(log_file=settings.log_file, console=False)
    run_form(settings)


if __name__ == "__main__":
    main()
