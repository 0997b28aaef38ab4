"""CLI entry point for generating phone provisioning files.

Usage:
    python -m sepgen                                   # Interactive form
    python -m sepgen --batch --set device=AABBCC112233 --set processNodeName1=10.0.0.5
    python -m sepgen --batch --print --set device=...  # Print XML instead of writing
    python -m sepgen --list                            # Show every settable tag
"""

from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional

from sepgen import __version__
from sepgen.lib.errors import DestinationError, ShapeError, UnknownTagError
from sepgen.lib.logging import setup_logging
from sepgen.tui.settings import get_settings

EXIT_SAVE_FAILED = 1
EXIT_BAD_INPUT = 2


def parse_assignments(items: List[str]) -> Dict[str, str]:
    """Parse ``TAG=VALUE`` pairs; the value may itself contain ``=``.

    Raises:
        ValueError: If an item has no ``=`` or an empty tag
    """
    values: Dict[str, str] = {}
    for item in items:
        tag, sep, value = item.partition("=")
        tag = tag.strip()
        if not sep or not tag:
            raise ValueError(f"Expected TAG=VALUE, got {item!r}")
        values[tag] = value
    return values


def list_tags() -> None:
    """Print every settable tag with its label and options."""
    from sepgen.tui.models.schema import build_registry

    registry = build_registry()
    width = max(len(tag) for tag in registry.tags)

    print(f"  {'Tag':<{width}}  Label / options")
    print(f"  {'-' * width}  {'-' * 40}")
    for field in registry:
        if field.is_header:
            print()
            print(f"  {field.label}")
            continue
        marker = " *" if field.is_required else ""
        print(f"  {field.tag:<{width}}  {field.label}{marker}")
        if field.is_dropdown:
            choices = ", ".join(f"{opt.value}={opt.label}" for opt in field.options)
            print(f"  {'':<{width}}    [{choices}]")


def run_batch(args: argparse.Namespace) -> None:
    """Build the document from ``--set`` values without opening the form."""
    from sepgen.tui.models.session import ConfigSession

    settings = get_settings()
    session = ConfigSession.create(settings)

    try:
        session.apply_overrides(parse_assignments(args.assignments))
    except (UnknownTagError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_BAD_INPUT)

    try:
        if args.print_xml:
            sys.stdout.write(session.preview())
            return
        path = session.save(args.output_dir)
    except (ShapeError, DestinationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_SAVE_FAILED)

    print(path)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="sepgen",
        description="Generate SEP<MAC>.cnf.xml provisioning files for SIP phones",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Fill in the form interactively
    python -m sepgen

    # Generate a file from the command line
    python -m sepgen --batch --set device=00:11:22:aa:bb:cc \\
        --set processNodeName1=192.168.1.10 --set line1.name=1001

    # Dropdowns take the written value, the label, or the option number
    python -m sepgen --batch --set device=001122AABBCC --set natEnabled=Yes

    # List every tag and its options
    python -m sepgen --list
        """,
    )
    parser.add_argument(
        "--batch",
        action="store_true",
        help="Build the file from --set values without opening the form",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        dest="assignments",
        metavar="TAG=VALUE",
        help="Set a field (repeatable)",
    )
    parser.add_argument(
        "--output-dir",
        help="Directory to write the file into (default: from .sepgen.yaml, else .)",
    )
    parser.add_argument(
        "--print",
        action="store_true",
        dest="print_xml",
        help="With --batch, print the XML to stdout instead of writing it",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        dest="list_tags",
        help="List settable tags and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--json-log",
        action="store_true",
        help="Output logs in JSON format",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to a file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)

    if args.list_tags:
        list_tags()
        return

    settings = get_settings()

    if args.batch:
        setup_logging(
            verbose=args.verbose,
            json_format=args.json_log,
            log_file=args.log_file,
        )
        run_batch(args)
        return

    if args.assignments or args.print_xml:
        parser.error("--set and --print require --batch")

    # The form owns the terminal: log to a file or nowhere
    setup_logging(
        verbose=args.verbose,
        json_format=args.json_log,
        log_file=args.log_file or settings.log_file,
        console=False,
    )
    if args.output_dir:
        settings.output_dir = args.output_dir

    from sepgen.tui.app import run_form

    try:
        run_form(settings)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
