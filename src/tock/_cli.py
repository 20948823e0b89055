"""Tock CLI — tock show / tock export / tock follow / tock types.

Entry point for the ``tock`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the tock CLI."""
    parser = argparse.ArgumentParser(
        prog="tock",
        description="Search, filter and export instrumentation command timelines.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--config-dir", default=".", help="Directory containing tock.yaml / tock.toml",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # tock show
    show_parser = subparsers.add_parser(
        "show",
        help="Print the filtered timeline of a command log",
    )
    show_parser.add_argument("log", help="Command log (JSON array or NDJSON)")
    show_parser.add_argument("--search", default="", help="Search text")
    show_parser.add_argument(
        "--hide", action="append", default=[], metavar="TYPE", help="Hide a command type",
    )
    show_parser.add_argument(
        "--reverse", action="store_true", default=None, help="Newest first",
    )

    # tock export
    export_parser = subparsers.add_parser(
        "export",
        help="Export the raw log or the API-call report",
    )
    export_parser.add_argument("log", help="Command log (JSON array or NDJSON)")
    export_parser.add_argument(
        "--api", action="store_true", help="Write the API-call report instead of the raw log",
    )
    export_parser.add_argument("--output", default=None, help="Destination file")

    # tock follow
    follow_parser = subparsers.add_parser(
        "follow",
        help="Tail an NDJSON command log",
    )
    follow_parser.add_argument("log", help="NDJSON command log")
    follow_parser.add_argument("--search", default="", help="Search text")
    follow_parser.add_argument(
        "--hide", action="append", default=[], metavar="TYPE", help="Hide a command type",
    )

    # tock types
    subparsers.add_parser("types", help="List built-in command types")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from tock import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from tock._errors import TockError
    from tock.app import export_log, follow, list_types, show

    try:
        if args.command == "show":
            show(
                args.log,
                search=args.search,
                hide=args.hide,
                reverse=args.reverse,
                root=args.config_dir,
            )
        elif args.command == "export":
            result = export_log(args.log, api=args.api, output=args.output, root=args.config_dir)
            if result.status == "failed":
                sys.exit(1)
        elif args.command == "follow":
            follow(args.log, search=args.search, hide=args.hide, root=args.config_dir)
        elif args.command == "types":
            for group, types in list_types().items():
                print(f"{group}:")
                for command_type in types:
                    print(f"  {command_type}")
    except TockError as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
