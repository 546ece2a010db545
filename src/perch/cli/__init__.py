"""Perch CLI — inspect mapped routes.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys

from perch.sources import MappingFormat


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch — metadata-driven route mapping.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes mapped by source files")
    routes_parser.add_argument("paths", nargs="+", help="Mapping files or directories")
    routes_parser.add_argument(
        "--format",
        choices=[f.value for f in MappingFormat],
        default=MappingFormat.YAML.value,
        help="Mapping file format (default: yaml)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from perch.cli._routes import run_routes

        run_routes(args)
