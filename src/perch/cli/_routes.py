"""``perch routes`` — list routes mapped by source files.

Loads the given paths as one mapping source, builds metadata and prints
a table of METHOD, PATTERN, NAME and INVOKABLE.
"""

import argparse
import sys
from typing import Any

from perch.errors import ConfigurationError
from perch.mapping.builder import build_metadata
from perch.mapping.loading import load_sources
from perch.sources import MappingSource


def _describe(invokable: Any) -> str:
    if isinstance(invokable, str):
        return invokable
    if isinstance(invokable, list | tuple) and len(invokable) == 2:
        target, method = invokable
        target_name = target if isinstance(target, str) else getattr(target, "__qualname__", target)
        return f"{target_name}.{method}"
    return getattr(invokable, "__qualname__", repr(invokable))


def run_routes(args: argparse.Namespace) -> None:
    """Print the route table for ``args.paths`` in ``args.format``."""
    try:
        tree = load_sources([MappingSource(args.paths, args.format)])
        routes = build_metadata(tree)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not routes:
        print("No routes mapped.")
        return

    rows: list[tuple[str, str, str, str]] = [
        (
            ", ".join(sorted(route.methods)),
            route.full_pattern,
            route.full_name or "-",
            _describe(route.invokable),
        )
        for route in routes
    ]

    headers = ("METHOD", "PATTERN", "NAME", "INVOKABLE")
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers[:3])]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format(*headers))
    sep_len = sum(widths) + 6 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
