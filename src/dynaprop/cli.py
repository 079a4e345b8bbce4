"""Command-line interface for dynaprop.

Usage::

    dynaprop members TYPE [--name NAME] [--private] [--config FILE]
    dynaprop eval LITERAL PROP [PROP ...] [--config FILE]
    python -m dynaprop members builtins.str --name substring
"""

from __future__ import annotations

import argparse
import ast
import sys


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dynaprop",
        description="dynaprop CLI: inspect and try template member resolution.",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        help="Registry config file (.json, .toml, .yaml); defaults to the built-in functions.",
    )
    sub = parser.add_subparsers(dest="command")

    members = sub.add_parser(
        "members",
        parents=[common],
        help="List the members a type exposes, in match order.",
    )
    members.add_argument(
        "type",
        help="Type as 'module:qualname' or dotted name (e.g. builtins.str).",
    )
    members.add_argument("--name", help="Only show members with this name.")
    members.add_argument(
        "--private", action="store_true", default=False,
        help="Include single-underscore members.",
    )

    ev = sub.add_parser(
        "eval",
        parents=[common],
        help="Evaluate a property chain on a Python literal.",
    )
    ev.add_argument("literal", help="Target value as a Python literal, e.g. 123 or \"'ABC'\".")
    ev.add_argument("props", nargs="+", help="Property steps; later steps are call arguments.")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        registry = _load_registry(args.config)
    except Exception as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.command == "members":
        return _cmd_members(args, registry)
    if args.command == "eval":
        return _cmd_eval(args, registry)

    return 0


def _load_registry(config: str | None):
    if config:
        from .config import registry_from_config
        return registry_from_config(config)
    from .registry import default_registry
    return default_registry()


def _cmd_members(args: argparse.Namespace, registry) -> int:
    from .exc import ConfigurationError
    from .registry import resolve_name

    try:
        value_type = resolve_name(args.type)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    if not isinstance(value_type, type):
        print(f"error: {args.type} is not a class", file=sys.stderr)
        return 1

    functions = registry.get(value_type)
    names = [args.name] if args.name else functions.names
    shown = 0
    for name in names:
        invokers = [
            inv for inv in functions.get(name)
            if inv.is_accessible(only_public=not args.private)
        ]
        if not invokers:
            continue
        print(name)
        for inv in invokers:
            print(f"  [{inv.kind}] {inv.signature}")
        shown += 1

    if not shown:
        print(f"error: no members found on {value_type.__qualname__}", file=sys.stderr)
        return 1
    return 0


def _cmd_eval(args: argparse.Namespace, registry) -> int:
    from .exc import DispatchError
    from .host import Host

    try:
        value = ast.literal_eval(args.literal)
    except (ValueError, SyntaxError):
        # Bare words are text.
        value = args.literal

    host = Host(registry)
    try:
        result = host.evaluate(value, *args.props)
    except DispatchError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(repr(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
