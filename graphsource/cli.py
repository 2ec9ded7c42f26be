"""CLI entry point: get, list, search, types."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from graphsource.config import load_config, resolve_account_id
from graphsource.context import RequestContext, background
from graphsource.errors import SourceError
from graphsource.logging_config import configure_logging
from graphsource.registry import SOURCE_REGISTRY, build_source, new_limiter, source_class

logger = logging.getLogger("graphsource.cli")


def _context(timeout: Optional[float]) -> RequestContext:
    if timeout:
        return RequestContext.with_timeout(timeout)
    return background()


def _print_items(items) -> None:
    for item in items:
        print(json.dumps(item.to_dict(), sort_keys=False, default=str))


def cmd_query(args: argparse.Namespace) -> None:
    """Run a get/list/search query and print items as JSON lines."""
    config = load_config()
    configure_logging(config.log_level)
    aws = resolve_account_id(config.aws)

    source = build_source(args.type, aws, new_limiter(config.rate_limit))
    scope = args.scope or source.scope
    ctx = _context(args.timeout)

    try:
        if args.command == "get":
            _print_items([source.get(ctx, scope, args.query)])
        elif args.command == "list":
            _print_items(source.list(ctx, scope))
        else:
            _print_items(source.search(ctx, scope, args.query))
    except SourceError as exc:
        logger.error("%s failed: %s", args.command, exc)
        sys.exit(1)


def cmd_types(args: argparse.Namespace) -> None:
    """Show registered item types and their metadata."""
    fmt = "{:<34}  {:<24}  {:<18}  {}"
    print(fmt.format("TYPE", "NAME", "METHODS", "TERRAFORM"))
    print("-" * 110)
    for item_type in SOURCE_REGISTRY:
        meta = source_class(item_type).METADATA
        print(fmt.format(
            meta.item_type,
            meta.descriptive_name,
            ",".join(m.value for m in meta.methods),
            ", ".join(meta.terraform_query_map),
        ))


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    configure_logging()

    parser = argparse.ArgumentParser(
        prog="graphsource",
        description="Discover AWS resources as graph items",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_query_parser(name: str, help_text: str, with_query: bool) -> None:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--type", "-t",
            choices=sorted(SOURCE_REGISTRY),
            required=True,
            help="Item type to query",
        )
        if with_query:
            sub.add_argument("query", help="Identifier (get) or search key (search)")
        sub.add_argument(
            "--scope", "-s",
            default="",
            help="Scope to query (default: configured account.region)",
        )
        sub.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Give up after this many seconds",
        )
        sub.set_defaults(func=cmd_query)

    add_query_parser("get", "Get one item by its unique identifier", True)
    add_query_parser("list", "List all items of a type", False)
    add_query_parser("search", "Search items by an alternate key", True)

    types_parser = subparsers.add_parser("types", help="Show registered item types")
    types_parser.set_defaults(func=cmd_types)

    args = parser.parse_args(argv)
    args.func(args)
