from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from .config import get_settings
from .logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Family Calendar command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the HTTP server exposing the calendar functions.")
    api_parser.add_argument("--host", default=None)
    api_parser.add_argument("--port", type=int, default=None)

    mcp_parser = subparsers.add_parser("mcp", help="Start the FastMCP server exposing the calendar functions as tools.")
    mcp_parser.add_argument("--host", default=None)
    mcp_parser.add_argument("--port", type=int, default=None)

    functions_parser = subparsers.add_parser("functions", help="List the registered calendar functions.")
    functions_parser.add_argument("--category", default=None)

    return parser


def _print_functions(category: Optional[str]) -> None:
    from .api import get_api_functions

    for function in get_api_functions(category):
        marker = "*" if function.mutates else " "
        print(f"{marker} {function.category:<12} {function.name:<24} {function.description}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "functions":
        _print_functions(args.category)
        return

    configure_logging(get_settings().server.log_level)
    logging.getLogger(__name__).info("Family Calendar CLI starting: %s", args.command)
    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    elif args.command == "mcp":
        from .services.mcp import run_mcp_server

        run_mcp_server(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
