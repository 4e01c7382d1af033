"""Command-line interface for the stars records management front-end."""

from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from starboard.client import RecordsAPIError, RecordsClient
from starboard.config import Settings, load_settings
from starboard.models import PageResult

logger = logging.getLogger("starboard.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=None,
        help="Path to a YAML configuration file (default: STARBOARD_CONFIG or config/starboard.yaml)",
    )

    parser = argparse.ArgumentParser(description="Stars records management utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser(
        "serve", parents=[common], help="Start the web management interface"
    )
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address for the web UI")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the web UI (default: 8000)",
    )

    list_parser = subparsers.add_parser(
        "list", parents=[common], help="Print one page of records from the backend"
    )
    list_parser.add_argument("--page", type=int, default=1, help="Page number to fetch (default: 1)")
    list_parser.add_argument("--search", default="", help="Only list records matching this term")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "list"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _load_settings(config: str | None) -> Settings:
    try:
        return load_settings(Path(config).expanduser() if config else None)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc


def _serve(settings: Settings, *, host: str, port: int) -> None:
    from starboard.application import create_application
    import uvicorn

    try:
        app = create_application(settings=settings)
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc

    logger.info("Starting management UI on http://%s:%s (backend %s)", host, port, settings.backend_url)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def _print_page(result: PageResult, page: int) -> None:
    if not result.items:
        print("No records found.")
        return

    print(f"{'ID':<26}  {'Name':<24}  {'Email':<32}  Major")
    print("-" * 100)
    for record in result.items:
        print(f"{record.id:<26}  {record.name:<24}  {record.email:<32}  {record.major}")
    print(f"\nPage {page} / {result.total_pages}")


def _list_records(settings: Settings, *, page: int, search: str) -> int:
    client = RecordsClient.from_settings(settings)
    page = max(page, 1)
    try:
        result = asyncio.run(client.list_records(page, settings.page_size, search))
    except RecordsAPIError as exc:
        print(f"Failed to list records: {exc}")
        return 1

    _print_page(result, page)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    settings = _load_settings(args.config)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.command == "serve":
        _serve(settings, host=args.host, port=args.port)
    elif args.command == "list":
        status = _list_records(settings, page=args.page, search=args.search)
        if status:
            raise SystemExit(status)


if __name__ == "__main__":
    main()
