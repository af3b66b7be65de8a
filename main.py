"""
main.py
-------
Command-line entry point for the activist registry.

Responsibilities:
    - Initialize the database connection pool.
    - Dispatch a command to ActivistService.
    - Print the JSON result and close the pool.

Examples:
    python main.py list
    python main.py get 42
    python main.py range --name Bob --limit 20 --order desc
    python main.py get-or-create "Alice Doe"
    python main.py update '{"id": 42, "name": "Alice Doe", "email": "a@x.org"}'
    python main.py events 42
"""

import argparse
import json
import sys
from typing import Optional

from db.connection import close_pool, init_pool
from models.activist import Order
from models.errors import ActivistError, ValidationError
from services.activist_service import ActivistService
from utils.logger import get_logger, set_level

logger = get_logger(__name__)

_ORDERS = {"asc": Order.ASCENDING, "desc": Order.DESCENDING}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query and update activist records.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="all activists with attendance data")

    get = sub.add_parser("get", help="one activist by id")
    get.add_argument("id", type=int)

    rng = sub.add_parser("range", help="keyset page of activists ordered by name")
    rng.add_argument("--name", default="", help="anchor name (exclusive)")
    rng.add_argument("--limit", type=int, default=0, help="max rows, 0 = unlimited")
    rng.add_argument("--order", choices=sorted(_ORDERS), default="asc")

    goc = sub.add_parser("get-or-create", help="find an activist by name or create them")
    goc.add_argument("name")

    upd = sub.add_parser("update", help="overwrite an activist from a JSON object")
    upd.add_argument("payload", help="JSON object with at least id and name")

    events = sub.add_parser("events", help="attendance aggregates for one activist")
    events.add_argument("id", type=int)

    return parser


def _parse_payload(text: str):
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError("update_full", text, f"invalid JSON: {e}") from e


def run(args: argparse.Namespace, service: ActivistService):
    """Execute one parsed command and return its JSON-ready result."""
    if args.command == "list":
        return service.get_activists_json()
    if args.command == "get":
        return service.get_activist_json(args.id)
    if args.command == "range":
        return service.get_activist_range_json(
            {"name": args.name, "limit": args.limit, "order": int(_ORDERS[args.order])}
        )
    if args.command == "get-or-create":
        return service.get_or_create_json(args.name)
    if args.command == "update":
        return service.update_activist_json(_parse_payload(args.payload))
    if args.command == "events":
        return service.get_event_data_json(args.id)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, run the command and print its result."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_level("DEBUG")

    init_pool()
    try:
        result = run(args, ActivistService())
    except ActivistError as e:
        logger.error(str(e))
        return 1
    finally:
        close_pool()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
