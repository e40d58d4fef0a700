from __future__ import annotations

"""
cli.py — `bms-table` console script.

Commands:
- load : fetch a table and print a JSON summary (head, level order, counts)
"""

import argparse
import json
import sys
from collections import Counter
from typing import Any, Optional, Sequence

from .errors import BMSTableError
from .http_engine import make_http_engine_from_meta
from .loader import load_table
from .table import Table


class CliError(Exception):
    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def _pretty(obj: Any, pretty: bool) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=(2 if pretty else None))


def _summary(table: Table) -> dict[str, Any]:
    per_level = Counter(str(e.level) for e in table.body)
    by_type = Counter(e.checksum.type for e in table.body)
    return {
        "url": table.url,
        "head_url": table.head_url,
        "body_url": table.body_url,
        "head": table.head.to_dict(),
        "level_order": table.get_level_order(),
        "entries": len(table.body),
        "dropped_entries": table.dropped_entries,
        "checksums": dict(by_type),
        "entries_per_level": dict(per_level),
    }


def cmd_load(args: argparse.Namespace) -> int:
    retries: dict[str, Any] = {"base_delay": args.retry_delay}
    if args.retries is not None:
        retries["max_attempts"] = args.retries
    engine = make_http_engine_from_meta({
        "retries": retries,
        "timeout": args.timeout,
        "diag_http": args.diag_http,
    })

    try:
        table = load_table(args.url, engine=engine)
    except BMSTableError as e:
        raise CliError(str(e)) from e

    if args.levels_only:
        print(_pretty(table.get_level_order(), args.pretty))
    else:
        print(_pretty(_summary(table), args.pretty))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bms-table", description="Load and normalize BMS difficulty tables")
    sub = p.add_subparsers(dest="cmd", required=True)

    ld = sub.add_parser("load", help="load a table (HTML page or JSON header URL) and print a summary")
    ld.add_argument("url")
    ld.add_argument("--retries", type=int, default=None, help="attempts per fetch, including the first (default 3)")
    ld.add_argument("--retry-delay", type=float, default=0.0, help="base backoff delay in seconds (default: none)")
    ld.add_argument("--timeout", type=float, default=10.0, help="per-attempt timeout, seconds")
    ld.add_argument("--diag-http", action="store_true", help="one stderr line per failed attempt")
    ld.add_argument("--levels-only", action="store_true", help="print only the level order")
    ld.add_argument("--pretty", action="store_true")
    ld.set_defaults(fn=cmd_load)

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    try:
        return int(args.fn(args) or 0)
    except CliError as e:
        print(str(e), file=sys.stderr)
        return int(e.exit_code)


if __name__ == "__main__":
    raise SystemExit(main())
