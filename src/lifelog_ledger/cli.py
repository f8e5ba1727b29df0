# -*- coding: utf-8 -*-
"""
lifelog-ledger – run once over the Limitless lifelogs and record what is new.

Configuration comes from the environment:

    LIMITLESS_API_KEY       required
    LIMITLESS_API_BASE_URL  default https://api.limitless.ai
    DATABASE_PATH           default lifelogs.db (":memory:" for a throwaway ledger)

Exit status is 0 when the run completes, even if individual lifelogs
failed; 1 when the run itself could not complete.
"""

from __future__ import annotations
import argparse
import json
import sys
import traceback
from dataclasses import replace
from typing import List, Optional

from . import __version__
from .api import LifelogQuery
from .config import load_settings
from .errors import LifelogError
from .lifelogs import DEFAULT_MAX_ITEMS, DEFAULT_QUERY
from .processor import LifelogProcessor, RunResult, Stats


def build_query(args) -> LifelogQuery:
    return replace(
        DEFAULT_QUERY,
        timezone=args.timezone,
        date=args.date,
        start=args.start,
        end=args.end,
        direction=args.direction,
        include_markdown=args.include_markdown,
        include_headings=args.include_headings,
        is_starred=True if args.starred else None,
    )

def print_summary(result: RunResult, stats: Stats, raw: bool=False):
    if raw:
        print(json.dumps({
            "fetched": result.fetched,
            "processed": result.processed_count,
            "skipped": result.skipped_count,
            "failed": result.failed_count,
            "new": [lg.to_dict() for lg in result.new_records],
            "errors": [{"id": e.lifelog_id, "message": str(e)} for e in result.errors],
            "total_processed": stats.total_processed,
            "last_processed_at": stats.last_processed_at.isoformat() if stats.last_processed_at else None,
        }, indent=2))
        return

    print("Processing complete:")
    print(f"  Fetched:   {result.fetched}")
    print(f"  Processed: {result.processed_count}")
    print(f"  Skipped:   {result.skipped_count}")
    print(f"  Failed:    {result.failed_count}")
    for lg in result.new_records:
        print(f"  + {lg.title} ({lg.id})")
    if result.errors:
        print("Errors:")
        for err in result.errors:
            print(f"  - {err.lifelog_id}: {err}")
    last = stats.last_processed_at.isoformat() if stats.last_processed_at else "never"
    print(f"Ledger: {stats.total_processed} processed in total, last at {last}")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch Limitless lifelogs and record the new ones in a local ledger.")
    parser.add_argument("-v","--verbose", action="store_true", help="Enable verbose output for debugging.")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress messages to stderr.")
    parser.add_argument("--raw", action="store_true", help="Print the run summary as JSON.")
    parser.add_argument("--db", type=str, metavar="PATH", help="Ledger database path (overrides DATABASE_PATH).")
    parser.add_argument("--limit", type=int, default=DEFAULT_MAX_ITEMS, help=f"Maximum number of lifelogs to fetch (default: {DEFAULT_MAX_ITEMS}).")
    parser.add_argument("--starred", action="store_true", help="Only fetch starred lifelogs.")
    parser.add_argument("--timezone", type=str, help="Timezone the API should use for date filtering.")
    parser.add_argument("--date", type=str, metavar="YYYY-MM-DD", help="Only fetch lifelogs for this date.")
    parser.add_argument("--start", type=str, help="Start date/time filter.")
    parser.add_argument("--end", type=str, help="End date/time filter.")
    parser.add_argument("--direction", choices=["asc","desc"], default="desc", help="Sort direction for lifelogs.")
    parser.add_argument("--include-markdown", action=argparse.BooleanOptionalAction, default=True, help="Ask the API for markdown.")
    parser.add_argument("--include-headings", action=argparse.BooleanOptionalAction, default=True, help="Ask the API for headings.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser

def main(argv: Optional[List[str]]=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
        if args.db:
            settings = replace(settings, database_path=args.db)
        with LifelogProcessor.from_settings(settings, query=build_query(args), max_items=args.limit,
                                            verbose=args.verbose, quiet=args.quiet) as processor:
            result = processor.run()
            stats = processor.get_stats()
    except LifelogError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            traceback.print_exc()
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        traceback.print_exc()
        return 1

    print_summary(result, stats, raw=args.raw)
    return 0


if __name__ == "__main__":
    sys.exit(main())
