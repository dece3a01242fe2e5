"""CLI command to fetch a club's stats and print the derived table.

Usage:
    python -m clubstats.cli batting
    python -m clubstats.cli pitching --league BBL --season 2024 --sort WAR --desc
    python -m clubstats.cli batting --club 492 --limit 20
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from clubstats.analysis.datasets import DatasetKind, get_dataset
from clubstats.analysis.loader import DatasetLoadError, StatsLoader
from clubstats.analysis.table import filter_rows, sort_rows
from clubstats.config import Settings

logger = logging.getLogger(__name__)


def format_table(rows: list[dict], columns: tuple[str, ...]) -> str:
    """Fixed-width text table, one line per row."""
    cells = [[str(r.get(c, "")) for c in columns] for r in rows]
    widths = [
        max([len(c)] + [len(line[i]) for line in cells])
        for i, c in enumerate(columns)
    ]
    header = "  ".join(c.ljust(w) for c, w in zip(columns, widths))
    lines = [header, "-" * len(header)]
    for line in cells:
        lines.append("  ".join(v.ljust(w) for v, w in zip(line, widths)))
    return "\n".join(lines)


async def run(args: argparse.Namespace) -> list[dict]:
    settings = Settings.from_env()
    if args.club is not None:
        settings = settings.with_overrides(CLUB_ID=args.club)

    loader = StatsLoader(settings=settings)
    config = get_dataset(args.kind)
    rows = await loader.load_and_derive(config.kind)

    rows = filter_rows(rows, league=args.league, season=args.season)
    if args.sort:
        rows = sort_rows(rows, args.sort, config.sort_keys, descending=args.desc)
    if args.limit:
        rows = rows[:args.limit]
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Print club batting or pitching stats")
    parser.add_argument("kind", choices=[k.value for k in DatasetKind], help="Dataset to load")
    parser.add_argument("--club", type=int, default=None, help="Club id (default: CLUB_ID or 492)")
    parser.add_argument("--league", type=str, default=None, help="League acronym filter")
    parser.add_argument("--season", type=str, default=None, help="Season filter")
    parser.add_argument("--sort", type=str, default=None, help="Column to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--limit", type=int, default=None, help="Max rows to print")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log fetch progress")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    config = get_dataset(args.kind)
    if args.sort and args.sort not in config.columns:
        parser.error(f"unknown column {args.sort!r} for {args.kind}")

    try:
        rows = asyncio.run(run(args))
    except DatasetLoadError as e:
        print(f"{e}", file=sys.stderr)
        sys.exit(1)

    if not rows:
        print("No data found.")
        return
    print(format_table(rows, config.columns))


if __name__ == "__main__":
    main()
