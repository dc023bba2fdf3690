from __future__ import annotations

import argparse
import os
import sys

from dotenv import load_dotenv

from .config import MODES, Config
from .errors import ConfigError
from .model import Failure
from .pipeline import run
from .util.dates import parse_date_yyyy_mm_dd


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        description="Render the upcoming-workload chart from a Notion database and update the page embed."
    )
    ap.add_argument("--dry-run", action="store_true", help="Print the chart URL without updating the embed")
    ap.add_argument("--today", default=None, help="Treat this date (YYYY-MM-DD) as today (default: today in the reference tz)")
    ap.add_argument("--days", type=int, default=None, help="Number of days to chart (default: env LOADCHART_DAYS or 14)")
    ap.add_argument("--mode", choices=MODES, default=None, help="Allocation mode (default: env LOADCHART_MODE or spread)")
    ap.add_argument("--tz", default=None, help="Reference timezone (default: env LOADCHART_TZ or America/New_York)")
    ap.add_argument("--env-file", default=".env", help="Load variables from this .env file first; existing environment wins (default: ./.env)")

    args = ap.parse_args(argv)

    load_dotenv(args.env_file, override=False)
    env = dict(os.environ)
    if args.days is not None:
        env["LOADCHART_DAYS"] = str(args.days)
    if args.mode is not None:
        env["LOADCHART_MODE"] = args.mode
    if args.tz is not None:
        env["LOADCHART_TZ"] = args.tz

    try:
        cfg = Config.from_env(env)
    except ConfigError as e:
        print(f"[loadchart] ERROR: {e}", file=sys.stderr)
        return 2

    today = None
    if args.today:
        try:
            today = parse_date_yyyy_mm_dd(args.today)
        except ValueError:
            print(f"[loadchart] ERROR: invalid --today value: {args.today!r}", file=sys.stderr)
            return 2

    result = run(cfg, today=today, dry_run=bool(args.dry_run))
    if isinstance(result, Failure):
        print(f"[loadchart] ERROR: {result.reason}", file=sys.stderr)
        return 2

    report = result.value
    print(report.chart_url if args.dry_run else report.status)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
