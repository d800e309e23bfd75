"""
Shiftboard — End-to-end analytics pipeline.

Loads a tenant config, fetches every sector's display table, and prints the
parsed series and the fleet summary.

Usage:
    python main.py [client_id]
    python main.py --demo
    python main.py --xlsx costura.xlsx [--xlsx corte.xlsx] [--sheet NAME]
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from shiftboard.config import DEFAULT_COLUMNS, load_dashboard_config
from shiftboard.dashboard import (
    format_hours,
    format_minutes_as_hms,
    format_percent,
    format_pieces,
    get_sector_view,
    get_summary_overview,
)
from shiftboard.errors import DashboardConfigError
from shiftboard.loaders import (
    fetch_display_table,
    make_workbook_fetch,
    refresh_sectors,
    workbook_sectors,
)
from shiftboard.simulator import generate_demo_sectors, make_demo_fetch

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Run the full pipeline once and print the summary screen contents."""
    parser = argparse.ArgumentParser(description="Fetch sector sheets and print the summary.")
    parser.add_argument("client", nargs="?", default=None, help="tenant id under clients/")
    parser.add_argument("--demo", action="store_true", help="use simulated sector tables")
    parser.add_argument("--xlsx", action="append", metavar="PATH",
                        help="read an exported sector sheet instead of the endpoint (repeatable)")
    parser.add_argument("--sheet", default=None, help="worksheet name inside --xlsx files")
    args = parser.parse_args(argv)

    if args.demo:
        title = "Shiftboard demo"
        sectors = generate_demo_sectors()
        columns = DEFAULT_COLUMNS
        fetch = make_demo_fetch()
    elif args.xlsx:
        title = "Shiftboard workbook"
        sectors = workbook_sectors(args.xlsx)
        columns = DEFAULT_COLUMNS
        fetch = make_workbook_fetch(args.sheet)
    else:
        try:
            config = load_dashboard_config(args.client)
        except DashboardConfigError as exc:
            logger.error("%s", exc)
            return 1
        title = config["title"]
        sectors = config["sectors"]
        columns = config["columns"]
        fetch = fetch_display_table

    now = datetime.now()

    print("=" * 70)
    print(f"  {title.upper()}")
    print(f"  {now:%d/%m/%Y %H:%M}")
    print("=" * 70)

    # ------------------------------------------------------------------
    # 1. Fetch & parse every sector
    # ------------------------------------------------------------------
    print("\n[ 1 ] SECTORS")
    print("-" * 40)

    state = refresh_sectors(sectors, columns, fetch=fetch)

    for sector in sectors:
        view = get_sector_view(sector, state, now)
        if view["error_msg"]:
            print(f"\n{view['name']}: FAILED: {view['error_msg']}")
            continue
        print(f"\n{view['name']}: {view['row_count']} rows")
        frame = view["frame"]
        if not frame.empty:
            cols = ["label", "pieces", "running_hours", "stopped_hours",
                    "utilization_percent", "tc_medio_min_per_piece"]
            print(frame[cols].tail(7).to_string(index=False))

    # ------------------------------------------------------------------
    # 2. Fleet summary
    # ------------------------------------------------------------------
    print("\n[ 2 ] SUMMARY")
    print("-" * 40)

    overview = get_summary_overview(sectors, state, now)
    summary = overview["summary"]
    totals = summary["totals"]

    print(f"  Date:         {summary['date_str'] or '-'}")
    print(f"  Pieces:       {format_pieces(totals['pieces'])}")
    print(f"  Running:      {format_hours(totals['running_hours'])}")
    print(f"  Stopped:      {format_hours(totals['stopped_hours'])}")
    print(f"  Utilization:  {format_percent(summary['utilization_percent'])}"
          f"  (target {format_percent(summary['target_utilization_percent'])},"
          f" min {format_percent(summary['min_utilization_percent'])}) [{overview['rag']}]")
    print(f"  Avg TC:       {format_minutes_as_hms(summary['tc_medio_avg_min_per_piece'])}")

    if not overview["sectors"].empty:
        print()
        print(overview["sectors"][["name", "pieces", "total_hours", "utilization_percent", "rag"]]
              .to_string(index=False))

    for sector_id, msg in overview["errors"].items():
        print(f"  [WARN] {sector_id}: {msg}")

    print("\n" + "=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
