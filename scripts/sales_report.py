#!/usr/bin/env python3
"""Print the sales summary and ledger held in a file-backed store.

Usage:
    python scripts/sales_report.py ./data
    python scripts/sales_report.py ./data --key eventosPanamaData

Requires: pip install -e .
"""

from __future__ import annotations

import argparse
import logging
import sys

from ticketbooth.config import TicketboothConfig
from ticketbooth.session import BoxOfficeSession, open_session
from ticketbooth.tools.sales import sales_table_tool, summary_tool


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("store_dir", help="Directory holding <key>.json records")
    parser.add_argument("--key", default=TicketboothConfig.storage_key)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = TicketboothConfig(storage_key=args.key, store_dir=args.store_dir)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    with open_session(config) as session:
        if not session.storage_ok:
            print("Error: could not read the sales store.", file=sys.stderr)
            return 1
        _print_report(session)
    return 0


def _print_report(session: BoxOfficeSession) -> None:
    summary = summary_tool(session)
    print("=== Resumen ===")
    for data in summary["categories"].values():
        print(f"  {data['label']:<20} {data['tickets_text']:>14} {data['revenue_text']:>12}")
    grand = summary["grand_total"]
    print(f"  {'Total General':<20} {grand['tickets_text']:>14} {grand['revenue_text']:>12}")
    print()

    table = sales_table_tool(session)
    print("=== Ventas ===")
    if not table["rows"]:
        print(f"  {table['message']}")
    for row in table["rows"]:
        print(
            f"  {row['customer_name']:<24} {row['category_label']:<20} "
            f"{row['quantity']:>4} {row['total_text']:>12}"
        )


if __name__ == "__main__":
    sys.exit(main())
