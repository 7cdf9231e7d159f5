#!/usr/bin/env python3
"""CLI entry point for importing scanned roster sheets.

Usage:
    python import_scan.py --scan sheet1.json sheet2.json \\
        --roster roster.json --roosters-per-team 12 --output roster.json
"""

import argparse
import os
import sys

# Add parent directory to path for imports (skip when frozen by PyInstaller)
if not getattr(sys, 'frozen', False):
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gallera.adapters.roster_file_adapter import RosterFileAdapter
from gallera.adapters.scan_adapter import ScanAdapter
from gallera.core.front_resolver import base_teams, group_label
from gallera.core.import_reconciler import print_import_report, reconcile
from gallera.core.models import TournamentConfig
from gallera.core.roster_book import RosterBook, print_apply_summary, print_roster_summary
from gallera.core.slot_allocator import print_slot_layout


def main(argv=None):
    parser = argparse.ArgumentParser(description='Import scanned roster sheets')
    parser.add_argument('--scan', nargs='+', required=True, help='Scanner JSON file(s)')
    parser.add_argument('--roster', default=None,
                        help='Roster snapshot JSON with the registered teams (default: empty roster)')
    parser.add_argument('--roosters-per-team', type=int, default=None,
                        help='Roster capacity per team (default: value in snapshot, or 12)')
    parser.add_argument('--output', default=None,
                        help='Where to write the updated roster snapshot (default: --roster path)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Reconcile and report without applying anything')
    parser.add_argument('--show-slots', action='store_true',
                        help='Print the slot layout of every team after the import')

    args = parser.parse_args(argv)

    roster_adapter = RosterFileAdapter(roosters_per_team=args.roosters_per_team)
    if args.roster:
        print(f"Loading roster {args.roster}...")
        book = roster_adapter.parse(args.roster)
    else:
        book = RosterBook(TournamentConfig(roosters_per_team=args.roosters_per_team or 12))
    print(f"Roster: {len(base_teams(book.teams))} teams, {len(book.teams)} fronts, "
          f"{len(book.roosters)} roosters, {book.config.roosters_per_team} per team")

    scan_adapter = ScanAdapter()
    failures = 0
    for scan_path in args.scan:
        print(f"\nReading scan {scan_path}...")
        try:
            scan = scan_adapter.parse(scan_path)
        except (OSError, ValueError) as e:
            print(f"Error: {e}")
            failures += 1
            continue

        result = reconcile(scan, book.teams)
        print_import_report(result)
        if result.failed:
            failures += 1
            continue
        if not args.dry_run:
            print_apply_summary(book.apply(result))

    print_roster_summary(book)

    if args.show_slots:
        for base in base_teams(book.teams):
            print_slot_layout(group_label(book.teams, base), book.slots_for(base.id))

    output = args.output or args.roster
    if output and not args.dry_run:
        roster_adapter.save(book, output)
        print(f"\nSaved {output}")

    if failures:
        print(f"\n{failures} of {len(args.scan)} scans failed")
        sys.exit(1)
    print("\nDone!")


if __name__ == '__main__':
    main()
