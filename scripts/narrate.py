#!/usr/bin/env python3
"""Narrate a heap-sort run step by step on stdout.

Usage:
    python scripts/narrate.py --order max
    python scripts/narrate.py --order min --values 5 2 9 1 --interval 0.3
    python scripts/narrate.py --order max --json run.json --stats
"""
import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from heapstep import (
    DEFAULT_SETTINGS,
    DEFAULT_VALUES,
    Autoplay,
    SiftEngine,
    collect_stats,
    history_to_json,
)


def _print_record(record):
    active = ", ".join(str(i) for i in sorted(record.active_indices)) or "-"
    print(f"[{record.step:3d}] {record.phase.value:<8s} "
          f"boundary={record.heap_boundary:<3d} active={active}")
    for line in record.narrative:
        print(f"      {line}")
    print(f"      {list(record.values_snapshot)}", flush=True)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--order", choices=["max", "min"], default="max")
    parser.add_argument("--values", type=int, nargs="*",
                        default=list(DEFAULT_VALUES))
    parser.add_argument("--interval", type=float, default=0.0,
                        help="seconds between steps (0 = no pause)")
    parser.add_argument("--json", type=Path, default=None,
                        help="write the full history to this file")
    parser.add_argument("--stats", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    # Allow 0 to mean "as fast as possible".
    settings = DEFAULT_SETTINGS.replace(
        min_interval_s=0.0, interval_s=args.interval, name="narrate")
    engine = SiftEngine(args.values, settings=settings)
    _print_record(engine.start(args.order))
    for record in Autoplay(engine):
        _print_record(record)

    if args.stats:
        print()
        print(collect_stats(engine.history).summary())
        for key, (value, default) in settings.changed().items():
            print(f"  {key} = {value} (default {default})")

    if args.json is not None:
        args.json.write_text(
            history_to_json(engine.history, {"values": args.values}),
            encoding="utf-8",
        )
        print(f"History written to {args.json}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
