#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
NEO Feed Checker

Validates a near-Earth object element table and reports which rows the
simulator would load and which it would skip.

Usage
-----
Command-line:
    python -m tools.neo_feed data/dataset.csv
    python -m tools.neo_feed data/dataset.csv --delimiter ,

Programmatic:
    from orrery.feed import read_neo_csv

    feed = read_neo_csv("data/dataset.csv")
    sim = Simulation(SimulationConfig(extra_bodies=feed.definitions))
"""

from pathlib import Path
import argparse
import logging
import sys

from orrery.feed import DEFAULT_DELIMITER, read_neo_csv


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate a near-Earth object feed")
    parser.add_argument("path", type=Path, help="CSV file to read")
    parser.add_argument(
        "--delimiter",
        default=DEFAULT_DELIMITER,
        help=f"Column delimiter (default: '{DEFAULT_DELIMITER}')",
    )
    parser.add_argument(
        "--builtin-names",
        action="store_true",
        help="Also reject rows that reuse a built-in body name",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    reserved = ()
    if args.builtin_names:
        from orrery import create_solar_system

        reserved = [definition.name for definition in create_solar_system()]

    result = read_neo_csv(args.path, delimiter=args.delimiter, reserved=reserved)
    print(f"Valid objects: {len(result.definitions)}")
    print(f"Rejected rows: {len(result.rejected)}")
    for error in result.rejected:
        print(f"  {error}")
    return 0 if result.definitions else 1


if __name__ == "__main__":
    sys.exit(main())
