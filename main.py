#!/usr/bin/env python3
"""
Orrery - Solar System and Near-Earth Object Simulator

Command-line entry point for running the orbital simulation headless and
reporting body positions.

Usage:
    python main.py                                  # One year, one day per frame
    python main.py --speed 0.5 --frames 2000        # Half a day per frame
    python main.py --neo-feed data/dataset.csv      # Include near-Earth objects
    python main.py --speed -1                       # Run backwards in time
    python main.py --help                           # Show all options
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path


def _parse_date(text: str) -> datetime:
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def main():
    parser = argparse.ArgumentParser(
        description="Solar System and Near-Earth Object Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # Sun, planets and Moon for 365 frames
  %(prog)s --frames 100 --speed 3.65          # 100 frames of 3.65 days
  %(prog)s --neo-feed data/dataset.csv        # Include near-Earth objects
  %(prog)s --drift                            # Let the Sun drift linearly
  %(prog)s --bodies Earth Moon --report-every 30
        """,
    )

    # -------------------------------------------------------------------------
    # Bodies
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--neo-feed",
        type=Path,
        default=None,
        help="CSV file of near-Earth objects (';' delimited)",
    )
    parser.add_argument(
        "--no-moon",
        action="store_true",
        help="Leave the Moon out of the simulation",
    )
    parser.add_argument(
        "--from-mean-longitude",
        action="store_true",
        help="Start bodies at their mean anomaly at epoch instead of perihelion",
    )

    # -------------------------------------------------------------------------
    # Simulation control
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Simulated days per frame, negative runs backwards (default: 1)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=365,
        help="Number of frames to run (default: 365)",
    )
    parser.add_argument(
        "--start",
        type=_parse_date,
        default=None,
        help="Start date in ISO format (default: 2000-01-01T12:00)",
    )
    parser.add_argument(
        "--drift",
        action="store_true",
        help="Run the Sun in linear-drift mode",
    )
    parser.add_argument(
        "--trail-capacity",
        type=int,
        default=500,
        help="Points kept in each live trail (default: 500)",
    )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--bodies",
        nargs="+",
        default=None,
        help="Bodies to report (default: first five)",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=None,
        help="Frames between reports (default: a tenth of the run)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # -------------------------------------------------------------------------
    # Import simulation components
    # -------------------------------------------------------------------------
    from orrery import (
        J2000,
        RootMotion,
        Simulation,
        SimulationConfig,
        days_per_second,
    )

    # -------------------------------------------------------------------------
    # Create simulation configuration
    # -------------------------------------------------------------------------
    config = SimulationConfig(
        sim_speed=args.speed,
        start_epoch=args.start or J2000,
        trail_capacity=args.trail_capacity,
        root_motion=RootMotion.LINEAR_DRIFT if args.drift else RootMotion.FIXED,
        include_moon=not args.no_moon,
        neo_feed=args.neo_feed,
        start_from_mean_longitude=args.from_mean_longitude,
        enable_logging=args.log_level == "DEBUG",
    )

    # -------------------------------------------------------------------------
    # Create and initialize simulation
    # -------------------------------------------------------------------------
    sim = Simulation(config)
    try:
        sim.initialize()
    except (OSError, ValueError, LookupError) as e:
        print(f"\nError: Could not build the simulation: {e}")
        sys.exit(1)

    bodies = args.bodies or sim.registry.names[:5]
    unknown = [name for name in bodies if name not in sim.registry]
    if unknown:
        print(f"\nError: Unknown bodies: {', '.join(unknown)}")
        sys.exit(1)

    # -------------------------------------------------------------------------
    # Print configuration summary
    # -------------------------------------------------------------------------
    print("=" * 60)
    print("Orrery - Solar System Simulator")
    print("=" * 60)
    print(f"\nBodies: {sim.num_bodies} ({sim.num_neos} near-Earth objects)")
    if sim.rejected_records:
        print(f"Rejected feed rows: {len(sim.rejected_records)}")
    print(f"Start date: {sim.state.epoch.date()}")
    print(f"Speed: {args.speed:g} days/frame ({days_per_second(args.speed):g} days/sec at 40 fps)")
    print(f"Sun motion: {config.root_motion.value}")

    # -------------------------------------------------------------------------
    # Run simulation
    # -------------------------------------------------------------------------
    print(f"\n{'=' * 60}")
    print(f"Running {args.frames} frames...")
    print(f"{'=' * 60}")

    report_interval = args.report_every or max(1, args.frames // 10)

    for frame in range(1, args.frames + 1):
        state = sim.step()

        for name, reason in state.failures.items():
            print(f"  Frame {frame}: {name} held ({reason})")

        if frame % report_interval == 0 or frame == args.frames:
            print(f"\nFrame {frame} - {state.epoch.date()}")
            for name in bodies:
                x, y, z = state.positions[name]
                print(f"  {name:<12} ({x:+12.1f}, {y:+12.1f}, {z:+12.1f})")

    # Final summary
    print(f"\n{'=' * 60}")
    print("Simulation Complete!")
    print(f"{'=' * 60}")
    print(f"Final date: {sim.state.epoch.date()}")
    print(f"Simulated days: {sim.state.elapsed_days:.1f}")
    print(f"Frames executed: {sim.state.frame_count}")

    trail_lengths = [len(sim.trail(name)) for name in bodies if name in sim.trails]
    if trail_lengths:
        print(f"Trail points per body: {max(trail_lengths)}/{args.trail_capacity}")


if __name__ == "__main__":
    main()
