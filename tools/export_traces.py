#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Trace Export Utility

Runs a simulation for a number of frames and writes what a renderer
consumes to JSON files:

- {body}_trace.json: Static full-orbit polyline and per-frame positions
- metadata.json: Export metadata

Usage
-----
Command-line:
    python -m tools.export_traces --output ./traces --frames 365 --speed 1

Programmatic:
    from tools.export_traces import TraceExporter

    exporter = TraceExporter(output_dir)
    exporter.add_from_simulation(sim, frames=365)
    exporter.export()
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging
import sys

import numpy as np


logger = logging.getLogger(__name__)


@dataclass
class BodyTrajectory:
    """
    Recorded frames of a single body.

    Attributes
    ----------
    name : str
        Body name
    parent : Optional[str]
        Parent body name, None for a root
    epochs : List[datetime]
        Simulated date of each frame
    positions : List[np.ndarray]
        Absolute position of each frame (render units)
    static_trace : Optional[np.ndarray]
        Parent-relative full-orbit polyline (render units)
    """
    name: str
    parent: Optional[str] = None
    epochs: List[datetime] = field(default_factory=list)
    positions: List[np.ndarray] = field(default_factory=list)
    static_trace: Optional[np.ndarray] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "parent": self.parent,
            "frames": [
                {"epoch": epoch.isoformat(), "position": position.tolist()}
                for epoch, position in zip(self.epochs, self.positions)
            ],
            "static_trace": (
                self.static_trace.tolist() if self.static_trace is not None else None
            ),
        }


class TraceExporter:
    """
    Collects body trajectories from a simulation and writes them as JSON.

    Parameters
    ----------
    output_dir : Path or str
        Directory to write into (created on export)
    """

    def __init__(self, output_dir: Union[Path, str]):
        self.output_dir = Path(output_dir)
        self.trajectories: Dict[str, BodyTrajectory] = {}
        self._metadata: Dict[str, Any] = {
            "created": datetime.now(timezone.utc).isoformat(),
            "version": "1.0",
        }

    def add_from_simulation(self, simulation, frames: int, sim_speed: Optional[float] = None) -> None:
        """
        Step a simulation and record every body's position each frame.

        Parameters
        ----------
        simulation : Simulation
            Simulation to run; initialized if needed
        frames : int
            Number of frames to record
        sim_speed : float, optional
            Simulated days per frame (default: the simulation's own)
        """
        if not simulation.is_initialized:
            simulation.initialize()

        registry = simulation.registry
        for name in registry.names:
            if name not in self.trajectories:
                static = simulation.static_traces.get(name)
                self.trajectories[name] = BodyTrajectory(
                    name=name,
                    parent=registry.parent_of(name),
                    static_trace=static,
                )

        for _ in range(frames):
            state = simulation.step(sim_speed)
            for name, position in state.positions.items():
                trajectory = self.trajectories[name]
                trajectory.epochs.append(state.epoch)
                trajectory.positions.append(position)
            for name, reason in state.failures.items():
                logger.warning(f"{name} held at frame {state.frame_count}: {reason}")

        self._metadata["sim_speed"] = simulation.config.sim_speed if sim_speed is None else sim_speed
        logger.info(f"Recorded {frames} frames for {len(self.trajectories)} bodies")

    def export(self) -> Path:
        """
        Write one file per body plus metadata.json.

        Returns
        -------
        Path
            Output directory containing all files
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        for trajectory in self.trajectories.values():
            filepath = self.output_dir / f"{_safe_name(trajectory.name)}_trace.json"
            with open(filepath, "w") as f:
                json.dump(trajectory.to_dict(), f)
            logger.debug(f"Wrote trajectory: {filepath}")

        self._write_metadata()
        return self.output_dir

    def _write_metadata(self) -> Path:
        """Write export metadata."""
        filepath = self.output_dir / "metadata.json"

        metadata = {
            **self._metadata,
            "num_bodies": len(self.trajectories),
            "bodies": list(self.trajectories),
            "total_frames": max(
                (len(t.positions) for t in self.trajectories.values()), default=0
            ),
        }

        epochs = [t.epochs for t in self.trajectories.values() if t.epochs]
        if epochs:
            metadata["earliest_epoch"] = min(e[0] for e in epochs).isoformat()
            metadata["latest_epoch"] = max(e[-1] for e in epochs).isoformat()

        with open(filepath, "w") as f:
            json.dump(metadata, f, indent=2)

        logger.debug(f"Wrote metadata: {filepath}")
        return filepath


def _safe_name(name: str) -> str:
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in name)


def main():
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Export simulated orbit traces to JSON"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output directory for trace files"
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=365,
        help="Number of frames to record (default: 365)"
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Simulated days per frame (default: 1)"
    )
    parser.add_argument(
        "--neo-feed",
        type=Path,
        default=None,
        help="CSV file of near-Earth objects to include"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )

    from orrery import Simulation, SimulationConfig

    sim = Simulation(SimulationConfig(sim_speed=args.speed, neo_feed=args.neo_feed))
    sim.initialize()

    exporter = TraceExporter(args.output)
    exporter.add_from_simulation(sim, frames=args.frames)
    output_dir = exporter.export()

    logger.info(f"Traces exported to: {output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
