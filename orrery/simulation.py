#!/usr/bin/env python3
"""
Simulation Module

Main simulation class for the solar system and near-Earth object orrery.
Drives the per-frame update of every body, keeps the live trails and the
static orbit traces, and tracks the simulated calendar date.

The simulation runs independently of any renderer; a host calls
:meth:`Simulation.step` once per animation frame.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .body import BodyDefinition
from .catalog import create_solar_system
from .elements import J2000
from .feed import read_neo_csv
from .registry import DEFAULT_DRIFT_SPEED, CelestialBodyRegistry, RootMotion
from .trace import TRACE_STEP, TRAIL_CAPACITY, OrbitTraceBuffer, sample_full_ellipse

logger = logging.getLogger(__name__)

# Base sim speed of the speed control, in days per frame
SLIDER_BASE_SPEED = 1 / 2592000

# Frames per second assumed when displaying days per second
DISPLAY_FRAME_RATE = 40


def sim_speed_from_slider(value: float, base: float = SLIDER_BASE_SPEED) -> float:
    """
    Map a speed-control position to simulated days per frame.

    Positive positions run forward, negative ones backward, each step of 2
    doubling the rate.
    """
    rate = base * math.pow(2, abs(value) / 2)
    return -rate if value < 0 else rate


def days_per_second(sim_speed: float, frame_rate: float = DISPLAY_FRAME_RATE) -> float:
    """Simulated days per wall-clock second at a given frame rate."""
    return sim_speed * frame_rate


@dataclass
class SimulationConfig:
    """
    Configuration for a simulation.

    Attributes
    ----------
    sim_speed : float
        Simulated days per frame.
    start_epoch : datetime
        Calendar date at frame zero.
    trail_capacity : int
        Maximum number of points in each live trail.
    trace_step : float
        True-anomaly increment of the static traces (radians).
    record_trails : bool
        Record live trails each frame.
    root_motion : RootMotion
        Default motion mode of the Sun.
    root_drift_speed : float
        Sun drift speed in linear-drift mode.
    origin : tuple
        Sun position in fixed mode (render units).
    include_moon : bool
        Include the Moon in the built-in bodies.
    include_planets : bool
        Include the Sun and planets. When False, extra_bodies must supply a root.
    neo_feed : Path, optional
        CSV file of near-Earth objects to load.
    extra_bodies : list
        Additional body definitions.
    start_from_mean_longitude : bool
        Start bodies at their mean anomaly at epoch instead of perihelion.
    enable_logging : bool
        Log a debug summary of every frame.
    """

    sim_speed: float = 1.0
    start_epoch: datetime = J2000
    trail_capacity: int = TRAIL_CAPACITY
    trace_step: float = TRACE_STEP
    record_trails: bool = True
    root_motion: RootMotion = RootMotion.FIXED
    root_drift_speed: float = DEFAULT_DRIFT_SPEED
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    include_moon: bool = True
    include_planets: bool = True
    neo_feed: Optional[Path] = None
    extra_bodies: List[BodyDefinition] = field(default_factory=list)
    start_from_mean_longitude: bool = False
    enable_logging: bool = False


@dataclass
class FrameState:
    """
    Result of the latest frame.

    Attributes
    ----------
    epoch : datetime
        Simulated calendar date.
    frame_count : int
        Number of frames executed.
    elapsed_days : float
        Total simulated days.
    positions : dict
        Absolute body positions (name -> ndarray, render units).
    failures : dict
        Bodies held at their previous position this frame (name -> reason).
    """

    epoch: datetime = J2000
    frame_count: int = 0
    elapsed_days: float = 0.0
    positions: Dict[str, np.ndarray] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)


class Simulation:
    """
    Main simulation class for the orrery.

    Parameters
    ----------
    config : SimulationConfig, optional
        Simulation configuration.

    Attributes
    ----------
    config : SimulationConfig
        Current configuration.
    registry : CelestialBodyRegistry
        All simulated bodies.
    trails : dict
        Live trail buffer per orbiting body.
    static_traces : dict
        Full-orbit polyline per orbiting body, parent-relative.
    state : FrameState
        Result of the latest frame.
    rejected_records : list
        Feed rows skipped while loading.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.registry = CelestialBodyRegistry()
        self.trails: Dict[str, OrbitTraceBuffer] = {}
        self.static_traces: Dict[str, np.ndarray] = {}
        self.state = FrameState(epoch=self.config.start_epoch)
        self.rejected_records: List[Any] = []

        self._initialized = False

    def initialize(self) -> None:
        """
        Build the registry and the static traces.

        Must be called before stepping the simulation.
        """
        definitions = self._collect_definitions()
        self.registry = CelestialBodyRegistry(
            definitions,
            origin=self.config.origin,
            from_mean_longitude=self.config.start_from_mean_longitude,
        )
        self.trails = {}
        self.static_traces = {}
        for entry in self.registry:
            if entry.is_root:
                continue
            self.static_traces[entry.name] = sample_full_ellipse(
                entry.elements, self.config.trace_step
            )

        self.state = FrameState(
            epoch=self.config.start_epoch,
            positions=self.registry.positions(),
        )
        self._initialized = True
        logger.info(
            f"Simulation initialized with {len(self.registry)} bodies "
            f"({len(self.rejected_records)} feed rows rejected)"
        )

    def _collect_definitions(self) -> List[BodyDefinition]:
        definitions: List[BodyDefinition] = []
        if self.config.include_planets:
            definitions.extend(create_solar_system(self.config.include_moon))

        definitions.extend(self.config.extra_bodies)

        self.rejected_records = []
        if self.config.neo_feed is not None:
            reserved = {definition.name for definition in definitions}
            feed = read_neo_csv(self.config.neo_feed, reserved=reserved)
            definitions.extend(feed.definitions)
            self.rejected_records = list(feed.rejected)

        return definitions

    def step(
        self,
        sim_speed: Optional[float] = None,
        root_motion: Optional[RootMotion] = None,
        record_trails: Optional[bool] = None,
        now: Optional[float] = None
    ) -> FrameState:
        """
        Advance simulation by one frame.

        Parameters
        ----------
        sim_speed : float, optional
            Simulated days this frame. Defaults to config.sim_speed.
        root_motion : RootMotion, optional
            Sun motion mode this frame. Defaults to config.root_motion.
        record_trails : bool, optional
            Record live trails this frame. Defaults to config.record_trails.
        now : float, optional
            Wall-clock seconds used by linear drift.

        Returns
        -------
        FrameState
            Updated frame state.

        Raises
        ------
        RuntimeError
            If simulation not initialized.
        """
        if not self._initialized:
            raise RuntimeError("Simulation not initialized. Call initialize() first.")

        if sim_speed is None:
            sim_speed = self.config.sim_speed
        if root_motion is None:
            root_motion = self.config.root_motion
        if record_trails is None:
            record_trails = self.config.record_trails

        failures = self.registry.update(
            sim_speed,
            root_motion=root_motion,
            drift_speed=self.config.root_drift_speed,
            now=now,
        )

        positions = self.registry.positions()
        if record_trails:
            for entry in self.registry:
                if entry.is_root:
                    continue
                trail = self.trails.get(entry.name)
                if trail is None:
                    trail = self.trails[entry.name] = OrbitTraceBuffer(
                        self.config.trail_capacity
                    )
                trail.enqueue(positions[entry.name])

        self.state = FrameState(
            epoch=self.state.epoch + timedelta(days=sim_speed),
            frame_count=self.state.frame_count + 1,
            elapsed_days=self.state.elapsed_days + sim_speed,
            positions=positions,
            failures={name: str(exc) for name, exc in failures.items()},
        )

        if self.config.enable_logging:
            logger.debug(
                f"Frame {self.state.frame_count}: epoch={self.state.epoch.date()} "
                f"speed={sim_speed:g} d/frame failures={len(failures)}"
            )

        return self.state

    def run(self, frames: int, sim_speed: Optional[float] = None) -> List[FrameState]:
        """
        Run simulation for a number of frames.

        Parameters
        ----------
        frames : int
            Number of frames.
        sim_speed : float, optional
            Simulated days per frame.

        Returns
        -------
        list
            Frame state after each frame.
        """
        if not self._initialized:
            self.initialize()

        return [self.step(sim_speed) for _ in range(frames)]

    def reset(self) -> None:
        """Reset simulation to initial state."""
        self.initialize()

    def absolute_position(self, name: str) -> np.ndarray:
        """Absolute position of a body (render units)."""
        return self.registry.absolute_position(name)

    def trail(self, name: str) -> np.ndarray:
        """Live trail of a body as an (N, 3) polyline."""
        trail = self.trails.get(name)
        if trail is None:
            return np.empty((0, 3))
        return trail.points()

    def static_trace(self, name: str, absolute: bool = True) -> np.ndarray:
        """
        Full-orbit polyline of a body.

        With ``absolute`` the trace is offset by the parent's current
        absolute position.
        """
        trace = self.static_traces[name]
        if not absolute:
            return trace
        parent = self.registry.parent_of(name)
        return trace + self.registry.absolute_position(parent)

    def find(self, query: str) -> List[str]:
        """Body names containing a query string, case-insensitive."""
        query = query.strip().lower()
        return [name for name in self.registry.names if query in name.lower()]

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def num_bodies(self) -> int:
        """Number of bodies."""
        return len(self.registry)

    @property
    def num_neos(self) -> int:
        """Number of near-Earth objects."""
        return sum(1 for entry in self.registry if entry.is_neo)

    def get_summary(self) -> Dict[str, Any]:
        """Get simulation summary."""
        return {
            "num_bodies": self.num_bodies,
            "num_neos": self.num_neos,
            "rejected_records": len(self.rejected_records),
            "epoch": self.state.epoch.isoformat(),
            "frame_count": self.state.frame_count,
            "elapsed_days": self.state.elapsed_days,
            "failures": dict(self.state.failures),
            "initialized": self._initialized,
        }

    def __repr__(self) -> str:
        return (
            f"Simulation(\n"
            f"  bodies={self.num_bodies},\n"
            f"  neos={self.num_neos},\n"
            f"  epoch={self.state.epoch.date()},\n"
            f"  frames={self.state.frame_count},\n"
            f"  elapsed={self.state.elapsed_days:.2f} days\n"
            f")"
        )


def create_simulation(**kwargs) -> Simulation:
    """
    Create simulation with configuration overrides.

    Parameters
    ----------
    **kwargs
        SimulationConfig fields.

    Returns
    -------
    Simulation
        Configured simulation (not yet initialized).

    Raises
    ------
    ValueError
        If a keyword is not a configuration field.
    """
    config = SimulationConfig()

    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise ValueError(f"Unknown configuration option: {key}")
        setattr(config, key, value)

    return Simulation(config)
