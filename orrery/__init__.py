#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Simulation Package

This package provides the numerical core of the solar system and
near-Earth object simulator: orbital elements, Kepler's equation,
orbit propagation, the per-frame recurrence, orbit traces and the
body registry.

The simulation can be run independently of any renderer.

Example usage:

    from orrery import Simulation, SimulationConfig

    sim = Simulation(SimulationConfig(sim_speed=1.0))
    sim.initialize()
    state = sim.step()          # advance one frame (one simulated day)
    earth = state.positions["Earth"]
"""

from .errors import (
    OrreryError,
    InvalidElements,
    ConvergenceFailure,
    UnresolvedParent,
    MalformedRecord,
)

from .elements import (
    OrbitalElementSet,
    PhysicalProperties,
    AU_KM,
    J2000,
    km_to_au,
    julian_date,
    datetime_from_julian,
    centuries_since_j2000,
)

from .kepler import (
    solve_kepler,
    true_to_eccentric,
    eccentric_to_true,
    mean_from_eccentric,
    KEPLER_TOLERANCE,
    KEPLER_MAX_ITERATIONS,
)

from .propagator import (
    propagate,
    propagate_render,
    to_render_frame,
    radial_distance,
    semi_latus_rectum,
    RENDER_SCALE,
)

from .state import (
    KeplerianState,
    LinearDriftState,
    initial_state,
    advance,
    advance_linear_drift,
)

from .trace import (
    OrbitTraceBuffer,
    limited_enqueue,
    sample_full_ellipse,
    TRAIL_CAPACITY,
    TRACE_STEP,
)

from .body import (
    BodyDefinition,
    SUN,
)

from .registry import (
    CelestialBodyRegistry,
    BodyEntry,
    RootMotion,
)

from .catalog import (
    EARTH,
    MOON,
    create_sun,
    create_planets,
    create_moon,
    create_solar_system,
)

from .feed import (
    NeoFeedResult,
    parse_neo_rows,
    read_neo_csv,
    NEO_FIELDS,
)

from .simulation import (
    Simulation,
    SimulationConfig,
    FrameState,
    create_simulation,
    sim_speed_from_slider,
    days_per_second,
)


__all__ = [
    # Errors
    "OrreryError",
    "InvalidElements",
    "ConvergenceFailure",
    "UnresolvedParent",
    "MalformedRecord",

    # Elements
    "OrbitalElementSet",
    "PhysicalProperties",
    "AU_KM",
    "J2000",
    "km_to_au",
    "julian_date",
    "datetime_from_julian",
    "centuries_since_j2000",

    # Kepler
    "solve_kepler",
    "true_to_eccentric",
    "eccentric_to_true",
    "mean_from_eccentric",
    "KEPLER_TOLERANCE",
    "KEPLER_MAX_ITERATIONS",

    # Propagation
    "propagate",
    "propagate_render",
    "to_render_frame",
    "radial_distance",
    "semi_latus_rectum",
    "RENDER_SCALE",

    # State
    "KeplerianState",
    "LinearDriftState",
    "initial_state",
    "advance",
    "advance_linear_drift",

    # Traces
    "OrbitTraceBuffer",
    "limited_enqueue",
    "sample_full_ellipse",
    "TRAIL_CAPACITY",
    "TRACE_STEP",

    # Bodies
    "BodyDefinition",
    "SUN",
    "CelestialBodyRegistry",
    "BodyEntry",
    "RootMotion",
    "EARTH",
    "MOON",
    "create_sun",
    "create_planets",
    "create_moon",
    "create_solar_system",

    # NEO feed
    "NeoFeedResult",
    "parse_neo_rows",
    "read_neo_csv",
    "NEO_FIELDS",

    # Simulation
    "Simulation",
    "SimulationConfig",
    "FrameState",
    "create_simulation",
    "sim_speed_from_slider",
    "days_per_second",
]

__version__ = "1.0.0"
