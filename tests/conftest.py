#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and markers for testing the orbital engine,
the body registry, the simulation driver and the feed tools.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "integration: mark as integration test"
    )


# =============================================================================
# ELEMENT FIXTURES
# =============================================================================

@pytest.fixture
def earth_elements():
    """Earth-like orbit used by the reference scenario."""
    from orrery import OrbitalElementSet

    return OrbitalElementSet(
        semi_major_axis=1.0,
        eccentricity=0.0167,
        inclination=0.0,
        longitude_of_ascending_node=0.0,
        longitude_of_perihelion=102.93,
        mean_longitude=100.46,
    )


@pytest.fixture
def circular_elements():
    """Inclined circular orbit."""
    from orrery import OrbitalElementSet

    return OrbitalElementSet(
        semi_major_axis=2.5,
        eccentricity=0.0,
        inclination=23.0,
        longitude_of_ascending_node=40.0,
        longitude_of_perihelion=75.0,
    )


@pytest.fixture
def eccentric_elements():
    """Highly eccentric, inclined orbit."""
    from orrery import OrbitalElementSet

    return OrbitalElementSet(
        semi_major_axis=3.2,
        eccentricity=0.85,
        inclination=12.5,
        longitude_of_ascending_node=210.0,
        longitude_of_perihelion=300.0,
    )


# =============================================================================
# REGISTRY AND SIMULATION FIXTURES
# =============================================================================

@pytest.fixture
def solar_registry():
    """Registry with the built-in Sun, planets and Moon."""
    from orrery import CelestialBodyRegistry, create_solar_system

    return CelestialBodyRegistry(create_solar_system())


@pytest.fixture
def small_simulation():
    """Initialized simulation with short trails for quick tests."""
    from orrery import Simulation, SimulationConfig

    config = SimulationConfig(
        sim_speed=1.0,
        start_epoch=datetime(2024, 1, 1, tzinfo=timezone.utc),
        trail_capacity=10,
        trace_step=0.01,
    )
    sim = Simulation(config)
    sim.initialize()
    return sim


# =============================================================================
# FEED FIXTURES
# =============================================================================

NEO_HEADER = "name;a;e;q;om;w;i;tp;diameter;gm"


def neo_row(name, a, e, om=80.0, w=120.0, i=6.0, tp="2460000.5", diameter="1.2", gm="", q=None):
    """Build one ';'-delimited feed row."""
    if q is None:
        q = a * (1 - e)
    return ";".join(str(v) for v in (name, a, e, q, om, w, i, tp, diameter, gm))


@pytest.fixture
def neo_csv(tmp_path):
    """Feed file with three valid rows and three malformed ones."""
    lines = [
        NEO_HEADER,
        neo_row("433 Eros", 1.458, 0.2229, om=304.3, w=178.9, i=10.83),
        neo_row("Bad eccentricity", 1.2, 1.4, q=0.1),
        neo_row("1036 Ganymed", 2.665, 0.5334, om=215.5, w=132.4, i=26.68),
        "Missing fields;1.1;0.2",
        neo_row("Bad q", 1.5, 0.3, q=0.2),
        neo_row("99942 Apophis", 0.9224, 0.1914, om=204.0, w=126.6, i=3.34, tp="2022-08-09"),
    ]
    path = tmp_path / "neos.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
