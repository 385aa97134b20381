#!/usr/bin/env python3
"""
Example: Running Orrery Simulations

Demonstrates how to drive the orbital engine programmatically without a
renderer. Useful for:
- Checking orbits of newly added bodies
- Running on headless servers
- Feeding positions to an external renderer
"""

import math
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from orrery import (
    BodyDefinition,
    CelestialBodyRegistry,
    KeplerianState,
    OrbitalElementSet,
    RootMotion,
    Simulation,
    SimulationConfig,
    advance,
    create_solar_system,
    propagate,
    solve_kepler,
)


def example_basic_simulation():
    """
    Basic example using the Simulation class.
    """
    print("=" * 70)
    print("Example 1: Basic Simulation")
    print("=" * 70)

    sim = Simulation(SimulationConfig(sim_speed=1.0))
    sim.initialize()

    print(f"\nBodies: {', '.join(sim.registry.names)}")
    print(f"Update order: {' -> '.join(sim.registry.update_order)}")

    print("\nRunning one simulated year...")
    for frame in range(365):
        state = sim.step()
        if (frame + 1) % 73 == 0:
            earth = state.positions["Earth"]
            print(f"  {state.epoch.date()}: Earth at {np.round(earth, 1)}")

    print(f"\nEarth trail holds {len(sim.trail('Earth'))} points")


def example_single_orbit():
    """
    Advance one orbit by hand with the pure functions.
    """
    print("\n" + "=" * 70)
    print("Example 2: Pure Recurrence")
    print("=" * 70)

    elements = OrbitalElementSet(
        semi_major_axis=1.0,
        eccentricity=0.0167,
        longitude_of_perihelion=102.93,
    )
    state = KeplerianState()

    print(f"\n{elements}")
    print(f"{'Day':^8} {'θ (deg)':^12} {'r (AU)':^10}")
    print("-" * 32)
    for day in range(0, 366, 61):
        r = np.linalg.norm(propagate(elements, state.true_anomaly))
        print(f"{day:^8} {math.degrees(state.true_anomaly):^12.3f} {r:^10.5f}")
        for _ in range(61):
            state = advance(state, elements, 1.0)


def example_custom_hierarchy():
    """
    A registry with a drifting Sun and a custom comet.
    """
    print("\n" + "=" * 70)
    print("Example 3: Custom Hierarchy")
    print("=" * 70)

    comet = BodyDefinition(
        name="Comet",
        elements=OrbitalElementSet(
            semi_major_axis=17.8,
            eccentricity=0.967,
            inclination=162.3,
            longitude_of_ascending_node=58.4,
            longitude_of_perihelion=170.0,
        ),
        parent="Sun",
    )
    registry = CelestialBodyRegistry(create_solar_system() + [comet])

    for second in range(5):
        registry.update(30.0, root_motion=RootMotion.LINEAR_DRIFT, now=float(second))

    print(f"\nSun: {registry.absolute_position('Sun')}")
    print(f"Comet: {np.round(registry.absolute_position('Comet'), 1)}")


def example_kepler_solver():
    """
    Solve Kepler's equation for a range of eccentricities.
    """
    print("\n" + "=" * 70)
    print("Example 4: Kepler's Equation")
    print("=" * 70)

    M = 1.0
    print(f"\n{'e':^8} {'E (rad)':^12} {'residual':^12}")
    print("-" * 34)
    for e in (0.0, 0.2, 0.5, 0.8, 0.95):
        E = solve_kepler(e, M)
        print(f"{e:^8.2f} {E:^12.6f} {E - e * math.sin(E) - M:^12.2e}")


def main():
    """Run all examples."""
    example_basic_simulation()
    example_single_orbit()
    example_custom_hierarchy()
    example_kepler_solver()

    print("\n" + "=" * 70)
    print("All examples complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
