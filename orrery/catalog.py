#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Solar System Catalog

Provides factory functions for the built-in bodies:
- The Sun (root of the hierarchy)
- The eight planets, orbiting the Sun
- The Moon, orbiting the Earth
"""

from datetime import datetime, timezone
from typing import List

from .body import SUN, BodyDefinition
from .elements import OrbitalElementSet, PhysicalProperties

EARTH = "Earth"
MOON = "Moon"

# The Moon is advanced at a hundredth of the frame's simulated days
MOON_TIME_SCALE = 0.01


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


# name: (a, e, ϖ, Ω, L0, i, epoch, radius km, mass kg, color)
PLANET_ELEMENTS = {
    "Earth": (1.00000018, 0.01673163, 102.93005885, -5.11260389, 100.46691572,
              -0.00054346, _utc(2024, 2, 4), 6378.0, 5.972e24, 0x22ABDF),
    "Mars": (1.52371034, 0.09339410, -23.94362959, 49.55953891, -4.55343205,
             1.84969142, _utc(2000, 1, 1), 3389.5, 6.39e23, 0xFF5E33),
    "Jupiter": (5.20288700, 0.04838624, 14.72847983, 100.47390909, 34.39644051,
                1.30439695, _utc(1999, 5, 20), 69911.0, 1.898e27, 0xA2440A),
    "Venus": (0.72332102, 0.00676399, 131.76755713, 76.67261496, 181.97970850,
              3.39777545, _utc(2014, 9, 5), 6051.8, 4.867e24, 0xD8B712),
    "Saturn": (9.53667594, 0.05386179, 92.59887831, 113.66242448, 49.95424423,
               2.48599187, _utc(1944, 9, 7), 58232.0, 5.683e26, 0xF6D624),
    "Mercury": (0.38709927, 0.20563593, 77.45779628, 48.33076593, 252.25032350,
                7.00497902, _utc(2021, 4, 27), 2440.0, 3.285e23, 0xA195A8),
    "Uranus": (19.18916464, 0.04725744, 170.95427630, 74.01692503, 313.23810451,
               0.77263783, _utc(1966, 6, 2), 25362.0, 8.681e25, 0x949AFF),
    "Neptune": (30.06992276, 0.00859048, 44.96476227, 131.78422574, -55.12002969,
                1.77004347, _utc(2042, 9, 15), 24622.0, 1.024e26, 0x3339FF),
}


def _definition(name: str, values: tuple, parent: str, time_scale: float = 1.0) -> BodyDefinition:
    a, e, varpi, node, mean_longitude, inclination, epoch, radius, mass, color = values
    return BodyDefinition(
        name=name,
        elements=OrbitalElementSet(
            semi_major_axis=a,
            eccentricity=e,
            inclination=inclination,
            longitude_of_ascending_node=node,
            longitude_of_perihelion=varpi,
            mean_longitude=mean_longitude,
            epoch=epoch,
        ),
        parent=parent,
        time_scale=time_scale,
        physical=PhysicalProperties(radius_km=radius, mass_kg=mass, color=color),
    )


def create_sun() -> BodyDefinition:
    """
    Create the Sun, the root of the hierarchy.

    Returns
    -------
    BodyDefinition
        A parentless body with zero-size orbital elements
    """
    return BodyDefinition(
        name=SUN,
        elements=OrbitalElementSet(semi_major_axis=0.0, eccentricity=0.0),
        parent=None,
        physical=PhysicalProperties(radius_km=696340.0, mass_kg=1.989e30, color=0xFDB813),
    )


def create_planets() -> List[BodyDefinition]:
    """Create the eight planets, each orbiting the Sun."""
    return [_definition(name, values, SUN) for name, values in PLANET_ELEMENTS.items()]


def create_moon() -> BodyDefinition:
    """Create the Moon, orbiting the Earth at a reduced time scale."""
    values = (0.00257, 0.0549, 0.0024, 125.08, 100.46691572, 5.145,
              _utc(2020, 11, 6), 1737.4, 7.34767309e22, 0xA1A1A1)
    return _definition(MOON, values, EARTH, time_scale=MOON_TIME_SCALE)


def create_solar_system(include_moon: bool = True) -> List[BodyDefinition]:
    """
    Create the built-in solar system.

    Parameters
    ----------
    include_moon : bool
        Whether to include the Moon (default True)

    Returns
    -------
    list
        Sun, planets and optionally the Moon
    """
    bodies = [create_sun()] + create_planets()
    if include_moon:
        bodies.append(create_moon())
    return bodies
