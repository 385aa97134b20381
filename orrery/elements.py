#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbital Element Set for the Solar System Simulator

Defines the immutable Keplerian elements of a body orbiting its parent.
Distances in astronomical units, angles in degrees (radian accessors are
provided), periods in years.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from .errors import InvalidElements

# Astronomical unit in km
AU_KM = 1.496e8

# Gravitational constant in m³/(kg·s²)
G = 6.67430e-11

# Days per Julian year
DAYS_PER_YEAR = 365.25

# J2000.0 reference epoch
J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
J2000_JULIAN_DATE = 2451545.0


def km_to_au(km: float) -> float:
    """Convert kilometers to astronomical units."""
    return km / AU_KM


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def julian_date(moment: datetime) -> float:
    """
    Julian date of a moment in time.

    Naive datetimes are interpreted as UTC.
    """
    delta = _as_utc(moment) - J2000
    return J2000_JULIAN_DATE + delta / timedelta(days=1)


def datetime_from_julian(jd: float) -> datetime:
    """Inverse of :func:`julian_date`, returning an aware UTC datetime."""
    return J2000 + timedelta(days=jd - J2000_JULIAN_DATE)


def centuries_since_j2000(moment: datetime) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (julian_date(moment) - J2000_JULIAN_DATE) / 36525.0


@dataclass(frozen=True)
class OrbitalElementSet:
    """
    Classical orbital elements of a body around its parent.

    Parameters
    ----------
    semi_major_axis : float
        Half the longest diameter of the ellipse (AU), a >= 0
    eccentricity : float
        Shape of the ellipse, 0 <= e < 1
    inclination : float
        Tilt of the orbital plane from the reference plane (degrees)
    longitude_of_ascending_node : float
        Angle from the reference direction to the ascending node (degrees), Ω
    longitude_of_perihelion : float
        Ω + ω, the longitude at which perihelion occurs (degrees), ϖ
    mean_longitude : float
        Mean longitude at the reference epoch (degrees), L0
    epoch : datetime
        Reference epoch of the elements

    Attributes
    ----------
    argument_of_perihelion : float
        ω = ϖ − Ω (degrees)
    period : float
        Orbital period a^1.5 (years). Applied to every body regardless of
        its actual parent, so it is only exact for solar-mass primaries.
    """
    semi_major_axis: float
    eccentricity: float
    inclination: float = 0.0
    longitude_of_ascending_node: float = 0.0
    longitude_of_perihelion: float = 0.0
    mean_longitude: float = 0.0
    epoch: datetime = J2000
    argument_of_perihelion: float = field(init=False)
    period: float = field(init=False)

    def __post_init__(self):
        values = {
            "semi_major_axis": self.semi_major_axis,
            "eccentricity": self.eccentricity,
            "inclination": self.inclination,
            "longitude_of_ascending_node": self.longitude_of_ascending_node,
            "longitude_of_perihelion": self.longitude_of_perihelion,
            "mean_longitude": self.mean_longitude,
        }
        for name, value in values.items():
            if not math.isfinite(value):
                raise InvalidElements(f"{name} must be finite, got {value}")
        if self.semi_major_axis < 0:
            raise InvalidElements(
                f"Semi-major axis must be non-negative, got {self.semi_major_axis}"
            )
        if not 0.0 <= self.eccentricity < 1.0:
            raise InvalidElements(
                f"Eccentricity must be in [0, 1), got {self.eccentricity}"
            )

        object.__setattr__(
            self,
            "argument_of_perihelion",
            self.longitude_of_perihelion - self.longitude_of_ascending_node,
        )
        object.__setattr__(self, "period", self.semi_major_axis ** 1.5)

    @property
    def inclination_rad(self) -> float:
        """Inclination in radians."""
        return math.radians(self.inclination)

    @property
    def ascending_node_rad(self) -> float:
        """Longitude of the ascending node in radians."""
        return math.radians(self.longitude_of_ascending_node)

    @property
    def argument_of_perihelion_rad(self) -> float:
        """Argument of perihelion in radians."""
        return math.radians(self.argument_of_perihelion)

    @property
    def mean_anomaly_at_epoch(self) -> float:
        """M0 = L0 − ϖ in radians."""
        return math.radians(self.mean_longitude - self.longitude_of_perihelion)

    @property
    def mean_motion(self) -> float:
        """Mean angular rate (radians/day)."""
        if self.period == 0:
            raise InvalidElements("Mean motion is undefined for a zero semi-major axis")
        return 2 * math.pi / (self.period * DAYS_PER_YEAR)

    @property
    def perihelion_distance(self) -> float:
        """Closest distance to the parent (AU)."""
        return self.semi_major_axis * (1 - self.eccentricity)

    @property
    def aphelion_distance(self) -> float:
        """Farthest distance from the parent (AU)."""
        return self.semi_major_axis * (1 + self.eccentricity)

    def __repr__(self) -> str:
        return (
            f"OrbitalElementSet(a={self.semi_major_axis:.6f} AU, "
            f"e={self.eccentricity:.6f}, i={self.inclination:.4f}°, "
            f"Ω={self.longitude_of_ascending_node:.4f}°, "
            f"ω={self.argument_of_perihelion:.4f}°, "
            f"P={self.period:.4f} yr)"
        )


@dataclass(frozen=True)
class PhysicalProperties:
    """
    Rendering-adjacent metadata of a body. Not used by the propagation math.

    Attributes
    ----------
    radius_km : float
        Mean radius (km)
    mass_kg : float
        Mass (kg)
    color : int
        Orbit color as a 0xRRGGBB integer
    description : Optional[str]
        Free-text description for the host UI
    """
    radius_km: float = 0.0
    mass_kg: float = 0.0
    color: int = 0x7F7F7F
    description: Optional[str] = None

    @property
    def radius_au(self) -> float:
        """Radius in astronomical units."""
        return km_to_au(self.radius_km)
