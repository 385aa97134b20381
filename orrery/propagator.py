#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbit Propagator

Maps a true anomaly to a position relative to the parent body using the
radial-distance law and the perifocal-to-inertial rotation. Pure functions
of (elements, true anomaly); no hidden state.
"""

import math
import numpy as np

from .elements import OrbitalElementSet

# Render units per astronomical unit
RENDER_SCALE = 10000.0

# Inertial (x, y, z) -> render (y, z, x)
RENDER_AXES = (1, 2, 0)


def semi_latus_rectum(elements: OrbitalElementSet) -> float:
    """p = a (1 - e²), the radius at a true anomaly of 90° (AU)."""
    e = elements.eccentricity
    return elements.semi_major_axis * (1 - e ** 2)


def radial_distance(elements: OrbitalElementSet, theta: float) -> float:
    """
    Calculate orbital radius at a given true anomaly.

    Parameters
    ----------
    elements : OrbitalElementSet
        Orbit of the body
    theta : float
        True anomaly (radians)

    Returns
    -------
    float
        Distance from the parent (AU)
    """
    return semi_latus_rectum(elements) / (1 + elements.eccentricity * math.cos(theta))


def propagate(elements: OrbitalElementSet, theta: float) -> np.ndarray:
    """
    Calculate the position relative to the parent in the inertial frame.

    Parameters
    ----------
    elements : OrbitalElementSet
        Orbit of the body
    theta : float
        True anomaly (radians)

    Returns
    -------
    np.ndarray
        Position vector [x, y, z] in AU
    """
    r = radial_distance(elements, theta)
    i = elements.inclination_rad
    Omega = elements.ascending_node_rad
    u = elements.argument_of_perihelion_rad + theta

    cos_u = math.cos(u)
    sin_u = math.sin(u)
    cos_O = math.cos(Omega)
    sin_O = math.sin(Omega)
    cos_i = math.cos(i)

    return np.array([
        r * (cos_u * cos_O - cos_i * sin_u * sin_O),
        r * (cos_u * sin_O + cos_i * sin_u * cos_O),
        r * (sin_u * math.sin(i)),
    ])


def to_render_frame(position: np.ndarray) -> np.ndarray:
    """
    Permute and scale an inertial vector (AU) into render units.

    The same permutation is used for live positions, trails and static
    traces so all three line up.
    """
    return np.asarray(position, dtype=float)[list(RENDER_AXES)] * RENDER_SCALE


def propagate_render(elements: OrbitalElementSet, theta: float) -> np.ndarray:
    """Parent-relative position at a true anomaly, in render units."""
    return to_render_frame(propagate(elements, theta))
