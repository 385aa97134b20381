#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Kepler's Equation and Anomaly Conversions

Newton-Raphson inversion of Kepler's equation (mean anomaly to eccentric
anomaly) and the closed-form half-angle conversions between true and
eccentric anomaly. All angles in radians.
"""

import math

from .errors import ConvergenceFailure, InvalidElements

# Default convergence tolerance on the Newton correction
KEPLER_TOLERANCE = 1e-4

# Iteration cap before the solver gives up
KEPLER_MAX_ITERATIONS = 100


def _check_eccentricity(e: float) -> None:
    if not 0.0 <= e < 1.0:
        raise InvalidElements(f"Eccentricity must be in [0, 1), got {e}")


def solve_kepler(
    e: float,
    M: float,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS
) -> float:
    """
    Calculate eccentric anomaly from mean anomaly using Newton-Raphson iteration.

    Solves Kepler's equation: M = E - e * sin(E)

    Parameters
    ----------
    e : float
        Eccentricity, 0 <= e < 1
    M : float
        Mean anomaly (radians), any real value
    tolerance : float
        Convergence tolerance on the Newton correction
    max_iterations : int
        Maximum number of Newton iterations

    Returns
    -------
    float
        Eccentric anomaly (radians)

    Raises
    ------
    ConvergenceFailure
        If the correction is still above tolerance after max_iterations
    """
    _check_eccentricity(e)
    if not math.isfinite(M):
        raise InvalidElements(f"Mean anomaly must be finite, got {M}")

    E = M
    for _ in range(max_iterations):
        f = E - e * math.sin(E) - M
        f_prime = 1 - e * math.cos(E)
        ratio = f / f_prime
        E -= ratio
        if abs(ratio) <= tolerance:
            return E

    raise ConvergenceFailure(e, M, E, max_iterations)


def _same_revolution(angle: float, reference: float) -> float:
    """Shift angle by whole turns so it lies within π of reference."""
    turns = round((reference - angle) / (2 * math.pi))
    return angle + turns * 2 * math.pi


def true_to_eccentric(e: float, theta: float) -> float:
    """
    Convert true anomaly to eccentric anomaly.

    E = 2 atan( sqrt((1-e)/(1+e)) tan(θ/2) ), placed on the same revolution as θ.
    """
    _check_eccentricity(e)
    E = 2 * math.atan(math.sqrt((1 - e) / (1 + e)) * math.tan(theta / 2))
    if not math.isfinite(E):
        raise InvalidElements(f"Eccentric anomaly undefined for e={e}, θ={theta}")
    return _same_revolution(E, theta)


def eccentric_to_true(e: float, E: float) -> float:
    """
    Convert eccentric anomaly to true anomaly.

    θ = 2 atan( sqrt((1+e)/(1-e)) tan(E/2) ), placed on the same revolution as E.
    """
    _check_eccentricity(e)
    theta = 2 * math.atan(math.sqrt((1 + e) / (1 - e)) * math.tan(E / 2))
    if not math.isfinite(theta):
        raise InvalidElements(f"True anomaly undefined for e={e}, E={E}")
    return _same_revolution(theta, E)


def mean_from_eccentric(e: float, E: float) -> float:
    """Mean anomaly from eccentric anomaly, M = E - e sin(E)."""
    return E - e * math.sin(E)
