#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exception types raised by the orbital mechanics engine.

Element and solver errors are local to a single body; registry errors
are structural and surface when the registry is built.
"""

from typing import Optional


class OrreryError(Exception):
    """Base class for all engine errors."""


class InvalidElements(OrreryError, ValueError):
    """Orbital elements outside the supported elliptical domain."""


class ConvergenceFailure(OrreryError, RuntimeError):
    """
    Kepler's equation did not converge within the iteration cap.

    Attributes
    ----------
    eccentricity : float
        Eccentricity of the orbit being solved
    mean_anomaly : float
        Mean anomaly that was being inverted (radians)
    estimate : float
        Last eccentric anomaly estimate (radians)
    iterations : int
        Number of Newton iterations performed
    """

    def __init__(
        self,
        eccentricity: float,
        mean_anomaly: float,
        estimate: float,
        iterations: int
    ):
        self.eccentricity = eccentricity
        self.mean_anomaly = mean_anomaly
        self.estimate = estimate
        self.iterations = iterations
        super().__init__(
            f"Kepler solver did not converge after {iterations} iterations "
            f"(e={eccentricity}, M={mean_anomaly}, last E={estimate})"
        )


class UnresolvedParent(OrreryError, LookupError):
    """A body references a parent that is not in the registry."""

    def __init__(self, body: str, parent: str):
        self.body = body
        self.parent = parent
        super().__init__(f"Body '{body}' references unknown parent '{parent}'")


class MalformedRecord(OrreryError, ValueError):
    """A single input data row failed schema validation."""

    def __init__(self, message: str, row: Optional[int] = None, name: Optional[str] = None):
        self.row = row
        self.name = name
        where = f"row {row}" if row is not None else "record"
        if name:
            where += f" ({name})"
        super().__init__(f"{where}: {message}")
