#!/usr/bin/env python3
"""
Tests for Kepler's equation and the anomaly conversions.

These tests verify:
1. The solver satisfies Kepler's equation within tolerance
2. The iteration cap raises a typed failure instead of looping
3. True/eccentric anomaly conversions round-trip
4. Eccentricities outside [0, 1) are rejected
"""

import math

import numpy as np
import pytest

from orrery import (
    ConvergenceFailure,
    InvalidElements,
    KEPLER_MAX_ITERATIONS,
    eccentric_to_true,
    mean_from_eccentric,
    solve_kepler,
    true_to_eccentric,
)

ECCENTRICITIES = np.linspace(0.0, 0.95, 20)
ANGLES = np.linspace(0.0, 2 * math.pi, 73, endpoint=False)


class TestKeplerSolver:
    """Newton-Raphson inversion of M = E - e sin(E)."""

    def test_residual_within_tolerance(self):
        """Test every (e, M) on the grid solves Kepler's equation."""
        for e in ECCENTRICITIES:
            for M in ANGLES:
                E = solve_kepler(e, M)
                assert abs(E - e * math.sin(E) - M) <= 1e-4, (e, M)

    def test_zero_eccentricity_is_identity(self):
        """Test E = M exactly for a circular orbit."""
        for M in [0.0, 0.5, 1.0, 2.0, 5.0, -3.0, 40.0]:
            assert solve_kepler(0.0, M) == M

    def test_tight_tolerance(self):
        """Test a tighter tolerance is honored."""
        E = solve_kepler(0.4, 1.0, tolerance=1e-12)
        assert abs(E - 0.4 * math.sin(E) - 1.0) < 1e-12

    def test_large_and_negative_mean_anomaly(self):
        """Test M outside [0, 2π) is solved without wrapping."""
        for M in [-7.5, -0.3, 13.0, 100.0]:
            E = solve_kepler(0.6, M)
            assert abs(E - 0.6 * math.sin(E) - M) <= 1e-4

    def test_iteration_cap_raises(self):
        """Test exceeding the cap raises ConvergenceFailure with context."""
        with pytest.raises(ConvergenceFailure) as excinfo:
            solve_kepler(0.9, 0.3, tolerance=1e-15, max_iterations=1)

        error = excinfo.value
        assert error.eccentricity == 0.9
        assert error.mean_anomaly == 0.3
        assert error.iterations == 1
        assert math.isfinite(error.estimate)

    def test_default_cap_is_bounded(self):
        """Test the default iteration cap is finite."""
        assert 0 < KEPLER_MAX_ITERATIONS <= 1000

    def test_convergence_failure_is_runtime_error(self):
        """Test callers can catch the failure as a RuntimeError."""
        with pytest.raises(RuntimeError):
            solve_kepler(0.5, 2.0, tolerance=0.0, max_iterations=2)

    @pytest.mark.parametrize("e", [-0.1, 1.0, 1.5, float("nan")])
    def test_rejects_non_elliptical_eccentricity(self, e):
        with pytest.raises(InvalidElements):
            solve_kepler(e, 1.0)

    def test_rejects_non_finite_mean_anomaly(self):
        with pytest.raises(InvalidElements):
            solve_kepler(0.1, float("inf"))


class TestAnomalyConversions:
    """Closed-form conversions between true and eccentric anomaly."""

    def test_round_trip(self):
        """Test eccentric_to_true(true_to_eccentric(θ)) returns θ."""
        for e in ECCENTRICITIES:
            for theta in ANGLES:
                E = true_to_eccentric(e, theta)
                assert eccentric_to_true(e, E) == pytest.approx(theta, abs=1e-6), (e, theta)

    def test_reverse_round_trip(self):
        """Test true_to_eccentric(eccentric_to_true(E)) returns E."""
        for e in ECCENTRICITIES:
            for E in ANGLES:
                theta = eccentric_to_true(e, E)
                assert true_to_eccentric(e, theta) == pytest.approx(E, abs=1e-6)

    def test_circular_orbit_angles_coincide(self):
        """Test θ = E when e = 0."""
        for theta in ANGLES:
            assert true_to_eccentric(0.0, theta) == pytest.approx(theta, abs=1e-12)

    def test_apsides_are_fixed_points(self):
        """Test perihelion and aphelion map to themselves."""
        for e in [0.1, 0.5, 0.9]:
            assert true_to_eccentric(e, 0.0) == 0.0
            assert true_to_eccentric(e, math.pi) == pytest.approx(math.pi, abs=1e-9)

    def test_same_revolution_as_input(self):
        """Test results stay on the input's revolution."""
        for theta in [4.0, 2 * math.pi + 1.0, -2.5, 20.0]:
            E = true_to_eccentric(0.3, theta)
            assert abs(E - theta) < math.pi

    def test_eccentric_lags_true_on_outbound_leg(self):
        """Test E < θ between perihelion and aphelion."""
        assert true_to_eccentric(0.5, 1.0) < 1.0

    def test_against_atan2_form(self):
        """Test agreement with the atan2 half-angle formula."""
        e = 0.3
        for E in np.linspace(-3.0, 3.0, 13):
            expected = 2 * math.atan2(
                math.sqrt(1 + e) * math.sin(E / 2),
                math.sqrt(1 - e) * math.cos(E / 2),
            )
            assert eccentric_to_true(e, E) == pytest.approx(expected, abs=1e-12)

    @pytest.mark.parametrize("e", [1.0, 1.2, -0.01])
    def test_rejects_parabolic_and_invalid(self, e):
        with pytest.raises(InvalidElements):
            true_to_eccentric(e, 1.0)
        with pytest.raises(InvalidElements):
            eccentric_to_true(e, 1.0)

    def test_mean_from_eccentric(self):
        assert mean_from_eccentric(0.5, math.pi / 2) == pytest.approx(math.pi / 2 - 0.5)
