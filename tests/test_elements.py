#!/usr/bin/env python3
"""
Tests for orbital elements, physical properties and time utilities.
"""

import math
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from orrery import (
    AU_KM,
    J2000,
    InvalidElements,
    OrbitalElementSet,
    PhysicalProperties,
    centuries_since_j2000,
    datetime_from_julian,
    julian_date,
    km_to_au,
)


class TestOrbitalElementSet:
    """Tests for derived quantities and validation."""

    def test_argument_of_perihelion(self, eccentric_elements):
        assert eccentric_elements.argument_of_perihelion == pytest.approx(90.0)

    def test_period(self):
        elements = OrbitalElementSet(semi_major_axis=4.0, eccentricity=0.1)
        assert elements.period == pytest.approx(8.0)

    def test_radian_accessors(self, circular_elements):
        assert circular_elements.inclination_rad == pytest.approx(math.radians(23.0))
        assert circular_elements.ascending_node_rad == pytest.approx(math.radians(40.0))
        assert circular_elements.argument_of_perihelion_rad == pytest.approx(math.radians(35.0))

    def test_mean_anomaly_at_epoch(self, earth_elements):
        assert earth_elements.mean_anomaly_at_epoch == pytest.approx(
            math.radians(100.46 - 102.93)
        )

    def test_apsides(self, eccentric_elements):
        assert eccentric_elements.perihelion_distance == pytest.approx(0.48)
        assert eccentric_elements.aphelion_distance == pytest.approx(5.92)

    def test_default_epoch(self, earth_elements):
        assert earth_elements.epoch == J2000

    def test_immutable(self, earth_elements):
        with pytest.raises(FrozenInstanceError):
            earth_elements.semi_major_axis = 2.0

    @pytest.mark.parametrize("e", [-0.1, 1.0, 2.0])
    def test_rejects_bad_eccentricity(self, e):
        with pytest.raises(InvalidElements):
            OrbitalElementSet(semi_major_axis=1.0, eccentricity=e)

    def test_rejects_negative_axis(self):
        with pytest.raises(InvalidElements):
            OrbitalElementSet(semi_major_axis=-1.0, eccentricity=0.1)

    def test_rejects_non_finite(self):
        with pytest.raises(InvalidElements):
            OrbitalElementSet(semi_major_axis=1.0, eccentricity=0.1, inclination=float("nan"))

    def test_invalid_elements_is_value_error(self):
        with pytest.raises(ValueError):
            OrbitalElementSet(semi_major_axis=1.0, eccentricity=1.5)

    def test_zero_axis_has_no_mean_motion(self):
        elements = OrbitalElementSet(semi_major_axis=0.0, eccentricity=0.0)
        assert elements.period == 0.0
        with pytest.raises(InvalidElements):
            elements.mean_motion

    def test_repr(self, earth_elements):
        assert "a=1.000000 AU" in repr(earth_elements)


class TestPhysicalProperties:

    def test_radius_au(self):
        assert PhysicalProperties(radius_km=AU_KM).radius_au == pytest.approx(1.0)

    def test_defaults(self):
        physical = PhysicalProperties()
        assert physical.mass_kg == 0.0
        assert physical.description is None


class TestTimeUtilities:
    """Tests for Julian dates and unit conversion."""

    def test_j2000(self):
        assert julian_date(J2000) == 2451545.0
        assert centuries_since_j2000(J2000) == 0.0

    def test_naive_is_utc(self):
        naive = datetime(2000, 1, 1, 12, 0, 0)
        assert julian_date(naive) == 2451545.0

    def test_known_date(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert julian_date(moment) == pytest.approx(2460310.5)

    def test_round_trip(self):
        moment = datetime(1987, 6, 19, 6, 30, tzinfo=timezone.utc)
        restored = datetime_from_julian(julian_date(moment))
        assert abs((restored - moment).total_seconds()) < 1e-3

    def test_century(self):
        moment = datetime_from_julian(2451545.0 + 36525.0)
        assert centuries_since_j2000(moment) == pytest.approx(1.0)

    def test_km_to_au(self):
        assert km_to_au(1.496e8) == pytest.approx(1.0)
        assert km_to_au(0.0) == 0.0
