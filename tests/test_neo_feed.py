#!/usr/bin/env python3
"""
Tests for body records and the near-Earth object feed.
"""

import logging
from datetime import datetime, timezone

import pytest

from conftest import NEO_HEADER, neo_row
from orrery import (
    J2000,
    MalformedRecord,
    Simulation,
    SimulationConfig,
    SUN,
    julian_date,
)
from orrery.body import BodyDefinition, parse_epoch
from orrery.feed import parse_neo_rows, read_neo_csv


def _record(**overrides):
    record = {
        "name": "Comet",
        "a": "17.8",
        "e": "0.967",
        "inclination": "162.3",
        "longitudeOfAscendingNode": "58.4",
        "longitudeOfPerihelion": "170.0",
        "meanLongitude": "170.0",
        "epoch": "2451545.0",
    }
    record.update(overrides)
    return record


def _neo(**overrides):
    record = {
        "name": "433 Eros",
        "a": "1.458",
        "e": "0.2229",
        "q": str(1.458 * (1 - 0.2229)),
        "om": "304.3",
        "w": "178.9",
        "i": "10.83",
        "tp": "2459000.5",
        "diameter": "16.84",
        "gm": "0.00044",
    }
    record.update(overrides)
    return record


class TestParseEpoch:
    """Tests for epoch interpretation."""

    def test_julian_number(self):
        assert parse_epoch(2451545.0) == J2000

    def test_julian_string(self):
        assert julian_date(parse_epoch("2460000.5")) == pytest.approx(2460000.5)

    def test_iso_string(self):
        assert parse_epoch("2022-08-09").date() == datetime(2022, 8, 9).date()

    def test_datetime_passthrough(self):
        moment = datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert parse_epoch(moment) is moment

    @pytest.mark.parametrize("value", ["", "not a date", float("nan")])
    def test_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_epoch(value)


class TestFromRecord:
    """Tests for element records."""

    def test_builds_definition(self):
        definition = BodyDefinition.from_record(_record())
        assert definition.name == "Comet"
        assert definition.parent == SUN
        assert definition.elements.eccentricity == pytest.approx(0.967)
        assert definition.elements.argument_of_perihelion == pytest.approx(111.6)
        assert definition.elements.epoch == J2000

    def test_optional_fields(self):
        definition = BodyDefinition.from_record(
            _record(radius="5.5", color="0xff0000", timeScale="0.5", parent="Jupiter")
        )
        assert definition.physical.radius_km == 5.5
        assert definition.physical.color == 0xFF0000
        assert definition.time_scale == 0.5
        assert definition.parent == "Jupiter"

    def test_missing_field(self):
        record = _record()
        del record["meanLongitude"]
        with pytest.raises(MalformedRecord) as excinfo:
            BodyDefinition.from_record(record, row=4)
        assert excinfo.value.row == 4
        assert excinfo.value.name == "Comet"
        assert "meanLongitude" in str(excinfo.value)

    def test_invalid_elements(self):
        with pytest.raises(MalformedRecord):
            BodyDefinition.from_record(_record(e="1.2"))

    def test_non_numeric(self):
        with pytest.raises(MalformedRecord):
            BodyDefinition.from_record(_record(a="far"))

    @pytest.mark.parametrize("blank", ["", "  ", None])
    def test_blank_parent_uses_default(self, blank):
        assert BodyDefinition.from_record(_record(parent=blank)).parent == SUN
        assert BodyDefinition.from_record(_record(parent=blank), parent="Earth").parent == "Earth"


class TestFromNeoRecord:
    """Tests for the NEO column mapping."""

    def test_mapping(self):
        definition = BodyDefinition.from_neo_record(_neo())
        elements = definition.elements

        assert definition.is_neo
        assert definition.parent == SUN
        assert elements.longitude_of_ascending_node == pytest.approx(304.3)
        assert elements.longitude_of_perihelion == pytest.approx(304.3 + 178.9)
        assert elements.argument_of_perihelion == pytest.approx(178.9)
        assert elements.mean_longitude == elements.longitude_of_perihelion
        assert elements.inclination == pytest.approx(10.83)
        assert julian_date(elements.epoch) == pytest.approx(2459000.5)

    def test_physical_properties(self):
        definition = BodyDefinition.from_neo_record(_neo())
        assert definition.physical.radius_km == pytest.approx(8.42)
        assert definition.physical.mass_kg == pytest.approx(0.00044e9 / 6.67430e-11)

    def test_blank_optional_columns(self):
        definition = BodyDefinition.from_neo_record(_neo(diameter="", gm=""))
        assert definition.physical.radius_km == 0.0
        assert definition.physical.mass_kg == 0.0

    def test_perihelion_mismatch(self):
        with pytest.raises(MalformedRecord) as excinfo:
            BodyDefinition.from_neo_record(_neo(q="0.5"), row=7)
        assert excinfo.value.row == 7
        assert "inconsistent" in str(excinfo.value)

    def test_perihelion_within_tolerance(self):
        q = 1.458 * (1 - 0.2229) * 1.005
        assert BodyDefinition.from_neo_record(_neo(q=str(q))).name == "433 Eros"

    @pytest.mark.parametrize("field", ["a", "e", "om", "tp"])
    def test_missing_columns(self, field):
        with pytest.raises(MalformedRecord):
            BodyDefinition.from_neo_record(_neo(**{field: ""}))

    def test_hyperbolic_rejected(self):
        with pytest.raises(MalformedRecord):
            BodyDefinition.from_neo_record(_neo(a="-2.0", e="1.5", q="1.0"))


class TestParseNeoRows:
    """Tests for per-row validation."""

    def test_duplicates_rejected(self, caplog):
        rows = [_neo(), _neo()]
        with caplog.at_level(logging.WARNING, logger="orrery.feed"):
            result = parse_neo_rows(rows)
        assert len(result.definitions) == 1
        assert len(result.rejected) == 1
        assert result.rejected[0].row == 2
        assert "duplicate" in caplog.text

    def test_custom_parent(self):
        result = parse_neo_rows([_neo()], parent="Earth")
        assert result.definitions[0].parent == "Earth"

    def test_reserved_names_rejected(self):
        rows = [_neo(name="Earth"), _neo()]
        result = parse_neo_rows(rows, reserved={"Sun", "Earth"})
        assert [d.name for d in result.definitions] == ["433 Eros"]
        assert result.rejected[0].row == 1
        assert result.rejected[0].name == "Earth"
        assert "duplicate" in str(result.rejected[0])


class TestReadNeoCsv:
    """Tests for reading the feed file."""

    def test_valid_and_rejected_rows(self, neo_csv):
        result = read_neo_csv(neo_csv)
        names = [d.name for d in result.definitions]

        assert names == ["433 Eros", "1036 Ganymed", "99942 Apophis"]
        assert [error.row for error in result.rejected] == [3, 5, 6]
        assert result.total_rows == 6

    def test_iso_epoch_row(self, neo_csv):
        result = read_neo_csv(neo_csv)
        apophis = result.definitions[-1]
        assert apophis.elements.epoch.date() == datetime(2022, 8, 9).date()

    def test_missing_header_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("name;a;e\nX;1;0.1\n", encoding="utf-8")
        with pytest.raises(MalformedRecord) as excinfo:
            read_neo_csv(path)
        assert excinfo.value.row == 1

    def test_comma_delimiter(self, tmp_path):
        path = tmp_path / "comma.csv"
        lines = [NEO_HEADER.replace(";", ","), neo_row("Toro", 1.367, 0.436).replace(";", ",")]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        result = read_neo_csv(path, delimiter=",")
        assert [d.name for d in result.definitions] == ["Toro"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_neo_csv(tmp_path / "absent.csv")

    @pytest.mark.integration
    def test_simulation_loads_feed(self, neo_csv):
        sim = Simulation(SimulationConfig(neo_feed=neo_csv, trace_step=0.1))
        sim.initialize()

        assert sim.num_neos == 3
        assert sim.num_bodies == 13
        assert len(sim.rejected_records) == 3
        assert sim.registry.parent_of("433 Eros") == SUN

        state = sim.step(sim_speed=5.0)
        assert state.failures == {}
        assert "99942 Apophis" in state.positions

    @pytest.mark.integration
    def test_feed_row_reusing_builtin_name_is_skipped(self, tmp_path, caplog):
        path = tmp_path / "clash.csv"
        lines = [
            NEO_HEADER,
            neo_row("433 Eros", 1.458, 0.2229),
            neo_row("Earth", 1.1, 0.1),
        ]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

        sim = Simulation(SimulationConfig(neo_feed=path, trace_step=0.1))
        with caplog.at_level(logging.WARNING, logger="orrery.feed"):
            sim.initialize()

        assert sim.num_neos == 1
        assert sim.num_bodies == 11
        assert [error.row for error in sim.rejected_records] == [3]
        assert not sim.registry.entry("Earth").is_neo
        assert "duplicate" in caplog.text
