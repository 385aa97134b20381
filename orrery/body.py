#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Body definitions: the construction-time description of a simulated body
and the conversion of external element records into it.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from .elements import (
    G,
    J2000,
    OrbitalElementSet,
    PhysicalProperties,
    datetime_from_julian,
)
from .errors import InvalidElements, MalformedRecord

# Name of the primary body that planets and NEOs orbit by default
SUN = "Sun"

# Cubic meters per cubic kilometer, for feed GM values given in km³/s²
M3_PER_KM3 = 1e9

# Relative tolerance when checking a record's perihelion distance against a(1-e)
PERIHELION_TOLERANCE = 0.01


def parse_epoch(value: Any) -> datetime:
    """
    Interpret an epoch given as a datetime, a Julian date or an ISO date string.

    Raises
    ------
    ValueError
        If the value cannot be interpreted
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"Epoch must be finite, got {value}")
        return datetime_from_julian(float(value))
    text = str(value).strip()
    if not text:
        raise ValueError("Epoch is empty")
    try:
        return datetime_from_julian(float(text))
    except ValueError:
        pass
    return datetime.fromisoformat(text)


def _number(record: Mapping[str, Any], key: str) -> float:
    if key not in record or record[key] is None or str(record[key]).strip() == "":
        raise KeyError(key)
    value = float(record[key])
    if not math.isfinite(value):
        raise ValueError(f"field '{key}' is not finite")
    return value


def _optional_number(record: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    raw = record.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    return float(raw)


def _color(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


@dataclass(frozen=True)
class BodyDefinition:
    """
    Everything needed to add a body to the registry.

    Attributes
    ----------
    name : str
        Unique body name
    elements : OrbitalElementSet
        Orbit around the parent
    parent : Optional[str]
        Name of the parent body, None for a root
    time_scale : float
        Multiplier applied to the frame's simulated days for this body
    physical : PhysicalProperties
        Radius, mass and display metadata
    is_neo : bool
        True for bodies loaded from a near-Earth object feed
    """
    name: str
    elements: OrbitalElementSet
    parent: Optional[str] = None
    time_scale: float = 1.0
    physical: PhysicalProperties = field(default_factory=PhysicalProperties)
    is_neo: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        parent: Optional[str] = SUN,
        row: Optional[int] = None
    ) -> "BodyDefinition":
        """
        Build a definition from an element record.

        Expected keys: name, a, e, inclination, longitudeOfAscendingNode,
        longitudeOfPerihelion, meanLongitude, epoch, and optionally radius,
        mass, color, parent, timeScale.

        Raises
        ------
        MalformedRecord
            If a field is missing or the elements are invalid
        """
        name = str(record.get("name") or "").strip() or None
        try:
            if name is None:
                raise KeyError("name")
            elements = OrbitalElementSet(
                semi_major_axis=_number(record, "a"),
                eccentricity=_number(record, "e"),
                inclination=_number(record, "inclination"),
                longitude_of_ascending_node=_number(record, "longitudeOfAscendingNode"),
                longitude_of_perihelion=_number(record, "longitudeOfPerihelion"),
                mean_longitude=_number(record, "meanLongitude"),
                epoch=parse_epoch(record["epoch"]) if record.get("epoch") is not None else J2000,
            )
            physical = PhysicalProperties(
                radius_km=_optional_number(record, "radius"),
                mass_kg=_optional_number(record, "mass"),
                color=_color(record.get("color", 0x7F7F7F)),
                description=record.get("description"),
            )
            time_scale = _optional_number(record, "timeScale", 1.0)
        except KeyError as exc:
            raise MalformedRecord(f"missing field {exc}", row=row, name=name) from exc
        except InvalidElements as exc:
            raise MalformedRecord(str(exc), row=row, name=name) from exc
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(f"bad value: {exc}", row=row, name=name) from exc

        return cls(
            name=name,
            elements=elements,
            parent=str(record.get("parent") or "").strip() or parent,
            time_scale=time_scale,
            physical=physical,
        )

    @classmethod
    def from_neo_record(
        cls,
        record: Mapping[str, Any],
        parent: str = SUN,
        row: Optional[int] = None
    ) -> "BodyDefinition":
        """
        Build a definition from a near-Earth object feed row.

        Expected keys: name, a, e, q, om, w, i, tp, diameter, gm. The
        longitude of perihelion is om + w and the mean longitude equals it,
        so the body is at perihelion at the epoch tp. The gm column is in
        km³/s².

        Raises
        ------
        MalformedRecord
            If a field is missing, non-numeric or inconsistent
        """
        name = str(record.get("name") or "").strip() or None
        try:
            if name is None:
                raise KeyError("name")
            a = _number(record, "a")
            e = _number(record, "e")
            q = _number(record, "q")
            om = _number(record, "om")
            w = _number(record, "w")
            i = _number(record, "i")
            tp = parse_epoch(record["tp"])
            if a <= 0:
                raise InvalidElements(f"Semi-major axis must be positive, got {a}")
            expected_q = a * (1 - e)
            if abs(q - expected_q) > PERIHELION_TOLERANCE * max(abs(expected_q), 1e-12):
                raise InvalidElements(
                    f"perihelion distance q={q} inconsistent with a(1-e)={expected_q:.6f}"
                )
            elements = OrbitalElementSet(
                semi_major_axis=a,
                eccentricity=e,
                inclination=i,
                longitude_of_ascending_node=om,
                longitude_of_perihelion=om + w,
                mean_longitude=om + w,
                epoch=tp,
            )
            physical = PhysicalProperties(
                radius_km=_optional_number(record, "diameter") / 2,
                mass_kg=_optional_number(record, "gm") * M3_PER_KM3 / G,
            )
        except KeyError as exc:
            raise MalformedRecord(f"missing field {exc}", row=row, name=name) from exc
        except InvalidElements as exc:
            raise MalformedRecord(str(exc), row=row, name=name) from exc
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(f"bad value: {exc}", row=row, name=name) from exc

        return cls(
            name=name,
            elements=elements,
            parent=parent,
            physical=physical,
            is_neo=True,
        )
