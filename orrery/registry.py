#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Celestial Body Registry

Holds every simulated body in an index-addressed arena. Parent names are
resolved to indices once, when bodies are added, and the per-frame update
pass visits bodies in topological order so a parent's absolute position is
always computed before any of its dependents read it.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .body import BodyDefinition
from .elements import OrbitalElementSet, PhysicalProperties
from .errors import ConvergenceFailure, InvalidElements, UnresolvedParent
from .propagator import propagate_render
from .state import (
    BodyState,
    KeplerianState,
    LinearDriftState,
    advance,
    advance_linear_drift,
    initial_state,
    touch,
)

logger = logging.getLogger(__name__)

# Root drift speed in render units per (simulated day × wall-clock second)
DEFAULT_DRIFT_SPEED = -0.000001


class RootMotion(Enum):
    """How root bodies move during a frame."""

    FIXED = "fixed"
    LINEAR_DRIFT = "linear_drift"


@dataclass
class BodyEntry:
    """
    A body in the registry arena.

    Attributes
    ----------
    name : str
        Unique body name
    elements : OrbitalElementSet
        Orbit around the parent, never modified
    parent_index : Optional[int]
        Arena index of the parent, None for a root
    time_scale : float
        Multiplier on the frame's simulated days
    physical : PhysicalProperties
        Radius, mass and display metadata
    is_neo : bool
        True for near-Earth objects
    state : BodyState
        KeplerianState for orbiting bodies, LinearDriftState for roots
    relative_position : np.ndarray
        Latest parent-relative position (render units)
    absolute_position : np.ndarray
        Latest absolute position (render units)
    """
    name: str
    elements: OrbitalElementSet
    parent_index: Optional[int]
    time_scale: float
    physical: PhysicalProperties
    is_neo: bool
    state: BodyState
    relative_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    absolute_position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @property
    def is_root(self) -> bool:
        return self.parent_index is None


class CelestialBodyRegistry:
    """
    Name-indexed collection of bodies with parent-relative composition.

    Parameters
    ----------
    definitions : iterable of BodyDefinition
        Bodies to add, in any order
    origin : sequence of float
        Absolute position of root bodies in fixed mode (render units)
    from_mean_longitude : bool
        Start bodies at their mean anomaly at epoch instead of perihelion

    Raises
    ------
    UnresolvedParent
        If a body references a parent that is not defined
    InvalidElements
        If an orbiting body has a non-positive semi-major axis
    ValueError
        On duplicate names or a parent cycle
    """

    def __init__(
        self,
        definitions: Iterable[BodyDefinition] = (),
        origin: Sequence[float] = (0.0, 0.0, 0.0),
        from_mean_longitude: bool = False
    ):
        self.origin = np.array(origin, dtype=float)
        self.from_mean_longitude = from_mean_longitude
        self._entries: List[BodyEntry] = []
        self._index: Dict[str, int] = {}
        self._order: List[int] = []
        self.extend(definitions)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def extend(self, definitions: Iterable[BodyDefinition]) -> None:
        """
        Add bodies and rebuild the update order.

        All new bodies are validated before any is added, so a failed call
        leaves the registry unchanged.
        """
        definitions = list(definitions)
        names = set(self._index)
        for definition in definitions:
            if definition.name in names:
                raise ValueError(f"Duplicate body name '{definition.name}'")
            names.add(definition.name)

        for definition in definitions:
            if definition.parent is not None and definition.parent not in names:
                raise UnresolvedParent(definition.name, definition.parent)
            if definition.parent is not None and definition.elements.semi_major_axis <= 0:
                raise InvalidElements(
                    f"Body '{definition.name}' orbits '{definition.parent}' "
                    f"but has semi-major axis {definition.elements.semi_major_axis}"
                )

        parent_names = {e.name: self.parent_of(e.name) for e in self._entries}
        parent_names.update({d.name: d.parent for d in definitions})
        depths = self._depths(parent_names)

        start = len(self._entries)
        index = dict(self._index)
        for offset, definition in enumerate(definitions):
            index[definition.name] = start + offset
        entries = [self._make_entry(definition, index) for definition in definitions]

        self._index = index
        self._entries.extend(entries)
        self._order = sorted(
            range(len(self._entries)),
            key=lambda idx: (depths[self._entries[idx].name], idx),
        )
        for idx in self._order:
            if idx >= start:
                self._place(self._entries[idx])

        if definitions:
            logger.info(
                f"Registered {len(definitions)} bodies ({len(self._entries)} total, "
                f"max depth {max(depths.values())})"
            )

    @staticmethod
    def _depths(parent_names: Dict[str, Optional[str]]) -> Dict[str, int]:
        """Depth of every body below its root, rejecting cycles."""
        depths: Dict[str, int] = {}
        for name in parent_names:
            chain = []
            current: Optional[str] = name
            while current is not None and current not in depths:
                if current in chain:
                    raise ValueError(f"Parent cycle involving '{current}'")
                chain.append(current)
                current = parent_names[current]
            base = -1 if current is None else depths[current]
            for depth, body in enumerate(reversed(chain), start=base + 1):
                depths[body] = depth
        return depths

    def _make_entry(self, definition: BodyDefinition, index: Dict[str, int]) -> BodyEntry:
        if definition.parent is None:
            state: BodyState = LinearDriftState()
            parent_index = None
        else:
            try:
                state = initial_state(definition.elements, self.from_mean_longitude)
            except ConvergenceFailure as exc:
                logger.warning(f"Starting {definition.name} at perihelion: {exc}")
                state = KeplerianState()
            parent_index = index[definition.parent]
        return BodyEntry(
            name=definition.name,
            elements=definition.elements,
            parent_index=parent_index,
            time_scale=definition.time_scale,
            physical=definition.physical,
            is_neo=definition.is_neo,
            state=state,
        )

    # -------------------------------------------------------------------------
    # Per-frame update
    # -------------------------------------------------------------------------

    def update(
        self,
        sim_speed_days: float,
        root_motion: RootMotion = RootMotion.FIXED,
        drift_speed: float = DEFAULT_DRIFT_SPEED,
        now: Optional[float] = None
    ) -> Dict[str, ConvergenceFailure]:
        """
        Advance every body by one frame, parents before dependents.

        Parameters
        ----------
        sim_speed_days : float
            Simulated days elapsing this frame
        root_motion : RootMotion
            Motion mode of root bodies for this frame
        drift_speed : float
            Root drift speed in linear-drift mode
        now : float, optional
            Wall-clock seconds for linear drift; defaults to time.monotonic()

        Returns
        -------
        dict
            Bodies whose update failed this frame (name -> error). A failed
            body keeps its previous state and parent-relative position.
        """
        if now is None:
            now = time.monotonic()

        failures: Dict[str, ConvergenceFailure] = {}
        for idx in self._order:
            entry = self._entries[idx]

            if entry.is_root:
                if root_motion is RootMotion.LINEAR_DRIFT:
                    entry.state = advance_linear_drift(
                        entry.state, sim_speed_days, drift_speed, now
                    )
                else:
                    entry.state = touch(entry.state, now)
                self._place_root(entry, root_motion)
                continue

            try:
                entry.state = advance(
                    entry.state, entry.elements, sim_speed_days * entry.time_scale
                )
            except ConvergenceFailure as exc:
                logger.warning(f"Holding {entry.name} for this frame: {exc}")
                failures[entry.name] = exc
            else:
                entry.relative_position = propagate_render(
                    entry.elements, entry.state.true_anomaly
                )
            self._compose(entry)

        return failures

    def _place(self, entry: BodyEntry) -> None:
        """Compute positions from the current state without advancing."""
        if entry.is_root:
            self._place_root(entry, RootMotion.FIXED)
            return
        entry.relative_position = propagate_render(entry.elements, entry.state.true_anomaly)
        self._compose(entry)

    def _place_root(self, entry: BodyEntry, root_motion: RootMotion) -> None:
        position = self.origin.copy()
        if root_motion is RootMotion.LINEAR_DRIFT:
            position[1] += entry.state.offset
        entry.relative_position = np.zeros(3)
        entry.absolute_position = position

    def _compose(self, entry: BodyEntry) -> None:
        parent = self._entries[entry.parent_index]
        entry.absolute_position = parent.absolute_position + entry.relative_position

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def index_of(self, name: str) -> int:
        """Arena index of a body."""
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"No body named '{name}'") from None

    def entry(self, name: str) -> BodyEntry:
        return self._entries[self.index_of(name)]

    def absolute_position(self, name: str) -> np.ndarray:
        """Absolute position of a body for the latest frame (render units)."""
        return self.entry(name).absolute_position.copy()

    def relative_position(self, name: str) -> np.ndarray:
        """Parent-relative position of a body for the latest frame (render units)."""
        return self.entry(name).relative_position.copy()

    def state(self, name: str) -> BodyState:
        return self.entry(name).state

    def parent_of(self, name: str) -> Optional[str]:
        parent_index = self.entry(name).parent_index
        return None if parent_index is None else self._entries[parent_index].name

    def children_of(self, name: str) -> List[str]:
        idx = self.index_of(name)
        return [e.name for e in self._entries if e.parent_index == idx]

    def positions(self) -> Dict[str, np.ndarray]:
        """Absolute positions of all bodies, keyed by name."""
        return {e.name: e.absolute_position.copy() for e in self._entries}

    @property
    def names(self) -> List[str]:
        """Body names in insertion order."""
        return [e.name for e in self._entries]

    @property
    def update_order(self) -> List[str]:
        """Body names in the order the update pass visits them."""
        return [self._entries[idx].name for idx in self._order]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BodyEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        roots = [e.name for e in self._entries if e.is_root]
        return f"CelestialBodyRegistry(bodies={len(self)}, roots={roots})"
