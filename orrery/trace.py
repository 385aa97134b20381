#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbit traces: a bounded FIFO of recent positions for live trails and a
stateless full-ellipse sampler for static traces.
"""

import math
from collections import deque
from typing import Any, Callable, Deque, Iterator, Optional

import numpy as np

from .elements import OrbitalElementSet
from .propagator import propagate_render

# Default number of points kept in a live trail
TRAIL_CAPACITY = 500

# Default true-anomaly increment for static traces (radians)
TRACE_STEP = 0.001


def limited_enqueue(
    buffer: Deque[Any],
    point: Any,
    capacity: int,
    on_evict: Optional[Callable[[Any], None]] = None
) -> Optional[Any]:
    """
    Append to a bounded FIFO, evicting the oldest element first when full.

    Parameters
    ----------
    buffer : deque
        Buffer to append to, modified in place
    point : Any
        New element
    capacity : int
        Maximum length of the buffer
    on_evict : callable, optional
        Called with the evicted element so its owner can release resources

    Returns
    -------
    Optional[Any]
        The evicted element, if any
    """
    if capacity <= 0:
        raise ValueError("Capacity must be positive")

    evicted = None
    while len(buffer) >= capacity:
        evicted = buffer.popleft()
        if on_evict is not None:
            on_evict(evicted)
    buffer.append(point)
    return evicted


class OrbitTraceBuffer:
    """
    Recent absolute positions of a body, oldest first.

    Parameters
    ----------
    capacity : int
        Maximum number of points kept (default 500)
    """

    def __init__(self, capacity: int = TRAIL_CAPACITY):
        if capacity <= 0:
            raise ValueError("Capacity must be positive")
        self.capacity = capacity
        self._points: Deque[np.ndarray] = deque()

    def enqueue(self, point: np.ndarray) -> Optional[np.ndarray]:
        """Record a point, returning the evicted oldest point when full."""
        return limited_enqueue(
            self._points, np.array(point, dtype=float), self.capacity
        )

    def points(self) -> np.ndarray:
        """
        Buffer contents as a polyline.

        Returns
        -------
        np.ndarray
            Array of shape (N, 3) in insertion order
        """
        if not self._points:
            return np.empty((0, 3))
        return np.vstack(self._points)

    def clear(self) -> None:
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._points)

    def __repr__(self) -> str:
        return f"OrbitTraceBuffer({len(self)}/{self.capacity})"


def sample_full_ellipse(
    elements: OrbitalElementSet,
    step: float = TRACE_STEP
) -> np.ndarray:
    """
    Sample the whole orbit as a closed polyline.

    True anomaly runs from 0 to exactly 2π in increments of at most
    ``step``, so the first and last points coincide.

    Parameters
    ----------
    elements : OrbitalElementSet
        Orbit of the body
    step : float
        True-anomaly increment (radians)

    Returns
    -------
    np.ndarray
        Parent-relative points of shape (ceil(2π/step) + 1, 3), render units
    """
    if step <= 0:
        raise ValueError("Step must be positive")

    count = math.ceil(2 * math.pi / step)
    thetas = np.linspace(0.0, 2 * math.pi, count + 1)
    return np.vstack([propagate_render(elements, theta) for theta in thetas])
