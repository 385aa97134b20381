#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Per-body recurrence state and its time integration.

A body's orbital phase is carried by its true anomaly, advanced frame to
frame rather than recomputed from absolute time. Each call to
:func:`advance` consumes one frame's worth of simulated days, so updates
must be applied exactly once per frame and in order.

The root body may instead drift linearly; the two modes are separate
state types so a body's mode is visible from its state value.
"""

from dataclasses import dataclass, replace
from typing import Optional, Union

from .elements import OrbitalElementSet
from .kepler import (
    eccentric_to_true,
    mean_from_eccentric,
    solve_kepler,
    true_to_eccentric,
)


@dataclass(frozen=True)
class KeplerianState:
    """
    Orbital phase of a body following a fixed ellipse.

    Attributes
    ----------
    true_anomaly : float
        Current true anomaly (radians)
    elapsed_days : float
        Accumulated simulated time (days), informational only
    """
    true_anomaly: float = 0.0
    elapsed_days: float = 0.0


@dataclass(frozen=True)
class LinearDriftState:
    """
    Constant-velocity drift of a root body along the render y axis.

    Attributes
    ----------
    offset : float
        Accumulated displacement from the origin (render units)
    last_update : Optional[float]
        Wall-clock time of the last update (seconds), None before the first
    """
    offset: float = 0.0
    last_update: Optional[float] = None


BodyState = Union[KeplerianState, LinearDriftState]


def initial_state(
    elements: OrbitalElementSet,
    from_mean_longitude: bool = False
) -> KeplerianState:
    """
    Create the starting state of a body.

    By default every body starts at perihelion (θ = 0). With
    ``from_mean_longitude`` the phase is taken from the mean anomaly at
    epoch, M0 = L0 − ϖ.
    """
    if not from_mean_longitude:
        return KeplerianState()
    e = elements.eccentricity
    E = solve_kepler(e, elements.mean_anomaly_at_epoch)
    return KeplerianState(true_anomaly=eccentric_to_true(e, E))


def advance(
    state: KeplerianState,
    elements: OrbitalElementSet,
    sim_speed_days: float
) -> KeplerianState:
    """
    Advance a body's true anomaly by one frame.

    Parameters
    ----------
    state : KeplerianState
        State at the current frame
    elements : OrbitalElementSet
        Orbit of the body
    sim_speed_days : float
        Simulated days elapsing this frame; may be negative

    Returns
    -------
    KeplerianState
        State at the next frame. For a zero step the input is returned as is.

    Raises
    ------
    ConvergenceFailure
        If Kepler's equation cannot be solved for the advanced mean anomaly
    """
    if sim_speed_days == 0:
        return state

    e = elements.eccentricity
    E0 = true_to_eccentric(e, state.true_anomaly)
    M0 = mean_from_eccentric(e, E0)
    n = elements.mean_motion
    M1 = M0 + sim_speed_days * n
    E1 = solve_kepler(e, M1)
    theta1 = eccentric_to_true(e, E1)

    return KeplerianState(
        true_anomaly=theta1,
        elapsed_days=state.elapsed_days + sim_speed_days,
    )


def advance_linear_drift(
    state: LinearDriftState,
    sim_speed_days: float,
    speed: float,
    now: float
) -> LinearDriftState:
    """
    Advance a drifting root body.

    The displacement is ``speed * sim_speed_days * elapsed`` where elapsed is
    the wall-clock seconds since the previous update (zero on the first one).
    """
    if state.last_update is None:
        elapsed = 0.0
    else:
        elapsed = now - state.last_update
    return LinearDriftState(
        offset=state.offset + speed * sim_speed_days * elapsed,
        last_update=now,
    )


def touch(state: LinearDriftState, now: float) -> LinearDriftState:
    """Refresh the drift timestamp without moving."""
    return replace(state, last_update=now)
