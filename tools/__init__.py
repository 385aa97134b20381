#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Tools Package

This package provides command-line utilities for the solar system
simulator, including:

- NEO Feed: Check a near-Earth object element table
- Trace Export: Write simulated trajectories and orbit traces to JSON
"""

from .export_traces import (
    BodyTrajectory,
    TraceExporter,
)

__all__ = [
    "BodyTrajectory",
    "TraceExporter",
]

__version__ = "1.0.0"
