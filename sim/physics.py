#!/usr/bin/env python3
"""
sim/physics.py
==============
Low-level unit and kinematics helpers used by :mod:`sim.traffic_policy`
and :mod:`sim.world`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

KMH_PER_MPS: float = 3.6
KMH_PER_MPH: float = 1.6
"""Rounded conversion used by the safe-distance rule of thumb."""

METRES_PER_FOOT: float = 0.3
"""Rounded conversion used by the safe-distance rule of thumb."""


def kmh_to_mps(speed_kmh: float) -> float:
    """Convert km/h to m/s, clamping negatives to zero."""
    return max(0.0, float(speed_kmh)) / KMH_PER_MPS


def mps_to_kmh(speed_mps: float) -> float:
    """Convert m/s to km/h, clamping negatives to zero."""
    return max(0.0, float(speed_mps)) * KMH_PER_MPS


def brake(speed_mps: float, decel_mps2: float, dt: float) -> float:
    """Speed after braking at *decel_mps2* for *dt* seconds, floored at zero."""
    return max(0.0, speed_mps - decel_mps2 * dt)


def accelerate(speed_mps: float, accel_mps2: float, dt: float, cap_mps: float) -> float:
    """Speed after accelerating at *accel_mps2* for *dt* seconds, capped at *cap_mps*."""
    return min(cap_mps, speed_mps + accel_mps2 * dt)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
