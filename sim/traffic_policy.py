#!/usr/bin/env python3
"""
sim/traffic_policy.py
=====================
Fixed model constants and the car-following behaviour model for the
single-lane road simulation.  Every constant lives in the frozen
:class:`FollowingPolicy` dataclass so that experiments can swap policies
without touching code.

The behaviour model is a set of pure functions over explicit inputs:

* :func:`safe_following_distance` — speed-dependent minimum gap.
* :func:`find_leader` — nearest vehicle strictly ahead.
* :func:`decide` — one vehicle's braking / acceleration step.

None of them keep state or mutate their arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from sim.physics import (
    KMH_PER_MPH,
    METRES_PER_FOOT,
    accelerate,
    brake,
    mps_to_kmh,
)


class VehicleState(str, Enum):
    """Behavioural state derived for a vehicle on every tick."""
    NORMAL = "normal"
    BRAKING = "braking"
    ACCELERATING = "accelerating"


@dataclass(frozen=True)
class FollowingPolicy:
    """Immutable bag of every fixed model parameter.

    Groups: road geometry, car following, spawning, time scale.
    """

    # ── Road geometry ─────────────────────────────────────────────────────
    road_length_m: float = 5000.0
    """Length of the simulated road; vehicles leave once they reach it."""

    car_length_m: float = 4.5
    """Bumper-to-bumper length of every vehicle."""

    # ── Car following ─────────────────────────────────────────────────────
    reaction_time_s: float = 0.2
    """Minimum time between speed reductions of an already-braking car."""

    safety_multiplier: float = 3.0
    """Scale factor of the speed-difference safe-distance rule."""

    brake_decel_mps2: float = 6.67
    """Braking deceleration (about 15 mph per second)."""

    accel_mps2: float = 2.0
    """Acceleration towards the target speed."""

    brake_debounce_s: float = 1.0
    """A new braking episode needs more than this much time without braking."""

    # ── Spawning ──────────────────────────────────────────────────────────
    spawn_clear_zone_m: float = 50.0
    """No vehicle may be closer than this to the road entry for a spawn."""

    # ── Time scale ────────────────────────────────────────────────────────
    min_time_scale: float = 0.1
    max_time_scale: float = 10.0


@dataclass(frozen=True)
class Leader:
    """Position and speed of the nearest vehicle ahead."""
    position: float
    speed: float


@dataclass(frozen=True)
class FollowDecision:
    """Outcome of :func:`decide` for one vehicle and one tick."""
    position: float
    speed: float
    state: VehicleState
    brake_registered: bool
    last_brake_time: Optional[float]
    last_braking_time: Optional[float]


def safe_following_distance(speed_diff_mps: float, policy: FollowingPolicy) -> float:
    """Minimum gap (m) to the vehicle ahead for a given closing speed.

    Rule of thumb: ``safety_multiplier`` feet per mph of speed difference,
    never less than two car lengths.
    """
    diff_kmh = mps_to_kmh(abs(speed_diff_mps))
    distance = (diff_kmh / KMH_PER_MPH) * METRES_PER_FOOT * policy.safety_multiplier
    return max(distance, policy.car_length_m * 2.0)


def find_leader(index: int, positions: Sequence[float]) -> Optional[int]:
    """Index of the nearest vehicle strictly ahead of ``positions[index]``.

    Linear scan, so a full tick is O(n²) in the number of live vehicles.
    That is fine for tens of cars.
    """
    own = positions[index]
    best: Optional[int] = None
    best_dist = float("inf")
    for j, other in enumerate(positions):
        if j == index or other <= own:
            continue
        dist = other - own
        if dist < best_dist:
            best_dist = dist
            best = j
    return best


def decide(
    *,
    position: float,
    speed: float,
    target_speed: float,
    state: VehicleState,
    last_brake_time: Optional[float],
    last_braking_time: Optional[float],
    now: float,
    dt: float,
    leader: Optional[Leader],
    policy: FollowingPolicy,
) -> FollowDecision:
    """Advance one vehicle by *dt* seconds of simulated time.

    Parameters
    ----------
    position, speed, target_speed : float
        The vehicle's own kinematics (m, m/s, m/s).
    state : VehicleState
        State decided on the previous tick.
    last_brake_time : float or None
        Simulated time of the last counted braking episode; gates the
        reaction-time hold.
    last_braking_time : float or None
        Simulated time of the last tick spent braking, counted or not.  A
        new episode needs more than ``brake_debounce_s`` since then.
    now : float
        Current simulated time (already advanced for this tick).
    dt : float
        Time-scaled tick length in seconds.
    leader : Leader or None
        Nearest vehicle ahead, as it stood at the start of the tick.
    policy : FollowingPolicy
        Model constants.
    """
    registered = False

    too_close = False
    if leader is not None:
        gap = leader.position - position - policy.car_length_m
        too_close = gap < safe_following_distance(speed - leader.speed, policy)

    if too_close:
        since_brake = None if last_brake_time is None else now - last_brake_time
        if (state is not VehicleState.BRAKING
                or since_brake is None
                or since_brake > policy.reaction_time_s):
            state = VehicleState.BRAKING
            speed = brake(speed, policy.brake_decel_mps2, dt)
            if (last_braking_time is None
                    or now - last_braking_time > policy.brake_debounce_s):
                registered = True
                last_brake_time = now
        last_braking_time = now
    elif speed < target_speed:
        state = VehicleState.ACCELERATING
        speed = accelerate(speed, policy.accel_mps2, dt, target_speed)
    else:
        state = VehicleState.NORMAL

    return FollowDecision(
        position=position + speed * dt,
        speed=speed,
        state=state,
        brake_registered=registered,
        last_brake_time=last_brake_time,
        last_braking_time=last_braking_time,
    )
