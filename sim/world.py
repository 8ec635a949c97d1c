#!/usr/bin/env python3
"""
sim/world.py
============
Single-lane road world.

This module manages a flat list of :class:`Car` entities travelling along
one road of fixed length.  The :class:`World` class owns the simulated
clock, the spawn logic and the per-tick car-following update, and hands
out immutable :class:`SimulationSnapshot` copies to observers.

Locking contract
----------------
All state of a :class:`World` is guarded by one :class:`ReadWriteLock`.
``tick``, ``start``, ``stop``, ``reset``, ``update_config`` and
``set_time_scale`` take the lock exclusively; ``snapshot`` and ``config``
take it shared.  The lock is held only for in-memory work, so a snapshot
always shows a state that some sequence of those calls actually committed.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import (
    DEFAULT_MAX_CARS,
    DEFAULT_MAX_SPEED_KMH,
    DEFAULT_MIN_SPEED_KMH,
    DEFAULT_SPAWN_INTERVAL_S,
    DEFAULT_TIME_SCALE,
)
from sim.physics import clamp, kmh_to_mps, mps_to_kmh
from sim.rwlock import ReadWriteLock
from sim.traffic_policy import (
    FollowDecision,
    FollowingPolicy,
    Leader,
    VehicleState,
    decide,
    find_leader,
)

log = logging.getLogger("world")

CAR_COLORS: Tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
)

_TICK_LOG_EVERY: int = 200


@dataclass
class Car:
    """A vehicle on the road.

    Attributes
    ----------
    id : int
        Unique within a run, assigned in spawn order.
    position : float
        Metres travelled from the road entry.
    speed : float
        Current speed in m/s.
    target_speed : float
        Desired cruising speed in m/s, fixed at spawn.
    brake_count : int
        Number of distinct braking episodes.
    color : str
        Hex display color.
    state : VehicleState
        Behaviour decided on the last tick.
    """

    id: int
    position: float
    speed: float
    target_speed: float
    color: str = CAR_COLORS[0]
    brake_count: int = 0
    state: VehicleState = VehicleState.NORMAL
    last_brake_time: Optional[float] = field(default=None, repr=False)
    last_braking_time: Optional[float] = field(default=None, repr=False)

    def apply(self, decision: FollowDecision) -> None:
        """Commit a behaviour-model decision to this car."""
        self.position = decision.position
        self.speed = decision.speed
        self.state = decision.state
        self.last_brake_time = decision.last_brake_time
        self.last_braking_time = decision.last_braking_time
        if decision.brake_registered:
            self.brake_count += 1

    def freeze(self) -> "VehicleSnapshot":
        return VehicleSnapshot(
            id=self.id,
            position=self.position,
            speed=self.speed,
            target_speed=self.target_speed,
            brake_count=self.brake_count,
            color=self.color,
            state=self.state.value,
        )


@dataclass(frozen=True)
class VehicleSnapshot:
    """Read-only copy of a :class:`Car`'s public fields."""
    id: int
    position: float
    speed: float
    target_speed: float
    brake_count: int
    color: str
    state: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position,
            "speed": self.speed,
            "targetSpeed": self.target_speed,
            "brakeCount": self.brake_count,
            "color": self.color,
            "state": self.state,
        }


@dataclass(frozen=True)
class SimulationSnapshot:
    """Immutable view of a :class:`World` at one committed instant."""
    cars: Tuple[VehicleSnapshot, ...]
    time: float
    cars_completed: int
    total_cars_made: int
    running: bool
    road_length: float
    time_scale: float
    max_cars: int

    def as_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping using the wire field names."""
        return {
            "cars": [car.as_dict() for car in self.cars],
            "time": self.time,
            "carsCompleted": self.cars_completed,
            "totalCarsMade": self.total_cars_made,
            "running": self.running,
            "roadLength": self.road_length,
            "timeScale": self.time_scale,
            "maxCars": self.max_cars,
        }


@dataclass(frozen=True)
class SimulationConfig:
    """Externally facing configuration; speeds in km/h."""
    spawn_interval: float
    min_speed_kmh: float
    max_speed_kmh: float
    max_cars: int
    time_scale: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "spawnInterval": self.spawn_interval,
            "minSpeed": self.min_speed_kmh,
            "maxSpeed": self.max_speed_kmh,
            "maxCars": self.max_cars,
            "timeScale": self.time_scale,
        }


class World:
    """Traffic on one road, advanced by an external clock.

    Parameters
    ----------
    seed : int or None
        Seed for spawn speeds and colors.
    policy : FollowingPolicy or None
        Model constants; uses defaults when *None*.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        policy: Optional[FollowingPolicy] = None,
    ) -> None:
        self.policy = policy or FollowingPolicy()
        self._rng = random.Random(seed)
        self._lock = ReadWriteLock()

        self.spawn_interval: float = DEFAULT_SPAWN_INTERVAL_S
        self.min_speed: float = kmh_to_mps(DEFAULT_MIN_SPEED_KMH)
        self.max_speed: float = kmh_to_mps(DEFAULT_MAX_SPEED_KMH)
        self.max_cars: int = DEFAULT_MAX_CARS
        self.time_scale: float = DEFAULT_TIME_SCALE

        self._clear()

    def _clear(self) -> None:
        self.cars: List[Car] = []
        self.time: float = 0.0
        self.cars_completed: int = 0
        self.total_cars_made: int = 0
        self.running: bool = False
        self._last_spawn: float = 0.0
        self._next_car_id: int = 0
        self._tick_count: int = 0

    # ── lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> None:
        with self._lock.write_locked():
            self.running = True
        log.info("Simulation started")

    def stop(self) -> None:
        with self._lock.write_locked():
            was_running = self.running
            self.running = False
        if was_running:
            log.info("Simulation stopped")

    def reset(self) -> None:
        """Drop every car and zero the clock and counters.

        Configuration and time scale are kept.
        """
        with self._lock.write_locked():
            self._clear()
        log.info("Simulation reset")

    def update_config(
        self,
        spawn_interval: float,
        min_speed_kmh: float,
        max_speed_kmh: float,
        max_cars: int,
    ) -> None:
        """Apply new spawn settings; they take effect on the next tick.

        Speeds are given in km/h.  A non-positive *max_cars* is ignored and
        the previous limit kept.
        """
        with self._lock.write_locked():
            self.spawn_interval = float(spawn_interval)
            self.min_speed = kmh_to_mps(min_speed_kmh)
            self.max_speed = kmh_to_mps(max_speed_kmh)
            if max_cars > 0:
                self.max_cars = int(max_cars)
            max_cars_now = self.max_cars
        log.info(
            "Config updated: spawn_interval=%.2fs speed=%.1f-%.1f km/h max_cars=%d",
            spawn_interval, min_speed_kmh, max_speed_kmh, max_cars_now,
        )

    def set_time_scale(self, scale: float) -> None:
        """Set the simulated-to-wall-clock ratio, clamped to the policy bounds."""
        clamped = clamp(
            float(scale), self.policy.min_time_scale, self.policy.max_time_scale
        )
        with self._lock.write_locked():
            self.time_scale = clamped
        log.info("Time scale set to %.2fx", clamped)

    # ── queries ───────────────────────────────────────────────────────────

    def snapshot(self) -> SimulationSnapshot:
        with self._lock.read_locked():
            return SimulationSnapshot(
                cars=tuple(car.freeze() for car in self.cars),
                time=self.time,
                cars_completed=self.cars_completed,
                total_cars_made=self.total_cars_made,
                running=self.running,
                road_length=self.policy.road_length_m,
                time_scale=self.time_scale,
                max_cars=self.max_cars,
            )

    def config(self) -> SimulationConfig:
        with self._lock.read_locked():
            return SimulationConfig(
                spawn_interval=self.spawn_interval,
                min_speed_kmh=mps_to_kmh(self.min_speed),
                max_speed_kmh=mps_to_kmh(self.max_speed),
                max_cars=self.max_cars,
                time_scale=self.time_scale,
            )

    def is_finished(self) -> bool:
        """True once every car that will ever spawn has left the road."""
        with self._lock.read_locked():
            return self.total_cars_made >= self.max_cars and not self.cars

    # ── physics tick ──────────────────────────────────────────────────────

    def tick(self, dt: float) -> None:
        """Advance the simulation by *dt* wall-clock seconds.

        Does nothing while stopped.  *dt* is multiplied by the time scale
        before anything else happens.
        """
        with self._lock.write_locked():
            if not self.running:
                return

            dt = dt * self.time_scale
            self.time += dt
            self._tick_count += 1

            self._maybe_spawn()
            self._advance_cars(dt)
            completed = self._remove_finished()

            if self.total_cars_made >= self.max_cars and not self.cars:
                self.running = False
                log.info(
                    "All %d cars completed at t=%.2fs, simulation stopped",
                    self.total_cars_made, self.time,
                )

            if completed:
                log.debug("t=%.2fs: %d car(s) reached the end", self.time, completed)
            if self._tick_count % _TICK_LOG_EVERY == 0:
                log.debug(
                    "tick=%d t=%.2fs cars=%d made=%d completed=%d",
                    self._tick_count, self.time, len(self.cars),
                    self.total_cars_made, self.cars_completed,
                )

    def _maybe_spawn(self) -> None:
        if self.time - self._last_spawn < self.spawn_interval:
            return
        if self.total_cars_made >= self.max_cars:
            return
        clear_zone = self.policy.spawn_clear_zone_m
        if any(car.position < clear_zone for car in self.cars):
            return
        self._spawn_car()
        self._last_spawn = self.time

    def _spawn_car(self) -> Car:
        speed = self._rng.uniform(self.min_speed, self.max_speed)
        car = Car(
            id=self._next_car_id,
            position=0.0,
            speed=speed,
            target_speed=speed,
            color=self._rng.choice(CAR_COLORS),
        )
        self.cars.append(car)
        self._next_car_id += 1
        self.total_cars_made += 1
        log.debug(
            "Spawned car %d at t=%.2fs speed=%.1f km/h",
            car.id, self.time, mps_to_kmh(speed),
        )
        return car

    def _advance_cars(self, dt: float) -> None:
        # Every decision sees the road as it stood before anyone moved.
        positions = [car.position for car in self.cars]
        speeds = [car.speed for car in self.cars]
        decisions = [
            decide(
                position=car.position,
                speed=car.speed,
                target_speed=car.target_speed,
                state=car.state,
                last_brake_time=car.last_brake_time,
                last_braking_time=car.last_braking_time,
                now=self.time,
                dt=dt,
                leader=self._leader_of(i, positions, speeds),
                policy=self.policy,
            )
            for i, car in enumerate(self.cars)
        ]
        for car, decision in zip(self.cars, decisions):
            car.apply(decision)

    @staticmethod
    def _leader_of(
        index: int, positions: Sequence[float], speeds: Sequence[float]
    ) -> Optional[Leader]:
        j = find_leader(index, positions)
        if j is None:
            return None
        return Leader(position=positions[j], speed=speeds[j])

    def _remove_finished(self) -> int:
        road_length = self.policy.road_length_m
        remaining = [car for car in self.cars if car.position < road_length]
        completed = len(self.cars) - len(remaining)
        self.cars = remaining
        self.cars_completed += completed
        return completed
