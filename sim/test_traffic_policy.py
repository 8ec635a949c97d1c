#!/usr/bin/env python3
"""
Tests for the car-following behaviour model.
"""

from __future__ import annotations

import unittest

from sim.physics import kmh_to_mps, mps_to_kmh
from sim.traffic_policy import (
    FollowingPolicy,
    Leader,
    VehicleState,
    decide,
    find_leader,
    safe_following_distance,
)

_POLICY = FollowingPolicy()


def _step(**overrides):
    args = dict(
        position=50.0,
        speed=20.0,
        target_speed=20.0,
        state=VehicleState.NORMAL,
        last_brake_time=None,
        last_braking_time=None,
        now=3.0,
        dt=0.05,
        leader=None,
        policy=_POLICY,
    )
    args.update(overrides)
    return decide(**args)


class SafeDistanceTests(unittest.TestCase):
    def test_zero_difference_is_two_car_lengths(self) -> None:
        self.assertEqual(safe_following_distance(0.0, _POLICY), 2 * _POLICY.car_length_m)
        self.assertEqual(safe_following_distance(0.0, _POLICY), 9.0)

    def test_monotone_in_absolute_difference(self) -> None:
        previous = 0.0
        for tenth in range(0, 600):
            value = safe_following_distance(tenth / 10.0, _POLICY)
            self.assertGreaterEqual(value, previous)
            previous = value

    def test_symmetric_in_sign(self) -> None:
        for diff in (0.5, 3.0, 12.0, 40.0):
            self.assertEqual(
                safe_following_distance(diff, _POLICY),
                safe_following_distance(-diff, _POLICY),
            )

    def test_large_difference_exceeds_floor(self) -> None:
        # 30 m/s = 108 km/h -> 67.5 mph -> 20.25 m -> x3
        self.assertAlmostEqual(safe_following_distance(30.0, _POLICY), 60.75, places=6)

    def test_small_difference_stays_at_floor(self) -> None:
        self.assertEqual(safe_following_distance(1.0, _POLICY), 9.0)


class FindLeaderTests(unittest.TestCase):
    def test_nearest_strictly_ahead(self) -> None:
        positions = [10.0, 50.0, 30.0, 30.0]
        self.assertEqual(find_leader(0, positions), 2)
        self.assertIsNone(find_leader(1, positions))

    def test_equal_position_is_not_ahead(self) -> None:
        positions = [10.0, 50.0, 30.0, 30.0]
        self.assertEqual(find_leader(2, positions), 1)
        self.assertEqual(find_leader(3, positions), 1)

    def test_single_car_has_no_leader(self) -> None:
        self.assertIsNone(find_leader(0, [123.0]))


class DecideTests(unittest.TestCase):
    def test_closing_follower_brakes(self) -> None:
        result = _step(position=80.0, leader=Leader(position=100.0, speed=10.0))
        self.assertIs(result.state, VehicleState.BRAKING)
        self.assertAlmostEqual(result.speed, 20.0 - _POLICY.brake_decel_mps2 * 0.05)
        self.assertTrue(result.brake_registered)
        self.assertEqual(result.last_brake_time, 3.0)
        self.assertEqual(result.last_braking_time, 3.0)

    def test_gap_beyond_safe_distance_does_not_brake(self) -> None:
        # gap 45.5 m against a safe distance of 20.25 m
        result = _step(position=50.0, leader=Leader(position=100.0, speed=10.0))
        self.assertIs(result.state, VehicleState.NORMAL)
        self.assertEqual(result.speed, 20.0)

    def test_holds_speed_within_reaction_time(self) -> None:
        result = _step(
            position=80.0,
            state=VehicleState.BRAKING,
            last_brake_time=2.9,
            last_braking_time=2.95,
            leader=Leader(position=100.0, speed=10.0),
        )
        self.assertIs(result.state, VehicleState.BRAKING)
        self.assertEqual(result.speed, 20.0)
        self.assertFalse(result.brake_registered)
        self.assertEqual(result.last_brake_time, 2.9)

    def test_keeps_braking_after_reaction_time_without_new_episode(self) -> None:
        result = _step(
            position=80.0,
            state=VehicleState.BRAKING,
            last_brake_time=2.5,
            last_braking_time=2.95,
            leader=Leader(position=100.0, speed=10.0),
        )
        self.assertLess(result.speed, 20.0)
        self.assertFalse(result.brake_registered)
        self.assertEqual(result.last_brake_time, 2.5)
        self.assertEqual(result.last_braking_time, 3.0)

    def test_episode_debounce_boundary(self) -> None:
        leader = Leader(position=100.0, speed=10.0)
        at_boundary = _step(
            position=80.0, state=VehicleState.BRAKING,
            last_brake_time=2.0, last_braking_time=2.0, now=3.0, leader=leader,
        )
        self.assertFalse(at_boundary.brake_registered)
        self.assertEqual(at_boundary.last_brake_time, 2.0)

        past_boundary = _step(
            position=80.0, state=VehicleState.BRAKING,
            last_brake_time=2.0, last_braking_time=2.0, now=3.05, leader=leader,
        )
        self.assertTrue(past_boundary.brake_registered)
        self.assertEqual(past_boundary.last_brake_time, 3.05)

    def test_sustained_braking_is_one_episode(self) -> None:
        # counted 2 s ago, but braking on every tick since
        result = _step(
            position=80.0, state=VehicleState.BRAKING,
            last_brake_time=1.0, last_braking_time=2.95, now=3.0,
            leader=Leader(position=100.0, speed=10.0),
        )
        self.assertIs(result.state, VehicleState.BRAKING)
        self.assertLess(result.speed, 20.0)
        self.assertFalse(result.brake_registered)
        self.assertEqual(result.last_brake_time, 1.0)
        self.assertEqual(result.last_braking_time, 3.0)

    def test_reaction_hold_still_counts_as_braking(self) -> None:
        result = _step(
            position=80.0, state=VehicleState.BRAKING,
            last_brake_time=2.9, last_braking_time=None, now=3.0,
            leader=Leader(position=100.0, speed=10.0),
        )
        self.assertEqual(result.speed, 20.0)
        self.assertEqual(result.last_braking_time, 3.0)

    def test_new_episode_after_quiet_second(self) -> None:
        result = _step(
            position=80.0, state=VehicleState.NORMAL,
            last_brake_time=1.0, last_braking_time=1.5, now=3.0,
            leader=Leader(position=100.0, speed=10.0),
        )
        self.assertTrue(result.brake_registered)
        self.assertEqual(result.last_brake_time, 3.0)

    def test_not_braking_keeps_braking_time(self) -> None:
        result = _step(last_brake_time=1.0, last_braking_time=1.5)
        self.assertIs(result.state, VehicleState.NORMAL)
        self.assertEqual(result.last_braking_time, 1.5)

    def test_new_episode_after_break_from_braking(self) -> None:
        result = _step(
            position=80.0,
            state=VehicleState.ACCELERATING,
            last_brake_time=2.5,
            last_braking_time=2.5,
            leader=Leader(position=100.0, speed=10.0),
        )
        self.assertIs(result.state, VehicleState.BRAKING)
        self.assertLess(result.speed, 20.0)
        self.assertFalse(result.brake_registered)

    def test_speed_never_negative(self) -> None:
        result = _step(position=95.0, speed=0.1, leader=Leader(position=100.0, speed=0.0))
        self.assertEqual(result.speed, 0.0)
        self.assertEqual(result.position, 95.0)

    def test_accelerates_to_target_and_caps(self) -> None:
        target = kmh_to_mps(50.0)
        result = _step(speed=target - 0.01, target_speed=target)
        self.assertIs(result.state, VehicleState.ACCELERATING)
        self.assertEqual(result.speed, target)

    def test_accelerates_when_leader_far(self) -> None:
        result = _step(speed=10.0, target_speed=20.0, leader=Leader(position=1000.0, speed=20.0))
        self.assertIs(result.state, VehicleState.ACCELERATING)
        self.assertAlmostEqual(result.speed, 10.0 + _POLICY.accel_mps2 * 0.05)

    def test_cruising_is_normal(self) -> None:
        result = _step()
        self.assertIs(result.state, VehicleState.NORMAL)
        self.assertEqual(result.speed, 20.0)

    def test_position_advances_with_new_speed(self) -> None:
        result = _step(speed=10.0, target_speed=20.0)
        self.assertAlmostEqual(result.position, 50.0 + result.speed * 0.05)

    def test_unit_conversions(self) -> None:
        self.assertAlmostEqual(kmh_to_mps(50.0), 13.8888889, places=6)
        self.assertAlmostEqual(mps_to_kmh(kmh_to_mps(72.0)), 72.0)
        self.assertEqual(kmh_to_mps(-10.0), 0.0)


if __name__ == "__main__":
    unittest.main()
