#!/usr/bin/env python3
"""
Tests for the FastAPI transport: REST control, WebSocket streaming and
command validation.
"""

from __future__ import annotations

import time
import unittest

from fastapi.testclient import TestClient
from pydantic import ValidationError

from bus.state_bus import StateBus
from server.api import create_app
from server.commands import UnknownActionError, apply_command, parse_command
from sim.sim_bridge import STATE_TOPIC, SimBridge
from sim.world import World


def _wait_until(predicate, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class CommandTests(unittest.TestCase):
    def test_parse_simple_actions(self) -> None:
        for action in ("start", "stop", "reset"):
            self.assertEqual(parse_command({"action": action}).action, action)

    def test_parse_config_uses_wire_names(self) -> None:
        cmd = parse_command({
            "action": "config",
            "data": {"spawnInterval": 1.5, "minSpeed": 60, "maxSpeed": 90, "maxCars": 12},
        })
        self.assertEqual(cmd.data.spawn_interval, 1.5)
        self.assertEqual(cmd.data.min_speed, 60.0)
        self.assertEqual(cmd.data.max_speed, 90.0)
        self.assertEqual(cmd.data.max_cars, 12)

    def test_unknown_action(self) -> None:
        with self.assertRaises(UnknownActionError):
            parse_command({"action": "fly"})
        with self.assertRaises(UnknownActionError):
            parse_command({"value": 2})

    def test_missing_arguments(self) -> None:
        with self.assertRaises(ValidationError):
            parse_command({"action": "timescale"})
        with self.assertRaises(ValidationError):
            parse_command({"action": "config"})
        with self.assertRaises(ValidationError):
            parse_command({"action": "timescale", "value": "fast"})

    def test_apply_command_drives_world(self) -> None:
        world = World(seed=1)
        apply_command(world, parse_command({"action": "start"}))
        self.assertTrue(world.snapshot().running)
        apply_command(world, parse_command({"action": "timescale", "value": 0.01}))
        self.assertEqual(world.snapshot().time_scale, 0.1)
        apply_command(world, parse_command({"action": "stop"}))
        self.assertFalse(world.snapshot().running)


class RestApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.world = World(seed=1)
        self.client = TestClient(create_app(self.world))

    def test_get_state(self) -> None:
        resp = self.client.get("/state")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertFalse(data["running"])
        self.assertEqual(data["cars"], [])
        self.assertEqual(data["roadLength"], 5000.0)
        self.assertEqual(data["maxCars"], 100)

    def test_control_start_and_timescale(self) -> None:
        resp = self.client.post("/control", json={"action": "start"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["running"])

        resp = self.client.post("/control", json={"action": "timescale", "value": 50})
        self.assertEqual(resp.json()["timeScale"], 10.0)

    def test_control_config(self) -> None:
        resp = self.client.post("/control", json={
            "action": "config",
            "data": {"spawnInterval": 1.5, "minSpeed": 60, "maxSpeed": 90, "maxCars": 0},
        })
        self.assertEqual(resp.status_code, 200)
        cfg = self.client.get("/config").json()
        self.assertEqual(cfg["spawnInterval"], 1.5)
        self.assertAlmostEqual(cfg["minSpeed"], 60.0)
        self.assertAlmostEqual(cfg["maxSpeed"], 90.0)
        self.assertEqual(cfg["maxCars"], 100)

    def test_control_rejects_bad_commands(self) -> None:
        self.assertEqual(self.client.post("/control", json={"action": "fly"}).status_code, 400)
        self.assertEqual(
            self.client.post("/control", json={"action": "timescale"}).status_code, 422
        )
        self.assertEqual(
            self.client.post("/control", json={"action": "config"}).status_code, 422
        )
        self.assertFalse(self.world.snapshot().running)


class WebSocketTests(unittest.TestCase):
    def setUp(self) -> None:
        self.world = World(seed=1)
        self.bus = StateBus()
        self.client = TestClient(create_app(self.world, bus=self.bus))

    def test_initial_state_and_commands(self) -> None:
        with self.client.websocket_connect("/ws") as ws:
            first = ws.receive_json()
            self.assertFalse(first["running"])

            ws.send_text("not json")
            ws.send_json({"action": "fly"})
            ws.send_json({"action": "timescale"})
            ws.send_json({"action": "start"})
            reply = ws.receive_json()
            self.assertTrue(reply["running"])

            ws.send_json({"action": "timescale", "value": 0.05})
            self.assertEqual(ws.receive_json()["timeScale"], 0.1)

        self.assertTrue(self.world.snapshot().running)

    def test_binary_frames_are_commands(self) -> None:
        with self.client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_bytes(b"\xff\xfe")
            ws.send_bytes(b'{"action": "start"}')
            self.assertTrue(ws.receive_json()["running"])

            ws.send_bytes(b'{"action": "stop"}')
            self.assertFalse(ws.receive_json()["running"])

    def test_broadcasts_are_forwarded(self) -> None:
        with self.client.websocket_connect("/ws") as ws:
            ws.receive_json()
            self.assertEqual(self.bus.subscriber_count(STATE_TOPIC), 1)
            self.bus.publish(STATE_TOPIC, "test", {"marker": 1})
            self.assertEqual(ws.receive_json(), {"marker": 1})

        self.assertTrue(_wait_until(lambda: self.bus.subscriber_count(STATE_TOPIC) == 0))


class LifespanTests(unittest.TestCase):
    def test_bridge_runs_with_the_app(self) -> None:
        world = World(seed=1)
        bridge = SimBridge(world, StateBus(), tick_interval_s=0.01, broadcast_interval_s=0.01)
        app = create_app(world, bridge=bridge)

        with TestClient(app) as client:
            self.assertTrue(bridge.is_running)
            client.post("/control", json={"action": "start"})
            self.assertTrue(_wait_until(lambda: world.snapshot().time > 0.0))

        self.assertFalse(bridge.is_running)


if __name__ == "__main__":
    unittest.main()
