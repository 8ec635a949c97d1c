"""
sim/sim_bridge.py
=================
Background-thread orchestrator tying :class:`sim.world.World` and the
:class:`bus.state_bus.StateBus` together.

Two daemon threads run against the same world:

* the **ticker** calls :meth:`World.tick` at a fixed interval;
* the **broadcaster** takes :meth:`World.snapshot` at its own interval and
  publishes it on the ``sim.state`` topic.

Neither thread touches the world's fields directly; the world's own lock
serializes them against each other and against command handlers.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict

from bus.state_bus import StateBus
from sim.world import World

log = logging.getLogger("sim_bridge")

STATE_TOPIC = "sim.state"
_SENDER = "simulation"


class SimBridge:
    """Drive a :class:`World` and broadcast its state.

    Parameters
    ----------
    world : World
        The simulation to advance.
    bus : StateBus
        Where snapshots are published.
    tick_interval_s : float
        Wall-clock seconds between ticks; also the ``dt`` passed to
        :meth:`World.tick`.
    broadcast_interval_s : float
        Wall-clock seconds between snapshot broadcasts.
    """

    def __init__(
        self,
        world: World,
        bus: StateBus,
        tick_interval_s: float = 0.05,
        broadcast_interval_s: float = 0.05,
    ) -> None:
        self.world = world
        self.bus = bus
        self._tick_interval_s = tick_interval_s
        self._broadcast_interval_s = broadcast_interval_s

        self._stop_event = threading.Event()
        self._threads: Dict[str, threading.Thread] = {}

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return bool(self._threads)

    def start(self) -> None:
        """Spawn the ticker and broadcaster threads."""
        if self._threads:
            return
        self._stop_event.clear()
        self._threads = {
            "SimTicker": threading.Thread(
                target=self._loop,
                args=(self.tick_once, self._tick_interval_s, "tick"),
                daemon=True,
                name="SimTicker",
            ),
            "SimBroadcaster": threading.Thread(
                target=self._loop,
                args=(self.broadcast_once, self._broadcast_interval_s, "broadcast"),
                daemon=True,
                name="SimBroadcaster",
            ),
        }
        for thread in self._threads.values():
            thread.start()
        log.info(
            "SimBridge started: tick every %.0f ms, broadcast every %.0f ms",
            self._tick_interval_s * 1000, self._broadcast_interval_s * 1000,
        )

    def stop(self) -> None:
        """Signal both threads to stop and wait for them to join."""
        if not self._threads:
            return
        self._stop_event.set()
        for name, thread in self._threads.items():
            thread.join(timeout=2.0)
            if thread.is_alive():
                log.warning("%s did not stop within 2 s", name)
        self._threads = {}
        log.info("SimBridge stopped")

    # ── Single iterations ─────────────────────────────────────────────────────

    def tick_once(self) -> None:
        self.world.tick(self._tick_interval_s)

    def broadcast_once(self) -> Dict[str, Any]:
        """Publish the current snapshot and return its wire form."""
        state = self.world.snapshot().as_dict()
        self.bus.publish(topic=STATE_TOPIC, sender=_SENDER, payload=state)
        return state

    # ── Background loop ───────────────────────────────────────────────────────

    def _loop(self, step: Callable[[], Any], interval: float, label: str) -> None:
        while not self._stop_event.is_set():
            t0 = time.perf_counter()
            try:
                step()
            except Exception:
                log.exception("SimBridge %s error", label)
            remaining = interval - (time.perf_counter() - t0)
            if remaining > 0:
                self._stop_event.wait(remaining)
