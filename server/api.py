"""
server/api.py
=============
FastAPI server that streams the road simulation to clients and accepts
control commands.

Start the server::

    python main.py          # → ws://localhost:8080/ws

Endpoints
---------
``WS /ws``
    Sends the current state on connect, then every broadcast snapshot.
    Accepts JSON commands as text or UTF-8 binary frames (see
    :mod:`server.commands`); each applied command is answered with a fresh
    snapshot.  Malformed messages are logged and ignored.
``GET /state``
    Current snapshot.
``GET /config``
    Current spawn settings and time scale.
``POST /control``
    Same command schema as the socket; returns the new snapshot.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager, suppress
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from bus.message import StateMessage
from bus.state_bus import StateBus
from config import CLIENT_QUEUE_SIZE
from server.commands import Command, UnknownActionError, apply_command, parse_command
from sim.sim_bridge import STATE_TOPIC, SimBridge
from sim.world import World

log = logging.getLogger("server")


def _frame_text(message: Dict[str, Any]) -> str:
    """Text of a socket frame; binary frames are read as UTF-8."""
    text = message.get("text")
    if text is None:
        text = (message.get("bytes") or b"").decode("utf-8", "replace")
    return text


def _decode_command(text: str) -> Optional[Command]:
    """Parse one socket frame, or return *None* if it should be ignored."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError:
        log.warning("Ignoring non-JSON message: %.80s", text)
        return None
    try:
        return parse_command(raw)
    except UnknownActionError as exc:
        log.warning("Ignoring command: %s", exc)
    except ValidationError as exc:
        log.warning("Ignoring invalid command: %s", exc.errors(include_url=False))
    return None


async def _pump(websocket: WebSocket, outbox: "asyncio.Queue[Dict[str, Any]]") -> None:
    """Send queued states until the socket goes away."""
    while True:
        payload = await outbox.get()
        try:
            await websocket.send_json(payload)
        except (WebSocketDisconnect, RuntimeError):
            log.debug("Client gone, sender stopping")
            return


def create_app(
    world: World,
    bridge: Optional[SimBridge] = None,
    bus: Optional[StateBus] = None,
    queue_size: int = CLIENT_QUEUE_SIZE,
) -> FastAPI:
    """Build the application around an existing world.

    Parameters
    ----------
    world : World
        The simulation every endpoint operates on.
    bridge : SimBridge or None
        Started on application startup and stopped on shutdown.
    bus : StateBus or None
        Source of broadcast snapshots; defaults to the bridge's bus.
    queue_size : int
        Per-client backlog of unsent states; the oldest is dropped when full.
    """
    if bus is None:
        bus = bridge.bus if bridge is not None else StateBus()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if bridge is not None:
            bridge.start()
        try:
            yield
        finally:
            if bridge is not None:
                await run_in_threadpool(bridge.stop)

    app = FastAPI(
        title="Road Traffic Simulator",
        description="Single-lane car-following simulation streamed over WebSocket.",
        version="1.0",
        lifespan=lifespan,
    )
    app.state.world = world
    app.state.bus = bus

    # ── REST ─────────────────────────────────────────────────────────────────

    @app.get("/state")
    def get_state() -> Dict[str, Any]:
        return world.snapshot().as_dict()

    @app.get("/config")
    def get_config() -> Dict[str, Any]:
        return world.config().as_dict()

    @app.post("/control")
    def control(raw: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        """Apply one command and return the resulting state."""
        try:
            command = parse_command(raw)
        except UnknownActionError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except ValidationError as exc:
            raise HTTPException(
                status_code=422,
                detail=exc.errors(include_url=False, include_context=False),
            )
        apply_command(world, command)
        return world.snapshot().as_dict()

    # ── WebSocket ────────────────────────────────────────────────────────────

    @app.websocket("/ws")
    async def state_stream(websocket: WebSocket) -> None:
        await websocket.accept()
        loop = asyncio.get_running_loop()
        outbox: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue(maxsize=queue_size)

        def offer(payload: Dict[str, Any]) -> None:
            if outbox.full():
                outbox.get_nowait()
            outbox.put_nowait(payload)

        def on_state(msg: StateMessage) -> None:
            # Runs on the broadcaster thread.
            loop.call_soon_threadsafe(offer, msg.payload)

        offer(await run_in_threadpool(lambda: world.snapshot().as_dict()))
        sub_id = bus.subscribe(STATE_TOPIC, on_state)
        sender = asyncio.create_task(_pump(websocket, outbox))
        log.info("Client connected (%d subscribed)", bus.subscriber_count(STATE_TOPIC))

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    log.info("Client disconnected")
                    break
                command = _decode_command(_frame_text(message))
                if command is None:
                    continue
                await run_in_threadpool(apply_command, world, command)
                offer(await run_in_threadpool(lambda: world.snapshot().as_dict()))
        finally:
            bus.unsubscribe(sub_id)
            sender.cancel()
            with suppress(asyncio.CancelledError):
                await sender

    return app
