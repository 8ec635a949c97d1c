"""
StateBus: In-memory, thread-safe fan-out of simulation state to observers.

Supports:
    - Topic-based subscriptions with plain callbacks
    - Automatic removal of subscribers whose callback raises
    - Delivery metrics

Intended usage:
    - The broadcaster publishes snapshots to 'sim.state'
    - Each connected client subscribes a callback that forwards to its socket
"""

import threading
import time
import uuid
import logging
from typing import Any, Callable, Dict, List, Tuple

from .message import StateMessage
from .metrics import BusMetrics

log = logging.getLogger(__name__)

Subscriber = Callable[[StateMessage], Any]


class StateBus:
    """
    Publish/subscribe hub between the simulation and its observers.

    Callbacks run on the publisher's thread, outside the bus lock, so a
    callback may subscribe or unsubscribe without deadlocking.  Callbacks
    must not block; hand the message to a queue instead.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, Dict[str, Subscriber]] = {}
        self.metrics = BusMetrics()

    def subscribe(self, topic: str, callback: Subscriber) -> str:
        """
        Register *callback* for every future message on *topic*.

        Args:
            topic (str): The topic name (e.g., 'sim.state').
            callback (Callable): Called with each StateMessage.

        Returns:
            str: Subscription ID, needed to unsubscribe.
        """
        sub_id = str(uuid.uuid4())
        with self._lock:
            self._subscribers.setdefault(topic, {})[sub_id] = callback
        log.info("subscribe topic=%s id=%s", topic, sub_id)
        return sub_id

    def unsubscribe(self, sub_id: str) -> bool:
        """
        Remove a subscription.

        Args:
            sub_id (str): ID returned by subscribe().

        Returns:
            bool: True if the subscription existed.
        """
        with self._lock:
            for subs in self._subscribers.values():
                if subs.pop(sub_id, None) is not None:
                    log.info("unsubscribe id=%s", sub_id)
                    return True
        return False

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, {}))

    def publish(self, topic: str, sender: str, payload: dict) -> StateMessage:
        """
        Deliver a message to every current subscriber of *topic*.

        Args:
            topic (str): The topic name.
            sender (str): ID of the publisher.
            payload (dict): JSON-ready message contents.

        Returns:
            StateMessage: The message that was delivered.
        """
        msg = StateMessage(
            id=str(uuid.uuid4()),
            topic=topic,
            sender=sender,
            payload=payload,
            ts=time.time(),
        )
        with self._lock:
            targets: List[Tuple[str, Subscriber]] = list(
                self._subscribers.get(topic, {}).items()
            )

        delivered = 0
        failed = 0
        dropped = 0
        for sub_id, callback in targets:
            try:
                callback(msg)
                delivered += 1
            except Exception:
                failed += 1
                log.warning(
                    "delivery_failed topic=%s id=%s, dropping subscriber",
                    topic, sub_id, exc_info=True,
                )
                if self.unsubscribe(sub_id):
                    dropped += 1

        self.metrics.record_publish(delivered, failed, dropped)
        log.debug("publish topic=%s sender=%s id=%s subscribers=%d",
                  topic, sender, msg.id, len(targets))
        return msg
