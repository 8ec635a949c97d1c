"""
BusMetrics: Tracks simple statistics for StateBus message flow.
"""

import threading


class BusMetrics:
    """
    Tracks metrics for published messages, deliveries and dropped subscribers.

    Attributes:
        published (int): Total number of messages published.
        delivered (int): Number of successful callback deliveries.
        failed (int): Number of deliveries whose callback raised.
        dropped_subscribers (int): Subscribers removed after a failed delivery.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self._lock = threading.Lock()
        self.published = 0
        self.delivered = 0
        self.failed = 0
        self.dropped_subscribers = 0

    def record_publish(self, delivered: int, failed: int, dropped: int = 0) -> None:
        """Account for one publish call and the outcome of its deliveries.

        *dropped* counts only subscribers this call actually removed; a
        callback that already unsubscribed itself is not counted twice.
        """
        with self._lock:
            self.published += 1
            self.delivered += delivered
            self.failed += failed
            self.dropped_subscribers += dropped

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: Dictionary containing 'published', 'delivered', 'failed' and
            'dropped_subscribers' counters.
        """
        with self._lock:
            return {
                "published": self.published,
                "delivered": self.delivered,
                "failed": self.failed,
                "dropped_subscribers": self.dropped_subscribers,
            }
