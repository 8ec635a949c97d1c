"""
bus — In-memory state broadcast infrastructure
===============================================

Provides a lightweight pub/sub fan-out used to push simulation snapshots
to every connected observer without a real message broker.

Modules
-------
message
    :class:`StateMessage` dataclass.
state_bus
    :class:`StateBus` subscribe / publish / unsubscribe hub.
metrics
    :class:`BusMetrics` counter snapshot.
"""

from .message import StateMessage
from .state_bus import StateBus
from .metrics import BusMetrics

__all__ = [
    "StateMessage",
    "StateBus",
    "BusMetrics",
]
