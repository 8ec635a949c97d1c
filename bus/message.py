"""
StateMessage: Data structure representing a message fanned out by the StateBus.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StateMessage:
    """
    Represents a single message published on the StateBus.

    Attributes:
        id (str): Unique identifier for the message.
        topic (str): The topic of the message (e.g., 'sim.state').
        sender (str): ID of the publisher (e.g., 'simulation').
        payload (dict): JSON-ready message contents.
        ts (float): Timestamp (in seconds) when the message was created.
    """
    id: str
    topic: str
    sender: str
    payload: dict
    ts: float
