"""Aggregate persistence.

This package provides:
- Repository: Replays, applies commands to and saves aggregates
- ObserverDelivery and its strategies: Publication of saved events
"""

from .delivery import IsolatedDelivery, Observer, ObserverDelivery, SynchronousDelivery
from .repository import Repository

__all__ = [
    "Repository",
    # Observer delivery
    "Observer",
    "ObserverDelivery",
    "SynchronousDelivery",
    "IsolatedDelivery",
]
