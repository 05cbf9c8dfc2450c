"""Persistence infrastructure for chronicle.

This package provides the storage-facing components:
- Record / History: The serialized form of events
- Store: Versioned, ordered record persistence per aggregate
- Serializer: Conversion between events and records
"""

from .serializer import Envelope, JSONSerializer, Serializer
from .store import History, InMemoryStore, Record, Store

__all__ = [
    # Records
    "Record",
    "History",
    # Storage
    "Store",
    "InMemoryStore",
    # Serialization
    "Serializer",
    "JSONSerializer",
    "Envelope",
]
