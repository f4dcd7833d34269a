from workshop.stores.interfaces import Clock, DataStore, EntityKind, SystemClock
from workshop.stores.memory_store import InMemoryDataStore

__all__ = ["Clock", "DataStore", "EntityKind", "InMemoryDataStore", "SystemClock"]
