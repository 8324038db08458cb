# Storage Package - Log, Nudge, Profile and Plan Stores
from .base import DriftEventStore, LogStore, NudgeStore, PlanStateStore, ProfileStore
from .memory import (
    InMemoryDriftEventStore,
    InMemoryLogStore,
    InMemoryNudgeStore,
    InMemoryPlanStateStore,
    InMemoryProfileStore,
)
from .database import (
    SQLiteDriftEventStore,
    SQLiteLogStore,
    SQLiteNudgeStore,
    SQLitePlanStateStore,
    SQLiteProfileStore,
    get_connection,
    init_database,
)

__all__ = [
    "DriftEventStore",
    "LogStore",
    "NudgeStore",
    "PlanStateStore",
    "ProfileStore",
    "InMemoryDriftEventStore",
    "InMemoryLogStore",
    "InMemoryNudgeStore",
    "InMemoryPlanStateStore",
    "InMemoryProfileStore",
    "SQLiteDriftEventStore",
    "SQLiteLogStore",
    "SQLiteNudgeStore",
    "SQLitePlanStateStore",
    "SQLiteProfileStore",
    "get_connection",
    "init_database",
]
