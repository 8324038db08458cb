"""
Service Container

Wires stores, core components and services from settings. The API
builds one container per process; tests build their own with
in-memory stores and fixed clocks.
"""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from auth.tokens import TokenService
from config.settings import Settings
from monitoring.monitoring_service import MonitoringService
from nudges.policy import NudgePolicy
from storage.base import DriftEventStore, LogStore, NudgeStore, PlanStateStore, ProfileStore
from storage.database import (
    SQLiteDriftEventStore,
    SQLiteLogStore,
    SQLiteNudgeStore,
    SQLitePlanStateStore,
    SQLiteProfileStore,
    init_database,
)
from storage.memory import (
    InMemoryDriftEventStore,
    InMemoryLogStore,
    InMemoryNudgeStore,
    InMemoryPlanStateStore,
    InMemoryProfileStore,
)

from .drift_service import DriftAnalysisService
from .insights_service import InsightsService
from .log_service import LogService
from .plan_service import PlanService


@dataclass
class StoreBundle:
    logs: LogStore
    drift_events: DriftEventStore
    nudges: NudgeStore
    profiles: ProfileStore
    plan_states: PlanStateStore

    @classmethod
    def in_memory(cls, clock: Optional[Callable[[], datetime]] = None) -> "StoreBundle":
        return cls(
            logs=InMemoryLogStore(clock=clock),
            drift_events=InMemoryDriftEventStore(clock=clock),
            nudges=InMemoryNudgeStore(clock=clock),
            profiles=InMemoryProfileStore(),
            plan_states=InMemoryPlanStateStore(),
        )

    @classmethod
    def sqlite(cls, db_path: str, clock: Optional[Callable[[], datetime]] = None) -> "StoreBundle":
        """SQLite-backed stores; creates the schema if needed."""
        init_database(db_path)
        return cls(
            logs=SQLiteLogStore(db_path, clock=clock),
            drift_events=SQLiteDriftEventStore(db_path, clock=clock),
            nudges=SQLiteNudgeStore(db_path, clock=clock),
            profiles=SQLiteProfileStore(db_path),
            plan_states=SQLitePlanStateStore(db_path),
        )


@dataclass
class AppServices:
    settings: Settings
    stores: StoreBundle
    tokens: TokenService
    logs: LogService
    drift: DriftAnalysisService
    plans: PlanService
    insights: InsightsService
    monitoring: Optional[MonitoringService] = None


def build_services(
    settings: Settings,
    stores: StoreBundle,
    monitoring: Optional[MonitoringService] = None,
    policy: Optional[NudgePolicy] = None,
    rng: Optional[random.Random] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> AppServices:
    """
    Build the service container.

    Args:
        settings: Application settings
        stores: Store implementations
        monitoring: Optional JSONL monitoring sink
        policy: Nudge policy (inject a deterministic pick_one in tests)
        rng: Random source for synthetic fallback and demo data
        clock: Time source shared by every component
    """
    clock = clock or datetime.now
    policy = policy or NudgePolicy()

    return AppServices(
        settings=settings,
        stores=stores,
        tokens=TokenService(settings.auth_secret, settings.token_expiry_hours, clock=clock),
        logs=LogService(stores.logs, clock=clock),
        drift=DriftAnalysisService(
            stores.logs,
            stores.drift_events,
            stores.nudges,
            stores.profiles,
            policy=policy,
            monitoring=monitoring,
            window_days=settings.window_days,
            default_language=settings.default_language,
            clock=clock,
        ),
        plans=PlanService(
            stores.logs,
            stores.plan_states,
            monitoring=monitoring,
            window_days=settings.window_days,
            clock=clock,
        ),
        insights=InsightsService(
            stores.logs,
            stores.profiles,
            stores.plan_states,
            policy=policy,
            monitoring=monitoring,
            window_days=settings.window_days,
            default_language=settings.default_language,
            rng=rng,
            clock=clock,
        ),
        monitoring=monitoring,
    )
