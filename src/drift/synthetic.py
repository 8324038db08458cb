"""
Synthetic Engagement Data

Generates demo patients for the dashboard fallback and for tests.
All data is artificial - no real patient data.

Pass a seeded random.Random for reproducible scenarios.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from models.engagement import DailyEngagement, LogCategory, LogEvent

from .rounding import round_half_up


SCENARIO_PATTERNS = {
    "engaged": "stable",
    "drifting": "declining",
    "recovering": "recovering",
}

# Baseline engagement level used for the raw demo logs
PATTERN_ENGAGEMENT_LEVELS = {
    "stable": 0.85,
    "declining": 0.4,
    "recovering": 0.7,
}

SYNTHETIC_LOG_CATEGORIES = (
    LogCategory.GLUCOSE,
    LogCategory.MEAL,
    LogCategory.ACTIVITY,
    LogCategory.MEDICATION,
    LogCategory.WEIGHT,
)


@dataclass
class PatientBehaviorData:
    """Bundle of generated engagement data for one demo patient."""
    patient_id: str
    daily_engagement: List[DailyEngagement]
    recent_logs: List[LogEvent] = field(default_factory=list)
    average_logs_per_day: float = 0.0
    streak_days: int = 0
    last_active_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "patientId": self.patient_id,
            "dailyEngagement": [d.to_dict() for d in self.daily_engagement],
            "averageLogsPerDay": round(self.average_logs_per_day, 2),
            "streakDays": self.streak_days,
            "lastActiveDate": self.last_active_date.isoformat() if self.last_active_date else None,
        }


def generate_daily_engagement(
    days: int,
    pattern: str,
    rng: random.Random,
    now: datetime,
) -> List[DailyEngagement]:
    """Generate a most-recent-first window following a drift pattern."""
    if pattern not in PATTERN_ENGAGEMENT_LEVELS:
        raise ValueError(f"Unknown drift pattern: {pattern}")

    engagement = []
    expected_logs = 6
    expected_tasks = 5

    for d in range(days):
        multiplier = 1.0
        if pattern == "declining":
            # Recent days have lower engagement
            multiplier = max(0.2, 1 - (days - d) * 0.08)
        elif pattern == "recovering":
            # V-shaped: low in the middle, recovering recently
            midpoint = days / 2
            if d < midpoint:
                multiplier = 0.4 + (midpoint - d) * 0.08
            else:
                multiplier = 0.4 + (d - midpoint) * 0.08

        logs_count = round_half_up(expected_logs * multiplier * (0.8 + rng.random() * 0.4))
        completed = round_half_up(expected_tasks * multiplier * (0.7 + rng.random() * 0.5))
        timing = min(1.0, max(0.0, multiplier * (0.7 + rng.random() * 0.3)))

        engagement.append(DailyEngagement(
            date=(now - timedelta(days=d)).date(),
            logs_count=max(0, logs_count),
            expected_logs=expected_logs,
            timing_consistency=timing,
            completed_tasks=min(expected_tasks, max(0, completed)),
            total_tasks=expected_tasks,
            activity_minutes=float(round_half_up(30 * multiplier * (0.5 + rng.random()))),
            meal_logs_count=round_half_up(3 * multiplier * (0.6 + rng.random() * 0.6)),
            glucose_checks=round_half_up(4 * multiplier * (0.5 + rng.random() * 0.7)),
        ))

    return engagement


def generate_synthetic_logs(
    days: int,
    engagement_level: float,
    rng: random.Random,
    now: datetime,
) -> List[LogEvent]:
    """Generate raw demo logs, newest first."""
    logs = []

    for d in range(days):
        day = now - timedelta(days=d)
        daily_level = max(0.1, engagement_level - d * 0.02)
        logs_today = int(rng.random() * 8 * daily_level)

        for n in range(logs_today):
            category = rng.choice(SYNTHETIC_LOG_CATEGORIES)
            logged_at = day.replace(
                hour=6 + rng.randrange(16),
                minute=rng.randrange(60),
                second=0,
                microsecond=0,
            )
            value = 80 + rng.random() * 120 if category == LogCategory.GLUCOSE else None
            logs.append(LogEvent(
                id=f"log-{d}-{n}",
                category=category,
                timestamp=logged_at,
                value=value,
            ))

    return sorted(logs, key=lambda log: log.timestamp, reverse=True)


def generate_synthetic_patient_data(
    patient_id: str = "patient-001",
    pattern: str = "declining",
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    days: int = 14,
) -> PatientBehaviorData:
    """
    Generate a complete demo patient.

    Args:
        patient_id: Identifier for the demo patient
        pattern: stable, declining or recovering
        rng: Random source (seed it for reproducible output)
        now: Reference time
        days: Window length
    """
    rng = rng or random.Random()
    now = now or datetime.now()

    daily = generate_daily_engagement(days, pattern, rng, now)
    logs = generate_synthetic_logs(days, PATTERN_ENGAGEMENT_LEVELS[pattern], rng, now)

    streak = 0
    for day in daily:
        if day.logs_count >= day.expected_logs * 0.5:
            streak += 1
        else:
            break

    return PatientBehaviorData(
        patient_id=patient_id,
        daily_engagement=daily,
        recent_logs=logs,
        average_logs_per_day=sum(d.logs_count for d in daily) / days if days else 0.0,
        streak_days=streak,
        last_active_date=logs[0].timestamp if logs else now,
    )


def sample_scenario(
    name: str,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> PatientBehaviorData:
    """Demo scenarios: engaged, drifting, recovering."""
    if name not in SCENARIO_PATTERNS:
        raise ValueError(f"Unknown scenario: {name}")
    return generate_synthetic_patient_data("demo-patient", SCENARIO_PATTERNS[name], rng=rng, now=now)
