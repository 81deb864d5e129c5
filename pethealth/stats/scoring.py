# -*- coding: utf-8 -*-
"""Health score aggregation.

Score (0-100) = record recency (30) + vaccination compliance (40) + reminder
hygiene (30):

- recency: full weight when the latest checkup is at most `recent_checkup_days`
  old, zero at `stale_checkup_days` or with no checkup, linear in between.
- compliance: weight x compliance ratio, rounded half up.
- hygiene: weight minus `overdue_penalty` per overdue pending reminder, floored at 0.

Weights and breakpoints come from settings; pass a `ScorePolicy` to override.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..config import settings
from ..policy import DueStatus, to_utc
from ..records.models import HealthRecordType
from ..records.storage import count_records, count_since, latest_record
from ..reminders.storage import overdue, upcoming
from ..vaccinations.storage import compliance_ratio, latest_per_vaccine, status_for
from .models import HealthStats, ScoreComponents


@dataclass(frozen=True)
class ScorePolicy:
    recent_checkup_days: int = 365
    stale_checkup_days: int = 730
    weight_recency: int = 30
    weight_compliance: int = 40
    weight_hygiene: int = 30
    overdue_penalty: int = 10

    @classmethod
    def from_settings(cls) -> "ScorePolicy":
        return cls(
            recent_checkup_days=settings.recent_checkup_days,
            stale_checkup_days=settings.stale_checkup_days,
            weight_recency=settings.weight_recency,
            weight_compliance=settings.weight_compliance,
            weight_hygiene=settings.weight_hygiene,
            overdue_penalty=settings.overdue_penalty,
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def recency_component(last_checkup: Optional[datetime], now: datetime, policy: ScorePolicy) -> int:
    if last_checkup is None:
        return 0
    age_days = (to_utc(now) - to_utc(last_checkup)) / timedelta(days=1)
    if age_days <= policy.recent_checkup_days:
        return policy.weight_recency
    if age_days >= policy.stale_checkup_days:
        return 0
    span = policy.stale_checkup_days - policy.recent_checkup_days
    return _round_half_up(policy.weight_recency * (policy.stale_checkup_days - age_days) / span)


def compliance_component(ratio: float, policy: ScorePolicy) -> int:
    ratio = min(max(ratio, 0.0), 1.0)
    return _round_half_up(policy.weight_compliance * ratio)


def hygiene_component(overdue_count: int, policy: ScorePolicy) -> int:
    penalty = min(policy.weight_hygiene, policy.overdue_penalty * max(overdue_count, 0))
    return max(policy.weight_hygiene - penalty, 0)


def combine(components: ScoreComponents) -> int:
    total = components.record_recency + components.vaccination_compliance + components.reminder_hygiene
    return min(max(total, 0), 100)


def score_components(pet_id: str, now: datetime, policy: Optional[ScorePolicy] = None) -> ScoreComponents:
    policy = policy or ScorePolicy.from_settings()
    last = latest_record(pet_id, HealthRecordType.checkup)
    return ScoreComponents(
        record_recency=recency_component(last.date if last else None, now, policy),
        vaccination_compliance=compliance_component(compliance_ratio(pet_id, now), policy),
        reminder_hygiene=hygiene_component(len(overdue(pet_id, now)), policy),
    )


def compute_health_stats(
    pet_id: str,
    now: datetime,
    *,
    policy: Optional[ScorePolicy] = None,
    horizon_days: Optional[int] = None,
) -> HealthStats:
    policy = policy or ScorePolicy.from_settings()
    components = score_components(pet_id, now, policy)
    since = to_utc(now) - timedelta(days=policy.recent_checkup_days)
    up_to_date = sum(1 for v in latest_per_vaccine(pet_id) if status_for(v, now) != DueStatus.overdue)
    return HealthStats(
        pet_id=pet_id,
        total_records=count_records(pet_id),
        recent_checkups=count_since(pet_id, since, record_type=HealthRecordType.checkup),
        vaccinations_up_to_date=up_to_date,
        upcoming_reminders=len(upcoming(pet_id, now, horizon_days)),
        health_score=combine(components),
        components=components,
        generated_at=to_utc(now),
    )
