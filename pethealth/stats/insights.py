# -*- coding: utf-8 -*-
"""Health insights and dashboard views derived from the stores."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from ..config import settings
from ..policy import DueStatus, classify, days_until, to_utc
from ..records.models import HealthRecordType
from ..records.storage import latest_record, list_records
from ..reminders.models import Priority, ReminderType
from ..reminders.storage import overdue, upcoming
from ..vaccinations.models import VaccinationStatus
from ..vaccinations.storage import latest_per_vaccine, status_for, upcoming_for
from .models import HealthDashboard, HealthInsight, InsightKind, InsightSeverity
from .scoring import ScorePolicy, compute_health_stats

_SEVERITY_RANK = {InsightSeverity.high: 0, InsightSeverity.medium: 1, InsightSeverity.low: 2}

# Record types whose follow-up date is worth surfacing.
_FOLLOW_UP_TYPES = {HealthRecordType.illness, HealthRecordType.injury, HealthRecordType.surgery}


def _vaccination_insights(pet_id: str, now: datetime) -> List[HealthInsight]:
    out: List[HealthInsight] = []
    for v in latest_per_vaccine(pet_id):
        status = status_for(v, now)
        if status == DueStatus.overdue:
            late = -days_until(v.next_due_date, now)
            out.append(
                HealthInsight(
                    kind=InsightKind.vaccination_overdue,
                    severity=InsightSeverity.high,
                    message=f"{v.vaccine_name} vaccination is overdue by {late} day(s)",
                    ref_id=v.id,
                )
            )
        elif status == DueStatus.due_soon:
            out.append(
                HealthInsight(
                    kind=InsightKind.vaccination_due_soon,
                    severity=InsightSeverity.medium,
                    message=f"{v.vaccine_name} vaccination is due in {days_until(v.next_due_date, now)} day(s)",
                    ref_id=v.id,
                )
            )
    return out


def _reminder_insights(pet_id: str, now: datetime) -> List[HealthInsight]:
    return [
        HealthInsight(
            kind=InsightKind.reminder_overdue,
            severity=InsightSeverity.high if r.priority == Priority.high else InsightSeverity.medium,
            message=f"{r.title} is overdue by {-days_until(r.due_date, now)} day(s)",
            ref_id=r.id,
        )
        for r in overdue(pet_id, now)
    ]


def _follow_up_insights(pet_id: str, now: datetime) -> List[HealthInsight]:
    records = list_records(pet_id)
    if not records:
        return []
    newest = records[0].date
    out: List[HealthInsight] = []
    for rec in records:
        if rec.type not in _FOLLOW_UP_TYPES or rec.follow_up_date is None:
            continue
        # Any later visit counts as the follow-up having happened.
        if newest > rec.date:
            continue
        status = classify(rec.follow_up_date, now)
        if status not in (DueStatus.overdue, DueStatus.due_soon):
            continue
        label = rec.diagnosis or rec.type.value
        out.append(
            HealthInsight(
                kind=InsightKind.follow_up_due,
                severity=InsightSeverity.high if status == DueStatus.overdue else InsightSeverity.medium,
                message=f"Follow-up for {label} due {to_utc(rec.follow_up_date).date().isoformat()}",
                ref_id=rec.id,
            )
        )
    return out


def _checkup_insights(pet_id: str, now: datetime, policy: ScorePolicy) -> List[HealthInsight]:
    last = latest_record(pet_id, HealthRecordType.checkup)
    if last is None:
        return [
            HealthInsight(
                kind=InsightKind.checkup_missing,
                severity=InsightSeverity.medium,
                message="No checkup on file; schedule a routine vet visit",
            )
        ]
    age = -days_until(last.date, now)
    if age > policy.recent_checkup_days:
        return [
            HealthInsight(
                kind=InsightKind.checkup_stale,
                severity=InsightSeverity.medium if age < policy.stale_checkup_days else InsightSeverity.high,
                message=f"Last checkup was {age} days ago",
                ref_id=last.id,
            )
        ]
    return []


def health_insights(pet_id: str, now: datetime, *, policy: Optional[ScorePolicy] = None) -> List[HealthInsight]:
    policy = policy or ScorePolicy.from_settings()
    items = (
        _vaccination_insights(pet_id, now)
        + _reminder_insights(pet_id, now)
        + _follow_up_insights(pet_id, now)
        + _checkup_insights(pet_id, now, policy)
    )
    items.sort(key=lambda i: (_SEVERITY_RANK[i.severity], i.kind.value, i.ref_id or ""))
    return items


def health_dashboard(pet_id: str, now: datetime, *, recent_visits: int = 5) -> HealthDashboard:
    window = to_utc(now) + timedelta(days=settings.due_soon_days)
    vaccinations = [
        VaccinationStatus(vaccination=v, status=status_for(v, now), days_until_due=days_until(v.next_due_date, now))
        for v in upcoming_for(pet_id, now)
        if to_utc(v.next_due_date) <= window
    ]
    medication = [r for r in upcoming(pet_id, now) if r.type == ReminderType.medication]
    return HealthDashboard(
        pet_id=pet_id,
        vaccination_reminders=vaccinations,
        medication_reminders=medication,
        recent_visits=list_records(pet_id, limit=recent_visits),
        health_alerts=health_insights(pet_id, now),
        stats=compute_health_stats(pet_id, now),
    )
