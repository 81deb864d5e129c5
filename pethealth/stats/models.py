# -*- coding: utf-8 -*-
"""Health stats — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from ..models import ApiModel, UtcDatetime
from ..records.models import HealthRecord
from ..reminders.models import HealthReminder
from ..vaccinations.models import VaccinationStatus


class ScoreComponents(ApiModel):
    record_recency: int = Field(..., ge=0)
    vaccination_compliance: int = Field(..., ge=0)
    reminder_hygiene: int = Field(..., ge=0)


class HealthStats(ApiModel):
    pet_id: str
    total_records: int = Field(0, ge=0)
    recent_checkups: int = Field(0, ge=0)
    vaccinations_up_to_date: int = Field(0, ge=0)
    upcoming_reminders: int = Field(0, ge=0)
    health_score: int = Field(..., ge=0, le=100)
    components: ScoreComponents
    generated_at: UtcDatetime


class InsightSeverity(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class InsightKind(str, Enum):
    vaccination_overdue = "vaccination_overdue"
    vaccination_due_soon = "vaccination_due_soon"
    reminder_overdue = "reminder_overdue"
    follow_up_due = "follow_up_due"
    checkup_missing = "checkup_missing"
    checkup_stale = "checkup_stale"


class HealthInsight(ApiModel):
    kind: InsightKind
    severity: InsightSeverity
    message: str
    ref_id: Optional[str] = None


class HealthInsightsResponse(ApiModel):
    pet_id: str
    count: int
    insights: List[HealthInsight]


class HealthDashboard(ApiModel):
    pet_id: str
    vaccination_reminders: List[VaccinationStatus] = Field(default_factory=list)
    medication_reminders: List[HealthReminder] = Field(default_factory=list)
    recent_visits: List[HealthRecord] = Field(default_factory=list)
    health_alerts: List[HealthInsight] = Field(default_factory=list)
    stats: HealthStats
