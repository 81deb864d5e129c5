# -*- coding: utf-8 -*-
"""Health reminders — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from ..models import ApiModel, UtcDatetime
from ..policy import DueStatus, Frequency


class ReminderType(str, Enum):
    medication = "medication"
    vaccination = "vaccination"
    checkup = "checkup"
    grooming = "grooming"
    weight_check = "weight_check"
    other = "other"


class Priority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


# Sort rank used when effective due dates tie.
PRIORITY_RANK = {Priority.high: 0, Priority.medium: 1, Priority.low: 2}


class ReminderCreateRequest(ApiModel):
    type: ReminderType
    title: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = Field(None, max_length=2000)
    due_date: UtcDatetime
    frequency: Optional[Frequency] = None
    # Left unset, recurrence follows the frequency (anything but once/null recurs).
    is_recurring: Optional[bool] = None
    reminder_days: int = Field(0, ge=0, le=365, description="Lead time in days before dueDate")
    priority: Priority = Priority.medium
    health_record_id: Optional[str] = None
    vaccination_id: Optional[str] = None


class FromVaccinationRequest(ApiModel):
    reminder_days: int = Field(14, ge=0, le=365)
    priority: Priority = Priority.high


class CompleteReminderRequest(ApiModel):
    completed_at: Optional[UtcDatetime] = None


class HealthReminder(ApiModel):
    id: str
    pet_id: str
    type: ReminderType
    title: str
    description: Optional[str] = None
    due_date: UtcDatetime
    frequency: Optional[Frequency] = None
    is_recurring: bool = False
    is_completed: bool = False
    completed_at: Optional[UtcDatetime] = None
    reminder_days: int = 0
    priority: Priority = Priority.medium
    health_record_id: Optional[str] = None
    vaccination_id: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ReminderView(ApiModel):
    reminder: HealthReminder
    status: DueStatus
    days_until_due: int


class RemindersResponse(ApiModel):
    pet_id: str
    count: int
    reminders: List[ReminderView]


class ReminderCompletion(ApiModel):
    id: str
    reminder_id: str
    pet_id: str
    due_date: UtcDatetime
    completed_at: UtcDatetime


class ReminderHistoryResponse(ApiModel):
    reminder_id: str
    count: int
    completions: List[ReminderCompletion]
