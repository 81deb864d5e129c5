# -*- coding: utf-8 -*-
"""Health records — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from ..models import ApiModel, UtcDatetime


class HealthRecordType(str, Enum):
    checkup = "checkup"
    illness = "illness"
    injury = "injury"
    surgery = "surgery"
    medication = "medication"
    other = "other"


class HealthRecordCreateRequest(ApiModel):
    date: UtcDatetime = Field(..., description="When the visit/event happened (ISO8601)")
    type: HealthRecordType
    vet_name: Optional[str] = Field(None, max_length=128)
    vet_clinic: Optional[str] = Field(None, max_length=256)
    diagnosis: Optional[str] = Field(None, max_length=2000)
    treatment: Optional[str] = Field(None, max_length=2000)
    medications: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=4000)
    follow_up_date: Optional[UtcDatetime] = None
    cost: Optional[float] = Field(None, ge=0)
    attachments: List[str] = Field(default_factory=list)


class HealthRecordUpdateRequest(ApiModel):
    """Partial update; only fields present in the payload are applied."""

    date: Optional[UtcDatetime] = None
    type: Optional[HealthRecordType] = None
    vet_name: Optional[str] = Field(None, max_length=128)
    vet_clinic: Optional[str] = Field(None, max_length=256)
    diagnosis: Optional[str] = Field(None, max_length=2000)
    treatment: Optional[str] = Field(None, max_length=2000)
    medications: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=4000)
    follow_up_date: Optional[UtcDatetime] = None
    cost: Optional[float] = Field(None, ge=0)
    attachments: Optional[List[str]] = None


class HealthRecord(ApiModel):
    id: str
    pet_id: str
    date: UtcDatetime
    type: HealthRecordType
    vet_name: Optional[str] = None
    vet_clinic: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    medications: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[UtcDatetime] = None
    cost: Optional[float] = None
    attachments: List[str] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime


class HealthRecordsResponse(ApiModel):
    pet_id: str
    count: int
    records: List[HealthRecord]
