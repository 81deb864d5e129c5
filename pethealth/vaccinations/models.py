# -*- coding: utf-8 -*-
"""Vaccinations — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from ..models import ApiModel, UtcDatetime
from ..policy import DueStatus


class VaccinationCreateRequest(ApiModel):
    vaccine_name: str = Field(..., min_length=1, max_length=128)
    date_given: UtcDatetime
    next_due_date: Optional[UtcDatetime] = None
    vet_name: Optional[str] = Field(None, max_length=128)
    batch_number: Optional[str] = Field(None, max_length=64)
    notes: Optional[str] = Field(None, max_length=2000)


class VaccinationRecord(ApiModel):
    id: str
    pet_id: str
    vaccine_name: str
    date_given: UtcDatetime
    next_due_date: Optional[UtcDatetime] = None
    vet_name: Optional[str] = None
    batch_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class VaccinationStatus(ApiModel):
    """A vaccination plus its due classification at evaluation time."""

    vaccination: VaccinationRecord
    status: DueStatus
    days_until_due: Optional[int] = None


class VaccinationsResponse(ApiModel):
    pet_id: str
    count: int
    compliance_ratio: float = Field(..., ge=0, le=1)
    vaccinations: List[VaccinationStatus]
