# -*- coding: utf-8 -*-
"""Health records — API endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from ..deps import request_now
from ..errors import NotFoundError
from .models import HealthRecord, HealthRecordCreateRequest, HealthRecordType, HealthRecordUpdateRequest, HealthRecordsResponse
from .storage import create_record, delete_record, get_record, list_records, update_record

router = APIRouter(prefix="/api/health/records", tags=["Health records"])


@router.post("/{pet_id}", response_model=HealthRecord, status_code=201, summary="Add a health record")
def create_record_api(pet_id: str, request: HealthRecordCreateRequest, now: datetime = Depends(request_now)):
    return create_record(pet_id, request, now=now)


@router.get("/{pet_id}", response_model=HealthRecordsResponse, summary="List health records (most recent first)")
def list_records_api(
    pet_id: str,
    record_type: HealthRecordType | None = Query(default=None, alias="type"),
    limit: int | None = Query(default=None, ge=1, le=500),
):
    items = list_records(pet_id, record_type=record_type, limit=limit)
    return HealthRecordsResponse(pet_id=pet_id, count=len(items), records=items)


@router.get("/{pet_id}/{record_id}", response_model=HealthRecord, summary="Get a health record")
def get_record_api(pet_id: str, record_id: str):
    record = get_record(pet_id, record_id)
    if not record:
        raise NotFoundError("health record not found", field="recordId", value=record_id)
    return record


@router.patch("/{pet_id}/{record_id}", response_model=HealthRecord, summary="Update a health record")
def update_record_api(
    pet_id: str,
    record_id: str,
    request: HealthRecordUpdateRequest,
    now: datetime = Depends(request_now),
):
    return update_record(pet_id, record_id, request, now=now)


@router.delete("/{pet_id}/{record_id}", summary="Delete a health record")
def delete_record_api(pet_id: str, record_id: str):
    delete_record(pet_id, record_id)
    return {"status": "ok", "recordId": record_id}
