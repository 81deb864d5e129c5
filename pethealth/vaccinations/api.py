# -*- coding: utf-8 -*-
"""Vaccinations — API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends

from ..deps import request_now
from ..errors import NotFoundError
from ..policy import days_until
from .models import VaccinationCreateRequest, VaccinationRecord, VaccinationStatus, VaccinationsResponse
from .storage import (
    compliance_ratio,
    create_vaccination,
    delete_vaccination,
    get_vaccination,
    list_vaccinations,
    status_for,
    upcoming_for,
)

router = APIRouter(prefix="/api/health/vaccinations", tags=["Vaccinations"])


def _with_status(items: List[VaccinationRecord], now: datetime) -> List[VaccinationStatus]:
    return [
        VaccinationStatus(
            vaccination=v,
            status=status_for(v, now),
            days_until_due=days_until(v.next_due_date, now) if v.next_due_date else None,
        )
        for v in items
    ]


@router.post("/{pet_id}", response_model=VaccinationRecord, status_code=201, summary="Record a vaccination")
def create_vaccination_api(pet_id: str, request: VaccinationCreateRequest, now: datetime = Depends(request_now)):
    return create_vaccination(pet_id, request, now=now)


@router.get("/{pet_id}", response_model=VaccinationsResponse, summary="Vaccination history with due status")
def list_vaccinations_api(pet_id: str, now: datetime = Depends(request_now)):
    items = list_vaccinations(pet_id)
    return VaccinationsResponse(
        pet_id=pet_id,
        count=len(items),
        compliance_ratio=compliance_ratio(pet_id, now),
        vaccinations=_with_status(items, now),
    )


@router.get("/{pet_id}/upcoming", response_model=VaccinationsResponse, summary="Upcoming vaccinations (earliest first)")
def upcoming_vaccinations_api(pet_id: str, now: datetime = Depends(request_now)):
    items = upcoming_for(pet_id, now)
    return VaccinationsResponse(
        pet_id=pet_id,
        count=len(items),
        compliance_ratio=compliance_ratio(pet_id, now),
        vaccinations=_with_status(items, now),
    )


@router.get("/{pet_id}/{vaccination_id}", response_model=VaccinationRecord, summary="Get a vaccination")
def get_vaccination_api(pet_id: str, vaccination_id: str):
    vaccination = get_vaccination(pet_id, vaccination_id)
    if not vaccination:
        raise NotFoundError("vaccination not found", field="vaccinationId", value=vaccination_id)
    return vaccination


@router.delete("/{pet_id}/{vaccination_id}", summary="Delete a vaccination")
def delete_vaccination_api(pet_id: str, vaccination_id: str):
    delete_vaccination(pet_id, vaccination_id)
    return {"status": "ok", "vaccinationId": vaccination_id}
