# -*- coding: utf-8 -*-
"""Health reminders — API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from ..deps import request_now
from ..errors import NotFoundError
from ..policy import classify, days_until
from .models import (
    CompleteReminderRequest,
    FromVaccinationRequest,
    HealthReminder,
    ReminderCreateRequest,
    ReminderHistoryResponse,
    RemindersResponse,
    ReminderView,
)
from .storage import (
    complete_reminder,
    completion_history,
    create_reminder,
    delete_reminder,
    get_reminder,
    list_reminders,
    reminder_from_vaccination,
    upcoming,
)

router = APIRouter(prefix="/api/health/reminders", tags=["Reminders"])


def _views(pet_id: str, items: List[HealthReminder], now: datetime) -> RemindersResponse:
    views = [
        ReminderView(reminder=r, status=classify(r.due_date, now), days_until_due=days_until(r.due_date, now))
        for r in items
    ]
    return RemindersResponse(pet_id=pet_id, count=len(views), reminders=views)


@router.post("/{pet_id}", response_model=HealthReminder, status_code=201, summary="Create a reminder")
def create_reminder_api(pet_id: str, request: ReminderCreateRequest, now: datetime = Depends(request_now)):
    return create_reminder(pet_id, request, now=now)


@router.post(
    "/{pet_id}/from-vaccination/{vaccination_id}",
    response_model=HealthReminder,
    status_code=201,
    summary="Derive a reminder from a vaccination's next due date",
)
def reminder_from_vaccination_api(
    pet_id: str,
    vaccination_id: str,
    request: Optional[FromVaccinationRequest] = Body(default=None),
    now: datetime = Depends(request_now),
):
    options = request or FromVaccinationRequest()
    return reminder_from_vaccination(
        pet_id,
        vaccination_id,
        now=now,
        reminder_days=options.reminder_days,
        priority=options.priority,
    )


@router.get("/{pet_id}", response_model=RemindersResponse, summary="List reminders")
def list_reminders_api(
    pet_id: str,
    include_completed: bool = Query(default=True, alias="includeCompleted"),
    now: datetime = Depends(request_now),
):
    return _views(pet_id, list_reminders(pet_id, include_completed=include_completed), now)


@router.get("/{pet_id}/upcoming", response_model=RemindersResponse, summary="Upcoming reminders within a horizon")
def upcoming_reminders_api(
    pet_id: str,
    days: int | None = Query(default=None, ge=0, le=365, description="Horizon in days (default 30)"),
    now: datetime = Depends(request_now),
):
    return _views(pet_id, upcoming(pet_id, now, days), now)


@router.get("/{pet_id}/{reminder_id}", response_model=HealthReminder, summary="Get a reminder")
def get_reminder_api(pet_id: str, reminder_id: str):
    reminder = get_reminder(pet_id, reminder_id)
    if not reminder:
        raise NotFoundError("reminder not found", field="reminderId", value=reminder_id)
    return reminder


@router.post("/{pet_id}/{reminder_id}/complete", response_model=HealthReminder, summary="Complete a reminder")
def complete_reminder_api(
    pet_id: str,
    reminder_id: str,
    request: Optional[CompleteReminderRequest] = Body(default=None),
    now: datetime = Depends(request_now),
):
    completed_at = request.completed_at if request and request.completed_at else now
    return complete_reminder(pet_id, reminder_id, completed_at=completed_at)


@router.get(
    "/{pet_id}/{reminder_id}/history",
    response_model=ReminderHistoryResponse,
    summary="Completion history of a reminder",
)
def reminder_history_api(pet_id: str, reminder_id: str):
    items = completion_history(pet_id, reminder_id)
    return ReminderHistoryResponse(reminder_id=reminder_id, count=len(items), completions=items)


@router.delete("/{pet_id}/{reminder_id}", summary="Delete a reminder and its history")
def delete_reminder_api(pet_id: str, reminder_id: str):
    delete_reminder(pet_id, reminder_id)
    return {"status": "ok", "reminderId": reminder_id}
