# -*- coding: utf-8 -*-
"""Reminder engine — SQLite storage, completion and recurrence.

A reminder is either pending or completed. One-off reminders end in the
completed state; recurring ones bounce straight back to pending with their
due date advanced by exactly one period per completion.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..errors import ConcurrencyConflict, NotFoundError, ValidationError
from ..policy import DueStatus, Frequency, advance, classify, iso, parse_iso, to_utc
from ..records.storage import get_record
from ..vaccinations.storage import get_vaccination
from .models import (
    PRIORITY_RANK,
    HealthReminder,
    Priority,
    ReminderCompletion,
    ReminderCreateRequest,
    ReminderType,
)

logger = logging.getLogger(__name__)


def _row_to_reminder(row: Dict[str, Any]) -> HealthReminder:
    return HealthReminder(
        id=row["id"],
        pet_id=row["pet_id"],
        type=ReminderType(row["type"]),
        title=row["title"],
        description=row.get("description"),
        due_date=parse_iso(row["due_date"]),
        frequency=Frequency(row["frequency"]) if row.get("frequency") else None,
        is_recurring=bool(row.get("is_recurring")),
        is_completed=bool(row.get("is_completed")),
        completed_at=parse_iso(row.get("completed_at")),
        reminder_days=int(row.get("reminder_days") or 0),
        priority=Priority(row["priority"]),
        health_record_id=row.get("health_record_id"),
        vaccination_id=row.get("vaccination_id"),
        created_at=parse_iso(row["created_at"]),
        updated_at=parse_iso(row["updated_at"]),
    )


def _row_to_completion(row: Dict[str, Any]) -> ReminderCompletion:
    return ReminderCompletion(
        id=row["id"],
        reminder_id=row["reminder_id"],
        pet_id=row["pet_id"],
        due_date=parse_iso(row["due_date"]),
        completed_at=parse_iso(row["completed_at"]),
    )


def _resolve_recurrence(request: ReminderCreateRequest) -> bool:
    frequency = request.frequency
    if request.is_recurring is None:
        return frequency is not None and frequency != Frequency.once
    if request.is_recurring:
        if frequency is None:
            raise ValidationError("recurring reminders need a frequency", field="frequency")
        if frequency == Frequency.once:
            raise ValidationError(
                "a reminder with frequency 'once' cannot be recurring", field="isRecurring", value=True
            )
    return bool(request.is_recurring)


def effective_date(reminder: HealthReminder) -> datetime:
    """When the reminder enters the upcoming view: dueDate minus its lead time."""
    return to_utc(reminder.due_date) - timedelta(days=reminder.reminder_days)


def _insert_reminder(
    conn: sqlite3.Connection,
    pet_id: str,
    request: ReminderCreateRequest,
    *,
    is_recurring: bool,
    now: datetime,
) -> Dict[str, Any]:
    reminder_id = str(uuid4())
    stamp = iso(now)
    conn.execute(
        """
        INSERT INTO reminders (
            id, pet_id, type, title, description, due_date, frequency, is_recurring, is_completed,
            completed_at, reminder_days, priority, health_record_id, vaccination_id, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, NULL, ?, ?, ?, ?, ?, ?)
        """,
        (
            reminder_id,
            pet_id,
            request.type.value,
            request.title.strip(),
            request.description,
            iso(request.due_date),
            request.frequency.value if request.frequency else None,
            1 if is_recurring else 0,
            int(request.reminder_days),
            request.priority.value,
            request.health_record_id,
            request.vaccination_id,
            stamp,
            stamp,
        ),
    )
    row = conn.execute("SELECT * FROM reminders WHERE id = ?", (reminder_id,)).fetchone()
    logger.info(
        "Created reminder %s (%s, recurring=%s) for pet %s due %s",
        reminder_id, request.type.value, is_recurring, pet_id, iso(request.due_date),
    )
    return dict(row)


def create_reminder(pet_id: str, request: ReminderCreateRequest, *, now: datetime) -> HealthReminder:
    is_recurring = _resolve_recurrence(request)
    if request.health_record_id and get_record(pet_id, request.health_record_id) is None:
        raise NotFoundError("linked health record not found", field="healthRecordId", value=request.health_record_id)
    if request.vaccination_id and get_vaccination(pet_id, request.vaccination_id) is None:
        raise NotFoundError("linked vaccination not found", field="vaccinationId", value=request.vaccination_id)

    with db_conn(settings.db_path) as conn:
        row = _insert_reminder(conn, pet_id, request, is_recurring=is_recurring, now=now)
    return _row_to_reminder(row)


def reminder_from_vaccination(
    pet_id: str,
    vaccination_id: str,
    *,
    now: datetime,
    reminder_days: int = 14,
    priority: Priority = Priority.high,
) -> HealthReminder:
    vaccination = get_vaccination(pet_id, vaccination_id)
    if vaccination is None:
        raise NotFoundError("vaccination not found", field="vaccinationId", value=vaccination_id)
    if vaccination.next_due_date is None:
        raise ValidationError("vaccination has no next due date", field="nextDueDate")

    request = ReminderCreateRequest(
        type=ReminderType.vaccination,
        title=f"{vaccination.vaccine_name} vaccination due",
        due_date=vaccination.next_due_date,
        frequency=Frequency.once,
        is_recurring=False,
        reminder_days=reminder_days,
        priority=priority,
        vaccination_id=vaccination.id,
    )
    with db_conn(settings.db_path) as conn:
        # Write lock held from the duplicate lookup through the insert.
        conn.execute("BEGIN IMMEDIATE")
        row = conn.execute(
            "SELECT * FROM reminders WHERE pet_id = ? AND vaccination_id = ? AND is_completed = 0 AND due_date = ?",
            (pet_id, vaccination_id, iso(vaccination.next_due_date)),
        ).fetchone()
        if row is None:
            row = _insert_reminder(conn, pet_id, request, is_recurring=False, now=now)
    return _row_to_reminder(dict(row))


def get_reminder(pet_id: str, reminder_id: str) -> Optional[HealthReminder]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(
            "SELECT * FROM reminders WHERE id = ? AND pet_id = ?",
            (reminder_id, pet_id),
        ).fetchone()
    return _row_to_reminder(dict(row)) if row else None


def complete_reminder(pet_id: str, reminder_id: str, *, completed_at: datetime) -> HealthReminder:
    stamp = iso(completed_at)
    with db_conn(settings.db_path) as conn:
        # Read fully so no statement stays open across the conditional write.
        rows = conn.execute(
            "SELECT * FROM reminders WHERE id = ? AND pet_id = ?",
            (reminder_id, pet_id),
        ).fetchall()
        if not rows:
            raise NotFoundError("reminder not found", field="reminderId", value=reminder_id)
        current = _row_to_reminder(dict(rows[0]))

        if not current.is_recurring:
            if current.is_completed:
                return current
            cur = conn.execute(
                """
                UPDATE reminders SET is_completed = 1, completed_at = ?, updated_at = ?
                WHERE id = ? AND is_completed = 0
                """,
                (stamp, stamp, reminder_id),
            )
        else:
            next_due = advance(current.due_date, current.frequency)
            # Keyed on the due date we read so concurrent completions cannot double-advance.
            cur = conn.execute(
                """
                UPDATE reminders SET due_date = ?, completed_at = ?, is_completed = 0, updated_at = ?
                WHERE id = ? AND due_date = ? AND is_completed = 0
                """,
                (iso(next_due), stamp, stamp, reminder_id, iso(current.due_date)),
            )

        if cur.rowcount == 0:
            latest = conn.execute("SELECT * FROM reminders WHERE id = ?", (reminder_id,)).fetchone()
            if latest and not current.is_recurring and latest["is_completed"]:
                return _row_to_reminder(dict(latest))
            logger.warning("Concurrent completion of reminder %s (pet %s)", reminder_id, pet_id)
            raise ConcurrencyConflict(
                "reminder changed while completing; re-read and retry",
                field="dueDate",
                value=iso(current.due_date),
            )

        conn.execute(
            """
            INSERT INTO reminder_completions (id, reminder_id, pet_id, due_date, completed_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (str(uuid4()), reminder_id, pet_id, iso(current.due_date), stamp),
        )
        updated = conn.execute("SELECT * FROM reminders WHERE id = ?", (reminder_id,)).fetchone()

    result = _row_to_reminder(dict(updated))
    if current.is_recurring:
        logger.info("Completed recurring reminder %s; next due %s", reminder_id, iso(result.due_date))
    else:
        logger.info("Completed reminder %s", reminder_id)
    return result


def delete_reminder(pet_id: str, reminder_id: str) -> None:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            "DELETE FROM reminders WHERE id = ? AND pet_id = ?",
            (reminder_id, pet_id),
        )
        if cur.rowcount == 0:
            raise NotFoundError("reminder not found", field="reminderId", value=reminder_id)
    logger.info("Deleted reminder %s for pet %s", reminder_id, pet_id)


def list_reminders(pet_id: str, *, include_completed: bool = True) -> List[HealthReminder]:
    sql = "SELECT * FROM reminders WHERE pet_id = ?"
    if not include_completed:
        sql += " AND is_completed = 0"
    sql += " ORDER BY due_date ASC, id ASC"
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(sql, (pet_id,)).fetchall()
    return [_row_to_reminder(dict(r)) for r in rows]


def upcoming(pet_id: str, now: datetime, horizon_days: Optional[int] = None) -> List[HealthReminder]:
    horizon = settings.upcoming_horizon_days if horizon_days is None else horizon_days
    cutoff = to_utc(now) + timedelta(days=horizon)
    items = [r for r in list_reminders(pet_id, include_completed=False) if effective_date(r) <= cutoff]
    items.sort(key=lambda r: (effective_date(r), PRIORITY_RANK[r.priority], r.id))
    return items


def overdue(pet_id: str, now: datetime) -> List[HealthReminder]:
    return [
        r
        for r in list_reminders(pet_id, include_completed=False)
        if classify(r.due_date, now) == DueStatus.overdue
    ]


def completion_history(pet_id: str, reminder_id: str) -> List[ReminderCompletion]:
    if get_reminder(pet_id, reminder_id) is None:
        raise NotFoundError("reminder not found", field="reminderId", value=reminder_id)
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM reminder_completions WHERE reminder_id = ? ORDER BY completed_at DESC, id ASC",
            (reminder_id,),
        ).fetchall()
    return [_row_to_completion(dict(r)) for r in rows]
