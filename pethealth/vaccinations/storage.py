# -*- coding: utf-8 -*-
"""Vaccination schedule — SQLite storage and compliance queries."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..errors import NotFoundError, ValidationError
from ..policy import DueStatus, classify, iso, parse_iso, to_utc
from .models import VaccinationCreateRequest, VaccinationRecord

logger = logging.getLogger(__name__)


def _row_to_vaccination(row: Dict[str, Any]) -> VaccinationRecord:
    return VaccinationRecord(
        id=row["id"],
        pet_id=row["pet_id"],
        vaccine_name=row["vaccine_name"],
        date_given=parse_iso(row["date_given"]),
        next_due_date=parse_iso(row.get("next_due_date")),
        vet_name=row.get("vet_name"),
        batch_number=row.get("batch_number"),
        notes=row.get("notes"),
        created_at=parse_iso(row["created_at"]),
        updated_at=parse_iso(row["updated_at"]),
    )


def create_vaccination(pet_id: str, request: VaccinationCreateRequest, *, now: datetime) -> VaccinationRecord:
    if request.next_due_date is not None and to_utc(request.next_due_date) <= to_utc(request.date_given):
        logger.warning("Rejected vaccination for pet %s: nextDueDate %s <= dateGiven %s",
                       pet_id, iso(request.next_due_date), iso(request.date_given))
        raise ValidationError(
            "nextDueDate must be after dateGiven", field="nextDueDate", value=iso(request.next_due_date)
        )

    vaccination_id = str(uuid4())
    stamp = iso(now)
    with db_conn(settings.db_path) as conn:
        conn.execute(
            """
            INSERT INTO vaccinations (
                id, pet_id, vaccine_name, date_given, next_due_date, vet_name, batch_number, notes,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                vaccination_id,
                pet_id,
                request.vaccine_name.strip(),
                iso(request.date_given),
                iso(request.next_due_date),
                request.vet_name,
                request.batch_number,
                request.notes,
                stamp,
                stamp,
            ),
        )
        row = conn.execute("SELECT * FROM vaccinations WHERE id = ?", (vaccination_id,)).fetchone()
    logger.info("Created vaccination %s (%s) for pet %s", vaccination_id, request.vaccine_name, pet_id)
    return _row_to_vaccination(dict(row))


def get_vaccination(pet_id: str, vaccination_id: str) -> Optional[VaccinationRecord]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(
            "SELECT * FROM vaccinations WHERE id = ? AND pet_id = ?",
            (vaccination_id, pet_id),
        ).fetchone()
    return _row_to_vaccination(dict(row)) if row else None


def delete_vaccination(pet_id: str, vaccination_id: str) -> None:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            "DELETE FROM vaccinations WHERE id = ? AND pet_id = ?",
            (vaccination_id, pet_id),
        )
        if cur.rowcount == 0:
            raise NotFoundError("vaccination not found", field="vaccinationId", value=vaccination_id)
    logger.info("Deleted vaccination %s for pet %s", vaccination_id, pet_id)


def list_vaccinations(pet_id: str) -> List[VaccinationRecord]:
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM vaccinations WHERE pet_id = ? ORDER BY date_given DESC, created_at DESC, id ASC",
            (pet_id,),
        ).fetchall()
    return [_row_to_vaccination(dict(r)) for r in rows]


def upcoming_for(pet_id: str, now: datetime) -> List[VaccinationRecord]:
    """Vaccinations whose next due date is still ahead, earliest first."""
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM vaccinations
            WHERE pet_id = ? AND next_due_date IS NOT NULL AND next_due_date > ?
            ORDER BY next_due_date ASC, vaccine_name ASC, id ASC
            """,
            (pet_id, iso(now)),
        ).fetchall()
    return [_row_to_vaccination(dict(r)) for r in rows]


def latest_per_vaccine(pet_id: str) -> List[VaccinationRecord]:
    """The current record for each distinct vaccine name, sorted by name."""
    latest: Dict[str, VaccinationRecord] = {}
    # list_vaccinations is newest-first, so the first hit per name wins.
    for record in list_vaccinations(pet_id):
        latest.setdefault(record.vaccine_name, record)
    return [latest[name] for name in sorted(latest)]


def status_for(record: VaccinationRecord, now: datetime) -> DueStatus:
    return classify(record.next_due_date, now)


def compliance_ratio(pet_id: str, now: datetime) -> float:
    current = latest_per_vaccine(pet_id)
    if not current:
        # Nothing on file means nothing is out of compliance.
        return 1.0
    compliant = sum(1 for r in current if status_for(r, now) != DueStatus.overdue)
    return compliant / len(current)
