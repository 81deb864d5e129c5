# -*- coding: utf-8 -*-
"""Health records — SQLite storage."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..errors import NotFoundError, ValidationError
from ..policy import iso, parse_iso, to_utc
from .models import HealthRecord, HealthRecordCreateRequest, HealthRecordType, HealthRecordUpdateRequest

logger = logging.getLogger(__name__)

_ORDER = "ORDER BY date DESC, created_at DESC, id ASC"


def _row_to_record(row: Dict[str, Any]) -> HealthRecord:
    attachments: List[str] = []
    raw = row.get("attachments_json")
    if raw:
        try:
            attachments = list(json.loads(raw))
        except ValueError:
            attachments = []
    return HealthRecord(
        id=row["id"],
        pet_id=row["pet_id"],
        date=parse_iso(row["date"]),
        type=HealthRecordType(row["type"]),
        vet_name=row.get("vet_name"),
        vet_clinic=row.get("vet_clinic"),
        diagnosis=row.get("diagnosis"),
        treatment=row.get("treatment"),
        medications=row.get("medications"),
        notes=row.get("notes"),
        follow_up_date=parse_iso(row.get("follow_up_date")),
        cost=row.get("cost"),
        attachments=attachments,
        created_at=parse_iso(row["created_at"]),
        updated_at=parse_iso(row["updated_at"]),
    )


def _validate(date: datetime, follow_up_date: Optional[datetime], now: Optional[datetime]) -> None:
    if now is not None and to_utc(date) > to_utc(now):
        raise ValidationError("record date cannot be in the future", field="date", value=iso(date))
    if follow_up_date is not None and to_utc(follow_up_date) < to_utc(date):
        raise ValidationError(
            "followUpDate cannot precede the record date", field="followUpDate", value=iso(follow_up_date)
        )


def create_record(pet_id: str, request: HealthRecordCreateRequest, *, now: datetime) -> HealthRecord:
    _validate(request.date, request.follow_up_date, now)
    record_id = str(uuid4())
    stamp = iso(now)
    with db_conn(settings.db_path) as conn:
        conn.execute(
            """
            INSERT INTO health_records (
                id, pet_id, date, type, vet_name, vet_clinic, diagnosis, treatment,
                medications, notes, follow_up_date, cost, attachments_json, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record_id,
                pet_id,
                iso(request.date),
                request.type.value,
                request.vet_name,
                request.vet_clinic,
                request.diagnosis,
                request.treatment,
                request.medications,
                request.notes,
                iso(request.follow_up_date),
                request.cost,
                json.dumps(request.attachments, ensure_ascii=False),
                stamp,
                stamp,
            ),
        )
        row = conn.execute("SELECT * FROM health_records WHERE id = ?", (record_id,)).fetchone()
    logger.info("Created health record %s (%s) for pet %s", record_id, request.type.value, pet_id)
    return _row_to_record(dict(row))


def get_record(pet_id: str, record_id: str) -> Optional[HealthRecord]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(
            "SELECT * FROM health_records WHERE id = ? AND pet_id = ?",
            (record_id, pet_id),
        ).fetchone()
    return _row_to_record(dict(row)) if row else None


def update_record(pet_id: str, record_id: str, request: HealthRecordUpdateRequest, *, now: datetime) -> HealthRecord:
    current = get_record(pet_id, record_id)
    if current is None:
        raise NotFoundError("health record not found", field="recordId", value=record_id)

    changes = request.model_dump(exclude_unset=True)
    for key in ("date", "type"):
        if key in changes and changes[key] is None:
            raise ValidationError(f"{key} cannot be cleared", field=key)
    merged = current.model_copy(update=changes)
    # Only a changed date is re-checked against the clock.
    _validate(merged.date, merged.follow_up_date, now if "date" in changes else None)

    with db_conn(settings.db_path) as conn:
        conn.execute(
            """
            UPDATE health_records SET
                date = ?, type = ?, vet_name = ?, vet_clinic = ?, diagnosis = ?, treatment = ?,
                medications = ?, notes = ?, follow_up_date = ?, cost = ?, attachments_json = ?, updated_at = ?
            WHERE id = ? AND pet_id = ?
            """,
            (
                iso(merged.date),
                HealthRecordType(merged.type).value,
                merged.vet_name,
                merged.vet_clinic,
                merged.diagnosis,
                merged.treatment,
                merged.medications,
                merged.notes,
                iso(merged.follow_up_date),
                merged.cost,
                json.dumps(merged.attachments or [], ensure_ascii=False),
                iso(now),
                record_id,
                pet_id,
            ),
        )
        row = conn.execute("SELECT * FROM health_records WHERE id = ?", (record_id,)).fetchone()
    logger.info("Updated health record %s for pet %s", record_id, pet_id)
    return _row_to_record(dict(row))


def delete_record(pet_id: str, record_id: str) -> None:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            "DELETE FROM health_records WHERE id = ? AND pet_id = ?",
            (record_id, pet_id),
        )
        if cur.rowcount == 0:
            raise NotFoundError("health record not found", field="recordId", value=record_id)
    logger.info("Deleted health record %s for pet %s", record_id, pet_id)


def list_records(
    pet_id: str,
    *,
    record_type: HealthRecordType | None = None,
    limit: Optional[int] = None,
) -> List[HealthRecord]:
    sql = "SELECT * FROM health_records WHERE pet_id = ?"
    params: list[Any] = [pet_id]
    if record_type:
        sql += " AND type = ?"
        params.append(HealthRecordType(record_type).value)
    sql += " " + _ORDER
    if limit is not None:
        sql += " LIMIT ?"
        params.append(int(limit))

    with db_conn(settings.db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    return [_row_to_record(dict(r)) for r in rows]


def count_records(pet_id: str) -> int:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT COUNT(*) FROM health_records WHERE pet_id = ?", (pet_id,)).fetchone()
    return int(row[0])


def count_since(
    pet_id: str,
    since: datetime,
    *,
    record_type: HealthRecordType = HealthRecordType.checkup,
) -> int:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(
            "SELECT COUNT(*) FROM health_records WHERE pet_id = ? AND type = ? AND date >= ?",
            (pet_id, HealthRecordType(record_type).value, iso(since)),
        ).fetchone()
    return int(row[0])


def latest_record(pet_id: str, record_type: HealthRecordType) -> Optional[HealthRecord]:
    items = list_records(pet_id, record_type=record_type, limit=1)
    return items[0] if items else None
