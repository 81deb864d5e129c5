# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from pethealth.app_db import init_app_db
from pethealth.config import settings
from pethealth.errors import NotFoundError, ValidationError
from pethealth.records.models import HealthRecordCreateRequest, HealthRecordType, HealthRecordUpdateRequest
from pethealth.records.storage import (
    count_since,
    create_record,
    delete_record,
    get_record,
    latest_record,
    list_records,
    update_record,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestHealthRecordStore(unittest.TestCase):
    def setUp(self) -> None:
        tmp = Path(tempfile.mkdtemp(prefix="pethealth-test-"))
        self.addCleanup(shutil.rmtree, tmp, True)
        db_path = tmp / "pethealth.db"
        init_app_db(db_path)
        patcher = mock.patch.object(settings, "db_path", db_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _add(self, pet_id: str, days_ago: int, record_type: HealthRecordType = HealthRecordType.checkup, **extra):
        request = HealthRecordCreateRequest(date=NOW - timedelta(days=days_ago), type=record_type, **extra)
        return create_record(pet_id, request, now=NOW)

    def test_create_and_get(self) -> None:
        record = self._add(
            "pet1",
            10,
            HealthRecordType.illness,
            vet_name="Dr. Sarah Johnson",
            diagnosis="Mild ear infection",
            follow_up_date=NOW - timedelta(days=3),
            cost=65.0,
            attachments=["xray.png"],
        )
        self.assertEqual(record.pet_id, "pet1")
        self.assertEqual(record.type, HealthRecordType.illness)
        self.assertEqual(record.date, NOW - timedelta(days=10))

        fetched = get_record("pet1", record.id)
        self.assertIsNotNone(fetched)
        assert fetched is not None
        self.assertEqual(fetched.diagnosis, "Mild ear infection")
        self.assertEqual(fetched.attachments, ["xray.png"])
        self.assertEqual(fetched.cost, 65.0)
        # Records are scoped by pet.
        self.assertIsNone(get_record("pet2", record.id))

    def test_future_date_rejected(self) -> None:
        request = HealthRecordCreateRequest(date=NOW + timedelta(days=1), type=HealthRecordType.checkup)
        with self.assertRaises(ValidationError) as ctx:
            create_record("pet1", request, now=NOW)
        self.assertEqual(ctx.exception.field, "date")
        self.assertEqual(list_records("pet1"), [])

    def test_follow_up_before_date_rejected(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self._add("pet1", 5, HealthRecordType.injury, follow_up_date=NOW - timedelta(days=6))
        self.assertEqual(ctx.exception.field, "followUpDate")

    def test_list_most_recent_first(self) -> None:
        old = self._add("pet1", 300)
        new = self._add("pet1", 2, HealthRecordType.medication)
        mid = self._add("pet1", 100, HealthRecordType.surgery)
        self._add("pet2", 1)

        self.assertEqual([r.id for r in list_records("pet1")], [new.id, mid.id, old.id])
        self.assertEqual([r.id for r in list_records("pet1", record_type=HealthRecordType.surgery)], [mid.id])
        self.assertEqual(list_records("unknown-pet"), [])
        self.assertEqual(latest_record("pet1", HealthRecordType.checkup).id, old.id)
        self.assertIsNone(latest_record("pet1", HealthRecordType.injury))

    def test_count_since_counts_checkups_only(self) -> None:
        self._add("pet1", 10)
        self._add("pet1", 200)
        self._add("pet1", 400)
        self._add("pet1", 20, HealthRecordType.illness)
        self.assertEqual(count_since("pet1", NOW - timedelta(days=365)), 2)
        self.assertEqual(count_since("pet1", NOW - timedelta(days=365), record_type=HealthRecordType.illness), 1)
        self.assertEqual(count_since("nobody", NOW - timedelta(days=365)), 0)

    def test_update_record(self) -> None:
        record = self._add("pet1", 30, notes="first visit")
        later = NOW + timedelta(days=1)
        updated = update_record("pet1", record.id, HealthRecordUpdateRequest(notes="weight ideal"), now=later)
        self.assertEqual(updated.notes, "weight ideal")
        self.assertEqual(updated.date, record.date)
        self.assertEqual(updated.updated_at, later)

        with self.assertRaises(ValidationError):
            update_record("pet1", record.id, HealthRecordUpdateRequest(date=later + timedelta(days=5)), now=later)
        with self.assertRaises(NotFoundError):
            update_record("pet1", "missing", HealthRecordUpdateRequest(notes="x"), now=NOW)

    def test_delete_record(self) -> None:
        record = self._add("pet1", 1)
        delete_record("pet1", record.id)
        self.assertIsNone(get_record("pet1", record.id))
        with self.assertRaises(NotFoundError):
            delete_record("pet1", record.id)


if __name__ == "__main__":
    unittest.main()
