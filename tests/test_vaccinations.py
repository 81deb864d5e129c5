# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from pethealth.app_db import init_app_db
from pethealth.config import settings
from pethealth.errors import NotFoundError, ValidationError
from pethealth.policy import DueStatus
from pethealth.vaccinations.models import VaccinationCreateRequest
from pethealth.vaccinations.storage import (
    compliance_ratio,
    create_vaccination,
    delete_vaccination,
    latest_per_vaccine,
    list_vaccinations,
    status_for,
    upcoming_for,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestVaccinationStore(unittest.TestCase):
    def setUp(self) -> None:
        tmp = Path(tempfile.mkdtemp(prefix="pethealth-test-"))
        self.addCleanup(shutil.rmtree, tmp, True)
        db_path = tmp / "pethealth.db"
        init_app_db(db_path)
        patcher = mock.patch.object(settings, "db_path", db_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _add(self, pet_id: str, name: str, given_days_ago: int, due_in_days: int | None):
        request = VaccinationCreateRequest(
            vaccine_name=name,
            date_given=NOW - timedelta(days=given_days_ago),
            next_due_date=NOW + timedelta(days=due_in_days) if due_in_days is not None else None,
        )
        return create_vaccination(pet_id, request, now=NOW)

    def test_next_due_must_follow_date_given(self) -> None:
        request = VaccinationCreateRequest(
            vaccine_name="Rabies",
            date_given=date(2024, 1, 1),
            next_due_date=date(2023, 12, 31),
        )
        with self.assertRaises(ValidationError) as ctx:
            create_vaccination("pet1", request, now=NOW)
        self.assertEqual(ctx.exception.field, "nextDueDate")

        same_day = VaccinationCreateRequest(vaccine_name="Rabies", date_given=date(2024, 1, 1), next_due_date=date(2024, 1, 1))
        with self.assertRaises(ValidationError):
            create_vaccination("pet1", same_day, now=NOW)
        self.assertEqual(list_vaccinations("pet1"), [])

    def test_upcoming_ordered_by_due_date_then_name(self) -> None:
        self._add("pet1", "Rabies", 30, 90)
        self._add("pet1", "Leptospirosis", 30, 10)
        self._add("pet1", "Kennel Cough", 30, 10)
        self._add("pet1", "DHPP", 400, -5)
        self._add("pet1", "Deworming", 5, None)

        names = [v.vaccine_name for v in upcoming_for("pet1", NOW)]
        self.assertEqual(names, ["Kennel Cough", "Leptospirosis", "Rabies"])
        self.assertEqual(upcoming_for("pet2", NOW), [])

    def test_sub_second_dates_keep_their_precision(self) -> None:
        given = NOW - timedelta(days=1)
        stored = create_vaccination(
            "pet1",
            VaccinationCreateRequest(vaccine_name="Rabies", date_given=given, next_due_date=given + timedelta(milliseconds=500)),
            now=NOW,
        )
        self.assertGreater(stored.next_due_date, stored.date_given)
        self.assertEqual(list_vaccinations("pet1")[0].next_due_date, given + timedelta(milliseconds=500))

        soon = self._add("pet1", "DHPP", 30, 0)
        self.assertEqual(soon.next_due_date, NOW)
        create_vaccination(
            "pet1",
            VaccinationCreateRequest(
                vaccine_name="Leptospirosis",
                date_given=NOW - timedelta(days=30),
                next_due_date=NOW + timedelta(milliseconds=900),
            ),
            now=NOW,
        )
        names = [v.vaccine_name for v in upcoming_for("pet1", NOW + timedelta(milliseconds=300))]
        self.assertEqual(names, ["Leptospirosis"])

    def test_compliance_ratio_without_history(self) -> None:
        self.assertEqual(compliance_ratio("pet1", NOW), 1.0)

    def test_compliance_uses_latest_record_per_vaccine(self) -> None:
        # An overdue booster superseded by a newer shot is compliant.
        self._add("pet1", "DHPP", 800, -400)
        self._add("pet1", "DHPP", 20, 345)
        self._add("pet1", "Rabies", 1100, -10)
        self._add("pet1", "Kennel Cough", 10, None)

        latest = {v.vaccine_name: v for v in latest_per_vaccine("pet1")}
        self.assertEqual(sorted(latest), ["DHPP", "Kennel Cough", "Rabies"])
        self.assertEqual(status_for(latest["DHPP"], NOW), DueStatus.up_to_date)
        self.assertEqual(status_for(latest["Rabies"], NOW), DueStatus.overdue)
        self.assertEqual(status_for(latest["Kennel Cough"], NOW), DueStatus.no_date)
        self.assertAlmostEqual(compliance_ratio("pet1", NOW), 2 / 3)

    def test_all_overdue(self) -> None:
        self._add("pet1", "Rabies", 400, -1)
        self.assertEqual(compliance_ratio("pet1", NOW), 0.0)

    def test_delete(self) -> None:
        record = self._add("pet1", "Rabies", 10, 355)
        delete_vaccination("pet1", record.id)
        self.assertEqual(list_vaccinations("pet1"), [])
        with self.assertRaises(NotFoundError):
            delete_vaccination("pet1", record.id)


if __name__ == "__main__":
    unittest.main()
