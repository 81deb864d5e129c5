# -*- coding: utf-8 -*-
"""App database (records/vaccinations/reminders) — SQLite helpers."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS health_records (
                id TEXT PRIMARY KEY,
                pet_id TEXT NOT NULL,
                date TEXT NOT NULL,
                type TEXT NOT NULL,
                vet_name TEXT,
                vet_clinic TEXT,
                diagnosis TEXT,
                treatment TEXT,
                medications TEXT,
                notes TEXT,
                follow_up_date TEXT,
                cost REAL,
                attachments_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_health_records_pet_date ON health_records(pet_id, date DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS vaccinations (
                id TEXT PRIMARY KEY,
                pet_id TEXT NOT NULL,
                vaccine_name TEXT NOT NULL,
                date_given TEXT NOT NULL,
                next_due_date TEXT,
                vet_name TEXT,
                batch_number TEXT,
                notes TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_vaccinations_pet_name_given ON vaccinations(pet_id, vaccine_name, date_given DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS reminders (
                id TEXT PRIMARY KEY,
                pet_id TEXT NOT NULL,
                type TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT,
                due_date TEXT NOT NULL,
                frequency TEXT,
                is_recurring INTEGER NOT NULL DEFAULT 0,
                is_completed INTEGER NOT NULL DEFAULT 0,
                completed_at TEXT,
                reminder_days INTEGER NOT NULL DEFAULT 0,
                priority TEXT NOT NULL,
                health_record_id TEXT,
                vaccination_id TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(health_record_id) REFERENCES health_records(id) ON DELETE SET NULL,
                FOREIGN KEY(vaccination_id) REFERENCES vaccinations(id) ON DELETE SET NULL
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_reminders_pet_completed_due ON reminders(pet_id, is_completed, due_date ASC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS reminder_completions (
                id TEXT PRIMARY KEY,
                reminder_id TEXT NOT NULL,
                pet_id TEXT NOT NULL,
                due_date TEXT NOT NULL,
                completed_at TEXT NOT NULL,
                FOREIGN KEY(reminder_id) REFERENCES reminders(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_reminder_completions_reminder ON reminder_completions(reminder_id, completed_at DESC);"
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()
