# -*- coding: utf-8 -*-
"""Reminder engine (one-off and recurring health reminders)."""

from .models import HealthReminder, Priority, ReminderType
from .storage import complete_reminder, create_reminder, upcoming

__all__ = [
    "HealthReminder",
    "Priority",
    "ReminderType",
    "complete_reminder",
    "create_reminder",
    "upcoming",
]
