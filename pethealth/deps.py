# -*- coding: utf-8 -*-
"""FastAPI dependencies shared by the health routers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import Query

from .policy import to_utc


def request_now(
    now: Optional[datetime] = Query(default=None, description="Evaluation time (ISO8601, UTC); defaults to server time"),
) -> datetime:
    # The only place the wall clock is read; storage/scoring always take `now` explicitly.
    if now is None:
        return datetime.now(timezone.utc)
    return to_utc(now)
