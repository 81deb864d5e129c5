# -*- coding: utf-8 -*-
"""Domain errors shared by the health stores.

Storage code raises these; `pethealth.api` maps them to HTTP status codes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class HealthError(Exception):
    status_code = 400

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def to_detail(self) -> Dict[str, Any]:
        detail: Dict[str, Any] = {"error": type(self).__name__, "message": self.message}
        if self.field is not None:
            detail["field"] = self.field
        if self.value is not None:
            detail["value"] = self.value if isinstance(self.value, (str, int, float, bool)) else str(self.value)
        return detail


class ValidationError(HealthError):
    """Malformed entity; rejected before any write."""

    status_code = 422


class NotFoundError(HealthError):
    status_code = 404


class ConcurrencyConflict(HealthError):
    """A conditional update lost a race; the caller should re-read and retry."""

    status_code = 409
