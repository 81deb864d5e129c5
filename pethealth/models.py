# -*- coding: utf-8 -*-
"""Shared Pydantic base types."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from .policy import to_utc


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _date_to_datetime(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return to_utc(value)
    return value


# Accepts date objects, `YYYY-MM-DD` or full ISO8601; naive values are taken as UTC.
UtcDatetime = Annotated[datetime, BeforeValidator(_date_to_datetime), AfterValidator(to_utc)]
