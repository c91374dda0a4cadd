import datetime as dt
import re
from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import Dict, List, Optional

from app.schemas.common import CamelModel
from app.utils.enums import TodayStatus

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_record_date(value) -> dt.date:
    """Accept only YYYY-MM-DD strings that name a real calendar day."""
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValueError("date must be in YYYY-MM-DD format")
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{value} is not a valid calendar date")


class SleepRecordCreate(BaseModel):
    date: dt.date
    hours: float = Field(..., ge=0, le=24)
    note: Optional[str] = Field(default=None, max_length=500)

    @field_validator("date", mode="before")
    @classmethod
    def date_format(cls, v):
        return parse_record_date(v)


class SleepRecordUpdate(BaseModel):
    date: Optional[dt.date] = None
    hours: Optional[float] = Field(default=None, ge=0, le=24)
    note: Optional[str] = Field(default=None, max_length=500)

    @field_validator("date", mode="before")
    @classmethod
    def date_format(cls, v):
        if v is None:
            raise ValueError("date cannot be null")
        return parse_record_date(v)

    @field_validator("hours", mode="before")
    @classmethod
    def hours_not_null(cls, v):
        if v is None:
            raise ValueError("hours cannot be null")
        return v


class SleepRecordResponse(CamelModel):
    id: int
    date: dt.date
    hours: float
    note: Optional[str]
    created_at: dt.datetime
    updated_at: dt.datetime

    @field_serializer("created_at", "updated_at")
    def serialize_utc(self, value: dt.datetime) -> str:
        # SQLite drops tzinfo; stored values are UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return value.isoformat()


class WeeklyTrend(CamelModel):
    week: str
    average: float


class SleepStatistics(CamelModel):
    overall_average: float
    weekly_averages: Dict[str, float]
    weekly_trends: List[WeeklyTrend]


class SleepSummary(CamelModel):
    """Dashboard quick stats"""
    total_records: int
    average_hours: float
    current_streak: int
    today_status: TodayStatus
