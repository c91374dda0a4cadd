"""
Sleep Record Service

CRUD over the sleep_records table plus the derived views built from the full
history:
- Overall / day-of-week / 7-record trend statistics
- Consecutive-day streak
- Dashboard quick stats
"""

import logging
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.sleep_record import SleepRecord, utcnow
from app.schemas.sleep import (
    SleepRecordCreate, SleepRecordUpdate, SleepStatistics, SleepSummary, WeeklyTrend
)
from app.utils.enums import TodayStatus

logger = logging.getLogger(__name__)

# Sunday-first, index matches sunday_based_weekday()
WEEKDAY_LABELS = ("일", "월", "화", "수", "목", "금", "토")

TREND_CHUNK_SIZE = 7


def round1(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def sunday_based_weekday(day: date) -> int:
    """0=Sunday .. 6=Saturday"""
    return day.isoweekday() % 7


def compute_statistics(records: Sequence[SleepRecord]) -> SleepStatistics:
    """Aggregate the whole history into overall, weekday and weekly-trend averages."""
    if not records:
        return SleepStatistics(overall_average=0, weekly_averages={}, weekly_trends=[])
    
    overall_average = round1(mean([r.hours for r in records]))
    
    by_weekday: Dict[int, List[float]] = {}
    for record in records:
        by_weekday.setdefault(sunday_based_weekday(record.date), []).append(record.hours)
    
    weekly_averages = {
        label: round1(mean(by_weekday[i])) if i in by_weekday else 0
        for i, label in enumerate(WEEKDAY_LABELS)
    }
    
    ordered = sorted(records, key=lambda r: (r.date, r.id or 0))
    weekly_trends = []
    for start in range(0, len(ordered), TREND_CHUNK_SIZE):
        chunk = ordered[start:start + TREND_CHUNK_SIZE]
        weekly_trends.append(WeeklyTrend(
            week=f"Week {start // TREND_CHUNK_SIZE + 1}",
            average=round1(mean([r.hours for r in chunk]))
        ))
    
    return SleepStatistics(
        overall_average=overall_average,
        weekly_averages=weekly_averages,
        weekly_trends=weekly_trends
    )


def compute_streak(records: Sequence[SleepRecord]) -> int:
    """
    Count consecutive calendar days with at least one record, walking back
    from the most recent recorded date.
    """
    recorded_dates = {r.date for r in records}
    if not recorded_dates:
        return 0
    
    streak = 0
    check_date = max(recorded_dates)
    while check_date in recorded_dates:
        streak += 1
        check_date -= timedelta(days=1)
    return streak


class SleepRecordService:
    """Service for sleep record persistence and aggregation"""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def list_records(self) -> List[SleepRecord]:
        """All records, most recent date first"""
        result = await self.db.execute(
            select(SleepRecord).order_by(SleepRecord.date.desc(), SleepRecord.id.desc())
        )
        return list(result.scalars().all())
    
    async def get_record(self, record_id: int) -> Optional[SleepRecord]:
        result = await self.db.execute(
            select(SleepRecord).where(SleepRecord.id == record_id)
        )
        return result.scalar_one_or_none()
    
    async def create_record(self, data: SleepRecordCreate) -> SleepRecord:
        now = utcnow()
        record = SleepRecord(
            **data.model_dump(),
            created_at=now,
            updated_at=now
        )
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        logger.info(f"Created sleep record {record.id} for {record.date}")
        return record
    
    async def update_record(
        self,
        record_id: int,
        data: SleepRecordUpdate
    ) -> Optional[SleepRecord]:
        """Merge the provided fields over the stored record. None if absent."""
        record = await self.get_record(record_id)
        if record is None:
            return None
        
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(record, field, value)
        record.updated_at = utcnow()
        
        await self.db.flush()
        await self.db.refresh(record)
        logger.info(f"Updated sleep record {record_id}")
        return record
    
    async def delete_record(self, record_id: int) -> bool:
        """True when a row was actually removed"""
        result = await self.db.execute(
            delete(SleepRecord).where(SleepRecord.id == record_id)
        )
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted sleep record {record_id}")
        return deleted
    
    async def get_statistics(self) -> SleepStatistics:
        return compute_statistics(await self.list_records())
    
    async def get_summary(self, today: Optional[date] = None) -> SleepSummary:
        """Quick stats shown on the dashboard"""
        today = today or date.today()
        records = await self.list_records()
        
        return SleepSummary(
            total_records=len(records),
            average_hours=round1(mean([r.hours for r in records])),
            current_streak=compute_streak(records),
            today_status=(
                TodayStatus.recorded
                if any(r.date == today for r in records)
                else TodayStatus.not_recorded
            )
        )
