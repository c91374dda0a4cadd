"""
Dummy Sleep Data Generator

Generates a run of daily sleep records ending yesterday:
- hours drawn uniformly from 4-9 at 0.5 granularity
- a short note picked from a fixed list
Used for local development and demos; never runs unless asked for.
"""

import logging
import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.sleep_record import SleepRecord, utcnow

logger = logging.getLogger(__name__)

DUMMY_NOTES = ["Good", "Okay", "Bad"]
MIN_HOURS = 4.0
MAX_HOURS = 9.0


class SleepMockDataGenerator:
    """Builds dummy sleep record payloads"""
    
    def __init__(self, days: int = 30, end_date: Optional[date] = None, seed: Optional[int] = None):
        self.days = days
        self.end_date = end_date or date.today() - timedelta(days=1)
        self.rng = random.Random(seed)
    
    def random_hours(self) -> float:
        return round(self.rng.uniform(MIN_HOURS, MAX_HOURS) * 2) / 2
    
    def generate(self) -> List[Dict[str, Any]]:
        """Oldest first, one record per day"""
        start_date = self.end_date - timedelta(days=self.days - 1)
        return [
            {
                "date": start_date + timedelta(days=offset),
                "hours": self.random_hours(),
                "note": self.rng.choice(DUMMY_NOTES),
            }
            for offset in range(self.days)
        ]


async def count_records(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(SleepRecord.id)))
    return result.scalar() or 0


async def seed_sleep_records(
    db: AsyncSession,
    days: int = 30,
    seed: Optional[int] = None,
) -> int:
    """Insert dummy records when the table is empty. Returns rows inserted."""
    existing = await count_records(db)
    if existing > 0:
        logger.info(f"Found {existing} sleep records, skipping dummy data")
        return 0
    
    now = utcnow()
    generator = SleepMockDataGenerator(days=days, seed=seed)
    for entry_data in generator.generate():
        db.add(SleepRecord(**entry_data, created_at=now, updated_at=now))
    await db.flush()
    
    logger.info(f"Inserted {days} dummy sleep records ({MIN_HOURS}-{MAX_HOURS}h)")
    return days
