from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict
import logging

from app.database import get_db
from app.models.sleep_record import SleepRecord
from app.schemas.common import ApiResponse
from app.utils.mock_data import count_records, seed_sleep_records

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate", response_model=ApiResponse[Dict[str, Any]])
async def generate_mock_data(
    days: int = Query(30, ge=1, le=365, description="Number of days to generate"),
    db: AsyncSession = Depends(get_db)
):
    """
    Generate dummy sleep records ending yesterday.
    
    Nothing is inserted when records already exist.
    """
    inserted = await seed_sleep_records(db, days=days)
    
    return ApiResponse(
        data={"inserted": inserted, "total": await count_records(db)},
        message=(
            f"Generated {inserted} dummy sleep records"
            if inserted else "Sleep records already exist; nothing generated"
        )
    )


@router.delete("/clear", response_model=ApiResponse[Dict[str, Any]])
async def clear_all_data(db: AsyncSession = Depends(get_db)):
    """Delete every sleep record"""
    result = await db.execute(delete(SleepRecord))
    logger.info(f"Cleared {result.rowcount} sleep records")
    
    return ApiResponse(
        data={"deleted": result.rowcount},
        message="All sleep records deleted"
    )
