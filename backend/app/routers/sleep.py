from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.database import get_db
from app.schemas.badge import BadgeBoard
from app.schemas.common import ApiResponse
from app.schemas.sleep import (
    SleepRecordCreate, SleepRecordUpdate, SleepRecordResponse, SleepStatistics, SleepSummary
)
from app.services.badge_service import build_badge_board
from app.services.sleep_record_service import SleepRecordService

router = APIRouter()

RECORD_NOT_FOUND = "Sleep record not found"

# Largest value a SQLite INTEGER primary key can hold
MAX_RECORD_ID = 2 ** 63 - 1


def parse_record_id(
    record_id: str = Path(..., pattern=r"^[0-9]+$", description="Sleep record ID")
) -> int:
    parsed = int(record_id)
    if parsed > MAX_RECORD_ID:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=RECORD_NOT_FOUND
        )
    return parsed


def get_sleep_record_service(db: AsyncSession = Depends(get_db)) -> SleepRecordService:
    return SleepRecordService(db)


@router.get("", response_model=ApiResponse[List[SleepRecordResponse]])
async def get_sleep_records(
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """Get all sleep records, most recent date first"""
    records = await service.list_records()
    return ApiResponse(data=[SleepRecordResponse.model_validate(r) for r in records])


@router.post(
    "",
    response_model=ApiResponse[SleepRecordResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_sleep_record(
    record_data: SleepRecordCreate,
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """Create a new sleep record"""
    record = await service.create_record(record_data)
    return ApiResponse(
        data=SleepRecordResponse.model_validate(record),
        message="Sleep record created"
    )


@router.get("/sleep-statistics", response_model=ApiResponse[SleepStatistics])
async def get_sleep_statistics(
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """
    Get sleep statistics over the whole history.
    
    Returns:
    - Overall average hours
    - Average hours per day of week
    - Average per consecutive 7-record chunk ("Week N")
    """
    return ApiResponse(data=await service.get_statistics())


@router.get("/summary", response_model=ApiResponse[SleepSummary])
async def get_sleep_summary(
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """Dashboard quick stats: totals, average, streak and whether today is logged"""
    return ApiResponse(data=await service.get_summary())


@router.get("/badges", response_model=ApiResponse[BadgeBoard])
async def get_sleep_badges(
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """Evaluate achievement badges against the current records"""
    records = await service.list_records()
    return ApiResponse(data=build_badge_board(records))


@router.get("/{record_id}", response_model=ApiResponse[SleepRecordResponse])
async def get_sleep_record(
    record_id: int = Depends(parse_record_id),
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """Get a specific sleep record"""
    record = await service.get_record(record_id)
    
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=RECORD_NOT_FOUND
        )
    
    return ApiResponse(data=SleepRecordResponse.model_validate(record))


@router.put("/{record_id}", response_model=ApiResponse[SleepRecordResponse])
async def update_sleep_record(
    update_data: SleepRecordUpdate,
    record_id: int = Depends(parse_record_id),
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """Update any subset of date, hours and note"""
    record = await service.update_record(record_id, update_data)
    
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=RECORD_NOT_FOUND
        )
    
    return ApiResponse(
        data=SleepRecordResponse.model_validate(record),
        message="Sleep record updated"
    )


@router.delete("/{record_id}", response_model=ApiResponse[None])
async def delete_sleep_record(
    record_id: int = Depends(parse_record_id),
    service: SleepRecordService = Depends(get_sleep_record_service)
):
    """Delete a sleep record"""
    if not await service.get_record(record_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=RECORD_NOT_FOUND
        )
    
    if not await service.delete_record(record_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete sleep record"
        )
    
    return ApiResponse(data=None, message="Sleep record deleted")
