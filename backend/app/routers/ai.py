from fastapi import APIRouter, Depends

from app.schemas.advice import SleepAdvice
from app.schemas.common import ApiResponse
from app.routers.sleep import get_sleep_record_service
from app.services.advisor_service import AdvisorService
from app.services.sleep_record_service import SleepRecordService

router = APIRouter()


def get_advisor_service() -> AdvisorService:
    return AdvisorService.from_settings()


@router.get("/ai-advice", response_model=ApiResponse[SleepAdvice])
async def get_ai_advice(
    records_service: SleepRecordService = Depends(get_sleep_record_service),
    advisor: AdvisorService = Depends(get_advisor_service)
):
    """
    Get AI sleep advice derived from the full history.
    
    Falls back to locally computed advice when the model is unavailable.
    """
    records = await records_service.list_records()
    analysis = await advisor.analyze(records)
    
    return ApiResponse(data=analysis, message="AI sleep analysis complete")
