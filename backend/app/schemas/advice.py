from typing import List

from app.schemas.common import CamelModel
from app.utils.enums import SleepQuality


class SleepAdvice(CamelModel):
    advice: str
    sleep_quality: SleepQuality
    recommendations: List[str]
    insights: List[str]
