import datetime as dt
from typing import List, Optional

from app.schemas.common import CamelModel
from app.utils.enums import BadgeRarity


class BadgeResponse(CamelModel):
    id: str
    name: str
    icon: str
    description: str
    condition: str
    rarity: BadgeRarity
    max_progress: Optional[int] = None
    earned: bool
    progress: Optional[int] = None
    earned_date: Optional[dt.date] = None


class BadgeBoard(CamelModel):
    current_streak: int
    average_hours: float
    badges: List[BadgeResponse]
    earned: List[BadgeResponse]
    in_progress: List[BadgeResponse]
    locked: List[BadgeResponse]
