"""
Badge Evaluator

Static badge catalogue plus a pure evaluation over the current record set.
Nothing here is persisted; the board is recomputed on every request.

early-bird and night-owl have no bed/wake timestamps to work from, so they
use a fixed fraction of the record count as a stand-in.
"""

import math
import statistics
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from app.models.sleep_record import SleepRecord
from app.schemas.badge import BadgeBoard, BadgeResponse
from app.services.sleep_record_service import compute_streak, mean, round1
from app.utils.enums import BadgeRarity

EARLY_BIRD_RATIO = 0.3
NIGHT_OWL_RATIO = 0.4
IDEAL_HOURS = (7, 9)
CONSISTENCY_MIN_RECORDS = 7
CONSISTENCY_MAX_STDDEV = 1.0


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    icon: str
    description: str
    condition: str
    rarity: BadgeRarity
    max_progress: Optional[int] = None


@dataclass(frozen=True)
class BadgeContext:
    records: Sequence[SleepRecord]
    streak: int
    average_hours: float


BADGES: Tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        id="first-record",
        name="First Step",
        icon="🌱",
        description="You logged your first night of sleep. Every habit starts somewhere!",
        condition="Log 1 sleep record",
        rarity=BadgeRarity.common,
        max_progress=1,
    ),
    BadgeDefinition(
        id="early-bird",
        name="Early Bird",
        icon="🐦",
        description="Up before 6 AM five times. A true morning person!",
        condition="Wake before 6 AM 5 times",
        rarity=BadgeRarity.rare,
        max_progress=5,
    ),
    BadgeDefinition(
        id="week-warrior",
        name="Week Warrior",
        icon="🗓️",
        description="Seven days in a row. That is what consistency looks like!",
        condition="7-day recording streak",
        rarity=BadgeRarity.rare,
        max_progress=7,
    ),
    BadgeDefinition(
        id="sleep-master",
        name="Sleep Master",
        icon="😴",
        description="Your average sleep sits in the ideal 7-9 hour range.",
        condition="Average 7-9 hours of sleep",
        rarity=BadgeRarity.epic,
    ),
    BadgeDefinition(
        id="night-owl",
        name="Night Owl No More",
        icon="🦉",
        description="In bed before midnight ten times. Healthy habits in the making!",
        condition="Go to bed before midnight 10 times",
        rarity=BadgeRarity.epic,
        max_progress=10,
    ),
    BadgeDefinition(
        id="month-master",
        name="Month Master",
        icon="📅",
        description="Thirty days in a row. Impressive willpower!",
        condition="30-day recording streak",
        rarity=BadgeRarity.epic,
        max_progress=30,
    ),
    BadgeDefinition(
        id="consistency-king",
        name="Consistency King",
        icon="👑",
        description="Your sleep duration varies by less than an hour. Remarkably steady!",
        condition="Keep a steady sleep pattern",
        rarity=BadgeRarity.legendary,
    ),
    BadgeDefinition(
        id="hundred-days",
        name="Hundred Days",
        icon="💯",
        description="One hundred days in a row. A true sleep-tracking expert!",
        condition="100-day recording streak",
        rarity=BadgeRarity.legendary,
        max_progress=100,
    ),
    BadgeDefinition(
        id="perfect-week",
        name="Perfect Week",
        icon="⭐",
        description="A full week on target every single night. Perfect!",
        condition="Hit the weekly goal 100%",
        rarity=BadgeRarity.legendary,
    ),
)


def _streak_rule(target: int) -> Callable[[BadgeContext], Tuple[bool, int]]:
    def rule(ctx: BadgeContext) -> Tuple[bool, int]:
        return ctx.streak >= target, min(ctx.streak, target)
    return rule


def _proxy_rule(ratio: float, target: int) -> Callable[[BadgeContext], Tuple[bool, int]]:
    def rule(ctx: BadgeContext) -> Tuple[bool, int]:
        proxy = math.floor(len(ctx.records) * ratio)
        return proxy >= target, min(proxy, target)
    return rule


def _first_record(ctx: BadgeContext) -> Tuple[bool, int]:
    count = len(ctx.records)
    return count >= 1, min(count, 1)


def _sleep_master(ctx: BadgeContext) -> Tuple[bool, int]:
    low, high = IDEAL_HOURS
    return low <= ctx.average_hours <= high, 0


def _consistency_king(ctx: BadgeContext) -> Tuple[bool, int]:
    if len(ctx.records) < CONSISTENCY_MIN_RECORDS:
        return False, 0
    stddev = statistics.pstdev([r.hours for r in ctx.records])
    return stddev <= CONSISTENCY_MAX_STDDEV, 0


def _perfect_week(ctx: BadgeContext) -> Tuple[bool, int]:
    earned = len(ctx.records) >= 7 and ctx.streak >= 7 and ctx.average_hours >= 7
    return earned, 0


RULES: Dict[str, Callable[[BadgeContext], Tuple[bool, int]]] = {
    "first-record": _first_record,
    "week-warrior": _streak_rule(7),
    "month-master": _streak_rule(30),
    "hundred-days": _streak_rule(100),
    "early-bird": _proxy_rule(EARLY_BIRD_RATIO, 5),
    "night-owl": _proxy_rule(NIGHT_OWL_RATIO, 10),
    "sleep-master": _sleep_master,
    "consistency-king": _consistency_king,
    "perfect-week": _perfect_week,
}


def evaluate_badges(
    records: Sequence[SleepRecord],
    streak: int,
    average_hours: float,
    today: Optional[date] = None,
) -> List[BadgeResponse]:
    """Evaluate every badge in catalogue order."""
    today = today or date.today()
    ctx = BadgeContext(records=records, streak=streak, average_hours=average_hours)
    
    results = []
    for badge in BADGES:
        earned, progress = RULES[badge.id](ctx)
        
        earned_date = None
        if earned:
            if badge.id == "first-record":
                earned_date = min(r.date for r in records)
            else:
                earned_date = today
        
        results.append(BadgeResponse(
            id=badge.id,
            name=badge.name,
            icon=badge.icon,
            description=badge.description,
            condition=badge.condition,
            rarity=badge.rarity,
            max_progress=badge.max_progress,
            earned=earned,
            progress=progress if badge.max_progress else None,
            earned_date=earned_date,
        ))
    
    return results


def build_badge_board(
    records: Sequence[SleepRecord],
    today: Optional[date] = None,
) -> BadgeBoard:
    """Evaluate badges for the full history and split them for display."""
    streak = compute_streak(records)
    average_hours = mean([r.hours for r in records])
    badges = evaluate_badges(records, streak, average_hours, today=today)
    
    return BadgeBoard(
        current_streak=streak,
        average_hours=round1(average_hours),
        badges=badges,
        earned=[b for b in badges if b.earned],
        in_progress=[b for b in badges if not b.earned and b.progress is not None],
        locked=[b for b in badges if not b.earned and b.progress is None],
    )
