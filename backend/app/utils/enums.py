from enum import Enum


class SleepQuality(str, Enum):
    excellent = "excellent"
    good = "good"
    fair = "fair"
    poor = "poor"


class BadgeRarity(str, Enum):
    common = "common"
    rare = "rare"
    epic = "epic"
    legendary = "legendary"


class TodayStatus(str, Enum):
    recorded = "recorded"
    not_recorded = "not-recorded"
