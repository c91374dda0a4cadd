# SleepLog Database Models
from app.models.sleep_record import SleepRecord

__all__ = [
    "SleepRecord",
]
