from datetime import date
from types import SimpleNamespace
from typing import List, Optional

from app.models.sleep_record import SleepRecord


class FakeCompletions:
    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Just enough of AsyncOpenAI for chat.completions.create"""

    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None):
        self.completions = FakeCompletions(reply=reply, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


def make_record(day: str, hours: float, note: Optional[str] = None, record_id: Optional[int] = None) -> SleepRecord:
    return SleepRecord(id=record_id, date=date.fromisoformat(day), hours=hours, note=note)
