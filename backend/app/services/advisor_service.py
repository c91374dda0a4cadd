"""
Sleep Advisor Service

Builds a prompt from the user's sleep history, asks the chat model for
advice and turns the reply into a SleepAdvice. Any failure on the way
(missing key, network error, bad status, unparseable reply) resolves to a
summary computed from local statistics, so analyze() never raises.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI

from app.config import settings
from app.models.sleep_record import SleepRecord
from app.schemas.advice import SleepAdvice
from app.services.sleep_record_service import mean, sunday_based_weekday
from app.utils.enums import SleepQuality

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
RECENT_WINDOW = 7
MAX_NOTES = 5

DEFAULT_ADVICE = "You are keeping up healthy sleep habits. Consistent care is what matters most."
DEFAULT_RECOMMENDATIONS = ["Keep a regular sleep schedule", "Improve your bedroom environment"]
DEFAULT_INSIGHTS = ["Your sleep pattern is stable", "Keep logging to uncover more patterns"]

SECTION_NAMES = ("ADVICE", "QUALITY", "RECOMMENDATIONS", "INSIGHTS")
BULLET_PATTERN = re.compile(r"^[-*•]\s*")
VALID_QUALITIES = {q.value for q in SleepQuality}


class AdvisorUnavailable(Exception):
    """Raised internally when no external advice can be obtained"""


def extract_section(text: str, section: str) -> str:
    """Text following `SECTION:` up to the next `\\nUPPERCASE:` header or the end."""
    match = re.search(rf"{section}:\s*(.+?)(?=\n[A-Z]+:|$)", text, re.DOTALL)
    return match.group(1).strip() if match else ""


def extract_list_section(text: str, section: str) -> List[str]:
    content = extract_section(text, section)
    if not content:
        return []
    lines = [BULLET_PATTERN.sub("", line).strip() for line in content.split("\n")]
    return [line for line in lines if line]


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.split("\n")
    if not isinstance(value, list):
        return []
    items = [BULLET_PATTERN.sub("", str(item)).strip() for item in value]
    return [item for item in items if item]


def parse_advice_reply(text: str) -> SleepAdvice:
    """
    Parse the model reply into SleepAdvice.
    
    A JSON object with advice/quality/recommendations/insights keys is read
    directly; anything else goes through the labeled-section parser. Missing
    or invalid fields fall back to defaults.
    """
    fields: Dict[str, Any]
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None
    
    if isinstance(payload, dict):
        fields = {
            "advice": str(payload.get("advice") or "").strip(),
            "quality": str(payload.get("quality") or payload.get("sleepQuality") or "").strip(),
            "recommendations": _as_list(payload.get("recommendations")),
            "insights": _as_list(payload.get("insights")),
        }
    else:
        fields = {
            "advice": extract_section(text, "ADVICE"),
            "quality": extract_section(text, "QUALITY"),
            "recommendations": extract_list_section(text, "RECOMMENDATIONS"),
            "insights": extract_list_section(text, "INSIGHTS"),
        }
    
    quality = fields["quality"].lower()
    return SleepAdvice(
        advice=fields["advice"] or DEFAULT_ADVICE,
        sleep_quality=(
            SleepQuality(quality)
            if quality in VALID_QUALITIES
            else SleepQuality.fair
        ),
        recommendations=fields["recommendations"] or list(DEFAULT_RECOMMENDATIONS),
        insights=fields["insights"] or list(DEFAULT_INSIGHTS),
    )


def summarize_records(records: Sequence[SleepRecord]) -> Dict[str, Any]:
    """Numbers the prompt and the fallback are built from"""
    ordered = sorted(records, key=lambda r: (r.date, r.id or 0))
    recent = ordered[-RECENT_WINDOW:]
    
    by_weekday: Dict[int, List[float]] = {}
    for record in ordered:
        by_weekday.setdefault(sunday_based_weekday(record.date), []).append(record.hours)
    
    notes = [r.note.strip() for r in ordered if r.note and r.note.strip()]
    
    return {
        "total_records": len(ordered),
        "average_hours": mean([r.hours for r in ordered]),
        "recent_average": mean([r.hours for r in recent]),
        "weekday_averages": {
            WEEKDAY_NAMES[day]: mean(hours) for day, hours in sorted(by_weekday.items())
        },
        "recent_notes": notes[-MAX_NOTES:],
        "recent_records": recent,
    }


def build_prompt(summary: Dict[str, Any]) -> str:
    weekday_lines = "\n".join(
        f"- {day}: {avg:.1f} hours" for day, avg in summary["weekday_averages"].items()
    )
    recent = summary["recent_records"]
    recent_lines = "\n".join(
        f"- {r.date.isoformat()}: {r.hours} hours" + (f" ({r.note})" if r.note else "")
        for r in recent
    )
    notes = ", ".join(summary["recent_notes"]) if summary["recent_notes"] else "none"
    
    return f"""You are a sleep specialist. Analyze the sleep data below and give personalized advice.

Sleep data summary:
- Total recorded days: {summary['total_records']}
- Overall average sleep: {summary['average_hours']:.1f} hours
- Average over the last {len(recent)} records: {summary['recent_average']:.1f} hours
- Recent notes: {notes}

Average sleep by day of week:
{weekday_lines}

Most recent records:
{recent_lines}

Respond with a JSON object in exactly this format:
{{
    "advice": "Warm, friendly advice about the overall sleep state, 2-3 sentences",
    "quality": "excellent|good|fair|poor",
    "recommendations": ["3-4 concrete improvements, one sentence each"],
    "insights": ["2-3 interesting observations about the sleep pattern"]
}}

Make clear this is general wellness advice, not a medical diagnosis."""


def fallback_advice(summary: Dict[str, Any]) -> SleepAdvice:
    """Deterministic advice computed from local statistics only"""
    average = summary["average_hours"]
    in_range = 7 <= average <= 9
    
    if in_range:
        comment = "You are keeping a healthy amount of sleep!"
    elif average < 7:
        comment = "Try to get a little more sleep."
    else:
        comment = "It may help to cut back your sleep a little."
    
    return SleepAdvice(
        advice=f"You are averaging {average:.1f} hours of sleep. {comment}",
        sleep_quality=SleepQuality.good if in_range else SleepQuality.fair,
        recommendations=[
            "Keep a regular sleep schedule",
            "Cut down on phone use before bed",
            "Keep your bedroom at 18-22°C",
            "Watch the timing of your caffeine intake",
        ],
        insights=[
            f"{summary['total_records']} days of sleep data have been collected",
            f"Your average over the last week is {summary['recent_average']:.1f} hours",
        ],
    )


INSUFFICIENT_DATA_ADVICE = SleepAdvice(
    advice="There is insufficient data to analyze your sleep yet. Try collecting more records.",
    sleep_quality=SleepQuality.fair,
    recommendations=["Log your sleep every day", "Keep a regular sleep schedule"],
    insights=["A more accurate analysis becomes possible once enough data is collected"],
)


class AdvisorService:
    """AI sleep advisor with a local fallback"""
    
    def __init__(self, client: Optional[Any] = None):
        self.client = client
    
    @classmethod
    def from_settings(cls) -> "AdvisorService":
        client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY) if settings.OPENAI_API_KEY else None
        return cls(client=client)
    
    async def analyze(self, records: Sequence[SleepRecord]) -> SleepAdvice:
        if not records:
            return INSUFFICIENT_DATA_ADVICE.model_copy(deep=True)
        
        summary = summarize_records(records)
        
        try:
            reply = await self._complete(build_prompt(summary))
            return parse_advice_reply(reply)
        except Exception as e:
            logger.warning(f"AI advice unavailable, using local fallback: {e}")
            return fallback_advice(summary)
    
    async def _complete(self, prompt: str) -> str:
        if not self.client:
            raise AdvisorUnavailable("OpenAI API key is not configured")
        
        response = await self.client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=settings.ADVISOR_MAX_TOKENS,
            temperature=settings.ADVISOR_TEMPERATURE,
            response_format={"type": "json_object"}
        )
        content = response.choices[0].message.content
        if not content:
            raise AdvisorUnavailable("Empty response from model")
        return content
