"""
Trend Analysis
==============

Day-of-week frequency over complaint timestamps.

The riskiest day is the weekday with the most complaints; ties go to the
day seen first in input order, and an empty input yields Monday.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Union
from zoneinfo import ZoneInfo

from hostel_triage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

# Locale-independent, datetime.weekday() order
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
DEFAULT_RISKIEST_DAY = "Monday"

Timestamp = Union[datetime, str]


@dataclass(frozen=True)
class TrendInsight:
    riskiest_day: str
    observation: str
    day_counts: Dict[str, int] = field(default_factory=dict)
    sample_size: int = 0


def observation_for(day: str) -> str:
    return f"Historical data indicates a surge in reports on {day}s."


def parse_timestamp(value: Timestamp) -> datetime:
    """
    Parse a datetime or ISO-8601 string into an aware datetime.

    A trailing 'Z' is accepted; naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _created_at(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("created_at", item.get("createdAt"))
    return getattr(item, "created_at", None)


def analyze_trend(
    complaints: Iterable[Any],
    tz: Optional[Union[str, ZoneInfo]] = "UTC"
) -> TrendInsight:
    """
    Find the weekday with the most complaints.

    Args:
        complaints: Mappings or objects with a `created_at` datetime or ISO string
        tz: Reporting timezone used to decide the weekday

    Returns:
        TrendInsight naming the riskiest day
    """
    zone = ZoneInfo(tz) if isinstance(tz, str) else (tz or timezone.utc)

    # Insertion order records first appearance for the tie-break
    day_counts: Dict[str, int] = {}
    sample_size = 0

    for item in complaints:
        raw = _created_at(item)
        try:
            created_at = parse_timestamp(raw)
        except (TypeError, ValueError) as e:
            logger.warning(
                "Skipping complaint with unusable created_at",
                extra={"created_at": str(raw), "error": str(e)}
            )
            continue

        day = DAY_NAMES[created_at.astimezone(zone).weekday()]
        day_counts[day] = day_counts.get(day, 0) + 1
        sample_size += 1

    riskiest_day = DEFAULT_RISKIEST_DAY
    max_count = 0
    for day, count in day_counts.items():
        if count > max_count:
            riskiest_day, max_count = day, count

    return TrendInsight(
        riskiest_day=riskiest_day,
        observation=observation_for(riskiest_day),
        day_counts=day_counts,
        sample_size=sample_size,
    )
