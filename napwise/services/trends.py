"""Weekly sleep timeline: minutes slept per day and hour."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .nap_predictor import NapObservation
from .tracker_store import TrackerStore
from ..core.constants import TRENDS_DAYS, TRENDS_FIRST_HOUR

logger = logging.getLogger(__name__)


@dataclass
class TimelineRow:
    hour: int
    label: str
    minutes: List[float]


@dataclass
class WeeklyTimeline:
    days: List[date]
    day_labels: List[str]
    rows: List[TimelineRow]

    @property
    def daily_totals_hours(self) -> List[float]:
        return [
            round(sum(row.minutes[i] for row in self.rows) / 60.0, 2)
            for i in range(len(self.days))
        ]


def day_label(day: date) -> str:
    return f"{day.strftime('%a')} {day.day}"


def hour_label(hour: int) -> str:
    return f"{hour % 12 or 12} {'AM' if hour < 12 else 'PM'}"


# Used by: build_weekly_timeline
def timeline_hours() -> List[int]:
    """Hours of a timeline day, starting at TRENDS_FIRST_HOUR and wrapping past midnight."""
    return [(i + TRENDS_FIRST_HOUR) % 24 for i in range(24)]


def _overlap_minutes(nap: NapObservation, slot_start: datetime, slot_end: datetime) -> float:
    start = max(nap.start_time, slot_start)
    end = min(nap.end_time, slot_end)
    if end <= start:
        return 0.0
    return (end - start).total_seconds() / 60.0


# Used by: get_weekly_trends
def build_weekly_timeline(history: Sequence[NapObservation], today: date) -> WeeklyTimeline:
    """Minutes of sleep per hour slot for the last TRENDS_DAYS days, oldest first.

    A timeline day runs from TRENDS_FIRST_HOUR to the same hour the next
    morning, so the early-hour rows belong to the following calendar date.
    """
    days = [today - timedelta(days=offset) for offset in range(TRENDS_DAYS - 1, -1, -1)]

    rows = []
    for hour in timeline_hours():
        minutes = []
        for day in days:
            slot_day = day if hour >= TRENDS_FIRST_HOUR else day + timedelta(days=1)
            slot_start = datetime.combine(slot_day, time(hour))
            slot_end = slot_start + timedelta(hours=1)
            minutes.append(round(sum(_overlap_minutes(nap, slot_start, slot_end) for nap in history), 1))
        rows.append(TimelineRow(hour=hour, label=hour_label(hour), minutes=minutes))

    return WeeklyTimeline(days=days, day_labels=[day_label(d) for d in days], rows=rows)


# Used by: trends.py (GET /trends/weekly)
async def get_weekly_trends(today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    history = await TrackerStore().get_observations()
    timeline = build_weekly_timeline(history, today)
    logger.info(f"Built weekly timeline ending {today} from {len(history)} naps")

    return {
        "start_date": timeline.days[0],
        "end_date": timeline.days[-1],
        "days": timeline.day_labels,
        "daily_totals_hours": timeline.daily_totals_hours,
        "rows": [
            {"hour": row.hour, "label": row.label, "minutes": row.minutes}
            for row in timeline.rows
        ],
    }
