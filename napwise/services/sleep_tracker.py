"""Caregiving log: sleep toggles, manual naps, wake-ups, nursing and goals."""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from .sleep_state import (
    ActivitySession, get_sleep_state_manager,
    KID_SLEEP, PARENT_SLEEP, NURSING,
)
from .tracker_store import (
    TrackerStore, to_local_naive,
    KID_SLEEP_TOTAL, PARENT_SLEEP_TOTAL, WAKE_UP_COUNT,
    KID_GOAL, PARENT_GOAL, BABY_AGE,
)
from .nap_predictor import hours_between
from ..db.models import NapHistory
from ..core.constants import SCORE_CAP_PERCENT
from ..core.settings import settings

logger = logging.getLogger(__name__)


class InvalidNapError(ValueError):
    """A manual nap whose end is not after its start."""


@dataclass
class TrackerSettings:
    kid_goal: float
    parent_goal: float
    baby_age: float


@dataclass
class ToggleResult:
    activity: str
    active: bool
    start_time: datetime
    end_time: Optional[datetime] = None
    hours: Optional[float] = None


@dataclass
class TrackerSummary:
    kid_sleep_total: float
    parent_sleep_total: float
    kid_goal: float
    parent_goal: float
    kid_score: int
    parent_score: int
    wake_ups: int
    baby_age: float
    active_sessions: List[ActivitySession] = field(default_factory=list)


# Used by: SleepTracker.get_summary
def sleep_score(total_hours: float, goal_hours: float) -> int:
    """Percent of the goal reached, capped at 100."""
    return math.floor(min(total_hours / goal_hours * 100, SCORE_CAP_PERCENT) + 0.5)


# Used by: SleepTracker.stop_nursing, tracker.py
def format_duration(elapsed: timedelta) -> str:
    total_seconds = max(int(elapsed.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def _settings_from(values: Dict[str, str]) -> TrackerSettings:
    return TrackerSettings(
        kid_goal=float(values.get(KID_GOAL, settings.KID_SLEEP_GOAL_HOURS)),
        parent_goal=float(values.get(PARENT_GOAL, settings.PARENT_SLEEP_GOAL_HOURS)),
        baby_age=float(values.get(BABY_AGE, settings.DEFAULT_BABY_AGE_MONTHS)),
    )


class SleepTracker:
    def __init__(self):
        self.store = TrackerStore()
        self.state = get_sleep_state_manager()

    # Used by: tracker.py, settings.py, SleepTracker toggles
    async def get_settings(self) -> TrackerSettings:
        return _settings_from(await self.store.get_values())

    # Used by: settings.py (PUT /settings)
    async def update_settings(
            self,
            kid_goal: Optional[float] = None,
            parent_goal: Optional[float] = None,
            baby_age: Optional[float] = None
    ) -> TrackerSettings:
        updates = {}
        if kid_goal is not None:
            if kid_goal <= 0:
                raise ValueError("Kid's sleep goal must be positive")
            updates[KID_GOAL] = kid_goal
        if parent_goal is not None:
            if parent_goal <= 0:
                raise ValueError("Parent's sleep goal must be positive")
            updates[PARENT_GOAL] = parent_goal
        if baby_age is not None:
            if baby_age < 0:
                raise ValueError("Baby age cannot be negative")
            updates[BABY_AGE] = baby_age

        if updates:
            await self.store.set_values(updates)
            logger.info(f"Updated settings: {updates}")
        return await self.get_settings()

    # Used by: tracker.py (POST /tracker/kid/toggle)
    async def toggle_kid_sleep(self, now: Optional[datetime] = None) -> ToggleResult:
        """Start the kid's sleep, or end it and record the nap."""
        now = now or datetime.now()
        session = await self.state.get_session(KID_SLEEP)
        if session is None:
            session = await self.state.start(KID_SLEEP, now)
            return ToggleResult(activity=KID_SLEEP, active=True, start_time=session.start_time)

        await self.state.end(KID_SLEEP)
        hours = hours_between(session.start_time, now)
        baby_age = await self.store.get_float(BABY_AGE, settings.DEFAULT_BABY_AGE_MONTHS)
        await self.store.add_nap(session.start_time, now, baby_age, total_key=KID_SLEEP_TOTAL)
        return ToggleResult(
            activity=KID_SLEEP, active=False,
            start_time=session.start_time, end_time=now, hours=hours,
        )

    # Used by: tracker.py (POST /tracker/parent/toggle)
    async def toggle_parent_sleep(self, now: Optional[datetime] = None) -> ToggleResult:
        now = now or datetime.now()
        session = await self.state.get_session(PARENT_SLEEP)
        if session is None:
            session = await self.state.start(PARENT_SLEEP, now)
            return ToggleResult(activity=PARENT_SLEEP, active=True, start_time=session.start_time)

        await self.state.end(PARENT_SLEEP)
        hours = hours_between(session.start_time, now)
        await self.store.increment(PARENT_SLEEP_TOTAL, hours)
        return ToggleResult(
            activity=PARENT_SLEEP, active=False,
            start_time=session.start_time, end_time=now, hours=hours,
        )

    # Used by: tracker.py (POST /tracker/kid/manual)
    async def add_manual_nap(self, start_time: datetime, end_time: datetime) -> NapHistory:
        """Record a nap entered after the fact; returns the stored local-time row."""
        start_time = to_local_naive(start_time)
        end_time = to_local_naive(end_time)
        if end_time <= start_time:
            raise InvalidNapError(f"Nap must end after it starts ({start_time} - {end_time})")

        baby_age = await self.store.get_float(BABY_AGE, settings.DEFAULT_BABY_AGE_MONTHS)
        return await self.store.add_nap(start_time, end_time, baby_age, total_key=KID_SLEEP_TOTAL)

    # Used by: tracker.py (POST /tracker/wake-ups)
    async def add_wake_up(self) -> int:
        return int(await self.store.increment(WAKE_UP_COUNT, 1))

    # Used by: tracker.py (POST /tracker/nursing/start)
    async def start_nursing(self, now: Optional[datetime] = None) -> ActivitySession:
        return await self.state.start(NURSING, now)

    # Used by: tracker.py (POST /tracker/nursing/stop)
    async def stop_nursing(self, now: Optional[datetime] = None) -> Optional[timedelta]:
        session = await self.state.end(NURSING)
        if session is None:
            return None
        return (now or datetime.now()) - session.start_time

    # Used by: tracker.py (GET /tracker/summary)
    async def get_summary(self) -> TrackerSummary:
        values = await self.store.get_values()
        current = _settings_from(values)
        kid_total = float(values.get(KID_SLEEP_TOTAL, 0.0))
        parent_total = float(values.get(PARENT_SLEEP_TOTAL, 0.0))

        return TrackerSummary(
            kid_sleep_total=kid_total,
            parent_sleep_total=parent_total,
            kid_goal=current.kid_goal,
            parent_goal=current.parent_goal,
            kid_score=sleep_score(kid_total, current.kid_goal),
            parent_score=sleep_score(parent_total, current.parent_goal),
            wake_ups=int(float(values.get(WAKE_UP_COUNT, 0))),
            baby_age=current.baby_age,
            active_sessions=await self.state.get_active_sessions(),
        )
