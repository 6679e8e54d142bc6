"""In-memory state for the sessions currently running (kid sleep, parent sleep, nursing)."""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

KID_SLEEP = "kid_sleep"
PARENT_SLEEP = "parent_sleep"
NURSING = "nursing"
ACTIVITIES = (KID_SLEEP, PARENT_SLEEP, NURSING)


@dataclass
class ActivitySession:
    activity: str
    start_time: datetime


class SleepStateManager:
    """Tracks which activities are running and since when."""

    def __init__(self):
        self._sessions: Dict[str, ActivitySession] = {}
        self._lock = asyncio.Lock()

    # Used by: sleep_tracker.py: toggles and nursing start
    async def start(self, activity: str, now: Optional[datetime] = None) -> ActivitySession:
        async with self._lock:
            if activity in self._sessions:
                logger.warning(
                    f"{activity} already running since {self._sessions[activity].start_time}"
                )
                return self._sessions[activity]

            session = ActivitySession(activity=activity, start_time=now or datetime.now())
            self._sessions[activity] = session
            logger.info(f"{activity} started at {session.start_time}")
            return session

    # Used by: sleep_tracker.py: toggles and nursing stop
    async def end(self, activity: str) -> Optional[ActivitySession]:
        async with self._lock:
            session = self._sessions.pop(activity, None)
            if session is None:
                logger.warning(f"{activity} was not running")
                return None

            logger.info(f"{activity} ended, had been running since {session.start_time}")
            return session

    # Used by: sleep_tracker.py toggles, schedule_predictor.get_nap_prediction
    async def get_session(self, activity: str) -> Optional[ActivitySession]:
        async with self._lock:
            return self._sessions.get(activity)

    # Used by: sleep_tracker.get_summary
    async def get_active_sessions(self) -> List[ActivitySession]:
        async with self._lock:
            return list(self._sessions.values())


_sleep_state_manager: Optional[SleepStateManager] = None


# Used by: sleep_tracker.py, schedule_predictor.py
def get_sleep_state_manager() -> SleepStateManager:
    global _sleep_state_manager
    if _sleep_state_manager is None:
        _sleep_state_manager = SleepStateManager()
    return _sleep_state_manager
