"""Tracker log database operations: nap history and saved values."""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_database
from ..db.models import NapHistory, TrackerValue
from .nap_predictor import NapObservation, hours_between

logger = logging.getLogger(__name__)

# Keys in tracker_values
KID_SLEEP_TOTAL = "kid_sleep_total"
PARENT_SLEEP_TOTAL = "parent_sleep_total"
WAKE_UP_COUNT = "wake_up_count"
KID_GOAL = "kid_goal"
PARENT_GOAL = "parent_goal"
BABY_AGE = "baby_age"


# Timestamps are stored as naive local ISO strings
def to_local_naive(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


class TrackerStore:
    def __init__(self):
        self.database = get_database()

    # Used by: schedule_predictor.get_nap_prediction, sleep_tracker.py, trends.py
    async def get_nap_history(self) -> List[NapHistory]:
        async with self.database.session() as session:
            result = await session.execute(
                text('''
                    SELECT id, start_time, end_time, age_in_months
                    FROM nap_history
                    ORDER BY start_time ASC, id ASC
                '''),
            )
            rows = result.mappings().all()
            return [NapHistory(**row) for row in rows]

    async def get_observations(self) -> List[NapObservation]:
        return [
            NapObservation(
                start_time=row.start_time,
                end_time=row.end_time,
                age_in_months=row.age_in_months,
            )
            for row in await self.get_nap_history()
        ]

    # Used by: sleep_tracker.py (kid toggle, manual entry)
    async def add_nap(
            self,
            start_time: datetime,
            end_time: datetime,
            age_in_months: Optional[float],
            total_key: Optional[str] = None
    ) -> NapHistory:
        """Insert a nap; with total_key, add its hours to that total in the same transaction."""
        start_time = to_local_naive(start_time)
        end_time = to_local_naive(end_time)
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    text('''
                        INSERT INTO nap_history (start_time, end_time, age_in_months)
                        VALUES (:start_time, :end_time, :age_in_months)
                    '''),
                    {
                        "start_time": start_time.isoformat(),
                        "end_time": end_time.isoformat(),
                        "age_in_months": age_in_months,
                    }
                )
                nap_id = result.lastrowid
                if total_key is not None:
                    await self._increment(session, total_key, hours_between(start_time, end_time))
                await session.commit()
                nap = NapHistory(
                    id=nap_id,
                    start_time=start_time,
                    end_time=end_time,
                    age_in_months=age_in_months,
                )
                logger.info(f"Recorded nap {nap.id}: {start_time} - {end_time}")
                return nap
        except Exception as e:
            logger.error(f"Failed to record nap {start_time} - {end_time}: {e}")
            raise

    async def get_values(self) -> Dict[str, str]:
        async with self.database.session() as session:
            result = await session.execute(text('SELECT key, value FROM tracker_values'))
            return {v.key: v.value for v in (TrackerValue(**row) for row in result.mappings().all())}

    async def get_float(self, key: str, default: float) -> float:
        async with self.database.session() as session:
            result = await session.execute(
                text('SELECT value FROM tracker_values WHERE key = :key'),
                {"key": key}
            )
            row = result.fetchone()
            if row is None:
                return default
            return float(row[0])

    # Used by: sleep_tracker.py (totals, counters, settings)
    async def set_values(self, values: Dict[str, float]) -> None:
        try:
            async with self.database.session() as session:
                for key, value in values.items():
                    await session.execute(
                        text('''
                            INSERT INTO tracker_values (key, value)
                            VALUES (:key, :value)
                            ON CONFLICT(key) DO UPDATE SET value = excluded.value
                        '''),
                        {"key": key, "value": str(value)}
                    )
                await session.commit()
        except Exception as e:
            logger.error(f"Failed to save tracker values {list(values)}: {e}")
            raise

    async def _increment(self, session: AsyncSession, key: str, amount: float) -> float:
        await session.execute(
            text('''
                INSERT INTO tracker_values (key, value)
                VALUES (:key, :amount)
                ON CONFLICT(key) DO UPDATE SET value = CAST(value AS REAL) + :amount
            '''),
            {"key": key, "amount": amount}
        )
        result = await session.execute(
            text('SELECT value FROM tracker_values WHERE key = :key'),
            {"key": key}
        )
        return float(result.scalar_one())

    # Used by: sleep_tracker.py (parent total, wake-up counter)
    async def increment(self, key: str, amount: float) -> float:
        try:
            async with self.database.session() as session:
                updated = await self._increment(session, key, amount)
                await session.commit()
                return updated
        except Exception as e:
            logger.error(f"Failed to increment {key} by {amount}: {e}")
            raise
