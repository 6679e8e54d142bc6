import asyncio
from datetime import datetime

import pytest

from napwise.core import database
from napwise.core.settings import settings
from napwise.services import sleep_state
from napwise.services.sleep_tracker import SleepTracker
from napwise.services.tracker_store import TrackerStore, KID_SLEEP_TOTAL, WAKE_UP_COUNT


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    monkeypatch.setattr(database, "_db", None)
    monkeypatch.setattr(sleep_state, "_sleep_state_manager", None)
    monkeypatch.setattr(settings, "DEFAULT_BABY_AGE_MONTHS", 6.0)
    return f"sqlite+aiosqlite:///{tmp_path / 'napwise.db'}"


def run_connected(database_url, scenario):
    async def wrapper():
        db = database.get_database()
        await db.connect(database_url)
        try:
            return await scenario()
        finally:
            await db.disconnect()
    return asyncio.run(wrapper())


def test_concurrent_manual_naps_both_reach_the_total(database_url):
    async def scenario():
        tracker = SleepTracker()
        await asyncio.gather(
            tracker.add_manual_nap(datetime(2026, 10, 17, 9), datetime(2026, 10, 17, 10)),
            tracker.add_manual_nap(datetime(2026, 10, 17, 13), datetime(2026, 10, 17, 15)),
        )
        store = TrackerStore()
        return await store.get_float(KID_SLEEP_TOTAL, 0), await store.get_nap_history()

    total, history = run_connected(database_url, scenario)
    assert total == pytest.approx(3.0)
    assert len(history) == 2


def test_concurrent_increments_are_not_lost(database_url):
    async def scenario():
        store = TrackerStore()
        await asyncio.gather(*(store.increment(WAKE_UP_COUNT, 1) for _ in range(5)))
        return await store.get_float(WAKE_UP_COUNT, 0)

    assert run_connected(database_url, scenario) == 5


def test_add_nap_without_total_key_leaves_totals_alone(database_url):
    async def scenario():
        store = TrackerStore()
        nap = await store.add_nap(datetime(2026, 10, 17, 9), datetime(2026, 10, 17, 10), 6.0)
        return nap, await store.get_values()

    nap, values = run_connected(database_url, scenario)
    assert nap.id is not None
    assert nap.start_time == datetime(2026, 10, 17, 9)
    assert KID_SLEEP_TOTAL not in values
