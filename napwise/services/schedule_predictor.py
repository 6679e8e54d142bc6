"""Turns the wake-window model into a next-nap time."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .nap_predictor import (
    NapObservation, NapPredictor, SleepWindow,
    default_wake_window, hours_between, prepare_data, predict_nighttime_sleep,
)
from .sleep_state import get_sleep_state_manager, KID_SLEEP
from .tracker_store import TrackerStore, BABY_AGE
from ..core.constants import TIME_DISPLAY_FORMAT
from ..core.settings import settings

logger = logging.getLogger(__name__)

BASED_ON_HISTORY = "history"
BASED_ON_ACTIVE_NAP = "active_nap"
BASED_ON_NIGHTTIME = "nighttime"
BASED_ON_AGE_DEFAULT = "age_default"


@dataclass
class NapForecast:
    predicted_time: datetime
    wake_window_hours: float
    based_on: str
    in_nighttime_window: bool
    nighttime: SleepWindow

    @property
    def predicted_time_formatted(self) -> str:
        return self.predicted_time.strftime(TIME_DISPLAY_FORMAT)


# Used by: compose_next_nap
def ensure_chronological(history: Sequence[NapObservation]) -> List[NapObservation]:
    """History sorted by start time; the regression relies on adjacency."""
    ordered = sorted(history, key=lambda nap: nap.start_time)
    if ordered != list(history):
        logger.warning(f"Nap history of {len(ordered)} entries was out of order, sorted by start time")
    return ordered


# Used by: compose_next_nap
def is_nighttime(window: SleepWindow, now: datetime) -> bool:
    """Whether now falls in tonight's window or the one that began a day earlier."""
    return window.contains(now) or window.shifted(-1).contains(now)


# Used by: compose_next_nap
def _current_night(window: SleepWindow, now: datetime) -> SleepWindow:
    previous = window.shifted(-1)
    return previous if previous.contains(now) else window


# Used by: get_nap_prediction, predictions.py
def compose_next_nap(
        history: Sequence[NapObservation],
        age_months: float,
        now: Optional[datetime] = None,
        active_nap_start: Optional[datetime] = None
) -> NapForecast:
    """Predict when the next nap should start.

    With history, the model is refit on every call and the next nap is
    projected from the end of the last one. Without history, the age default
    is projected from now while a nap is running, from the night's wake time
    during the night, and from now otherwise.
    """
    if now is None:
        now = datetime.now()

    nighttime = predict_nighttime_sleep(age_months, now=now)
    in_night = is_nighttime(nighttime, now)
    history = ensure_chronological(history)
    predictor = NapPredictor()

    if history:
        last_nap = history[-1]
        predictor.fit(prepare_data(history, age_months))

        if len(history) > 1:
            last_wake_window = hours_between(history[-2].end_time, last_nap.start_time)
        else:
            last_wake_window = default_wake_window(age_months)

        wake_window = predictor.predict(age_months, last_wake_window, last_nap.duration_hours)
        predicted_time = last_nap.end_time + timedelta(hours=wake_window)
        based_on = BASED_ON_HISTORY
    elif active_nap_start is not None:
        wake_window = predictor.predict(age_months, 0, 0, use_default=True)
        predicted_time = now + timedelta(hours=wake_window)
        based_on = BASED_ON_ACTIVE_NAP
    else:
        wake_window = predictor.predict(age_months, 0, 0, use_default=True)
        if in_night:
            predicted_time = _current_night(nighttime, now).wake_time + timedelta(hours=wake_window)
            based_on = BASED_ON_NIGHTTIME
        else:
            predicted_time = now + timedelta(hours=wake_window)
            based_on = BASED_ON_AGE_DEFAULT

    logger.debug(
        f"Next nap at {predicted_time} (wake window {wake_window:.2f}h, based on {based_on})"
    )
    return NapForecast(
        predicted_time=predicted_time,
        wake_window_hours=wake_window,
        based_on=based_on,
        in_nighttime_window=in_night,
        nighttime=nighttime,
    )


# Used by: predictions.py
async def get_nap_prediction(now: Optional[datetime] = None) -> Dict[str, Any]:
    """Next nap prediction from the stored history and current nap state."""
    if now is None:
        now = datetime.now()

    store = TrackerStore()
    history = await store.get_observations()
    age_months = await store.get_float(BABY_AGE, settings.DEFAULT_BABY_AGE_MONTHS)
    active_nap = await get_sleep_state_manager().get_session(KID_SLEEP)

    logger.info(f"Predicting next nap from {len(history)} recorded naps, age {age_months} months")

    forecast = compose_next_nap(
        history=history,
        age_months=age_months,
        now=now,
        active_nap_start=active_nap.start_time if active_nap else None,
    )

    return {
        "generated_at": now.isoformat(),
        "age_months": age_months,
        "history_size": len(history),
        "nap_in_progress": active_nap is not None,
        "predicted_time": forecast.predicted_time.isoformat(),
        "predicted_time_formatted": forecast.predicted_time_formatted,
        "wake_window_hours": round(forecast.wake_window_hours, 3),
        "minutes_until": int((forecast.predicted_time - now).total_seconds() / 60),
        "based_on": forecast.based_on,
        "in_nighttime_window": forecast.in_nighttime_window,
        "nighttime": {
            "bedtime": forecast.nighttime.bedtime_formatted,
            "wake_time": forecast.nighttime.wake_time_formatted,
        },
    }
