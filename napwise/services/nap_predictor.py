"""Wake-window regression and age-based night-window heuristics."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence
from statistics import mean

from ..core.constants import (
    DEFAULT_WAKE_WINDOWS, DEFAULT_WAKE_WINDOW_OLDER_HOURS,
    MIN_WAKE_WINDOW_HOURS, DEFAULT_COEFFICIENTS, MIN_REGRESSION_ROWS,
    NIGHTTIME_SLEEP, NIGHTTIME_SLEEP_OLDER, TIME_DISPLAY_FORMAT,
)

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class NapObservation:
    start_time: datetime
    end_time: datetime
    age_in_months: Optional[float] = None

    @property
    def duration_hours(self) -> float:
        return hours_between(self.start_time, self.end_time)


@dataclass(frozen=True)
class RegressionRow:
    age: float
    last_wake_window: float
    last_nap_duration: float
    wake_window: float


@dataclass(frozen=True)
class Coefficients:
    beta0: float
    beta1: float
    beta2: float
    beta3: float


@dataclass(frozen=True)
class SleepWindow:
    bedtime: datetime
    wake_time: datetime

    @property
    def bedtime_formatted(self) -> str:
        return self.bedtime.strftime(TIME_DISPLAY_FORMAT)

    @property
    def wake_time_formatted(self) -> str:
        return self.wake_time.strftime(TIME_DISPLAY_FORMAT)

    def contains(self, moment: datetime) -> bool:
        return self.bedtime <= moment <= self.wake_time

    def shifted(self, days: int) -> "SleepWindow":
        offset = timedelta(days=days)
        return SleepWindow(bedtime=self.bedtime + offset, wake_time=self.wake_time + offset)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_HOUR


# Used by: NapPredictor.predict, schedule_predictor.compose_next_nap
def default_wake_window(age_months: float) -> float:
    """Cold-start wake window (hours) for an age in months."""
    for max_age, hours in DEFAULT_WAKE_WINDOWS:
        if age_months <= max_age:
            return hours
    return DEFAULT_WAKE_WINDOW_OLDER_HOURS


# Used by: schedule_predictor.compose_next_nap, predictions.py
def predict_nighttime_sleep(age_months: float, now: Optional[datetime] = None) -> SleepWindow:
    """Next occurrence of the age-typical bedtime and the matching wake time.

    The bedtime is placed on today's date; if that moment has already passed
    the whole window moves forward one day, so the result never starts in the
    past.
    """
    if now is None:
        now = datetime.now()

    bedtime_hour, bedtime_minute, duration_hours = NIGHTTIME_SLEEP_OLDER
    for max_age, band in NIGHTTIME_SLEEP:
        if age_months <= max_age:
            bedtime_hour, bedtime_minute, duration_hours = band
            break

    bedtime = now.replace(hour=bedtime_hour, minute=bedtime_minute, second=0, microsecond=0)
    wake_time = bedtime + timedelta(hours=duration_hours)

    window = SleepWindow(bedtime=bedtime, wake_time=wake_time)
    if bedtime < now:
        window = window.shifted(1)
    return window


# Used by: schedule_predictor.compose_next_nap
def prepare_data(history: Sequence[NapObservation], fallback_age: float) -> List[RegressionRow]:
    """Derive one regression row per consecutive pair of naps.

    History must already be chronological; adjacency is positional. For the
    pair (i-1, i) the target is the gap between them, and the predictors all
    describe nap i-1: its age, its duration, and the wake window that came
    before it. The first pair has no earlier gap, so it reuses its own.
    """
    rows = []
    for i in range(1, len(history)):
        prev_nap = history[i - 1]
        current_nap = history[i]

        wake_window = hours_between(prev_nap.end_time, current_nap.start_time)
        last_nap_duration = hours_between(prev_nap.start_time, prev_nap.end_time)
        age = prev_nap.age_in_months or fallback_age

        last_wake_window = wake_window
        if i > 1:
            last_wake_window = hours_between(history[i - 2].end_time, prev_nap.start_time)

        if wake_window < 0 or last_nap_duration < 0:
            logger.warning(
                f"Negative interval in nap history at index {i} "
                f"(wake window {wake_window:.2f}h, nap {last_nap_duration:.2f}h)"
            )

        rows.append(RegressionRow(
            age=age,
            last_wake_window=last_wake_window,
            last_nap_duration=last_nap_duration,
            wake_window=wake_window,
        ))
    return rows


class NapPredictor:
    """Linear wake-window model over age, last wake window and last nap duration.

    wake_window = beta0 + beta1·age + beta2·last_wake_window + beta3·last_nap_duration

    Each slope is fitted on its own against the centered target, ignoring the
    covariance between predictors. This is a simplification of a joint
    least-squares solve and is kept on purpose: switching to a true multivariate
    fit changes every prediction.
    """

    def __init__(self, coefficients: Coefficients = Coefficients(*DEFAULT_COEFFICIENTS)):
        self.coefficients = coefficients

    def fit(self, rows: Sequence[RegressionRow]) -> Coefficients:
        if len(rows) < MIN_REGRESSION_ROWS:
            logger.debug(f"Only {len(rows)} regression rows, using default coefficients")
            self.coefficients = Coefficients(*DEFAULT_COEFFICIENTS)
            return self.coefficients

        columns = (
            [r.age for r in rows],
            [r.last_wake_window for r in rows],
            [r.last_nap_duration for r in rows],
        )
        targets = [r.wake_window for r in rows]
        mean_y = mean(targets)

        slopes = []
        means = []
        for column in columns:
            mean_x = mean(column)
            numerator = sum((x - mean_x) * (y - mean_y) for x, y in zip(column, targets))
            denominator = sum((x - mean_x) ** 2 for x in column)
            slopes.append(numerator / (denominator or 1))
            means.append(mean_x)

        beta0 = mean_y - sum(slope * mean_x for slope, mean_x in zip(slopes, means))
        self.coefficients = Coefficients(beta0, *slopes)
        logger.debug(f"Fitted nap model on {len(rows)} rows: {self.coefficients}")
        return self.coefficients

    def predict(
            self,
            age: float,
            last_wake_window: float,
            last_nap_duration: float,
            use_default: bool = False
    ) -> float:
        """Predicted wake window in hours, never below MIN_WAKE_WINDOW_HOURS."""
        if use_default:
            return default_wake_window(age)

        c = self.coefficients
        wake_window = (
            c.beta0
            + c.beta1 * age
            + c.beta2 * last_wake_window
            + c.beta3 * last_nap_duration
        )
        return max(wake_window, MIN_WAKE_WINDOW_HOURS)
