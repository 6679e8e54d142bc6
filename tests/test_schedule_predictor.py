from datetime import datetime, timedelta

import pytest

from napwise.services.nap_predictor import NapObservation, predict_nighttime_sleep
from napwise.services.schedule_predictor import (
    compose_next_nap,
    ensure_chronological,
    is_nighttime,
)

DAY = datetime(2026, 10, 18)


def at(hours: float) -> datetime:
    return DAY + timedelta(hours=hours)


def assert_same_minute(actual: datetime, expected: datetime):
    assert abs((actual - expected).total_seconds()) < 1


TWO_NAPS = [
    NapObservation(at(9), at(10.5), 6),
    NapObservation(at(13), at(14), 6),
]


def test_history_projects_from_last_nap_end():
    forecast = compose_next_nap(TWO_NAPS, 6, now=at(15))

    # 2 + 0.1·6 + 0.5·2.5 - 0.2·1.0 with default coefficients
    assert forecast.wake_window_hours == pytest.approx(3.65)
    assert_same_minute(forecast.predicted_time, at(14 + 3.65))
    assert forecast.based_on == "history"
    assert forecast.predicted_time_formatted == "05:39 PM"


def test_single_nap_uses_age_default_for_previous_gap():
    forecast = compose_next_nap(TWO_NAPS[:1], 6, now=at(11))

    # 2 + 0.6 + 0.5·2.0 - 0.2·1.5
    assert forecast.wake_window_hours == pytest.approx(3.3)
    assert_same_minute(forecast.predicted_time, at(10.5 + 3.3))


def test_history_takes_priority_over_active_nap():
    forecast = compose_next_nap(TWO_NAPS, 6, now=at(15), active_nap_start=at(14.5))
    assert forecast.based_on == "history"


def test_active_nap_projects_from_now():
    forecast = compose_next_nap([], 6, now=at(11), active_nap_start=at(10.5))
    assert forecast.based_on == "active_nap"
    assert forecast.wake_window_hours == 2.0
    assert forecast.predicted_time == at(13)


def test_daytime_cold_start_projects_from_now():
    forecast = compose_next_nap([], 2, now=at(11))
    assert forecast.based_on == "age_default"
    assert forecast.in_nighttime_window is False
    assert forecast.predicted_time == at(11 + 1.125)


def test_evening_cold_start_projects_from_wake_time():
    # age 6: bedtime 19:00, 10.5h → wake 05:30
    forecast = compose_next_nap([], 6, now=at(23))
    assert forecast.in_nighttime_window is True
    assert forecast.based_on == "nighttime"
    assert forecast.predicted_time == at(24 + 5.5 + 2)


def test_early_morning_cold_start_uses_last_nights_wake_time():
    forecast = compose_next_nap([], 6, now=at(3))
    assert forecast.in_nighttime_window is True
    assert forecast.predicted_time == at(5.5 + 2)


def test_out_of_order_history_is_sorted():
    shuffled = list(reversed(TWO_NAPS))
    assert ensure_chronological(shuffled) == TWO_NAPS

    ordered = compose_next_nap(TWO_NAPS, 6, now=at(15))
    unordered = compose_next_nap(shuffled, 6, now=at(15))
    assert unordered.predicted_time == ordered.predicted_time


@pytest.mark.parametrize("hour,expected", [
    (12, False), (18.9, False), (19, True), (21, True), (27, True), (29.5, True), (30, False),
])
def test_is_nighttime(hour, expected):
    now = at(hour)
    window = predict_nighttime_sleep(6, now=now)
    assert is_nighttime(window, now) is expected
