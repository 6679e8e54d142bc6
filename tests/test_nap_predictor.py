from datetime import datetime, timedelta

import pytest

from napwise.services.nap_predictor import (
    Coefficients,
    NapObservation,
    NapPredictor,
    RegressionRow,
    default_wake_window,
    predict_nighttime_sleep,
    prepare_data,
)

DAY = datetime(2026, 10, 18)


def at(hours: float) -> datetime:
    return DAY + timedelta(hours=hours)


def nap(start: float, end: float, age=6) -> NapObservation:
    return NapObservation(start_time=at(start), end_time=at(end), age_in_months=age)


def test_fit_with_fewer_than_two_rows_uses_defaults():
    row = RegressionRow(age=6, last_wake_window=9, last_nap_duration=4, wake_window=7)
    for rows in ([], [row]):
        predictor = NapPredictor(Coefficients(1, 2, 3, 4))
        assert predictor.fit(rows) == Coefficients(2, 0.1, 0.5, -0.2)
        assert predictor.coefficients == Coefficients(2, 0.1, 0.5, -0.2)


def test_fit_reproduces_mean_target_at_mean_predictors():
    rows = [
        RegressionRow(age=5, last_wake_window=2.0, last_nap_duration=1.0, wake_window=2.2),
        RegressionRow(age=5.5, last_wake_window=2.2, last_nap_duration=0.5, wake_window=2.6),
        RegressionRow(age=6, last_wake_window=2.6, last_nap_duration=1.5, wake_window=2.1),
        RegressionRow(age=6.5, last_wake_window=2.1, last_nap_duration=1.2, wake_window=3.0),
    ]
    predictor = NapPredictor()
    predictor.fit(rows)

    n = len(rows)
    prediction = predictor.predict(
        sum(r.age for r in rows) / n,
        sum(r.last_wake_window for r in rows) / n,
        sum(r.last_nap_duration for r in rows) / n,
    )
    assert prediction == pytest.approx(sum(r.wake_window for r in rows) / n)


def test_fit_slopes_are_independent_single_variable_estimates():
    rows = [
        RegressionRow(age=1, last_wake_window=0, last_nap_duration=0, wake_window=1),
        RegressionRow(age=2, last_wake_window=0, last_nap_duration=0, wake_window=3),
        RegressionRow(age=3, last_wake_window=0, last_nap_duration=0, wake_window=5),
    ]
    c = NapPredictor().fit(rows)
    assert c.beta1 == pytest.approx(2.0)
    assert c.beta0 == pytest.approx(-1.0)


def test_fit_zero_variance_predictor_gets_zero_slope():
    rows = [
        RegressionRow(age=6, last_wake_window=2.0, last_nap_duration=1.0, wake_window=2.0),
        RegressionRow(age=6, last_wake_window=3.0, last_nap_duration=1.0, wake_window=3.0),
    ]
    c = NapPredictor().fit(rows)
    assert c.beta1 == 0
    assert c.beta3 == 0
    assert c.beta2 == pytest.approx(1.0)


@pytest.mark.parametrize("age,expected", [
    (0, 1.125), (2, 1.125), (3, 1.125), (4, 2.0),
    (5, 2.0), (6, 2.0), (7, 3.0),
    (11, 3.0), (12, 3.0), (13, 5.0),
    (23, 5.0), (24, 5.0), (25, 6.0), (48, 6.0),
])
def test_default_prediction_follows_age_bands(age, expected):
    predictor = NapPredictor(Coefficients(100, 100, 100, 100))
    assert predictor.predict(age, 9, 9, use_default=True) == expected
    assert default_wake_window(age) == expected


def test_predict_is_floored_at_half_an_hour():
    predictor = NapPredictor(Coefficients(-1000, -50, -50, -50))
    assert predictor.predict(6, 2.5, 1.5) == 0.5
    assert predictor.predict(0, 0, 0) == 0.5


@pytest.mark.parametrize("count", [0, 1, 2, 5])
def test_prepare_data_yields_one_row_per_pair(count):
    history = [nap(i * 4, i * 4 + 1) for i in range(count)]
    assert len(prepare_data(history, 6)) == max(count - 1, 0)


def test_prepare_data_lags_last_wake_window():
    # gaps of 2h then 5h
    history = [nap(0, 1), nap(3, 4), nap(9, 10)]
    rows = prepare_data(history, 6)

    assert rows[0].wake_window == pytest.approx(2)
    assert rows[0].last_wake_window == pytest.approx(2)
    assert rows[1].wake_window == pytest.approx(5)
    assert rows[1].last_wake_window == pytest.approx(2)
    assert rows[1].last_nap_duration == pytest.approx(1)


def test_prepare_data_falls_back_to_caller_age():
    history = [nap(0, 1, age=None), nap(3, 4, age=0), nap(6, 7, age=8)]
    rows = prepare_data(history, 5)
    assert [r.age for r in rows] == [5, 5]


def test_prepare_data_passes_negative_gaps_through():
    history = [nap(0, 3), nap(2, 4)]
    rows = prepare_data(history, 6)
    assert rows[0].wake_window == pytest.approx(-1)


def test_two_nap_history_falls_back_to_default_coefficients():
    history = [
        NapObservation(at(9), at(10.5), 6),
        NapObservation(at(13), at(14), 6),
    ]
    rows = prepare_data(history, 6)
    assert rows == [RegressionRow(age=6, last_wake_window=2.5, last_nap_duration=1.5, wake_window=2.5)]

    predictor = NapPredictor()
    predictor.fit(rows)
    # 2 + 0.1·6 + 0.5·2.5 - 0.2·1.5 = 2 + 0.6 + 1.25 - 0.3
    assert predictor.predict(6, 2.5, 1.5) == pytest.approx(3.55)


def test_nighttime_for_newborn_before_bedtime():
    window = predict_nighttime_sleep(2, now=at(12))
    assert window.bedtime == at(18)
    assert window.bedtime_formatted == "06:00 PM"
    assert window.wake_time - window.bedtime == timedelta(hours=9.5)
    assert window.wake_time_formatted == "03:30 AM"


def test_nighttime_rolls_to_next_day_after_bedtime():
    window = predict_nighttime_sleep(2, now=at(20))
    assert window.bedtime == at(24 + 18)
    assert window.wake_time == at(24 + 27.5)


@pytest.mark.parametrize("age,bedtime,wake_time", [
    (3, "06:00 PM", "03:30 AM"),
    (4, "07:00 PM", "05:30 AM"),
    (11, "07:00 PM", "05:30 AM"),
    (12, "07:30 PM", "06:00 AM"),
    (24, "07:30 PM", "06:00 AM"),
    (30, "08:00 PM", "06:30 AM"),
])
def test_nighttime_age_bands(age, bedtime, wake_time):
    window = predict_nighttime_sleep(age, now=at(8))
    assert window.bedtime_formatted == bedtime
    assert window.wake_time_formatted == wake_time
