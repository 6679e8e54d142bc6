"""Age-banded sleep heuristics and app-level tuning constants."""

# ── DEFAULT WAKE WINDOWS (hours) ────────────────────────────────────────────
# Cold-start wake window per age band, the midpoint of the commonly published
# range for that band:
#   0-3 months:  45-90 minutes  → 67.5 minutes
#   4-6 months:  1.5-2.5 hours  → 2 hours
#   7-12 months: 2-4 hours      → 3 hours
#   1-2 years:   4-6 hours      → 5 hours
#   3-5 years:   6+ hours       → 6 hours (no upper bound published)
#
# Keys are inclusive upper bounds in months, checked in order.
DEFAULT_WAKE_WINDOWS = [
    (3, 1.125),
    (6, 2.0),
    (12, 3.0),
    (24, 5.0),
]
DEFAULT_WAKE_WINDOW_OLDER_HOURS = 6.0

# Shortest wake window the regression is allowed to predict.
MIN_WAKE_WINDOW_HOURS = 0.5


# ── REGRESSION FALLBACK ─────────────────────────────────────────────────────
# Coefficients used when fewer than MIN_REGRESSION_ROWS rows are available.
# wake_window = 2 + 0.1·age + 0.5·last_wake_window - 0.2·last_nap_duration
DEFAULT_COEFFICIENTS = (2.0, 0.1, 0.5, -0.2)
MIN_REGRESSION_ROWS = 2


# ── NIGHTTIME SLEEP (bedtime_hour, bedtime_minute, duration_hours) ──────────
# Duration is the midpoint of the published nighttime range:
#   0-3 months:  8-11 hours  → 9.5 hours
#   4-11 months: 9-12 hours  → 10.5 hours
#   1-2 years:   9-12 hours  → 10.5 hours
#   3-5 years:   9-12 hours  → 10.5 hours
NIGHTTIME_SLEEP = [
    (3, (18, 0, 9.5)),
    (11, (19, 0, 10.5)),
    (24, (19, 30, 10.5)),
]
NIGHTTIME_SLEEP_OLDER = (20, 0, 10.5)


# No clinical source, app defaults carried over from the tracker UI.
DEFAULT_BABY_AGE_MONTHS = 6.0
DEFAULT_KID_SLEEP_GOAL_HOURS = 10.0
DEFAULT_PARENT_SLEEP_GOAL_HOURS = 6.0
SCORE_CAP_PERCENT = 100

# Display format for predicted clock times, e.g. "06:00 PM".
TIME_DISPLAY_FORMAT = "%I:%M %p"


# ── TRENDS TIMELINE ─────────────────────────────────────────────────────────
TRENDS_DAYS = 7
TRENDS_FIRST_HOUR = 7
