"""Pydantic request/response models for all API endpoints."""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from typing import List, Optional, Literal


# Tracker models

class ActiveSession(BaseModel):
    activity: Literal["kid_sleep", "parent_sleep", "nursing"]
    start_time: datetime


class TrackerSummaryResponse(BaseModel):
    kid_sleep_total_hours: float
    parent_sleep_total_hours: float
    kid_goal_hours: float
    parent_goal_hours: float
    kid_score: int  # percent of goal, capped at 100
    parent_score: int
    wake_ups: int
    baby_age_months: float
    active_sessions: List[ActiveSession]


class ToggleResponse(BaseModel):
    activity: str
    active: bool
    start_time: datetime
    end_time: Optional[datetime] = None
    hours_slept: Optional[float] = None
    message: str


class ManualNapRequest(BaseModel):
    start_time: datetime
    end_time: datetime


class ManualNapResponse(BaseModel):
    start_time: datetime
    end_time: datetime
    hours_slept: float
    message: str


class WakeUpResponse(BaseModel):
    wake_ups: int


class NursingStartResponse(BaseModel):
    start_time: datetime
    message: str


class NursingStopResponse(BaseModel):
    duration: str  # "H:MM:SS"
    duration_minutes: float
    message: str


class NapEntry(BaseModel):
    id: int
    start_time: datetime
    end_time: datetime
    age_in_months: Optional[float] = None
    duration_hours: float


class NapHistoryResponse(BaseModel):
    total: int
    naps: List[NapEntry]


# Settings models

class SettingsResponse(BaseModel):
    kid_goal_hours: float
    parent_goal_hours: float
    baby_age_months: float


class SettingsUpdate(BaseModel):
    kid_goal_hours: Optional[float] = None
    parent_goal_hours: Optional[float] = None
    baby_age_months: Optional[float] = None

    @field_validator("kid_goal_hours", "parent_goal_hours")
    @classmethod
    def goal_positive(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("goal must be positive")
        return v


# Prediction models

class NighttimeWindow(BaseModel):
    bedtime: str  # "07:00 PM"
    wake_time: str


class NighttimeResponse(BaseModel):
    age_months: float
    bedtime: str
    wake_time: str
    bedtime_at: datetime
    wake_time_at: datetime


class NextNapResponse(BaseModel):
    generated_at: datetime
    age_months: float
    history_size: int
    nap_in_progress: bool
    predicted_time: datetime
    predicted_time_formatted: str
    wake_window_hours: float
    minutes_until: int
    based_on: Literal["history", "active_nap", "nighttime", "age_default"]
    in_nighttime_window: bool
    nighttime: NighttimeWindow


# Trend models

class TimelineRowResponse(BaseModel):
    hour: int
    label: str  # "7 AM"
    minutes: List[float] = Field(description="Minutes slept in this hour, one per day")


class WeeklyTrendsResponse(BaseModel):
    start_date: date
    end_date: date
    days: List[str]  # "Sat 17"
    daily_totals_hours: List[float]
    rows: List[TimelineRowResponse]
