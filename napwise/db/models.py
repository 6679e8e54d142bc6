"""Pydantic models mirroring the napwise database tables."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


# Used by: tracker_store.py (nap history rows)
class NapHistory(BaseModel):
    id: int
    start_time: datetime
    end_time: datetime
    age_in_months: Optional[float] = None

    class Config:
        from_attributes = True
        json_encoders = {
            datetime: lambda v: v.isoformat() if v else None,
        }


# Used by: tracker_store.py (totals, counters, goals, age)
class TrackerValue(BaseModel):
    key: str
    value: str

    class Config:
        from_attributes = True
