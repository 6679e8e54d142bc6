"""
Predictions API - next nap and nighttime sleep window.

Routes (/predictions):
  GET /next-nap    - Next nap time from the wake-window model
  GET /nighttime   - Age-typical bedtime and wake time
"""

import logging
from typing import Optional
from fastapi import APIRouter, Query

from ..core.settings import settings
from ..services.nap_predictor import predict_nighttime_sleep
from ..services.schedule_predictor import get_nap_prediction
from ..services.tracker_store import TrackerStore, BABY_AGE
from .models import NextNapResponse, NighttimeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/predictions", tags=["predictions"])


# Used by: Home screen - "next nap" card
@router.get("/next-nap", response_model=NextNapResponse)
async def get_next_nap():
    return NextNapResponse(**await get_nap_prediction())


# Used by: Home screen - bedtime card
@router.get("/nighttime", response_model=NighttimeResponse)
async def get_nighttime(
    age_months: Optional[float] = Query(None, ge=0, description="Defaults to the saved baby age")
):
    if age_months is None:
        age_months = await TrackerStore().get_float(BABY_AGE, settings.DEFAULT_BABY_AGE_MONTHS)

    window = predict_nighttime_sleep(age_months)
    return NighttimeResponse(
        age_months=age_months,
        bedtime=window.bedtime_formatted,
        wake_time=window.wake_time_formatted,
        bedtime_at=window.bedtime,
        wake_time_at=window.wake_time,
    )
