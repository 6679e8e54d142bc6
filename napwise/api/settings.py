"""
Settings API - sleep goals and baby age.

Routes (/settings):
  GET /   - Current goals and age
  PUT /   - Update any of the goals or the age
"""

import logging
from fastapi import APIRouter, HTTPException, status

from ..services.sleep_tracker import SleepTracker, TrackerSettings
from .models import SettingsResponse, SettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


def _to_response(current: TrackerSettings) -> SettingsResponse:
    return SettingsResponse(
        kid_goal_hours=current.kid_goal,
        parent_goal_hours=current.parent_goal,
        baby_age_months=current.baby_age,
    )


@router.get("", response_model=SettingsResponse)
async def get_settings():
    return _to_response(await SleepTracker().get_settings())


# Used by: Settings screen - "Save Goals"
@router.put("", response_model=SettingsResponse)
async def update_settings(request: SettingsUpdate):
    try:
        current = await SleepTracker().update_settings(
            kid_goal=request.kid_goal_hours,
            parent_goal=request.parent_goal_hours,
            baby_age=request.baby_age_months,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _to_response(current)
