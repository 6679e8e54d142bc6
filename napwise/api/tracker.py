"""
Tracker API - sleep toggles, manual naps, wake-ups and nursing sessions.

Routes (/tracker):
  GET  /summary         - Totals, goal scores, wake-ups and running sessions
  GET  /history         - Recorded naps, oldest first
  POST /kid/toggle      - Kid fell asleep / woke up (waking records a nap)
  POST /kid/manual      - Record a nap after the fact
  POST /parent/toggle   - Parent in bed / up
  POST /wake-ups        - Count a night waking
  POST /nursing/start   - Start a nursing session
  POST /nursing/stop    - Stop the nursing session
"""

import logging
from fastapi import APIRouter, HTTPException, status

from ..services.sleep_tracker import SleepTracker, InvalidNapError, ToggleResult, format_duration
from ..services.tracker_store import TrackerStore
from ..services.nap_predictor import hours_between
from .models import (
    ActiveSession,
    TrackerSummaryResponse,
    ToggleResponse,
    ManualNapRequest,
    ManualNapResponse,
    WakeUpResponse,
    NursingStartResponse,
    NursingStopResponse,
    NapEntry,
    NapHistoryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tracker", tags=["tracker"])


def _toggle_response(result: ToggleResult, started: str, ended: str) -> ToggleResponse:
    return ToggleResponse(
        activity=result.activity,
        active=result.active,
        start_time=result.start_time,
        end_time=result.end_time,
        hours_slept=round(result.hours, 3) if result.hours is not None else None,
        message=started if result.active else ended,
    )


# Used by: Home screen - totals and scores
@router.get("/summary", response_model=TrackerSummaryResponse)
async def get_summary():
    summary = await SleepTracker().get_summary()
    return TrackerSummaryResponse(
        kid_sleep_total_hours=round(summary.kid_sleep_total, 2),
        parent_sleep_total_hours=round(summary.parent_sleep_total, 2),
        kid_goal_hours=summary.kid_goal,
        parent_goal_hours=summary.parent_goal,
        kid_score=summary.kid_score,
        parent_score=summary.parent_score,
        wake_ups=summary.wake_ups,
        baby_age_months=summary.baby_age,
        active_sessions=[
            ActiveSession(activity=s.activity, start_time=s.start_time)
            for s in summary.active_sessions
        ],
    )


# Used by: Trends screen - raw nap log
@router.get("/history", response_model=NapHistoryResponse)
async def get_history():
    naps = await TrackerStore().get_nap_history()
    return NapHistoryResponse(
        total=len(naps),
        naps=[
            NapEntry(
                id=n.id,
                start_time=n.start_time,
                end_time=n.end_time,
                age_in_months=n.age_in_months,
                duration_hours=round(hours_between(n.start_time, n.end_time), 3),
            )
            for n in naps
        ],
    )


# Used by: Home screen - "Kid's Asleep" / "Kid's Awake" button
@router.post("/kid/toggle", response_model=ToggleResponse)
async def toggle_kid_sleep():
    result = await SleepTracker().toggle_kid_sleep()
    return _toggle_response(result, "Kid's sleep started", "Kid's nap recorded")


# Used by: Home screen - "Set Kid's Sleep Times"
@router.post("/kid/manual", response_model=ManualNapResponse, status_code=status.HTTP_201_CREATED)
async def add_manual_nap(request: ManualNapRequest):
    try:
        nap = await SleepTracker().add_manual_nap(request.start_time, request.end_time)
    except InvalidNapError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    hours = hours_between(nap.start_time, nap.end_time)
    logger.info(f"Manual nap recorded: {hours:.2f}h")
    return ManualNapResponse(
        start_time=nap.start_time,
        end_time=nap.end_time,
        hours_slept=round(hours, 3),
        message="Nap recorded",
    )


# Used by: Home screen - "I'm in Bed" / "I'm Up" button
@router.post("/parent/toggle", response_model=ToggleResponse)
async def toggle_parent_sleep():
    result = await SleepTracker().toggle_parent_sleep()
    return _toggle_response(result, "Parent's sleep started", "Parent's sleep recorded")


@router.post("/wake-ups", response_model=WakeUpResponse)
async def add_wake_up():
    return WakeUpResponse(wake_ups=await SleepTracker().add_wake_up())


# Used by: Action modal - nursing "Start"
@router.post("/nursing/start", response_model=NursingStartResponse)
async def start_nursing():
    session = await SleepTracker().start_nursing()
    return NursingStartResponse(start_time=session.start_time, message="Nursing session started")


# Used by: Action modal - nursing "Stop"
@router.post("/nursing/stop", response_model=NursingStopResponse)
async def stop_nursing():
    elapsed = await SleepTracker().stop_nursing()
    if elapsed is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No nursing session in progress"
        )

    return NursingStopResponse(
        duration=format_duration(elapsed),
        duration_minutes=round(elapsed.total_seconds() / 60.0, 2),
        message="Nursing session ended",
    )
