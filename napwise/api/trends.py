"""
Trends API - weekly sleep timeline.

Routes (/trends):
  GET /weekly   - Minutes slept per hour for the last seven days
"""

from fastapi import APIRouter

from ..services.trends import get_weekly_trends
from .models import WeeklyTrendsResponse

router = APIRouter(prefix="/trends", tags=["trends"])


# Used by: Trends screen - daily grid
@router.get("/weekly", response_model=WeeklyTrendsResponse)
async def get_weekly():
    return WeeklyTrendsResponse(**await get_weekly_trends())
