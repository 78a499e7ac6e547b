from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.analytics_service import AnalyticsService, TIMEFRAMES

router = APIRouter(prefix="/api/v1/analytics", tags=["Analytics"])


def _check_timeframe(timeframe: str) -> str:
    if timeframe not in TIMEFRAMES:
        raise HTTPException(status_code=400, detail=f"Invalid timeframe. Must be one of: {', '.join(TIMEFRAMES)}")
    return timeframe


@router.get("/stats")
async def get_stats(timeframe: str = "year", user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    _check_timeframe(timeframe)
    try:
        return AnalyticsService.get_stats(db, user_id, timeframe)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/reading-progress")
async def get_reading_progress(timeframe: str = "year", user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    _check_timeframe(timeframe)
    try:
        return AnalyticsService.get_reading_progress(db, user_id, timeframe)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/genres")
async def get_genres(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return AnalyticsService.get_genres(db, user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
