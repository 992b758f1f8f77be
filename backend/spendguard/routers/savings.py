from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from .. import schemas, services

router = APIRouter(prefix="/savings", tags=["Savings"])


@router.get("/daily", response_model=schemas.DailySavingsResponse)
async def get_daily_savings(
    user_id: str = Query(...),
    date: Optional[date] = Query(None, description="YYYY-MM-DD, defaults to today"),
    db: AsyncSession = Depends(get_db),
):
    result = await services.get_daily_savings(db, user_id, day=date)
    return schemas.DailySavingsResponse.model_validate(result, from_attributes=True)


@router.get("/stats", response_model=schemas.SavingsStatsResponse)
async def get_savings_stats(
    user_id: str = Query(...),
    period: str = Query("week", description="day, week, month, year or all"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    result = await services.get_savings_stats(
        db, user_id, period=period, start_date=start_date, end_date=end_date
    )
    return schemas.SavingsStatsResponse.model_validate(result, from_attributes=True)
