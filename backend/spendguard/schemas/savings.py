from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime


class SavedPurchaseOut(BaseModel):
    id: int
    item_name: str
    amount_saved: float
    website: str
    url: Optional[str] = None
    description: Optional[str] = None
    saved_at: datetime = Field(validation_alias="saved_date")
    distribution_method: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class WebsiteDailyTotal(BaseModel):
    website: str
    count: int
    total_saved: float


class DailySavingsBreakdown(BaseModel):
    by_website: List[WebsiteDailyTotal]


class DailySavingsResponse(BaseModel):
    success: bool = True
    date: date
    total_saved: float
    purchases_avoided: int
    savings_breakdown: DailySavingsBreakdown
    saved_purchases: List[SavedPurchaseOut]


class StatsPeriod(BaseModel):
    type: str
    start_date: date
    end_date: date
    days: int


class BiggestSave(BaseModel):
    item_name: str
    amount: float
    website: str
    date: datetime


class StatsSummary(BaseModel):
    total_saved: float
    purchases_avoided: int
    avg_saved_per_day: float
    avg_saved_per_purchase: float
    biggest_save: Optional[BiggestSave] = None


class WebsiteStats(BaseModel):
    website: str
    purchases_avoided: int
    total_saved: float
    top_items: List[str]


class DailyTrendPoint(BaseModel):
    date: date
    total_saved: float
    purchases_avoided: int


class StatsBreakdown(BaseModel):
    by_website: List[WebsiteStats]
    daily_trend: List[DailyTrendPoint]


class RecentSave(BaseModel):
    id: int
    item_name: str
    amount_saved: float
    website: str
    saved_at: datetime = Field(validation_alias="saved_date")

    model_config = ConfigDict(from_attributes=True)


class SavingsStatsResponse(BaseModel):
    success: bool = True
    period: StatsPeriod
    summary: StatsSummary
    breakdown: StatsBreakdown
    recent_saves: List[RecentSave]
