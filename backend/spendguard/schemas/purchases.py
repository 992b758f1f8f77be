from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Optional
from datetime import datetime


class SpendingCheckRequest(BaseModel):
    user_id: str
    item_name: str
    price: Any = None


class SpendingCheckResponse(BaseModel):
    success: bool = True
    can_purchase: bool
    is_overspending: bool
    daily_limit: float
    spent_today: float
    remaining: float
    new_total: float
    overspend_amount: float
    roast_message: Optional[str] = None
    message: str


class PurchaseCreate(BaseModel):
    item_name: Optional[str] = None
    price: Any = None
    currency: Optional[str] = None
    website: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    purchase_date: Optional[datetime] = None
    metadata: Optional[Dict[str, Any]] = None


class PurchaseOut(BaseModel):
    id: int
    item_name: str
    price: float
    currency: str
    category: str
    website: str
    url: Optional[str] = None
    description: Optional[str] = None
    purchase_date: datetime
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PurchaseResponse(BaseModel):
    success: bool = True
    purchase: PurchaseOut
    message: str


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class CategoryTotals(BaseModel):
    total_spent: float
    count: int


class PurchaseStatistics(BaseModel):
    total_purchases: int
    total_spent: float
    category_breakdown: Dict[str, CategoryTotals]


class PurchaseListResponse(BaseModel):
    success: bool = True
    purchases: List[PurchaseOut]
    pagination: Pagination
    statistics: PurchaseStatistics


class CategoryInfo(BaseModel):
    id: str
    name: str
    icon: str
