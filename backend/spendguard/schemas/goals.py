from pydantic import BaseModel, ConfigDict
from typing import Any, List, Literal, Optional
from datetime import datetime

GoalType = Literal["daily_spending", "savings", "custom"]
GoalPeriod = Literal["daily", "weekly", "monthly", "yearly", "one_time"]
DistributionMethod = Literal["equal", "proportional", "priority"]


class UserRequest(BaseModel):
    user_id: str


class GoalCreate(BaseModel):
    # Presence is checked by the service so clients get one readable message
    user_id: str
    name: Optional[str] = None
    type: Optional[str] = None
    target_amount: Optional[Any] = None
    current_amount: Any = 0.0
    period: Optional[str] = None
    is_default: bool = False


class GoalUpdate(BaseModel):
    user_id: str
    name: Optional[str] = None
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    is_default: Optional[bool] = None


class GoalOut(BaseModel):
    id: int
    user_id: str
    name: str
    type: GoalType
    target_amount: float
    current_amount: float
    period: GoalPeriod
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GoalResponse(BaseModel):
    success: bool = True
    goal: GoalOut
    message: str


class GoalListResponse(BaseModel):
    success: bool = True
    goals: List[GoalOut]


class ResetDailyResponse(BaseModel):
    success: bool = True
    reset_count: int
    message: str


class AddSavingsRequest(BaseModel):
    user_id: str
    amount: Any = None
    distribution: DistributionMethod = "equal"
    item_name: Optional[str] = None
    website: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    metadata: Optional[dict] = None


class GoalAllocationOut(BaseModel):
    id: int
    name: str
    previous_amount: float
    new_amount: float
    amount_added: float
    target_amount: float
    progress_percentage: float


class AddSavingsResponse(BaseModel):
    success: bool = True
    message: str
    distribution_method: DistributionMethod
    total_amount: float
    saved_purchase_id: int
    goals_updated: List[GoalAllocationOut]
