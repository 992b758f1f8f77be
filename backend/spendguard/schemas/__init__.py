from .goals import (
    UserRequest,
    GoalCreate,
    GoalUpdate,
    GoalOut,
    GoalResponse,
    GoalListResponse,
    ResetDailyResponse,
    AddSavingsRequest,
    AddSavingsResponse,
    GoalAllocationOut,
)
from .purchases import (
    SpendingCheckRequest,
    SpendingCheckResponse,
    PurchaseCreate,
    PurchaseOut,
    PurchaseResponse,
    PurchaseListResponse,
    CategoryInfo,
)
from .savings import DailySavingsResponse, SavingsStatsResponse
from .ai import RoastRequest, RoastResponse, CategorizeRequest, CategorizeResponse
