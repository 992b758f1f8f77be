from .goals import (
    get_goals,
    get_goal_by_id,
    get_default_daily_goal,
    create_goal,
    initialize_default_goal,
    update_goal,
    reset_daily_goals,
    progress_percentage,
)
from .distribution import distribute, compute_allocations, SavingsMetadata, DistributionResult
from .spending import evaluate_purchase, SpendingCheck
from .categorization import (
    categorize_purchase,
    categorize_batch,
    categorize_cart,
    get_category_display_name,
    get_category_icon,
)
from .roasting import roast
from .purchases import add_purchase, list_purchases
from .savings import get_daily_savings, get_savings_stats
from .llm import GeminiClient, get_llm_client
