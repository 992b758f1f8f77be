"""Spreads money the user chose not to spend across their savings goals.

Three policies:
- equal: every eligible goal gets ``amount / N``
- proportional: each goal gets ``amount * (target / sum of targets)``
- priority: the default goal gets everything; without one, same as equal

Goal updates and the ``SavedPurchase`` audit row are committed together.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from .. import config, models
from ..database import atomic
from ..errors import NoGoalsError, ValidationError
from ..utils.dates import local_now
from ..utils.numbers import is_number
from .goals import get_goals_by_types

logger = logging.getLogger(__name__)


@dataclass
class SavingsMetadata:
    item_name: Optional[str] = None
    website: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    extra_data: Optional[Dict[str, Any]] = None


@dataclass
class GoalAllocation:
    goal: models.Goal
    previous_amount: float
    amount_added: float

    @property
    def new_amount(self) -> float:
        return self.goal.current_amount


@dataclass
class DistributionResult:
    distribution_method: str
    total_amount: float
    saved_purchase: models.SavedPurchase
    allocations: List[GoalAllocation] = field(default_factory=list)


def _equal_split(goals: Sequence[models.Goal], amount: float) -> List[Tuple[models.Goal, float]]:
    amount_per_goal = amount / len(goals)
    return [(goal, amount_per_goal) for goal in goals]


def compute_allocations(
    goals: Sequence[models.Goal],
    amount: float,
    method: str,
) -> List[Tuple[models.Goal, float]]:
    """Pair every eligible goal with the amount it should receive.

    Goals that receive nothing are still listed (with 0.0) so callers can see
    the full picture; ``distribute`` only writes the nonzero ones.
    """
    if not goals:
        raise NoGoalsError("No savings goals found for this user")

    if method == "equal":
        return _equal_split(goals, amount)

    if method == "proportional":
        total_target = sum(goal.target_amount for goal in goals)
        if total_target <= 0:
            raise ValidationError("no target amounts to distribute against")
        return [(goal, amount * (goal.target_amount / total_target)) for goal in goals]

    if method == "priority":
        default_goal = next((goal for goal in goals if goal.is_default), None)
        if default_goal is None:
            return _equal_split(goals, amount)
        return [(goal, amount if goal is default_goal else 0.0) for goal in goals]

    raise ValidationError(
        f"distribution must be one of: {', '.join(models.DISTRIBUTION_METHODS)}"
    )


async def distribute(
    db: AsyncSession,
    user_id: str,
    amount: Any,
    method: str = "equal",
    metadata: Optional[SavingsMetadata] = None,
    now: Optional[datetime] = None,
) -> DistributionResult:
    """Adds ``amount`` to the user's savings/custom goals and records the save."""
    if not user_id:
        raise ValidationError("user_id is required")
    if not is_number(amount) or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    if method not in models.DISTRIBUTION_METHODS:
        raise ValidationError(
            f"distribution must be one of: {', '.join(models.DISTRIBUTION_METHODS)}"
        )
    metadata = metadata or SavingsMetadata()
    amount = float(amount)

    goals = await get_goals_by_types(db, user_id, models.SAVINGS_GOAL_TYPES)
    planned = compute_allocations(goals, amount, method)

    credited = [(goal, share) for goal, share in planned if share != 0]
    async with atomic(db, "add savings to goals"):
        # Loaded current_amount may be stale; increment in SQL
        for goal, share in credited:
            await db.execute(
                update(models.Goal)
                .where(models.Goal.id == goal.id)
                .values(current_amount=models.Goal.current_amount + share)
                .execution_options(synchronize_session=False)
            )

        saved_purchase = models.SavedPurchase(
            user_id=user_id,
            item_name=metadata.item_name or "Unknown Item",
            amount_saved=amount,
            currency=metadata.currency or config.DEFAULT_CURRENCY,
            website=metadata.website or "Unknown",
            url=metadata.url,
            description=metadata.description,
            saved_date=now or local_now(),
            distribution_method=method,
            goals_updated=[str(goal.id) for goal, _ in credited],
            extra_data=metadata.extra_data,
        )
        db.add(saved_purchase)

    await db.refresh(saved_purchase)
    allocations: List[GoalAllocation] = []
    for goal, share in credited:
        await db.refresh(goal)
        allocations.append(
            GoalAllocation(goal=goal, previous_amount=goal.current_amount - share, amount_added=share)
        )
    logger.info(
        f"Distributed {amount:.2f} ({method}) across {len(allocations)} goal(s) for user {user_id}"
    )
    return DistributionResult(
        distribution_method=method,
        total_amount=amount,
        saved_purchase=saved_purchase,
        allocations=allocations,
    )
