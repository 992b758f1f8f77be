"""Daily spending limit checks.

The allow/deny numbers are always computed locally first. The roast message
is decoration: if the model is down, a templated message is used instead.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..errors import ValidationError
from ..utils.dates import today_bounds
from ..utils.numbers import format_money, format_plain, is_number
from .goals import get_default_daily_goal, get_goals_by_types
from .llm import TextGenerator
from .roasting import roast

logger = logging.getLogger(__name__)


@dataclass
class SpendingCheck:
    can_purchase: bool
    is_overspending: bool
    daily_limit: float
    spent_today: float
    remaining: float
    new_total: float
    overspend_amount: float
    roast_message: Optional[str]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def get_spent_in_window(
    db: AsyncSession,
    user_id: str,
    start: datetime,
    end: datetime,
) -> float:
    """Sum of purchase prices with ``start <= purchase_date < end``."""
    stmt = (
        select(func.coalesce(func.sum(models.Purchase.price), 0.0))
        .where(
            models.Purchase.user_id == user_id,
            models.Purchase.purchase_date >= start,
            models.Purchase.purchase_date < end,
        )
    )
    result = await db.execute(stmt)
    return float(result.scalar() or 0.0)


def fallback_roast_message(item_name: str, price: float, new_total: float, daily_limit: float) -> str:
    return (
        f"You're about to spend {format_money(price)} on {item_name}, which would put you at "
        f"{format_money(new_total)} for today. Your daily limit is {format_money(daily_limit)}. "
        f"That's {format_money(new_total - daily_limit)} over budget! Maybe reconsider this purchase?"
    )


async def _savings_goals_context(db: AsyncSession, user_id: str) -> Dict[str, Tuple[str, str]]:
    goals = await get_goals_by_types(db, user_id, ("savings",))
    return {
        goal.name: (f"save ${format_plain(goal.target_amount)}", goal.period)
        for goal in goals
    }


async def _roast_or_fallback(
    db: AsyncSession,
    llm: TextGenerator,
    user_id: str,
    item_name: str,
    price: float,
    new_total: float,
    daily_limit: float,
) -> str:
    goals = await _savings_goals_context(db, user_id)
    try:
        message = await roast(
            llm,
            {item_name: format_money(price)},
            format_money(daily_limit),
            goals,
        )
    except Exception as e:
        logger.error(f"Error calling roast, using fallback message: {e}")
        message = ""
    if not message or not message.strip():
        return fallback_roast_message(item_name, price, new_total, daily_limit)
    return message


async def evaluate_purchase(
    db: AsyncSession,
    llm: TextGenerator,
    user_id: str,
    item_name: str,
    price: Any,
    now: Optional[datetime] = None,
) -> SpendingCheck:
    """Would buying ``item_name`` for ``price`` break today's spending limit?

    A purchase that lands exactly on the limit is allowed.
    """
    if not user_id or not item_name:
        raise ValidationError("Missing required fields: user_id, item_name, price")
    if not is_number(price) or price < 0:
        raise ValidationError("Price must be a non-negative number")
    price = float(price)

    daily_goal = await get_default_daily_goal(db, user_id)
    if not daily_goal:
        return SpendingCheck(
            can_purchase=True,
            is_overspending=False,
            daily_limit=0.0,
            spent_today=0.0,
            remaining=0.0,
            new_total=price,
            overspend_amount=0.0,
            roast_message=None,
            message="No spending goal set",
        )

    start, end = today_bounds(now)
    spent_today = await get_spent_in_window(db, user_id, start, end)
    daily_limit = daily_goal.target_amount
    new_total = spent_today + price
    is_overspending = new_total > daily_limit

    roast_message = None
    if is_overspending:
        roast_message = await _roast_or_fallback(
            db, llm, user_id, item_name, price, new_total, daily_limit
        )

    return SpendingCheck(
        can_purchase=not is_overspending,
        is_overspending=is_overspending,
        daily_limit=daily_limit,
        spent_today=spent_today,
        remaining=daily_limit - spent_today,
        new_total=new_total,
        overspend_amount=max(0.0, new_total - daily_limit),
        roast_message=roast_message,
        message=(
            "This purchase would exceed your daily spending limit"
            if is_overspending
            else "Purchase is within your daily spending limit"
        ),
    )
