import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .. import config, models
from ..database import atomic
from ..errors import NotFoundError, ValidationError
from ..utils.numbers import is_number

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "target_amount", "current_amount", "is_default")


async def get_goals(db: AsyncSession, user_id: str) -> List[models.Goal]:
    """All goals for a user, default first then newest first."""
    stmt = (
        select(models.Goal)
        .where(models.Goal.user_id == user_id)
        .order_by(
            models.Goal.is_default.desc(),
            models.Goal.created_at.desc(),
            models.Goal.id.desc(),
        )
    )
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_goal_by_id(db: AsyncSession, user_id: str, goal_id: int) -> Optional[models.Goal]:
    stmt = select(models.Goal).where(
        models.Goal.id == goal_id,
        models.Goal.user_id == user_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_default_daily_goal(db: AsyncSession, user_id: str) -> Optional[models.Goal]:
    stmt = (
        select(models.Goal)
        .where(
            models.Goal.user_id == user_id,
            models.Goal.type == "daily_spending",
            models.Goal.is_default == True,
        )
        .order_by(models.Goal.id)
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_goals_by_types(db: AsyncSession, user_id: str, types: Tuple[str, ...]) -> List[models.Goal]:
    """Goals of the given types in creation order."""
    stmt = (
        select(models.Goal)
        .where(
            models.Goal.user_id == user_id,
            models.Goal.type.in_(types),
        )
        .order_by(models.Goal.created_at, models.Goal.id)
    )
    result = await db.execute(stmt)
    return result.scalars().all()


async def _clear_defaults(db: AsyncSession, user_id: str, keep_goal_id: Optional[int] = None) -> None:
    """Unset ``is_default`` on the user's goals, except ``keep_goal_id``.

    Must run in the same transaction as the write that sets the new default.
    """
    stmt = (
        update(models.Goal)
        .where(models.Goal.user_id == user_id, models.Goal.is_default == True)
        .values(is_default=False)
    )
    if keep_goal_id is not None:
        stmt = stmt.where(models.Goal.id != keep_goal_id)
    await db.execute(stmt.execution_options(synchronize_session="fetch"))


def _validate_amount(field: str, value: Any) -> None:
    if not is_number(value) or value < 0:
        raise ValidationError(f"{field} must be a non-negative number")


async def create_goal(
    db: AsyncSession,
    user_id: str,
    name: Optional[str],
    type: Optional[str],
    target_amount: Any,
    period: Optional[str],
    is_default: bool = False,
    current_amount: Any = 0.0,
) -> models.Goal:
    """Creates a goal. Marking it default clears the user's other defaults."""
    missing = [
        field for field, value in (
            ("user_id", user_id),
            ("name", name),
            ("type", type),
            ("target_amount", target_amount),
            ("period", period),
        )
        if value is None or value == ""
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if type not in models.GOAL_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(models.GOAL_TYPES)}")
    if period not in models.GOAL_PERIODS:
        raise ValidationError(f"period must be one of: {', '.join(models.GOAL_PERIODS)}")
    _validate_amount("target_amount", target_amount)
    _validate_amount("current_amount", current_amount)

    async with atomic(db, "create goal"):
        if is_default:
            await _clear_defaults(db, user_id)
        goal = models.Goal(
            user_id=user_id,
            name=name,
            type=type,
            target_amount=float(target_amount),
            current_amount=float(current_amount),
            period=period,
            is_default=bool(is_default),
        )
        db.add(goal)

    await db.refresh(goal)
    logger.info(f"Created goal {goal.id} ({goal.type}) for user {user_id}")
    return goal


async def initialize_default_goal(db: AsyncSession, user_id: str) -> Tuple[models.Goal, bool]:
    """Ensures the user has a default daily spending goal.

    Returns:
        Tuple of (goal, created). An existing default goal is returned as is.
    """
    if not user_id:
        raise ValidationError("user_id is required")

    existing = await get_default_daily_goal(db, user_id)
    if existing:
        return existing, False

    goal = await create_goal(
        db,
        user_id,
        name=config.DEFAULT_DAILY_GOAL_NAME,
        type="daily_spending",
        target_amount=config.DEFAULT_DAILY_LIMIT,
        period="daily",
        is_default=True,
    )
    return goal, True


async def update_goal(
    db: AsyncSession,
    user_id: str,
    goal_id: int,
    fields: Dict[str, Any],
) -> models.Goal:
    """Applies a partial update to one of the user's goals."""
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")
    if "is_default" in fields and not isinstance(fields["is_default"], bool):
        raise ValidationError("is_default must be true or false")
    if "name" in fields and not fields["name"]:
        raise ValidationError("name cannot be empty")
    for field in ("target_amount", "current_amount"):
        if field in fields:
            _validate_amount(field, fields[field])

    goal = await get_goal_by_id(db, user_id, goal_id)
    if not goal:
        raise NotFoundError("Goal not found")

    async with atomic(db, "update goal"):
        if fields.get("is_default"):
            await _clear_defaults(db, user_id, keep_goal_id=goal.id)
        for field, value in fields.items():
            if field in ("target_amount", "current_amount"):
                value = float(value)
            setattr(goal, field, value)

    await db.refresh(goal)
    return goal


async def reset_daily_goals(db: AsyncSession, user_id: str) -> int:
    """Zeroes ``current_amount`` on daily spending goals. Returns rows changed."""
    if not user_id:
        raise ValidationError("user_id is required")

    stmt = (
        update(models.Goal)
        .where(
            models.Goal.user_id == user_id,
            models.Goal.type == "daily_spending",
            models.Goal.period == "daily",
            models.Goal.current_amount != 0,
        )
        .values(current_amount=0.0)
        .execution_options(synchronize_session=False)
    )
    async with atomic(db, "reset daily goals"):
        result = await db.execute(stmt)

    logger.info(f"Reset {result.rowcount} daily spending goal(s) for user {user_id}")
    return result.rowcount


def progress_percentage(goal: models.Goal) -> float:
    if not goal.target_amount or goal.target_amount <= 0:
        return 0.0
    return round(min(goal.current_amount / goal.target_amount * 100, 100), 2)
