import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import config, models
from ..database import atomic
from ..errors import ValidationError
from ..utils.dates import local_now, to_local_naive
from ..utils.numbers import is_number
from .categorization import categorize_purchase
from .llm import TextGenerator

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


async def add_purchase(
    db: AsyncSession,
    llm: TextGenerator,
    user_id: str,
    item_name: Optional[str],
    price: Any,
    website: Optional[str],
    currency: Optional[str] = None,
    url: Optional[str] = None,
    description: Optional[str] = None,
    purchase_date: Optional[datetime] = None,
    extra_data: Optional[Dict[str, Any]] = None,
) -> models.Purchase:
    """Records a purchase, letting the model pick its category."""
    missing = [
        name for name, value in (("item_name", item_name), ("price", price), ("website", website))
        if value is None or value == ""
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if not is_number(price) or price < 0:
        raise ValidationError("Price must be a non-negative number")

    category = await categorize_purchase(llm, item_name, description)

    purchase = models.Purchase(
        user_id=user_id,
        item_name=item_name,
        price=float(price),
        currency=currency or config.DEFAULT_CURRENCY,
        category=category,
        website=website,
        url=url,
        description=description,
        purchase_date=to_local_naive(purchase_date) if purchase_date else local_now(),
        extra_data=extra_data,
    )
    async with atomic(db, "add purchase"):
        db.add(purchase)

    await db.refresh(purchase)
    logger.info(f"Recorded purchase {purchase.id} ({category}) for user {user_id}")
    return purchase


async def list_purchases(
    db: AsyncSession,
    user_id: str,
    limit: int = 50,
    offset: int = 0,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    sort: str = "desc",
) -> Dict[str, Any]:
    """Paginated purchases plus overall spending statistics for the user.

    ``end_date`` is inclusive: the whole day is covered.
    """
    if not user_id:
        raise ValidationError("user_id is required")
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    offset = max(0, offset)

    filters = [models.Purchase.user_id == user_id]
    if category:
        filters.append(models.Purchase.category == category)
    if start_date:
        filters.append(models.Purchase.purchase_date >= datetime.combine(start_date, time.min))
    if end_date:
        filters.append(
            models.Purchase.purchase_date < datetime.combine(end_date + timedelta(days=1), time.min)
        )

    order = models.Purchase.purchase_date.asc() if sort == "asc" else models.Purchase.purchase_date.desc()
    stmt = select(models.Purchase).where(*filters).order_by(order, models.Purchase.id).offset(offset).limit(limit)
    purchases = (await db.execute(stmt)).scalars().all()

    count_stmt = select(func.count(models.Purchase.id)).where(*filters)
    total = (await db.execute(count_stmt)).scalar() or 0

    breakdown_stmt = (
        select(
            models.Purchase.category,
            func.sum(models.Purchase.price).label("total_spent"),
            func.count(models.Purchase.id).label("count"),
        )
        .where(models.Purchase.user_id == user_id)
        .group_by(models.Purchase.category)
    )
    breakdown_rows = (await db.execute(breakdown_stmt)).mappings().all()
    category_breakdown = {
        row["category"]: {"total_spent": float(row["total_spent"] or 0.0), "count": row["count"]}
        for row in breakdown_rows
    }

    return {
        "purchases": purchases,
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": offset + limit < total,
        },
        "statistics": {
            "total_purchases": total,
            "total_spent": round(sum(v["total_spent"] for v in category_breakdown.values()), 2),
            "category_breakdown": category_breakdown,
        },
    }
