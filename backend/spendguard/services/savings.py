"""Reports over money the user chose not to spend."""

from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..errors import ValidationError
from ..utils.dates import day_bounds, days_in_span, local_now, shift_months

STATS_PERIODS = ("day", "week", "month", "year", "all")
RECENT_SAVES_LIMIT = 10
TOP_ITEMS_PER_WEBSITE = 3


async def _saved_between(
    db: AsyncSession,
    user_id: str,
    start: datetime,
    end: datetime,
    end_inclusive: bool = False,
) -> List[models.SavedPurchase]:
    upper = models.SavedPurchase.saved_date <= end if end_inclusive else models.SavedPurchase.saved_date < end
    stmt = (
        select(models.SavedPurchase)
        .where(
            models.SavedPurchase.user_id == user_id,
            models.SavedPurchase.saved_date >= start,
            upper,
        )
        .order_by(models.SavedPurchase.saved_date.desc(), models.SavedPurchase.id.desc())
    )
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_daily_savings(
    db: AsyncSession,
    user_id: str,
    day: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Everything saved on ``day`` (today by default), newest first."""
    if not user_id:
        raise ValidationError("user_id is required")
    day = day or (now or local_now()).date()
    start, end = day_bounds(day)

    saved = await _saved_between(db, user_id, start, end)

    by_website: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for sp in saved:
        entry = by_website.setdefault(sp.website, {"website": sp.website, "count": 0, "total_saved": 0.0})
        entry["count"] += 1
        entry["total_saved"] += sp.amount_saved

    return {
        "date": day,
        "total_saved": sum(sp.amount_saved for sp in saved),
        "purchases_avoided": len(saved),
        "savings_breakdown": {"by_website": list(by_website.values())},
        "saved_purchases": saved,
    }


def resolve_stats_window(
    period: str,
    start_date: Optional[date],
    end_date: Optional[date],
    now: datetime,
) -> Tuple[str, datetime, datetime]:
    """Returns (period_type, start, end); ``end`` is inclusive.

    An explicit ``start_date``/``end_date`` pair wins over ``period``.
    Unknown periods fall back to a week.
    """
    if start_date and end_date:
        if end_date < start_date:
            raise ValidationError("end_date must not be before start_date")
        return "custom", datetime.combine(start_date, time.min), datetime.combine(end_date, time.max)

    if period not in STATS_PERIODS:
        period = "week"

    if period == "day":
        start = datetime.combine(now.date(), time.min)
    elif period == "week":
        start = now - timedelta(days=7)
    elif period == "month":
        start = shift_months(now, -1)
    elif period == "year":
        start = shift_months(now, -12)
    else:
        start = datetime(1970, 1, 1)
    return period, start, now


async def get_savings_stats(
    db: AsyncSession,
    user_id: str,
    period: str = "week",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    if not user_id:
        raise ValidationError("user_id is required")
    now = now or local_now()
    period_type, start, end = resolve_stats_window(period, start_date, end_date, now)

    saved = await _saved_between(db, user_id, start, end, end_inclusive=True)

    total_saved = sum(sp.amount_saved for sp in saved)
    purchases_avoided = len(saved)
    days = days_in_span(start, end)

    biggest = None
    for sp in saved:
        if biggest is None or sp.amount_saved > biggest.amount_saved:
            biggest = sp

    by_day: Dict[date, Dict[str, Any]] = {}
    by_website: Dict[str, Dict[str, Any]] = {}
    for sp in saved:
        day_entry = by_day.setdefault(sp.saved_date.date(), {"total_saved": 0.0, "purchases_avoided": 0})
        day_entry["total_saved"] += sp.amount_saved
        day_entry["purchases_avoided"] += 1

        site_entry = by_website.setdefault(
            sp.website, {"website": sp.website, "purchases_avoided": 0, "total_saved": 0.0, "items": []}
        )
        site_entry["purchases_avoided"] += 1
        site_entry["total_saved"] += sp.amount_saved
        site_entry["items"].append(sp.item_name)

    websites = sorted(by_website.values(), key=lambda e: e["total_saved"], reverse=True)

    return {
        "period": {
            "type": period_type,
            "start_date": start.date(),
            "end_date": end.date(),
            "days": days,
        },
        "summary": {
            "total_saved": total_saved,
            "purchases_avoided": purchases_avoided,
            "avg_saved_per_day": total_saved / days,
            "avg_saved_per_purchase": total_saved / purchases_avoided if purchases_avoided else 0.0,
            "biggest_save": {
                "item_name": biggest.item_name,
                "amount": biggest.amount_saved,
                "website": biggest.website,
                "date": biggest.saved_date,
            } if biggest else None,
        },
        "breakdown": {
            "by_website": [
                {
                    "website": e["website"],
                    "purchases_avoided": e["purchases_avoided"],
                    "total_saved": e["total_saved"],
                    "top_items": e["items"][:TOP_ITEMS_PER_WEBSITE],
                }
                for e in websites
            ],
            "daily_trend": [
                {"date": d, **by_day[d]}
                for d in sorted(by_day)
            ],
        },
        "recent_saves": saved[:RECENT_SAVES_LIMIT],
    }
