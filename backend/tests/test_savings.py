"""Tests for savings reports."""
from datetime import date, datetime, timedelta

import pytest

from spendguard import models
from spendguard.errors import ValidationError
from spendguard.services.savings import get_daily_savings, get_savings_stats, resolve_stats_window

NOW = datetime(2025, 3, 31, 18, 0)


@pytest.fixture
def add_save(db):
    async def _add(amount, saved_date, website="shop.com", item_name="Thing", user_id="user_1"):
        sp = models.SavedPurchase(
            user_id=user_id,
            item_name=item_name,
            amount_saved=amount,
            website=website,
            saved_date=saved_date,
            distribution_method="equal",
            goals_updated=[],
        )
        db.add(sp)
        await db.commit()
        return sp
    return _add


@pytest.mark.asyncio
async def test_daily_savings(db, add_save) -> None:
    await add_save(10.0, datetime(2025, 3, 31, 9), website="a.com", item_name="Hat")
    await add_save(5.0, datetime(2025, 3, 31, 20), website="b.com", item_name="Pen")
    await add_save(2.5, datetime(2025, 3, 31, 21), website="a.com", item_name="Sock")
    await add_save(100.0, datetime(2025, 4, 1, 0), website="a.com")
    await add_save(100.0, datetime(2025, 3, 31, 12), user_id="user_2")

    result = await get_daily_savings(db, "user_1", now=NOW)

    assert result["date"] == date(2025, 3, 31)
    assert result["total_saved"] == 17.5
    assert result["purchases_avoided"] == 3
    assert [sp.item_name for sp in result["saved_purchases"]] == ["Sock", "Pen", "Hat"]
    assert result["savings_breakdown"]["by_website"] == [
        {"website": "a.com", "count": 2, "total_saved": 12.5},
        {"website": "b.com", "count": 1, "total_saved": 5.0},
    ]


@pytest.mark.asyncio
async def test_daily_savings_for_given_day(db, add_save) -> None:
    await add_save(7.0, datetime(2025, 2, 10, 12))
    result = await get_daily_savings(db, "user_1", day=date(2025, 2, 10), now=NOW)
    assert result["total_saved"] == 7.0


def test_resolve_window_periods() -> None:
    assert resolve_stats_window("day", None, None, NOW) == ("day", datetime(2025, 3, 31), NOW)
    assert resolve_stats_window("week", None, None, NOW)[1] == NOW - timedelta(days=7)
    # March 31st minus a month clamps to the end of February
    assert resolve_stats_window("month", None, None, NOW)[1] == datetime(2025, 2, 28, 18, 0)
    assert resolve_stats_window("year", None, None, NOW)[1] == datetime(2024, 3, 31, 18, 0)
    assert resolve_stats_window("all", None, None, NOW)[1] == datetime(1970, 1, 1)
    assert resolve_stats_window("fortnight", None, None, NOW)[0] == "week"


def test_resolve_window_custom_range_wins() -> None:
    period, start, end = resolve_stats_window("day", date(2025, 1, 1), date(2025, 1, 3), NOW)
    assert period == "custom"
    assert start == datetime(2025, 1, 1)
    assert end.date() == date(2025, 1, 3)


def test_resolve_window_rejects_reversed_range() -> None:
    with pytest.raises(ValidationError):
        resolve_stats_window("week", date(2025, 1, 3), date(2025, 1, 1), NOW)


@pytest.mark.asyncio
async def test_savings_stats(db, add_save) -> None:
    await add_save(20.0, datetime(2025, 3, 30, 10), website="a.com", item_name="Lamp")
    await add_save(50.0, datetime(2025, 3, 29, 10), website="b.com", item_name="Chair")
    await add_save(5.0, datetime(2025, 3, 30, 11), website="a.com", item_name="Mug")
    await add_save(999.0, datetime(2025, 3, 1), website="c.com")  # outside the week

    stats = await get_savings_stats(db, "user_1", period="week", now=NOW)

    assert stats["period"]["type"] == "week"
    assert stats["period"]["days"] == 7
    summary = stats["summary"]
    assert summary["total_saved"] == 75.0
    assert summary["purchases_avoided"] == 3
    assert summary["avg_saved_per_day"] == 75.0 / 7
    assert summary["avg_saved_per_purchase"] == 25.0
    assert summary["biggest_save"]["item_name"] == "Chair"

    websites = stats["breakdown"]["by_website"]
    assert [w["website"] for w in websites] == ["b.com", "a.com"]
    assert websites[1]["top_items"] == ["Mug", "Lamp"]
    assert stats["breakdown"]["daily_trend"] == [
        {"date": date(2025, 3, 29), "total_saved": 50.0, "purchases_avoided": 1},
        {"date": date(2025, 3, 30), "total_saved": 25.0, "purchases_avoided": 2},
    ]
    assert [sp.item_name for sp in stats["recent_saves"]] == ["Mug", "Lamp", "Chair"]


@pytest.mark.asyncio
async def test_savings_stats_empty(db) -> None:
    stats = await get_savings_stats(db, "user_1", period="day", now=NOW)
    assert stats["summary"]["total_saved"] == 0
    assert stats["summary"]["avg_saved_per_purchase"] == 0.0
    assert stats["summary"]["biggest_save"] is None
    assert stats["period"]["days"] == 1
