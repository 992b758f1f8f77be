"""Tests for the daily spending limit check."""
from datetime import datetime, timedelta, timezone

import pytest

from spendguard.errors import UpstreamError, ValidationError
from spendguard.services.purchases import add_purchase
from spendguard.services.spending import evaluate_purchase, fallback_roast_message

NOW = datetime(2025, 3, 14, 15, 30)
MIDNIGHT = datetime(2025, 3, 14)


@pytest.fixture
def daily_limit(add_goal):
    async def _set(limit=100.0, user_id="user_1"):
        return await add_goal(user_id=user_id, name="Daily Spending Limit", type="daily_spending",
                              target_amount=limit, period="daily", is_default=True)
    return _set


@pytest.mark.asyncio
async def test_no_daily_goal_always_allows(db, llm) -> None:
    check = await evaluate_purchase(db, llm, "user_1", "Yacht", 1_000_000, now=NOW)
    assert check.can_purchase is True
    assert check.is_overspending is False
    assert check.daily_limit == 0
    assert check.spent_today == 0
    assert check.remaining == 0
    assert check.new_total == 1_000_000
    assert check.roast_message is None
    assert llm.prompts == []


@pytest.mark.asyncio
async def test_non_default_daily_goal_is_ignored(db, llm, add_goal) -> None:
    await add_goal(type="daily_spending", period="daily", target_amount=1.0, is_default=False)
    check = await evaluate_purchase(db, llm, "user_1", "Coffee", 5.0, now=NOW)
    assert check.can_purchase is True
    assert check.daily_limit == 0


@pytest.mark.asyncio
async def test_over_limit(db, llm, daily_limit, add_purchase_row) -> None:
    await daily_limit(100.0)
    await add_purchase_row(price=50.0, purchase_date=MIDNIGHT)
    await add_purchase_row(price=30.0, purchase_date=NOW - timedelta(hours=1))
    llm.reply = "Put the headphones down."

    check = await evaluate_purchase(db, llm, "user_1", "Headphones", 25.0, now=NOW)

    assert check.spent_today == 80.0
    assert check.new_total == 105.0
    assert check.is_overspending is True
    assert check.can_purchase is False
    assert check.overspend_amount == 5.0
    assert check.remaining == 20.0
    assert check.roast_message == "Put the headphones down."


@pytest.mark.asyncio
async def test_exactly_at_limit_is_allowed(db, llm, daily_limit, add_purchase_row) -> None:
    await daily_limit(100.0)
    await add_purchase_row(price=80.0, purchase_date=NOW)

    check = await evaluate_purchase(db, llm, "user_1", "Lunch", 20.0, now=NOW)

    assert check.new_total == 100.0
    assert check.is_overspending is False
    assert check.can_purchase is True
    assert check.overspend_amount == 0
    assert check.roast_message is None
    assert llm.prompts == []


@pytest.mark.asyncio
async def test_window_is_today_only(db, llm, daily_limit, add_purchase_row) -> None:
    await daily_limit(100.0)
    await add_purchase_row(price=500.0, purchase_date=MIDNIGHT - timedelta(microseconds=1))
    await add_purchase_row(price=500.0, purchase_date=MIDNIGHT + timedelta(days=1))
    await add_purchase_row(price=500.0, user_id="user_2", purchase_date=NOW)
    await add_purchase_row(price=10.0, purchase_date=MIDNIGHT)

    check = await evaluate_purchase(db, llm, "user_1", "Book", 15.0, now=NOW)

    assert check.spent_today == 10.0
    assert check.new_total == 25.0
    assert check.can_purchase is True


@pytest.mark.asyncio
async def test_roast_prompt_carries_budget_and_savings_goals(db, llm, daily_limit, add_goal) -> None:
    await daily_limit(20.0)
    await add_goal(name="Japan trip", type="savings", target_amount=1500.0, period="yearly")
    await add_goal(name="Misc", type="custom", target_amount=99.0)

    await evaluate_purchase(db, llm, "user_1", "Console", 499.99, now=NOW)

    assert len(llm.prompts) == 1
    prompt = llm.prompts[0]
    assert "I am buying Console for $499.99." in prompt
    assert "I have a budget of $20.00 left." in prompt
    assert "save $1500 for Japan trip by yearly" in prompt
    assert "Misc" not in prompt


@pytest.mark.asyncio
async def test_llm_failure_falls_back_to_template(db, llm, daily_limit, add_purchase_row) -> None:
    await daily_limit(100.0)
    await add_purchase_row(price=80.0, purchase_date=NOW)
    llm.error = UpstreamError("boom")

    check = await evaluate_purchase(db, llm, "user_1", "Headphones", 25.0, now=NOW)

    assert check.can_purchase is False
    assert check.roast_message == (
        "You're about to spend $25.00 on Headphones, which would put you at $105.00 for today. "
        "Your daily limit is $100.00. That's $5.00 over budget! Maybe reconsider this purchase?"
    )


@pytest.mark.asyncio
async def test_unexpected_llm_exception_also_falls_back(db, llm, daily_limit) -> None:
    await daily_limit(10.0)
    llm.error = RuntimeError("socket closed")
    check = await evaluate_purchase(db, llm, "user_1", "Shoes", 12.5, now=NOW)
    assert check.roast_message == fallback_roast_message("Shoes", 12.5, 12.5, 10.0)


@pytest.mark.asyncio
async def test_empty_roast_falls_back_to_template(db, llm, daily_limit) -> None:
    await daily_limit(10.0)
    llm.reply = "   "
    check = await evaluate_purchase(db, llm, "user_1", "Shoes", 12.5, now=NOW)
    assert check.roast_message.startswith("You're about to spend $12.50 on Shoes")


@pytest.mark.asyncio
@pytest.mark.parametrize("price", [-1, None, "12", False, float("nan")])
async def test_invalid_price(db, llm, price) -> None:
    with pytest.raises(ValidationError):
        await evaluate_purchase(db, llm, "user_1", "Thing", price, now=NOW)


@pytest.mark.asyncio
async def test_zero_price_is_valid(db, llm, daily_limit) -> None:
    await daily_limit(0.0)
    check = await evaluate_purchase(db, llm, "user_1", "Freebie", 0, now=NOW)
    assert check.new_total == 0.0
    assert check.can_purchase is True


@pytest.mark.asyncio
async def test_offset_purchase_date_counts_on_its_local_day(db, llm, daily_limit) -> None:
    await daily_limit(100.0)
    local_noon = datetime(2025, 3, 14, 12, 0)
    # Same instant written in UTC+14, which is already the next day on most clocks
    far_east = local_noon.astimezone().astimezone(timezone(timedelta(hours=14)))

    purchase = await add_purchase(db, llm, "user_1", "Jacket", 90.0, "shop.com", purchase_date=far_east)
    assert purchase.purchase_date == local_noon
    assert purchase.purchase_date.tzinfo is None

    check = await evaluate_purchase(db, llm, "user_1", "Scarf", 5.0, now=NOW)
    assert check.spent_today == 90.0

    next_day = await evaluate_purchase(db, llm, "user_1", "Scarf", 5.0, now=NOW + timedelta(days=1))
    assert next_day.spent_today == 0.0
