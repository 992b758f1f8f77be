"""Prompts asking the model to talk the user out of a purchase."""

import logging
from typing import Dict, Sequence

from .llm import TextGenerator

logger = logging.getLogger(__name__)

ROAST_ACTION = (
    "if it is responsible or within budget, please say approved. "
    "if it is irresponsible, please roast me and stop me from buying it in 5 lines."
)


def build_roast_prompt(
    items: Dict[str, str],
    amount: str,
    goals: Dict[str, Sequence[str]],
) -> str:
    """Build the roast prompt.

    Args:
        items: item name -> formatted price, e.g. ``{"Sneakers": "$120.00"}``
        amount: formatted budget left, e.g. ``"$100.00"``
        goals: goal name -> ``(what, by_when)``, e.g. ``{"Trip": ("save $500", "monthly")}``
    """
    list_of_items = ", ".join(f"{name} for {price}" for name, price in items.items())
    list_of_goals = ", ".join(f"{what} for {name} by {when}" for name, (what, when) in goals.items())
    return (
        f"I am buying {list_of_items}. I have a budget of {amount} left. "
        f"and I have these goals: {list_of_goals}. {ROAST_ACTION} "
    )


async def roast(
    llm: TextGenerator,
    items: Dict[str, str],
    amount: str,
    goals: Dict[str, Sequence[str]],
) -> str:
    """Ask the model for a verdict. Errors from ``llm`` propagate."""
    return await llm.generate(build_roast_prompt(items, amount, goals), max_tokens=512)
