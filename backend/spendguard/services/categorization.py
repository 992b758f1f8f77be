"""Purchase categorization through the text-generation service."""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..models import PURCHASE_CATEGORIES
from .llm import TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "other"

CATEGORY_DISPLAY_NAMES = {
    "food": "Food & Dining",
    "fashion": "Fashion & Apparel",
    "entertainment": "Entertainment",
    "transport": "Transportation",
    "travel": "Travel",
    "living": "Living & Household",
    "other": "Other",
}

CATEGORY_ICONS = {
    "food": "🍔",
    "fashion": "👕",
    "entertainment": "🎮",
    "transport": "🚗",
    "travel": "✈️",
    "living": "🏠",
    "other": "📦",
}

_PROMPT_CATEGORIES = ", ".join(c for c in PURCHASE_CATEGORIES if c != DEFAULT_CATEGORY)


def build_categorize_prompt(item_name: str, description: Optional[str] = None) -> str:
    item_info = f"{item_name} ({description})" if description else item_name
    return (
        f'Categorize "{item_info}" into one of the following categories: {_PROMPT_CATEGORIES}. '
        f'If it doesn\'t fit any category, respond with "{DEFAULT_CATEGORY}". '
        "Reply with only one word - the category name."
    )


def normalize_category(raw: Optional[str]) -> str:
    """Map a model reply onto the category enum, falling back to ``other``."""
    candidate = (raw or "").lower().replace(".", "").strip()
    if candidate in PURCHASE_CATEGORIES:
        return candidate
    return DEFAULT_CATEGORY


async def categorize_purchase(
    llm: TextGenerator,
    item_name: str,
    description: Optional[str] = None,
) -> str:
    """Categorize a purchase. Never raises; any failure yields ``other``."""
    try:
        reply = await llm.generate(build_categorize_prompt(item_name, description), max_tokens=16)
    except Exception as e:
        logger.warning(f"AI categorization failed for {item_name!r}, using default category: {e}")
        return DEFAULT_CATEGORY
    return normalize_category(reply)


async def categorize_batch(
    llm: TextGenerator,
    items: Sequence[Tuple[str, Optional[str]]],
) -> List[str]:
    """Categorize ``(name, description)`` pairs; results keep input order."""
    return list(await asyncio.gather(
        *(categorize_purchase(llm, name, description) for name, description in items)
    ))


async def categorize_cart(llm: TextGenerator, items: Dict[str, str]) -> Dict[str, List[Dict[str, str]]]:
    """Group cart items ``{item: price}`` by category."""
    names = list(items)
    categories = await categorize_batch(llm, [(name, None) for name in names])

    grouped: Dict[str, List[Dict[str, str]]] = {}
    for name, category in zip(names, categories):
        grouped.setdefault(category, []).append({"item": name, "price": items[name]})
    return grouped


def get_category_display_name(category: str) -> str:
    return CATEGORY_DISPLAY_NAMES.get(category, CATEGORY_DISPLAY_NAMES[DEFAULT_CATEGORY])


def get_category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(category, CATEGORY_ICONS[DEFAULT_CATEGORY])
