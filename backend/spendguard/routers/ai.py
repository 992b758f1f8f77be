from fastapi import APIRouter, Depends

from ..dependencies import get_llm
from ..services.llm import GeminiClient
from .. import schemas, services

router = APIRouter(tags=["AI"])


@router.post("/roast", response_model=schemas.RoastResponse)
async def roast_cart(body: schemas.RoastRequest, llm: GeminiClient = Depends(get_llm)):
    """Ask the model whether the cart fits the budget. Fails with 502 if it is unavailable."""
    result = await services.roast(llm, body.items, body.amount, body.goals)
    return schemas.RoastResponse(result=result)


@router.post("/categorize", response_model=schemas.CategorizeResponse)
async def categorize_cart(body: schemas.CategorizeRequest, llm: GeminiClient = Depends(get_llm)):
    """Group cart items by spending category."""
    categories = await services.categorize_cart(llm, body.items)
    return schemas.CategorizeResponse(categories=categories)


@router.get("/ai/rate-limit")
async def get_rate_limit(llm: GeminiClient = Depends(get_llm)):
    """Remaining daily and per-minute LLM requests."""
    return llm.rate_limit_status()
