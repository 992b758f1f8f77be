from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..dependencies import get_current_user_id, get_llm
from ..models import PURCHASE_CATEGORIES
from ..services.llm import GeminiClient
from .. import schemas, services

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.post("/check-spending", response_model=schemas.SpendingCheckResponse)
async def check_spending(
    body: schemas.SpendingCheckRequest,
    db: AsyncSession = Depends(get_db),
    llm: GeminiClient = Depends(get_llm),
):
    """Would this purchase push the user over today's limit? Roasts them if so."""
    check = await services.evaluate_purchase(db, llm, body.user_id, body.item_name, body.price)
    return schemas.SpendingCheckResponse(**check.to_dict())


@router.post("/", response_model=schemas.PurchaseResponse, status_code=201)
async def add_purchase(
    body: schemas.PurchaseCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    llm: GeminiClient = Depends(get_llm),
):
    purchase = await services.add_purchase(
        db,
        llm,
        user_id,
        item_name=body.item_name,
        price=body.price,
        website=body.website,
        currency=body.currency,
        url=body.url,
        description=body.description,
        purchase_date=body.purchase_date,
        extra_data=body.metadata,
    )
    return schemas.PurchaseResponse(
        purchase=schemas.PurchaseOut.model_validate(purchase),
        message="Purchase added successfully",
    )


@router.get("/", response_model=schemas.PurchaseListResponse)
async def list_purchases(
    user_id: str = Query(...),
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    sort: Literal["asc", "desc"] = "desc",
    db: AsyncSession = Depends(get_db),
):
    result = await services.list_purchases(
        db, user_id, limit=limit, offset=offset, category=category,
        start_date=start_date, end_date=end_date, sort=sort,
    )
    return schemas.PurchaseListResponse.model_validate(result, from_attributes=True)


@router.get("/categories", response_model=List[schemas.CategoryInfo])
async def list_categories():
    return [
        schemas.CategoryInfo(
            id=category,
            name=services.get_category_display_name(category),
            icon=services.get_category_icon(category),
        )
        for category in PURCHASE_CATEGORIES
    ]
