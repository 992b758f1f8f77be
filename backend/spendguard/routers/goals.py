from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from .. import schemas, services

router = APIRouter(prefix="/goals", tags=["Goals"])


@router.get("/", response_model=schemas.GoalListResponse)
async def list_goals(user_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    """All goals for a user, default goal first."""
    goals = await services.get_goals(db, user_id)
    return schemas.GoalListResponse(goals=[schemas.GoalOut.model_validate(g) for g in goals])


@router.post("/", response_model=schemas.GoalResponse, status_code=201)
async def create_goal(goal_data: schemas.GoalCreate, db: AsyncSession = Depends(get_db)):
    goal = await services.create_goal(
        db,
        goal_data.user_id,
        name=goal_data.name,
        type=goal_data.type,
        target_amount=goal_data.target_amount,
        period=goal_data.period,
        is_default=goal_data.is_default,
        current_amount=goal_data.current_amount,
    )
    return schemas.GoalResponse(goal=schemas.GoalOut.model_validate(goal), message="Goal created successfully")


@router.post("/initialize", response_model=schemas.GoalResponse)
async def initialize_goal(
    body: schemas.UserRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Give a new user the default $100/day spending limit."""
    goal, created = await services.initialize_default_goal(db, body.user_id)
    if created:
        response.status_code = 201
    return schemas.GoalResponse(
        goal=schemas.GoalOut.model_validate(goal),
        message="Default goal created successfully" if created else "User already has a default goal",
    )


@router.put("/{goal_id}", response_model=schemas.GoalResponse)
async def update_goal(
    goal_id: int,
    goal_data: schemas.GoalUpdate,
    db: AsyncSession = Depends(get_db)
):
    fields = goal_data.model_dump(exclude_unset=True, exclude_none=True, exclude={"user_id"})
    goal = await services.update_goal(db, goal_data.user_id, goal_id, fields)
    return schemas.GoalResponse(goal=schemas.GoalOut.model_validate(goal), message="Goal updated successfully")


@router.post("/reset-daily", response_model=schemas.ResetDailyResponse)
async def reset_daily_goals(body: schemas.UserRequest, db: AsyncSession = Depends(get_db)):
    """Zero out daily spending goals. Meant for a daily cron or first login of the day."""
    count = await services.reset_daily_goals(db, body.user_id)
    return schemas.ResetDailyResponse(reset_count=count, message=f"Reset {count} daily spending goal(s)")


@router.post("/add-savings", response_model=schemas.AddSavingsResponse)
async def add_savings(body: schemas.AddSavingsRequest, db: AsyncSession = Depends(get_db)):
    """
    Called when the user clicks "I'll save" instead of buying.

    Distribution methods:
    - equal: split across all savings/custom goals
    - proportional: bigger targets get a bigger share
    - priority: everything to the default goal, or equal split without one
    """
    metadata = services.SavingsMetadata(
        item_name=body.item_name,
        website=body.website,
        url=body.url,
        description=body.description,
        currency=body.currency,
        extra_data=body.metadata,
    )
    result = await services.distribute(db, body.user_id, body.amount, body.distribution, metadata)

    return schemas.AddSavingsResponse(
        message=f"Successfully added ${result.total_amount:.2f} to {len(result.allocations)} goal(s)",
        distribution_method=result.distribution_method,
        total_amount=result.total_amount,
        saved_purchase_id=result.saved_purchase.id,
        goals_updated=[
            schemas.GoalAllocationOut(
                id=a.goal.id,
                name=a.goal.name,
                previous_amount=a.previous_amount,
                new_amount=a.new_amount,
                amount_added=a.amount_added,
                target_amount=a.goal.target_amount,
                progress_percentage=services.progress_percentage(a.goal),
            )
            for a in result.allocations
        ],
    )
