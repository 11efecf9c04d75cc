# moneywise/api/v1/routes/savings_goals.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging
import uuid

from moneywise.schemas.savings_goal import (
    Contribution,
    GoalProgress,
    SavingsGoalCreate,
    SavingsGoalRead,
    SavingsGoalUpdate,
    SimulationRequest,
    SimulationResult,
)
from moneywise.crud.savings_goal import (
    add_to_savings_goal,
    create_savings_goal_for_user,
    delete_savings_goal,
    get_savings_goal_by_id,
    get_savings_goals_for_user,
    update_savings_goal,
)
from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
from moneywise.utils.projection import goal_progress, project

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/savings-goals", tags=["savings goals"])

@router.get("", response_model=List[SavingsGoalRead])
async def read_savings_goals(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_savings_goals_for_user(user.id, db)

@router.post("/simulate", response_model=SimulationResult)
async def simulate_savings_goal(
    simulation: SimulationRequest,
    user: User = Depends(get_current_user),
):
    """
    How much has to be put aside per day, week and month to reach a target.

    - **target_date** must be in the future, otherwise the request is rejected with 400.
    - **feasibility_score** runs from 20 (very hard) to 90 (very realistic).
    """
    return project(simulation.target_amount, simulation.current_amount, simulation.target_date)

@router.post("", response_model=SavingsGoalRead, status_code=status.HTTP_201_CREATED)
async def create_savings_goal(
    goal_in: SavingsGoalCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await create_savings_goal_for_user(user.id, goal_in, db)

@router.get("/{goal_id}", response_model=SavingsGoalRead)
async def read_savings_goal(
    goal_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_savings_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings goal not found")
    return goal

@router.patch("/{goal_id}", response_model=SavingsGoalRead)
async def update_savings_goal_endpoint(
    goal_id: uuid.UUID,
    goal_in: SavingsGoalUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_savings_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings goal not found")
    return await update_savings_goal(goal, goal_in, db)

@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_savings_goal_endpoint(
    goal_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_savings_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings goal not found")
    await delete_savings_goal(goal, db)
    return None

@router.post("/{goal_id}/contributions", response_model=SavingsGoalRead)
async def add_contribution(
    goal_id: uuid.UUID,
    contribution: Contribution,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Add money to a goal. Concurrent contributions are never lost."""
    goal = await add_to_savings_goal(goal_id, user.id, contribution.amount, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings goal not found")
    if goal.is_completed:
        logger.info(f"🎉 Savings goal {goal.name} completed for {user.email}")
    return goal

@router.get("/{goal_id}/progress", response_model=GoalProgress)
async def read_savings_goal_progress(
    goal_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_savings_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings goal not found")

    progress = goal_progress(goal.target_amount, goal.current_amount, goal.target_date)
    # Completion is sticky even if the target was raised afterwards
    progress["is_completed"] = progress["is_completed"] or goal.is_completed
    return GoalProgress(goal_id=goal.id, **progress)
