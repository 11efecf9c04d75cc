# moneywise/api/v1/routes/budgets.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from datetime import date
import uuid

from moneywise.schemas.budget import BudgetCreate, BudgetRead, BudgetUpdate, BudgetUsage
from moneywise.crud.budget import (
    create_budget_for_user,
    get_budgets_for_user,
    get_budget_by_id,
    update_budget,
    delete_budget,
)
from moneywise.crud.category import get_category_by_id
from moneywise.crud.transaction import get_transactions_in_range
from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
from moneywise.utils.reports import analyze_budget, budget_period_window

router = APIRouter(prefix="/budgets", tags=["budgets"])

@router.get("", response_model=List[BudgetRead])
async def read_budgets(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_budgets_for_user(user.id, db)

@router.get("/usage", response_model=List[BudgetUsage])
async def read_budget_usage(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Spending against every active budget for its current week, month or year."""
    today = date.today()
    budgets = await get_budgets_for_user(user.id, db, active_only=True)
    if not budgets:
        return []
    window_start = min(budget_period_window(b.period, today)[0] for b in budgets)
    transactions = await get_transactions_in_range(user.id, window_start, today, db)
    return [analyze_budget(b, transactions, today) for b in budgets]

@router.post("", response_model=BudgetRead, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget_in: BudgetCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await get_category_by_id(budget_in.category_id, user.id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    return await create_budget_for_user(user.id, budget_in, category, db)

@router.patch("/{budget_id}", response_model=BudgetRead)
async def update_budget_endpoint(
    budget_id: uuid.UUID,
    budget_in: BudgetUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget = await get_budget_by_id(budget_id, user.id, db)
    if not budget:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return await update_budget(budget, budget_in, db)

@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget_endpoint(
    budget_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget = await get_budget_by_id(budget_id, user.id, db)
    if not budget:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Budget not found")
    await delete_budget(budget, db)
    return None
