# moneywise/crud/savings_goal.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import case, desc, update
from moneywise.models.savings_goal import SavingsGoal
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import uuid
from moneywise.schemas.savings_goal import SavingsGoalCreate, SavingsGoalUpdate

async def get_savings_goals_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[SavingsGoal]:
    result = await db.execute(
        select(SavingsGoal)
        .where(SavingsGoal.user_id == user_id)
        .order_by(desc(SavingsGoal.created_at))
    )
    return result.scalars().all()

async def get_savings_goal_by_id(
    goal_id: uuid.UUID,
    user_id: uuid.UUID,
    db: AsyncSession,
    refresh: bool = False,
) -> Optional[SavingsGoal]:
    query = select(SavingsGoal).where(SavingsGoal.id == goal_id, SavingsGoal.user_id == user_id)
    if refresh:
        # Overwrite any stale copy already in the identity map
        query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()

async def create_savings_goal_for_user(user_id: uuid.UUID, goal_in: SavingsGoalCreate, db: AsyncSession) -> SavingsGoal:
    data = goal_in.model_dump()
    new_goal = SavingsGoal(
        **data,
        user_id=user_id,
        is_completed=data["current_amount"] >= data["target_amount"],
    )
    db.add(new_goal)
    await db.commit()
    await db.refresh(new_goal)
    return new_goal

async def update_savings_goal(goal: SavingsGoal, goal_in: SavingsGoalUpdate, db: AsyncSession) -> SavingsGoal:
    """Manual edit. Completion is sticky: lowering the amount never reopens a goal."""
    for field, value in goal_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(goal, field, value)
    if float(goal.current_amount or 0) >= float(goal.target_amount):
        goal.is_completed = True
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal

async def add_to_savings_goal(
    goal_id: uuid.UUID,
    user_id: uuid.UUID,
    amount: Decimal,
    db: AsyncSession,
) -> Optional[SavingsGoal]:
    """Atomically add ``amount`` to a goal's current amount.

    A single UPDATE computes the new balance inside the database, so two
    concurrent contributions can never overwrite each other. ``is_completed``
    is set in the same statement once the target is reached.
    Returns None when the goal does not exist for this user.
    """
    new_amount = SavingsGoal.current_amount + amount
    result = await db.execute(
        update(SavingsGoal)
        .where(SavingsGoal.id == goal_id, SavingsGoal.user_id == user_id)
        .values(
            current_amount=new_amount,
            is_completed=case(
                (new_amount >= SavingsGoal.target_amount, True),
                else_=SavingsGoal.is_completed,
            ),
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return None
    await db.commit()
    return await get_savings_goal_by_id(goal_id, user_id, db, refresh=True)

async def delete_savings_goal(goal: SavingsGoal, db: AsyncSession) -> None:
    await db.delete(goal)
    await db.commit()
