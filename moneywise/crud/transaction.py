# moneywise/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc
from moneywise.core.errors import CategoryTypeMismatchError
from moneywise.models.category import Category
from moneywise.models.transaction import Transaction
from typing import List, Optional
from datetime import date
import uuid
from moneywise.schemas.transaction import TransactionCreate, TransactionUpdate


def validate_category_type(category: Category, entry_type: str) -> None:
    """A transaction must carry the same income/expense type as its category."""
    expected = getattr(category.type, "value", category.type)
    if expected != entry_type:
        raise CategoryTypeMismatchError(expected, entry_type)


async def get_transactions_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Transaction]:
    """Newest first; no limit returns the full history."""
    query = (
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(desc(Transaction.date), desc(Transaction.created_at))
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return result.scalars().all()

async def get_transactions_in_range(
    user_id: uuid.UUID,
    start_date: date,
    end_date: date,
    db: AsyncSession,
) -> List[Transaction]:
    """Transactions dated inside [start_date, end_date], both ends inclusive."""
    result = await db.execute(
        select(Transaction)
        .where(
            Transaction.user_id == user_id,
            Transaction.date >= start_date,
            Transaction.date <= end_date,
        )
        .order_by(desc(Transaction.date))
    )
    return result.scalars().all()

async def get_transaction_by_id(transaction_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_transaction_for_user(
    user_id: uuid.UUID,
    tx_in: TransactionCreate,
    category: Category,
    db: AsyncSession,
) -> Transaction:
    validate_category_type(category, tx_in.type)
    new_tx = Transaction(**tx_in.model_dump(), user_id=user_id)
    db.add(new_tx)
    await db.commit()
    await db.refresh(new_tx)
    return new_tx

async def update_transaction(
    tx: Transaction,
    tx_in: TransactionUpdate,
    category: Category,
    db: AsyncSession,
) -> Transaction:
    """``category`` is the category the transaction will belong to after the update."""
    changes = tx_in.model_dump(exclude_unset=True, exclude_none=True)
    new_type = changes.get("type") or getattr(tx.type, "value", tx.type)
    validate_category_type(category, new_type)

    for field, value in changes.items():
        setattr(tx, field, value)
    db.add(tx)
    await db.commit()
    await db.refresh(tx)
    return tx

async def delete_transaction(tx: Transaction, db: AsyncSession) -> None:
    await db.delete(tx)
    await db.commit()
