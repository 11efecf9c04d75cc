# moneywise/api/v1/routes/transactions.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Literal, Optional
from datetime import date
import uuid

from moneywise.schemas.transaction import (
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
    TransactionSummary,
    TrendPoint,
)
from moneywise.crud.transaction import (
    create_transaction_for_user,
    get_transactions_for_user,
    get_transactions_in_range,
    get_transaction_by_id,
    update_transaction,
    delete_transaction,
)
from moneywise.crud.category import get_category_by_id
from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
from moneywise.utils.aggregation import (
    DEFAULT_TREND_BUCKETS,
    bucket_transactions,
    bucket_window_start,
    trend_series,
)
from moneywise.utils.summary import savings_ratio, summarize, validate_range

router = APIRouter(prefix="/transactions", tags=["transactions"])

@router.get("", response_model=List[TransactionRead])
async def read_transactions(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_transactions_for_user(user.id, db, limit=limit, offset=offset)

@router.get("/summary", response_model=TransactionSummary)
async def read_transaction_summary(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Income, expense and net balance for a date range, both ends inclusive."""
    start, end = validate_range(start_date, end_date)
    transactions = await get_transactions_in_range(user.id, start, end, db)
    summary = summarize(transactions, start, end)
    return TransactionSummary(
        start_date=start,
        end_date=end,
        savings_ratio=savings_ratio(summary),
        **summary,
    )

@router.get("/trends", response_model=List[TrendPoint])
async def read_transaction_trends(
    bucket_by: Literal["month", "week"] = Query("month"),
    last: Optional[int] = Query(None, ge=1, le=120, description="Keep only the most recent buckets"),
    start_date: Optional[date] = Query(None, description="Defaults to the start of the oldest bucket kept"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Income, expense and net per month or week.

    Without a start date only the last ``last`` buckets are loaded, or 12 months / 26 weeks when
    ``last`` is omitted.
    """
    end = end_date or date.today()
    if start_date is None:
        start_date = bucket_window_start(end, bucket_by, last or DEFAULT_TREND_BUCKETS[bucket_by])
    start, end = validate_range(start_date, end)
    transactions = await get_transactions_in_range(user.id, start, end, db)
    return trend_series(bucket_transactions(transactions, bucket_by), last=last)

@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    tx_in: TransactionCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await get_category_by_id(tx_in.category_id, user.id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    return await create_transaction_for_user(user.id, tx_in, category, db)

@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return tx

@router.patch("/{transaction_id}", response_model=TransactionRead)
async def update_transaction_endpoint(
    transaction_id: uuid.UUID,
    tx_in: TransactionUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")

    category_id = tx_in.category_id or tx.category_id
    category = await get_category_by_id(category_id, user.id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    return await update_transaction(tx, tx_in, category, db)

@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction_endpoint(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    await delete_transaction(tx, db)
    return None
