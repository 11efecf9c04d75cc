# moneywise/api/v1/routes/categories.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Literal
import logging

from moneywise.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate, DefaultCategoriesResult
from moneywise.crud.category import (
    create_category_for_user,
    get_categories_for_user,
    get_categories_by_type,
    get_category_by_id,
    update_category,
    delete_category,
    ensure_default_categories,
)
from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
import uuid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("", response_model=List[CategoryRead])
async def read_categories(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_categories_for_user(user.id, db)

@router.get("/type/{entry_type}", response_model=List[CategoryRead])
async def read_categories_by_type(
    entry_type: Literal["income", "expense"],
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_categories_by_type(user.id, entry_type, db)

@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await create_category_for_user(user.id, cat_in, db)

@router.post("/defaults", response_model=DefaultCategoriesResult)
async def create_default_categories(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Create any default categories the user is missing. Safe to call repeatedly."""
    created = await ensure_default_categories(user.id, db)
    logger.info(f"Default categories for {user.email}: {len(created)} created")
    return DefaultCategoriesResult(
        created_count=len(created),
        categories=[CategoryRead.model_validate(c) for c in await get_categories_for_user(user.id, db)],
    )

@router.get("/{category_id}", response_model=CategoryRead)
async def read_category(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await get_category_by_id(category_id, user.id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category

@router.patch("/{category_id}", response_model=CategoryRead)
async def update_category_endpoint(
    category_id: uuid.UUID,
    cat_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await get_category_by_id(category_id, user.id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    return await update_category(category, cat_in, db)

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_endpoint(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    category = await get_category_by_id(category_id, user.id, db)
    if not category:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Category not found")
    await delete_category(category, db)
    return None
