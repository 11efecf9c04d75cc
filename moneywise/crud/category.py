# moneywise/crud/category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from moneywise.models.category import Category, EntryType
from typing import List, Optional
import uuid
from moneywise.schemas.category import CategoryCreate, CategoryUpdate

async def get_categories_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category).where(Category.user_id == user_id).order_by(Category.type, Category.name)
    )
    return result.scalars().all()

async def get_categories_by_type(user_id: uuid.UUID, entry_type: str, db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category)
        .where(Category.user_id == user_id, Category.type == EntryType(entry_type))
        .order_by(Category.name)
    )
    return result.scalars().all()

async def get_category_by_id(category_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Category]:
    result = await db.execute(
        select(Category).where(Category.id == category_id, Category.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_category_for_user(user_id: uuid.UUID, cat_in: CategoryCreate, db: AsyncSession) -> Category:
    new_cat = Category(**cat_in.model_dump(), user_id=user_id)
    db.add(new_cat)
    await db.commit()
    await db.refresh(new_cat)
    return new_cat

async def update_category(category: Category, cat_in: CategoryUpdate, db: AsyncSession) -> Category:
    for field, value in cat_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(category, field, value)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category

async def delete_category(category: Category, db: AsyncSession) -> None:
    await db.delete(category)
    await db.commit()


# Default categories created once for every new account
DEFAULT_CATEGORIES: List[dict] = [
    # Income
    {"name": "Salary", "icon": "fas fa-briefcase", "color": "#10B981", "type": "income"},
    {"name": "Bonus", "icon": "fas fa-gift", "color": "#059669", "type": "income"},
    {"name": "Investments", "icon": "fas fa-chart-line", "color": "#047857", "type": "income"},
    {"name": "Freelance", "icon": "fas fa-laptop", "color": "#065F46", "type": "income"},
    {"name": "Other", "icon": "fas fa-plus", "color": "#064E3B", "type": "income"},
    # Expense
    {"name": "Food", "icon": "fas fa-utensils", "color": "#EF4444", "type": "expense"},
    {"name": "Transportation", "icon": "fas fa-car", "color": "#3B82F6", "type": "expense"},
    {"name": "Entertainment", "icon": "fas fa-gamepad", "color": "#F59E0B", "type": "expense"},
    {"name": "Health", "icon": "fas fa-heart", "color": "#10B981", "type": "expense"},
    {"name": "Shopping", "icon": "fas fa-shopping-bag", "color": "#8B5CF6", "type": "expense"},
    {"name": "Bills", "icon": "fas fa-file-invoice", "color": "#DC2626", "type": "expense"},
    {"name": "Education", "icon": "fas fa-graduation-cap", "color": "#7C3AED", "type": "expense"},
    {"name": "Other", "icon": "fas fa-ellipsis-h", "color": "#6B7280", "type": "expense"},
]

async def ensure_default_categories(user_id: uuid.UUID, db: AsyncSession) -> List[Category]:
    """Create whichever default categories the user is missing.

    Matching is on (lower-cased name, type), so calling this again is a no-op.
    Returns the categories that were created (empty if none were needed).
    """
    result = await db.execute(select(Category.name, Category.type).where(Category.user_id == user_id))
    existing = {(name.lower(), EntryType(entry_type)) for name, entry_type in result.all()}

    categories_to_create: List[Category] = []
    for cat in DEFAULT_CATEGORIES:
        if (cat["name"].lower(), EntryType(cat["type"])) not in existing:
            categories_to_create.append(
                Category(
                    user_id=user_id,
                    name=cat["name"],
                    type=EntryType(cat["type"]),
                    icon=cat["icon"],
                    color=cat["color"],
                )
            )

    if categories_to_create:
        db.add_all(categories_to_create)
        await db.commit()
        for c in categories_to_create:
            await db.refresh(c)

    return categories_to_create
