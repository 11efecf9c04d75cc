import uuid
from datetime import date
from types import SimpleNamespace


def make_category(name, type_="expense", color="#EF4444", icon="fas fa-tag"):
    return SimpleNamespace(id=uuid.uuid4(), name=name, type=type_, color=color, icon=icon)


def make_tx(amount, type_, day, category=None, description="Test transaction"):
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return SimpleNamespace(
        id=uuid.uuid4(),
        category_id=category.id if category is not None else uuid.uuid4(),
        amount=amount,
        type=type_,
        date=day,
        description=description,
    )
