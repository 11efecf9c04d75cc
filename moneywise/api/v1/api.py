from fastapi import APIRouter

from moneywise.api.v1.routes import (
    advice,
    budgets,
    categories,
    dashboard,
    insights,
    reports,
    savings_goals,
    tax,
    transactions,
)

api_router = APIRouter()

api_router.include_router(categories.router)
api_router.include_router(transactions.router)
api_router.include_router(budgets.router)
api_router.include_router(savings_goals.router)
api_router.include_router(dashboard.router)
api_router.include_router(reports.router)
api_router.include_router(insights.router)
api_router.include_router(advice.router)
api_router.include_router(tax.router)
