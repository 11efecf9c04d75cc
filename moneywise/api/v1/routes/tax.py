# moneywise/api/v1/routes/tax.py
from fastapi import APIRouter, Depends

from moneywise.schemas.tax import TaxCalculationRequest, TaxCalculationResult
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
from moneywise.utils.tax import calculate_income_tax

router = APIRouter(prefix="/tax", tags=["tax"])

@router.post("/calculate", response_model=TaxCalculationResult)
async def calculate_tax(
    request: TaxCalculationRequest,
    user: User = Depends(get_current_user),
):
    """
    Annual income tax estimate from monthly income and deductions.

    - **marital_status**: PTKP filing status, e.g. `TK/0` (single) or `K/2` (married, two dependents)
    - Taxable income is taxed progressively at 5%, 15%, 25% and 30%.
    """
    return calculate_income_tax(
        request.gross_income,
        request.marital_status,
        request.job_expenses,
        request.pension_contribution,
    )
