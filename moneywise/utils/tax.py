# moneywise/utils/tax.py
import math
from typing import Any, Dict

# Annual tax-free allowance (PTKP) per filing status for 2024
PTKP_RATES = {
    "TK/0": 54_000_000,  # single, no dependents
    "K/0": 58_500_000,   # married, no dependents
    "K/1": 63_000_000,
    "K/2": 67_500_000,
    "K/3": 72_000_000,
}
DEFAULT_MARITAL_STATUS = "TK/0"

# (upper bound of the band, rate in percent); the last band is open ended
TAX_BRACKETS = (
    (60_000_000, 5),
    (250_000_000, 15),
    (500_000_000, 25),
    (None, 30),
)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# ────────────────────────────────────────────────────────────────────────────────
# BRACKETS
# ────────────────────────────────────────────────────────────────────────────────
def progressive_tax(taxable_income: float) -> float:
    """Tax on ``taxable_income`` with every band taxed at its own rate."""
    tax = 0.0
    lower = 0.0
    for upper, rate in TAX_BRACKETS:
        if taxable_income <= lower:
            break
        top = taxable_income if upper is None else min(taxable_income, upper)
        tax += (top - lower) * rate / 100
        if upper is None:
            break
        lower = upper
    return tax


def marginal_rate(taxable_income: float) -> int:
    for upper, rate in TAX_BRACKETS:
        if upper is None or taxable_income <= upper:
            return rate
    return TAX_BRACKETS[-1][1]


# ────────────────────────────────────────────────────────────────────────────────
# CALCULATOR
# ────────────────────────────────────────────────────────────────────────────────
def calculate_income_tax(
    gross_monthly_income: float,
    marital_status: str = DEFAULT_MARITAL_STATUS,
    job_expenses: float = 0,
    pension_contribution: float = 0,
) -> Dict[str, Any]:
    """
    Annual personal income tax from monthly figures.

    Monthly deductions are annualised and subtracted together with the PTKP
    allowance; an unknown filing status falls back to ``TK/0``.
    """
    ptkp = PTKP_RATES.get(marital_status, PTKP_RATES[DEFAULT_MARITAL_STATUS])

    annual_income = float(gross_monthly_income) * 12
    deductions = (float(job_expenses or 0) + float(pension_contribution or 0)) * 12
    net_income = annual_income - deductions
    taxable_income = max(0.0, net_income - ptkp)

    tax = progressive_tax(taxable_income)

    return {
        "gross_income": annual_income,
        "deductions": deductions,
        "net_income": net_income,
        "ptkp": ptkp,
        "taxable_income": taxable_income,
        "annual_tax": round_half_up(tax),
        "monthly_tax": round_half_up(tax / 12),
        "effective_rate": (tax / taxable_income * 100) if taxable_income > 0 else 0.0,
        "marginal_rate": marginal_rate(taxable_income),
    }
