# moneywise/utils/advice.py
import json
import logging
import math
from typing import Any, Dict, Optional, Protocol, Sequence

import httpx

from moneywise.core.config import settings
from moneywise.utils.insights import OPENROUTER_URL, strip_code_fences

logger = logging.getLogger(__name__)

RECOMMENDATIONS = ("buy", "wait", "skip")

# Share of the monthly surplus that can go to a purchase without hurting savings
IMPULSE_BUDGET_SHARE = 0.3
# A purchase costing more than this many months of surplus is not worth waiting for
MAX_WAIT_MONTHS = 3
EMERGENCY_FUND_MONTHS = 6


def financial_profile(transactions: Sequence[Any], goals: Sequence[Any]) -> Dict[str, Any]:
    """Income, expenses and savings goal totals the advisor reasons about."""
    income = sum(float(t.amount) for t in transactions if t.type == "income")
    expenses = sum(float(t.amount) for t in transactions if t.type == "expense")
    return {
        "monthly_income": income,
        "monthly_expenses": expenses,
        "net_balance": income - expenses,
        "current_savings": max(0.0, income - expenses),
        "savings_goals": len(goals),
        "total_savings_target": sum(float(g.target_amount or 0) for g in goals),
        "total_current_savings": sum(float(g.current_amount or 0) for g in goals),
    }


def price_to_income_ratio(price: float, profile: Dict[str, Any]) -> float:
    income = profile["monthly_income"]
    return (float(price) / income * 100) if income > 0 else 0.0


class FinancialAdvisor(Protocol):
    async def purchase_decision(
        self, item: str, price: float, description: str, profile: Dict[str, Any]
    ) -> Dict[str, Any]:
        ...

    async def financial_advice(self, profile: Dict[str, Any]) -> str:
        ...


# ────────────────────────────────────────────────────────────────────────────────
# RULE BASED
# ────────────────────────────────────────────────────────────────────────────────
class RuleBasedAdvisor:
    """Deterministic advice used when no AI provider is available."""

    async def purchase_decision(
        self, item: str, price: float, description: str, profile: Dict[str, Any]
    ) -> Dict[str, Any]:
        price = float(price)
        surplus = profile["monthly_income"] - profile["monthly_expenses"]

        if surplus <= 0:
            return {
                "recommendation": "skip",
                "reasoning": (
                    f"Your expenses already match or exceed your income, so buying {item} "
                    f"for {price:,.2f} would have to come out of your savings."
                ),
                "alternatives": "Bring monthly spending below income before planning new purchases.",
            }

        if price <= surplus * IMPULSE_BUDGET_SHARE:
            return {
                "recommendation": "buy",
                "reasoning": (
                    f"{item} costs {price:,.2f}, which fits comfortably in your monthly surplus "
                    f"of {surplus:,.2f}."
                ),
                "alternatives": None,
            }

        months = math.ceil(price / (surplus * IMPULSE_BUDGET_SHARE))
        if price <= surplus * MAX_WAIT_MONTHS:
            return {
                "recommendation": "wait",
                "reasoning": (
                    f"{item} would use {price / surplus * 100:.0f}% of your monthly surplus of {surplus:,.2f}."
                ),
                "alternatives": (
                    f"Put aside {surplus * IMPULSE_BUDGET_SHARE:,.2f} per month and buy it in {months} months."
                ),
            }

        return {
            "recommendation": "skip",
            "reasoning": (
                f"{item} costs more than {MAX_WAIT_MONTHS} months of your surplus of {surplus:,.2f}."
            ),
            "alternatives": "Look for a cheaper alternative or a second-hand option.",
        }

    async def financial_advice(self, profile: Dict[str, Any]) -> str:
        income = profile["monthly_income"]
        expenses = profile["monthly_expenses"]
        if income <= 0:
            return "Record your income to receive personalised financial advice."

        balance = income - expenses
        rate = balance / income * 100
        lines = [f"Your savings rate is {rate:.1f}% ({balance:,.2f} left each month)."]

        if rate < 0:
            lines.append("You are spending more than you earn. Cut non-essential expenses first.")
        elif rate < 20:
            lines.append("Aim to save at least 20% of your income.")
        else:
            lines.append("You are saving more than 20% of your income. Keep it up.")

        lines.append(
            f"50/30/20 budget: {income * 0.5:,.2f} for needs, "
            f"{income * 0.3:,.2f} for wants and {income * 0.2:,.2f} for savings."
        )
        lines.append(
            f"Build an emergency fund of {expenses * EMERGENCY_FUND_MONTHS:,.2f} "
            f"({EMERGENCY_FUND_MONTHS} months of expenses)."
        )
        if profile["savings_goals"]:
            remaining = max(0.0, profile["total_savings_target"] - profile["total_current_savings"])
            lines.append(
                f"You still need {remaining:,.2f} across {profile['savings_goals']} savings goals."
            )
        else:
            lines.append("Create a savings goal to give your surplus a purpose.")
        return "\n".join(lines)


# ────────────────────────────────────────────────────────────────────────────────
# OPENROUTER
# ────────────────────────────────────────────────────────────────────────────────
def parse_purchase_decision(raw: str) -> Dict[str, Any]:
    """Parse the model's JSON verdict, tolerating markdown code fences."""
    data = json.loads(strip_code_fences(raw))
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object with a recommendation")
    recommendation = str(data.get("recommendation", "")).lower()
    if recommendation not in RECOMMENDATIONS:
        raise ValueError(f"Unknown recommendation: {recommendation!r}")
    alternatives = data.get("alternatives")
    return {
        "recommendation": recommendation,
        "reasoning": str(data["reasoning"]),
        "alternatives": str(alternatives) if alternatives else None,
    }


class OpenRouterAdvisor:
    system_prompt = """
    You are an experienced personal finance advisor. Give practical, realistic advice
    with concrete steps the user can act on. Use the currency amounts as given.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        fallback: Optional[FinancialAdvisor] = None,
        timeout: float = 20.0,
    ):
        self.api_key = api_key
        self.model = model
        self.fallback = fallback or RuleBasedAdvisor()
        self.timeout = timeout

    async def complete(self, prompt: str, max_tokens: int) -> str:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                OPENROUTER_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "HTTP-Referer": settings.BACKEND_BASE_URL,
                    "X-Title": "MoneyWise Financial Advisor",
                },
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": self.system_prompt},
                        {"role": "user", "content": prompt},
                    ],
                    "temperature": 0.7,
                    "max_tokens": max_tokens,
                },
                timeout=self.timeout,
            )
        response.raise_for_status()
        return response.json().get("choices", [{}])[0].get("message", {}).get("content", "")

    async def purchase_decision(
        self, item: str, price: float, description: str, profile: Dict[str, Any]
    ) -> Dict[str, Any]:
        prompt = f"""
        Should the user buy this item?

        Item: {item}
        Price: {float(price):,.2f}
        Notes: {description or "-"}

        User profile:
        - Monthly income: {profile["monthly_income"]:,.2f}
        - Monthly expenses: {profile["monthly_expenses"]:,.2f}
        - Disposable income: {profile["monthly_income"] - profile["monthly_expenses"]:,.2f}
        - Savings goals: {profile["savings_goals"]}
        - Current savings: {profile["current_savings"]:,.2f}
        - Price to income ratio: {price_to_income_ratio(price, profile):.1f}%

        Consider whether it is a need or a want, the effect on monthly cash flow and
        savings goals, timing and value for money.

        Respond with a JSON object only:
        {{"recommendation": "buy" | "wait" | "skip", "reasoning": "...", "alternatives": "..."}}
        """
        try:
            decision = parse_purchase_decision(await self.complete(prompt, max_tokens=400))
            logger.info(f"AI purchase decision for {item}: {decision['recommendation']}")
            return decision
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"AI purchase analysis failed, using rule based decision: {e}")
            return await self.fallback.purchase_decision(item, price, description, profile)

    async def financial_advice(self, profile: Dict[str, Any]) -> str:
        income = profile["monthly_income"]
        rate = ((income - profile["monthly_expenses"]) / income * 100) if income > 0 else 0.0
        prompt = f"""
        Give comprehensive financial advice for this profile:
        - Monthly income: {income:,.2f}
        - Monthly expenses: {profile["monthly_expenses"]:,.2f}
        - Monthly balance: {profile["net_balance"]:,.2f}
        - Savings rate: {rate:.1f}%
        - Number of savings goals: {profile["savings_goals"]}

        Cover: an evaluation of the current situation, a budget split (50/30/20 or
        adjusted), ways to cut spending, ways to grow income, an emergency fund plan
        and tips to reach the savings goals.
        """
        try:
            advice = (await self.complete(prompt, max_tokens=1024)).strip()
            if not advice:
                raise ValueError("Empty advice from model")
            logger.info("Generated AI financial advice")
            return advice
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"AI financial advice failed, using rule based advice: {e}")
            return await self.fallback.financial_advice(profile)


def get_financial_advisor() -> FinancialAdvisor:
    """FastAPI dependency; tests override it with a deterministic fake."""
    if settings.OPENROUTER_API_KEY:
        return OpenRouterAdvisor(settings.OPENROUTER_API_KEY, settings.OPENROUTER_MODEL)
    logger.warning("OpenRouter API key not configured. Using rule based advice.")
    return RuleBasedAdvisor()
