# moneywise/utils/insights.py
import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx

from moneywise.core.config import settings

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
INSIGHT_TYPES = ("budget_alert", "saving_tip", "investment_suggestion", "spending_pattern", "smart_decision")
PRIORITIES = ("high", "medium", "low")
MAX_AI_INSIGHTS = 3


class InsightGenerator(Protocol):
    async def generate(self, transactions: Sequence[Any]) -> List[Dict[str, Any]]:
        ...


def _totals(transactions: Sequence[Any]):
    income = sum(float(t.amount) for t in transactions if t.type == "income")
    expenses = sum(float(t.amount) for t in transactions if t.type == "expense")
    return income, expenses


# ────────────────────────────────────────────────────────────────────────────────
# RULE BASED
# ────────────────────────────────────────────────────────────────────────────────
class RuleBasedInsightGenerator:
    """Deterministic insights used when no AI provider is available."""

    async def generate(self, transactions: Sequence[Any]) -> List[Dict[str, Any]]:
        if not transactions:
            return []

        income, expenses = _totals(transactions)
        balance = income - expenses
        insights: List[Dict[str, Any]] = []

        if balance < 0:
            insights.append({
                "type": "budget_alert",
                "title": "Spending Exceeds Income",
                "message": f"You spent {abs(balance):,.2f} more than you earned. Review your non-essential expenses.",
                "priority": "high",
                "actionable": True,
            })
        elif balance > 0:
            insights.append({
                "type": "saving_tip",
                "title": "Savings Potential Available",
                "message": f"You have {balance:,.2f} left over. Consider saving 20% of it.",
                "priority": "medium",
                "actionable": True,
            })

        if len(transactions) >= 5:
            recent = [t for t in transactions if t.type == "expense"][:5]
            if recent:
                average = sum(float(t.amount) for t in recent) / len(recent)
                insights.append({
                    "type": "spending_pattern",
                    "title": "Spending Pattern Analysis",
                    "message": f"Your average expense is {average:,.2f} per transaction. Keep an eye on large purchases.",
                    "priority": "low",
                    "actionable": True,
                })

        return insights


# ────────────────────────────────────────────────────────────────────────────────
# OPENROUTER
# ────────────────────────────────────────────────────────────────────────────────
def strip_code_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text


def parse_insights(raw: str) -> List[Dict[str, Any]]:
    """Parse a JSON array of insights, tolerating markdown code fences."""
    data = json.loads(strip_code_fences(raw))
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of insights")

    insights = []
    for item in data[:MAX_AI_INSIGHTS]:
        insights.append({
            "type": item.get("type") if item.get("type") in INSIGHT_TYPES else "spending_pattern",
            "title": str(item["title"])[:200],
            "message": str(item["message"]),
            "priority": item.get("priority") if item.get("priority") in PRIORITIES else "medium",
            "actionable": bool(item.get("actionable", True)),
        })
    return insights


class OpenRouterInsightGenerator:
    """
    Ask an OpenRouter-hosted model for 3-4 actionable insights about the
    user's latest transactions. Any failure falls back to the rule based
    generator so callers always get a list.
    """

    system_prompt = """
    You are a personal finance expert who gives practical, specific advice.
    Analyse the transactions and return 3-4 actionable insights.

    Base every insight on the user's real data, never generic advice. Focus on:
    - spending patterns in the largest categories
    - saving opportunities in frequent transactions
    - warnings when expenses exceed income
    - investment tips that fit the user's situation

    Respond with a JSON array only:
    [
      {
        "type": "budget_alert" | "saving_tip" | "investment_suggestion" | "spending_pattern" | "smart_decision",
        "title": "short title (max 60 characters)",
        "message": "specific actionable message (max 200 characters)",
        "priority": "high" | "medium" | "low",
        "actionable": true
      }
    ]
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        fallback: Optional[InsightGenerator] = None,
        timeout: float = 15.0,
    ):
        self.api_key = api_key
        self.model = model
        self.fallback = fallback or RuleBasedInsightGenerator()
        self.timeout = timeout

    def build_prompt(self, transactions: Sequence[Any]) -> str:
        recent = [
            {
                "amount": float(t.amount),
                "description": t.description,
                "type": t.type,
                "date": str(t.date),
            }
            for t in transactions[:20]
        ]
        income, expenses = _totals(transactions[:20])
        rate = ((income - expenses) / income * 100) if income > 0 else 0.0

        spending: Dict[str, float] = {}
        for t in recent:
            if t["type"] == "expense":
                key = t["description"].lower()
                spending[key] = spending.get(key, 0.0) + t["amount"]
        top = sorted(spending.items(), key=lambda item: item[1], reverse=True)[:3]

        return f"""
        User financial data:
        - Total income: {income:,.2f}
        - Total expenses: {expenses:,.2f}
        - Net balance: {income - expenses:,.2f}
        - Savings rate: {rate:.1f}%
        - Number of transactions: {len(recent)}

        Largest expense items:
        {chr(10).join(f"- {name}: {amount:,.2f}" for name, amount in top)}

        Latest transactions:
        {json.dumps(recent[:8], indent=2)}
        """

    async def generate(self, transactions: Sequence[Any]) -> List[Dict[str, Any]]:
        if not transactions:
            return []

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    OPENROUTER_URL,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                        "HTTP-Referer": settings.BACKEND_BASE_URL,
                        "X-Title": "MoneyWise Insight Generator",
                    },
                    json={
                        "model": self.model,
                        "messages": [
                            {"role": "system", "content": self.system_prompt},
                            {"role": "user", "content": self.build_prompt(transactions)},
                        ],
                        "temperature": 0.7,
                        "max_tokens": 512,
                    },
                    timeout=self.timeout,
                )
            response.raise_for_status()
            content = response.json().get("choices", [{}])[0].get("message", {}).get("content", "")
            insights = parse_insights(content)
            logger.info(f"Generated {len(insights)} AI insights")
            return insights
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"AI insight generation failed, using fallback insights: {e}")
            return await self.fallback.generate(transactions)


def get_insight_generator() -> InsightGenerator:
    """FastAPI dependency; tests override it with a deterministic fake."""
    if settings.OPENROUTER_API_KEY:
        return OpenRouterInsightGenerator(settings.OPENROUTER_API_KEY, settings.OPENROUTER_MODEL)
    logger.warning("OpenRouter API key not configured. Using rule based insights.")
    return RuleBasedInsightGenerator()
