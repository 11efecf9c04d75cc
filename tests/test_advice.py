import json
from types import SimpleNamespace

import httpx
import pytest

from moneywise.utils.advice import (
    OpenRouterAdvisor,
    RuleBasedAdvisor,
    financial_profile,
    parse_purchase_decision,
    price_to_income_ratio,
)

from helpers import make_tx


def _profile(income=10_000, expenses=6_000, goals=()):
    txs = [make_tx(income, "income", "2024-01-01"), make_tx(expenses, "expense", "2024-01-02")]
    return financial_profile(txs, list(goals))


def _fake_reply(monkeypatch, content):
    async def fake_post(self, url, **kwargs):
        return httpx.Response(
            200,
            json={"choices": [{"message": {"content": content}}]},
            request=httpx.Request("POST", url),
        )

    monkeypatch.setattr(httpx.AsyncClient, "post", fake_post)


def test_financial_profile_totals():
    goals = [
        SimpleNamespace(target_amount=1000, current_amount=250),
        SimpleNamespace(target_amount=500, current_amount=None),
    ]

    profile = _profile(income=3000, expenses=3500, goals=goals)

    assert profile["net_balance"] == -500
    assert profile["current_savings"] == 0.0
    assert profile["savings_goals"] == 2
    assert profile["total_savings_target"] == 1500
    assert profile["total_current_savings"] == 250


def test_price_to_income_ratio():
    assert price_to_income_ratio(2500, _profile()) == pytest.approx(25.0)
    assert price_to_income_ratio(2500, _profile(income=0)) == 0.0


@pytest.mark.parametrize("price,expected", [
    (1000, "buy"),
    (1200, "buy"),
    (3000, "wait"),
    (12_000, "wait"),
    (12_001, "skip"),
])
async def test_rule_based_purchase_thresholds(price, expected):
    decision = await RuleBasedAdvisor().purchase_decision("Headphones", price, "", _profile())

    assert decision["recommendation"] == expected


async def test_waiting_suggests_a_saving_plan():
    decision = await RuleBasedAdvisor().purchase_decision("Phone", 3000, "", _profile())

    assert decision["alternatives"] == "Put aside 1,200.00 per month and buy it in 3 months."


async def test_no_surplus_means_skip():
    decision = await RuleBasedAdvisor().purchase_decision("Coffee", 5, "", _profile(expenses=10_000))

    assert decision["recommendation"] == "skip"


async def test_rule_based_financial_advice():
    advice = await RuleBasedAdvisor().financial_advice(_profile())

    assert advice.startswith("Your savings rate is 40.0%")
    assert "5,000.00 for needs" in advice
    assert "emergency fund of 36,000.00" in advice
    assert "Create a savings goal" in advice


async def test_advice_without_income():
    advice = await RuleBasedAdvisor().financial_advice(_profile(income=0, expenses=100))

    assert advice == "Record your income to receive personalised financial advice."


def test_parse_purchase_decision_strips_fences():
    raw = "```json\n" + json.dumps({"recommendation": "WAIT", "reasoning": "Sale next month"}) + "\n```"

    assert parse_purchase_decision(raw) == {
        "recommendation": "wait",
        "reasoning": "Sale next month",
        "alternatives": None,
    }


@pytest.mark.parametrize("raw", [
    '["buy"]',
    '{"recommendation": "maybe", "reasoning": "?"}',
    "not json",
])
def test_parse_purchase_decision_rejects_bad_replies(raw):
    with pytest.raises(ValueError):
        parse_purchase_decision(raw)


async def test_openrouter_purchase_decision(monkeypatch):
    _fake_reply(monkeypatch, json.dumps({
        "recommendation": "skip",
        "reasoning": "It is a want, not a need",
        "alternatives": "Borrow one",
    }))

    decision = await OpenRouterAdvisor("key", "some/model").purchase_decision("Drone", 100, "", _profile())

    assert decision == {"recommendation": "skip", "reasoning": "It is a want, not a need", "alternatives": "Borrow one"}


async def test_openrouter_bad_verdict_falls_back_to_rules(monkeypatch):
    _fake_reply(monkeypatch, '{"recommendation": "definitely", "reasoning": "!"}')

    decision = await OpenRouterAdvisor("key", "some/model").purchase_decision("Drone", 100, "", _profile())

    assert decision["recommendation"] == "buy"


async def test_openrouter_advice_falls_back_when_unreachable(monkeypatch):
    async def broken_post(self, *args, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(httpx.AsyncClient, "post", broken_post)

    advice = await OpenRouterAdvisor("key", "some/model").financial_advice(_profile())

    assert advice.startswith("Your savings rate is 40.0%")


async def test_openrouter_advice_text_and_empty_reply(monkeypatch):
    _fake_reply(monkeypatch, "  Spend less on takeaway.  ")
    assert await OpenRouterAdvisor("key", "some/model").financial_advice(_profile()) == "Spend less on takeaway."

    _fake_reply(monkeypatch, "")
    advice = await OpenRouterAdvisor("key", "some/model").financial_advice(_profile())
    assert advice.startswith("Your savings rate is")
