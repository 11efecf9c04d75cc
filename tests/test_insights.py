import json

import httpx
import pytest

from moneywise.utils.insights import (
    OpenRouterInsightGenerator,
    RuleBasedInsightGenerator,
    parse_insights,
)

from helpers import make_tx


async def test_rule_based_overspend_alert():
    txs = [
        make_tx(1000, "income", "2024-01-01"),
        make_tx(1500, "expense", "2024-01-02"),
    ]

    insights = await RuleBasedInsightGenerator().generate(txs)

    assert len(insights) == 1
    assert insights[0]["type"] == "budget_alert"
    assert insights[0]["priority"] == "high"
    assert "500.00" in insights[0]["message"]


async def test_rule_based_saving_tip_and_spending_pattern():
    txs = [make_tx(5000, "income", "2024-01-01")] + [
        make_tx(100 * i, "expense", f"2024-01-0{i + 1}") for i in range(1, 6)
    ]

    insights = await RuleBasedInsightGenerator().generate(txs)

    assert [i["type"] for i in insights] == ["saving_tip", "spending_pattern"]
    assert "300.00" in insights[1]["message"]


async def test_rule_based_without_transactions():
    assert await RuleBasedInsightGenerator().generate([]) == []


def test_parse_insights_strips_fences_and_caps_count():
    items = [
        {"type": "saving_tip", "title": f"Tip {i}", "message": "Save more", "priority": "low", "actionable": True}
        for i in range(5)
    ]
    raw = "```json\n" + json.dumps(items) + "\n```"

    insights = parse_insights(raw)

    assert len(insights) == 3
    assert insights[0]["title"] == "Tip 0"


def test_parse_insights_normalises_unknown_values():
    raw = json.dumps([{"type": "horoscope", "title": "T", "message": "M", "priority": "urgent"}])

    insight = parse_insights(raw)[0]

    assert insight["type"] == "spending_pattern"
    assert insight["priority"] == "medium"
    assert insight["actionable"] is True


def test_parse_insights_rejects_non_arrays():
    with pytest.raises(ValueError):
        parse_insights('{"type": "saving_tip"}')


async def test_openrouter_failure_falls_back_to_rules(monkeypatch):
    async def broken_post(self, *args, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(httpx.AsyncClient, "post", broken_post)
    txs = [make_tx(1000, "income", "2024-01-01"), make_tx(200, "expense", "2024-01-02")]

    insights = await OpenRouterInsightGenerator("key", "some/model").generate(txs)

    assert [i["type"] for i in insights] == ["saving_tip"]


async def test_openrouter_parses_model_reply(monkeypatch):
    reply = [{"type": "smart_decision", "title": "Cook at home", "message": "Groceries beat takeaway", "priority": "high"}]

    async def fake_post(self, url, **kwargs):
        request = httpx.Request("POST", url)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"content": json.dumps(reply)}}]},
            request=request,
        )

    monkeypatch.setattr(httpx.AsyncClient, "post", fake_post)
    txs = [make_tx(80, "expense", "2024-01-02", description="Takeaway")]

    insights = await OpenRouterInsightGenerator("key", "some/model").generate(txs)

    assert insights == [{
        "type": "smart_decision",
        "title": "Cook at home",
        "message": "Groceries beat takeaway",
        "priority": "high",
        "actionable": True,
    }]
