from datetime import date, timedelta

import pytest


async def _category(client, name, type_):
    response = await client.post("/api/v1/categories", json={"name": name, "type": type_})
    assert response.status_code == 201, response.text
    return response.json()


async def _transaction(client, category, amount, type_, day, description="Test"):
    return await client.post("/api/v1/transactions", json={
        "category_id": category["id"],
        "amount": amount,
        "type": type_,
        "date": day,
        "description": description,
    })


async def test_health_and_root(client):
    assert (await client.get("/")).status_code == 200
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_default_categories_are_idempotent(client):
    first = await client.post("/api/v1/categories/defaults")
    assert first.status_code == 200
    assert first.json()["created_count"] == 13

    second = await client.post("/api/v1/categories/defaults")
    assert second.json()["created_count"] == 0
    assert len(second.json()["categories"]) == 13

    expenses = await client.get("/api/v1/categories/type/expense")
    assert len(expenses.json()) == 8


async def test_listing_categories_never_seeds(client):
    response = await client.get("/api/v1/categories")
    assert response.status_code == 200
    assert response.json() == []


async def test_transaction_type_must_match_category(client):
    salary = await _category(client, "Salary", "income")

    response = await _transaction(client, salary, "25.00", "expense", "2024-01-10")

    assert response.status_code == 400
    assert "does not match" in response.json()["detail"]


async def test_transaction_validation_rejects_bad_amounts(client):
    food = await _category(client, "Food", "expense")

    assert (await _transaction(client, food, "-5", "expense", "2024-01-10")).status_code == 422
    assert (await _transaction(client, food, "1.005", "expense", "2024-01-10")).status_code == 422
    assert (await _transaction(client, food, "10", "transfer", "2024-01-10")).status_code == 422


async def test_transaction_crud_and_summary(client):
    salary = await _category(client, "Salary", "income")
    food = await _category(client, "Food", "expense")

    income = await _transaction(client, salary, "100000", "income", "2024-01-05", "January salary")
    expense = await _transaction(client, food, "40000", "expense", "2024-01-10", "Groceries")
    assert income.status_code == 201
    assert expense.json()["category"]["name"] == "Food"
    await _transaction(client, food, "999", "expense", "2024-02-01")

    summary = await client.get(
        "/api/v1/transactions/summary",
        params={"start_date": "2024-01-01", "end_date": "2024-01-31"},
    )
    assert summary.status_code == 200
    body = summary.json()
    assert body["total_income"] == 100000
    assert body["total_expense"] == 40000
    assert body["net_balance"] == 60000
    assert body["transaction_count"] == 2
    assert body["savings_ratio"] == pytest.approx(60.0)

    tx_id = expense.json()["id"]
    updated = await client.patch(f"/api/v1/transactions/{tx_id}", json={"amount": "45000.50"})
    assert updated.json()["amount"] == 45000.5

    mismatch = await client.patch(f"/api/v1/transactions/{tx_id}", json={"category_id": salary["id"]})
    assert mismatch.status_code == 400

    assert (await client.delete(f"/api/v1/transactions/{tx_id}")).status_code == 204
    assert (await client.get(f"/api/v1/transactions/{tx_id}")).status_code == 404


async def test_summary_rejects_inverted_range(client):
    response = await client.get(
        "/api/v1/transactions/summary",
        params={"start_date": "2024-02-01", "end_date": "2024-01-01"},
    )
    assert response.status_code == 400


async def test_trends_by_month(client):
    salary = await _category(client, "Salary", "income")
    food = await _category(client, "Food", "expense")
    await _transaction(client, salary, "3000", "income", "2024-01-05")
    await _transaction(client, food, "200", "expense", "2024-01-20")
    await _transaction(client, food, "50", "expense", "2024-02-02")
    await _transaction(client, food, "75", "expense", "2024-04-02")

    response = await client.get(
        "/api/v1/transactions/trends",
        params={"bucket_by": "month", "start_date": "2024-01-01", "end_date": "2024-02-29"},
    )

    assert response.json() == [
        {"period": "2024-01", "income": 3000.0, "expense": 200.0, "net": 2800.0},
        {"period": "2024-02", "income": 0.0, "expense": 50.0, "net": -50.0},
    ]


async def test_trends_default_to_recent_buckets(client):
    food = await _category(client, "Food", "expense")
    today = date.today()
    await _transaction(client, food, "10", "expense", today.isoformat())
    await _transaction(client, food, "20", "expense", (today - timedelta(days=45)).isoformat())
    await _transaction(client, food, "999", "expense", (today - timedelta(days=800)).isoformat())

    monthly = (await client.get("/api/v1/transactions/trends")).json()
    assert sum(p["expense"] for p in monthly) == 30.0

    latest = (await client.get("/api/v1/transactions/trends", params={"last": 1})).json()
    assert latest == [{"period": today.strftime("%Y-%m"), "income": 0.0, "expense": 10.0, "net": -10.0}]

    weekly = (await client.get("/api/v1/transactions/trends", params={"bucket_by": "week", "last": 2})).json()
    assert sum(p["expense"] for p in weekly) == 10.0


async def test_trends_reject_inverted_range(client):
    response = await client.get(
        "/api/v1/transactions/trends",
        params={"start_date": "2024-02-01", "end_date": "2024-01-01"},
    )
    assert response.status_code == 400


async def test_null_fields_in_transaction_update_are_ignored(client):
    food = await _category(client, "Food", "expense")
    tx = (await _transaction(client, food, "40", "expense", "2024-01-10", "Lunch")).json()

    response = await client.patch(f"/api/v1/transactions/{tx['id']}", json={"amount": None, "type": None})

    assert response.status_code == 200
    assert response.json()["amount"] == 40
    assert response.json()["type"] == "expense"
    assert response.json()["description"] == "Lunch"


async def test_budget_requires_expense_category(client):
    salary = await _category(client, "Salary", "income")
    food = await _category(client, "Food", "expense")

    rejected = await client.post("/api/v1/budgets", json={"category_id": salary["id"], "amount": "500"})
    assert rejected.status_code == 400

    created = await client.post("/api/v1/budgets", json={"category_id": food["id"], "amount": "500"})
    assert created.status_code == 201

    today = date.today().isoformat()
    await _transaction(client, food, "450", "expense", today)
    usage = (await client.get("/api/v1/budgets/usage")).json()
    assert usage[0]["usage"] == 450
    assert usage[0]["is_over_budget"] is True
    assert usage[0]["remaining_budget"] == 50


async def test_contributions_complete_goal(client):
    target_date = (date.today() + timedelta(days=90)).isoformat()
    goal = (await client.post("/api/v1/savings-goals", json={
        "name": "Emergency fund",
        "target_amount": "1000",
        "target_date": target_date,
    })).json()
    assert goal["is_completed"] is False
    assert goal["icon"] == "fas fa-piggy-bank"

    for _ in range(3):
        response = await client.post(
            f"/api/v1/savings-goals/{goal['id']}/contributions", json={"amount": "300"}
        )
        assert response.status_code == 200
    assert response.json()["current_amount"] == 900
    assert response.json()["is_completed"] is False

    response = await client.post(
        f"/api/v1/savings-goals/{goal['id']}/contributions", json={"amount": "150.50"}
    )
    assert response.json()["current_amount"] == 1050.5
    assert response.json()["is_completed"] is True

    # Lowering the amount by hand does not reopen the goal
    edited = await client.patch(f"/api/v1/savings-goals/{goal['id']}", json={"current_amount": "10"})
    assert edited.json()["is_completed"] is True

    progress = (await client.get(f"/api/v1/savings-goals/{goal['id']}/progress")).json()
    assert progress["is_completed"] is True


async def test_null_fields_in_goal_update_are_ignored(client):
    target_date = (date.today() + timedelta(days=90)).isoformat()
    goal = (await client.post("/api/v1/savings-goals", json={
        "name": "Laptop",
        "target_amount": "1000",
        "current_amount": "100",
        "target_date": target_date,
    })).json()

    response = await client.patch(
        f"/api/v1/savings-goals/{goal['id']}",
        json={"target_amount": None, "current_amount": None, "target_date": None, "name": "New laptop"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["target_amount"] == 1000
    assert body["current_amount"] == 100
    assert body["target_date"].startswith(target_date)
    assert body["name"] == "New laptop"
    assert body["is_completed"] is False


async def test_null_fields_in_budget_update_are_ignored(client):
    food = await _category(client, "Food", "expense")
    budget = (await client.post("/api/v1/budgets", json={"category_id": food["id"], "amount": "500"})).json()

    response = await client.patch(f"/api/v1/budgets/{budget['id']}", json={"amount": None, "period": None})

    assert response.status_code == 200
    assert response.json()["amount"] == 500
    assert response.json()["period"] == "monthly"


async def test_contribution_to_unknown_goal_is_404(client):
    response = await client.post(
        "/api/v1/savings-goals/00000000-0000-0000-0000-000000000000/contributions",
        json={"amount": "10"},
    )
    assert response.status_code == 404


async def test_contributions_from_stale_sessions_are_not_lost(session_factory, user):
    from moneywise.crud.savings_goal import add_to_savings_goal, get_savings_goal_by_id
    from moneywise.models.savings_goal import SavingsGoal

    async with session_factory() as db:
        goal = SavingsGoal(
            user_id=user.id,
            name="Bike",
            target_amount=500,
            current_amount=0,
            target_date=date.today() + timedelta(days=60),
        )
        db.add(goal)
        await db.commit()
        goal_id = goal.id

    # Both sessions hold a copy of the goal read before either contribution
    async with session_factory() as first, session_factory() as second:
        stale_first = await get_savings_goal_by_id(goal_id, user.id, first)
        stale_second = await get_savings_goal_by_id(goal_id, user.id, second)
        assert stale_first.current_amount == stale_second.current_amount == 0
        await first.commit()
        await second.commit()

        after_first = await add_to_savings_goal(goal_id, user.id, 300, first)
        after_second = await add_to_savings_goal(goal_id, user.id, 250, second)

    assert after_first.current_amount == 300
    assert after_first.is_completed is False
    assert after_second.current_amount == 550
    assert after_second.is_completed is True


async def test_simulation(client):
    target = (date.today() + timedelta(days=400)).isoformat() + "T00:00:00"
    response = await client.post("/api/v1/savings-goals/simulate", json={
        "target_amount": "12000",
        "current_amount": "2000",
        "target_date": target,
    })

    assert response.status_code == 200
    body = response.json()
    assert body["remaining_amount"] == 10000
    assert body["feasibility_score"] == 90
    assert len(body["recommendations"]) == 3


async def test_simulation_rejects_past_dates(client):
    response = await client.post("/api/v1/savings-goals/simulate", json={
        "target_amount": "1000",
        "target_date": "2020-01-01T00:00:00",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Target date must be in the future"


async def test_dashboard_summary(client):
    food = await _category(client, "Food", "expense")
    salary = await _category(client, "Salary", "income")
    today = date.today().isoformat()
    await _transaction(client, salary, "2000", "income", today)
    await _transaction(client, food, "500", "expense", today)
    old = (date.today() - timedelta(days=500)).isoformat()
    await _transaction(client, food, "7000", "expense", old)

    response = await client.get("/api/v1/dashboard/summary")

    assert response.status_code == 200
    body = response.json()
    assert body["summary"]["net_balance"] == 1500
    assert body["summary"]["savings_ratio"] == pytest.approx(75.0)
    assert body["top_expense_categories"][0]["name"] == "Food"
    assert len(body["weekly_trend"]) == 1
    assert len(body["monthly_trend"]) == 1
    assert body["monthly_trend"][0]["expense"] == 500
    assert body["savings_goals"]["total"] == 0


async def test_report_generation_and_retrieval(client):
    food = await _category(client, "Food", "expense")
    salary = await _category(client, "Salary", "income")
    await _transaction(client, salary, "3000", "income", "2024-01-05")
    await _transaction(client, food, "750", "expense", "2024-01-12")

    response = await client.post("/api/v1/reports/generate", json={
        "type": "monthly",
        "period_start": "2024-01-01",
        "period_end": "2024-01-31",
    })

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["report"]["status"] == "completed"
    assert body["data"]["summary"]["net_balance"] == 2250
    assert body["data"]["metadata"]["report_type"] == "monthly"

    report_id = body["report"]["id"]
    stored = (await client.get(f"/api/v1/reports/{report_id}")).json()
    assert stored["data"]["summary"] == body["data"]["summary"]

    listed = (await client.get("/api/v1/reports")).json()
    assert [r["id"] for r in listed] == [report_id]

    # SendGrid is not configured in tests
    emailed = await client.post(f"/api/v1/reports/{report_id}/email", json={"email": "ana@example.com"})
    assert emailed.json()["success"] is False

    assert (await client.delete(f"/api/v1/reports/{report_id}")).status_code == 204


async def test_report_rejects_inverted_period(client):
    response = await client.post("/api/v1/reports/generate", json={
        "period_start": "2024-02-01",
        "period_end": "2024-01-01",
    })
    assert response.status_code == 422


async def test_generate_insights_replaces_previous_batch(client):
    food = await _category(client, "Food", "expense")
    salary = await _category(client, "Salary", "income")
    await _transaction(client, salary, "1000", "income", "2024-01-01")
    await _transaction(client, food, "1800", "expense", "2024-01-02")

    first = (await client.post("/api/v1/insights/generate")).json()
    assert first["count"] == 1
    assert first["insights"][0]["type"] == "budget_alert"

    await client.post("/api/v1/insights/generate")
    listed = (await client.get("/api/v1/insights")).json()
    assert len(listed) == 1

    marked = await client.patch(f"/api/v1/insights/{listed[0]['id']}/read")
    assert marked.json()["is_read"] is True


async def test_tax_calculation(client):
    response = await client.post("/api/v1/tax/calculate", json={
        "gross_income": "10000000",
        "marital_status": "TK/0",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["taxable_income"] == 66_000_000
    assert body["annual_tax"] == 3_900_000
    assert body["monthly_tax"] == 325_000
    assert body["marginal_rate"] == 15


async def test_tax_calculation_validates_input(client):
    bad_status = await client.post("/api/v1/tax/calculate", json={"gross_income": "1000", "marital_status": "K/9"})
    negative = await client.post("/api/v1/tax/calculate", json={"gross_income": "-1"})

    assert bad_status.status_code == 422
    assert negative.status_code == 422


async def test_financial_summary_and_advice(client):
    salary = await _category(client, "Salary", "income")
    food = await _category(client, "Food", "expense")
    today = date.today()
    await _transaction(client, salary, "10000", "income", today.isoformat())
    await _transaction(client, food, "6000", "expense", today.isoformat())
    # Outside the 30 day window
    await _transaction(client, food, "9999", "expense", (today - timedelta(days=30)).isoformat())

    summary = (await client.get("/api/v1/advice/financial-summary")).json()
    assert summary["monthly_income"] == 10000
    assert summary["monthly_expenses"] == 6000
    assert summary["current_savings"] == 4000

    response = await client.post("/api/v1/advice/financial-advice")
    assert response.status_code == 200
    assert response.json()["advice"].startswith("Your savings rate is 40.0%")
    assert response.json()["profile"]["net_balance"] == 4000


async def test_purchase_decision(client):
    salary = await _category(client, "Salary", "income")
    food = await _category(client, "Food", "expense")
    today = date.today().isoformat()
    await _transaction(client, salary, "10000", "income", today)
    await _transaction(client, food, "6000", "expense", today)

    response = await client.post("/api/v1/advice/purchase-decision", json={"item": "Headphones", "price": "3000"})

    assert response.status_code == 200
    body = response.json()
    assert body["recommendation"] == "wait"
    assert body["price_to_income_ratio"] == pytest.approx(30.0)
    assert "3 months" in body["alternatives"]

    invalid = await client.post("/api/v1/advice/purchase-decision", json={"item": "", "price": "0"})
    assert invalid.status_code == 422
