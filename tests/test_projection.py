from datetime import date, datetime, timedelta, timezone

import pytest

from moneywise.core.errors import InvalidGoalDateError
from moneywise.utils.projection import (
    feasibility_score,
    goal_progress,
    month_difference,
    project,
    savings_recommendations,
)

NOW = datetime(2024, 3, 15, 12, 0)


@pytest.mark.parametrize("daily,score", [
    (0, 90),
    (10_000, 90),
    (10_000.01, 75),
    (25_000, 75),
    (25_000.01, 60),
    (50_000, 60),
    (100_000, 40),
    (100_000.01, 20),
])
def test_feasibility_bands(daily, score):
    assert feasibility_score(daily) == score


def test_thirty_day_example():
    result = project(1_200_000, 0, NOW + timedelta(days=30), now=NOW)

    assert result["total_days"] == 30
    assert result["daily_amount"] == pytest.approx(40_000)
    assert result["feasibility_score"] == 60
    assert result["recommendations"][0].startswith("This target is very ambitious")


def test_target_one_minute_ahead_counts_as_one_day():
    result = project(1_000_000, 0, NOW + timedelta(minutes=1), now=NOW)

    assert result["total_days"] == 1
    assert result["total_weeks"] == 1
    assert result["total_months"] == 1
    assert result["daily_amount"] == 1_000_000
    assert result["feasibility_score"] == 20


def test_past_or_present_target_is_rejected():
    with pytest.raises(InvalidGoalDateError):
        project(1000, 0, NOW, now=NOW)
    with pytest.raises(InvalidGoalDateError):
        project(1000, 0, NOW - timedelta(days=1), now=NOW)


def test_plain_date_target_means_start_of_day():
    # Midnight of 2024-03-16 is twelve hours away
    result = project(500, 0, date(2024, 3, 16), now=NOW)
    assert result["total_days"] == 1

    with pytest.raises(InvalidGoalDateError):
        project(500, 0, date(2024, 3, 15), now=NOW)


def test_higher_current_amount_never_raises_requirements():
    target = NOW + timedelta(days=90)
    previous = None
    for current in (0, 1000, 5000, 9999, 10000, 20000):
        result = project(10000, current, target, now=NOW)
        if previous is not None:
            assert result["daily_amount"] <= previous["daily_amount"]
            assert result["monthly_amount"] <= previous["monthly_amount"]
            assert result["feasibility_score"] >= previous["feasibility_score"]
        previous = result
    assert previous["remaining_amount"] == 0.0


def test_extra_income_advice_for_large_monthly_amounts():
    tips = savings_recommendations(daily_amount=20_000, monthly_amount=600_000)

    assert tips[0].startswith("This target is fairly challenging")
    assert "Consider looking for an additional source of income." in tips
    assert tips[-2:] == [
        "Use the app to track your progress every day.",
        "Set up an automatic transfer to your savings account.",
    ]


def test_month_difference_ignores_days():
    assert month_difference(date(2024, 1, 31), date(2024, 2, 1)) == 1
    assert month_difference(date(2024, 1, 1), date(2024, 1, 31)) == 0
    assert month_difference(date(2023, 11, 20), date(2024, 2, 1)) == 3


def test_completed_goal_progress():
    status = goal_progress(1000, 1200, date(2024, 6, 1), now=NOW)

    assert status["progress"] >= 100
    assert status["is_completed"] is True
    assert status["is_overdue"] is False
    assert status["remaining_amount"] == 0.0
    assert status["required_daily_savings"] == 0.0


def test_completed_goal_needs_no_further_saving():
    result = project(1000, 1500, NOW + timedelta(days=60), now=NOW)

    assert result["remaining_amount"] == 0.0
    assert result["daily_amount"] == 0
    assert result["weekly_amount"] == 0
    assert result["monthly_amount"] == 0
    assert result["feasibility_score"] == 90


def test_timezone_aware_targets_are_compared_as_local_time():
    result = project(1000, 0, "2099-01-01T00:00:00+00:00", now=datetime(2024, 1, 1))
    assert result["total_days"] > 0
    assert "+" not in result["target_date"]

    aware = datetime(2099, 1, 1, tzinfo=timezone(timedelta(hours=7)))
    assert project(1000, 0, aware, now=NOW)["remaining_amount"] == 1000.0

    with pytest.raises(InvalidGoalDateError):
        project(1000, 0, "2020-01-01T00:00:00+07:00", now=NOW)


def test_timezone_aware_goal_progress():
    status = goal_progress(1000, 100, "2099-01-01T00:00:00+00:00", now=NOW)

    assert status["is_overdue"] is False
    assert status["days_remaining"] > 0


def test_overdue_and_near_deadline_flags():
    overdue = goal_progress(1000, 100, date(2024, 3, 1), now=NOW)
    assert overdue["is_overdue"] is True
    assert overdue["days_remaining"] == 0
    assert overdue["required_daily_savings"] == 0.0

    near = goal_progress(1000, 100, date(2024, 4, 1), now=NOW)
    assert near["is_near_deadline"] is True
    assert near["days_remaining"] == 17
    assert near["required_daily_savings"] == pytest.approx(900 / 17)
