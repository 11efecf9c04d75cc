import random
from datetime import date, timedelta

import pytest

from moneywise.utils.aggregation import (
    OTHER_CATEGORY_COLOR,
    OTHER_CATEGORY_NAME,
    bucket_by_category,
    bucket_transactions,
    bucket_window_start,
    trend_series,
    week_start,
)

from helpers import make_category, make_tx


def _sample_transactions():
    return [
        make_tx(3000, "income", "2024-01-05"),
        make_tx(120, "expense", "2024-01-06"),
        make_tx(80, "expense", "2024-01-07"),
        make_tx(450, "expense", "2024-02-14"),
        make_tx(3000, "income", "2024-02-05"),
        make_tx(60.25, "expense", "2024-03-02"),
    ]


def test_week_start_is_sunday_aligned():
    # 2024-01-07 is a Sunday
    assert week_start(date(2024, 1, 7)) == date(2024, 1, 7)
    assert week_start(date(2024, 1, 6)) == date(2023, 12, 31)
    assert week_start(date(2024, 1, 8)) == date(2024, 1, 7)


def test_monthly_buckets_are_ordered_and_netted():
    buckets = bucket_transactions(_sample_transactions(), "month")

    assert list(buckets) == ["2024-01", "2024-02", "2024-03"]
    assert buckets["2024-01"] == {"income": 3000.0, "expense": 200.0, "net": 2800.0}
    assert buckets["2024-03"]["net"] == pytest.approx(-60.25)


def test_weekly_keys_use_week_start_dates():
    buckets = bucket_transactions(_sample_transactions(), "week")

    # 2024-01-06 (Sat) and 2024-01-07 (Sun) fall in different weeks
    assert "2023-12-31" in buckets
    assert "2024-01-07" in buckets
    assert list(buckets) == sorted(buckets)


def _generated_transactions(seed, count=60):
    rng = random.Random(seed)
    start = date(2023, 11, 1)
    return [
        make_tx(
            round(rng.uniform(1, 5000), 2),
            rng.choice(["income", "expense"]),
            start + timedelta(days=rng.randrange(0, 180)),
        )
        for _ in range(count)
    ]


@pytest.mark.parametrize("txs", [_sample_transactions()] + [_generated_transactions(seed) for seed in range(5)])
@pytest.mark.parametrize("bucket_by", ["month", "week"])
def test_bucket_totals_match_raw_sums(txs, bucket_by):
    buckets = bucket_transactions(txs, bucket_by).values()

    for type_ in ("income", "expense"):
        raw = sum(t.amount for t in txs if t.type == type_)
        assert sum(b[type_] for b in buckets) == pytest.approx(raw)


def test_totals_do_not_depend_on_granularity():
    for txs in [_sample_transactions()] + [_generated_transactions(seed) for seed in range(3)]:
        monthly = bucket_transactions(txs, "month").values()
        weekly = bucket_transactions(txs, "week").values()

        for field in ("income", "expense", "net"):
            assert sum(b[field] for b in monthly) == pytest.approx(sum(b[field] for b in weekly))


def test_unknown_transaction_types_are_not_counted():
    txs = _sample_transactions() + [make_tx(999, "transfer", "2024-01-10")]

    buckets = bucket_transactions(txs, "month")

    assert buckets["2024-01"] == {"income": 3000.0, "expense": 200.0, "net": 2800.0}


def test_empty_input_gives_empty_buckets():
    assert bucket_transactions([], "month") == {}


def test_unknown_granularity_is_rejected():
    with pytest.raises(ValueError):
        bucket_transactions(_sample_transactions(), "day")


def test_trend_series_keeps_the_latest_rows():
    rows = trend_series(bucket_transactions(_sample_transactions(), "month"), last=2)

    assert [r["period"] for r in rows] == ["2024-02", "2024-03"]
    assert set(rows[0]) == {"period", "income", "expense", "net"}


def test_category_buckets_sorted_with_other_sentinel():
    food = make_category("Food", color="#EF4444")
    rent = make_category("Rent", color="#3B82F6")
    txs = [
        make_tx(50, "expense", "2024-01-02", food),
        make_tx(25, "expense", "2024-01-03", food),
        make_tx(900, "expense", "2024-01-01", rent),
        make_tx(10, "expense", "2024-01-04"),  # category unknown
        make_tx(12, "expense", "2024-01-05"),  # category unknown
    ]

    rows = bucket_by_category(txs, [food, rent])

    assert [r["name"] for r in rows] == ["Rent", "Food", OTHER_CATEGORY_NAME]
    assert rows[1] == {
        "category_id": str(food.id),
        "name": "Food",
        "amount": 75.0,
        "color": "#EF4444",
        "count": 2,
    }
    other = rows[2]
    assert other["category_id"] is None
    assert other["color"] == OTHER_CATEGORY_COLOR
    assert other["amount"] == 22.0
    assert other["count"] == 2


def test_category_buckets_limit_and_type_filter():
    cats = [make_category(f"Cat {i}") for i in range(7)]
    txs = [make_tx(10 * (i + 1), "expense", "2024-01-01", c) for i, c in enumerate(cats)]
    txs.append(make_tx(5000, "income", "2024-01-01", cats[0]))

    rows = bucket_by_category(txs, cats, limit=5, transaction_type="expense")

    assert len(rows) == 5
    assert rows[0]["name"] == "Cat 6"
    assert all(r["amount"] <= 70 for r in rows)


@pytest.mark.parametrize("end,bucket_by,count,expected", [
    (date(2024, 3, 15), "month", 1, date(2024, 3, 1)),
    (date(2024, 3, 15), "month", 3, date(2024, 1, 1)),
    (date(2024, 3, 15), "month", 12, date(2023, 4, 1)),
    (date(2024, 1, 31), "month", 13, date(2023, 1, 1)),
    # 2024-01-10 is a Wednesday; its week starts on Sunday 2024-01-07
    (date(2024, 1, 10), "week", 1, date(2024, 1, 7)),
    (date(2024, 1, 10), "week", 8, date(2023, 11, 19)),
])
def test_bucket_window_start(end, bucket_by, count, expected):
    assert bucket_window_start(end, bucket_by, count) == expected


def test_bucket_window_keeps_the_requested_number_of_buckets():
    txs = [make_tx(10, "expense", date(2023, 1, 1) + timedelta(days=d)) for d in range(0, 500, 3)]
    end = date(2024, 5, 15)

    for bucket_by, count in (("month", 6), ("week", 10)):
        start = bucket_window_start(end, bucket_by, count)
        kept = [t for t in txs if start <= t.date <= end]
        assert len(bucket_transactions(kept, bucket_by)) == count
