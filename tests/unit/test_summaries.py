"""Unit tests for report aggregates."""

from datetime import timedelta

from wastems.domain.summaries import (
    daily_intake,
    penalty_summary,
    percent,
    points_by_type,
    revenue_by_type,
    within_days,
)
from wastems.shared.utils import utc_now


def test_percent_of_zero_is_zero() -> None:
    assert percent(1, 3) == 33.33
    assert percent(5, 0) == 0.0


def test_within_days_falls_back_to_created_at() -> None:
    now = utc_now()
    records = [
        {"id": "new", "imposedAt": now.isoformat()},
        {"id": "old", "imposedAt": now - timedelta(days=40)},
        {"id": "created", "createdAt": now},
        {"id": "undated"},
    ]
    assert [r["id"] for r in within_days(records, "imposedAt", 30)] == ["new", "created"]


def test_penalty_summary_skips_non_numeric_amounts() -> None:
    penalties = [
        {"status": "paid", "amount": 300},
        {"status": "pending", "amount": 100},
        {"status": "pending", "amount": "lots"},
    ]
    summary = penalty_summary(penalties)
    assert summary["totalPenalties"] == 3
    assert summary["totalAmount"] == 400
    assert summary["pendingAmount"] == 100
    assert summary["collectionRate"] == 75.0


def test_revenue_and_points_grouped_by_type() -> None:
    rows = revenue_by_type([
        {"violationType": "other", "amount": 100, "status": "paid"},
        {"type": "other", "amount": 100},
    ])
    assert rows == [
        {"type": "other", "count": 2, "totalAmount": 200, "paidAmount": 100, "collectionRate": 50.0}
    ]
    assert points_by_type([{"type": "training", "points": 50}, {"type": "training", "points": 25}]) == [
        {"type": "training", "count": 2, "points": 75, "averagePoints": 38}
    ]


def test_daily_intake_ignores_out_of_window_and_malformed_entries() -> None:
    now = utc_now()
    facility = {
        "intakeHistory": [
            {"receivedAt": now, "wasteType": "hazardous", "quantity": 2},
            {"receivedAt": now - timedelta(days=10), "wasteType": "wet", "quantity": 9},
            {"receivedAt": "not a date", "quantity": 1},
            "legacy",
        ]
    }
    rows = daily_intake([facility, {"intakeHistory": None}], 3)
    assert [r["date"] for r in rows] == [(now.date() - timedelta(days=d)).isoformat() for d in (2, 1, 0)]
    assert rows[-1]["hazardousWaste"] == 2
    assert sum(r["totalIntakes"] for r in rows) == 1
