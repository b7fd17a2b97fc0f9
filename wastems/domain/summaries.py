"""Aggregates behind the stats and analytics endpoints.

Plain functions over lists of stored records. Amounts go through
as_number() so one malformed document cannot fail a whole report.
"""

from collections import Counter
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from wastems.domain.ratings import as_mapping, as_number, as_records
from wastems.shared.utils import parse_timestamp, utc_now

Record = dict[str, Any]

WASTE_TYPES = ("wet", "dry", "hazardous", "mixed")


def percent(part: float, whole: float) -> float:
    """part/whole as a percentage with two decimals; 0 when whole is 0."""
    return round(part / whole * 100, 2) if whole else 0.0


def within_days(records: list[Record], field: str, days: int) -> list[Record]:
    """Records whose timestamp field (falling back to createdAt) is in the last days days."""
    cutoff = utc_now() - timedelta(days=days)
    recent = []
    for record in records:
        stamp = parse_timestamp(record.get(field) or record.get("createdAt"))
        if stamp is not None and stamp >= cutoff:
            recent.append(record)
    return recent


def penalty_type(penalty: Record) -> str:
    return str(penalty.get("violationType") or penalty.get("type") or "other")


def count_by(records: list[Record], key: Callable[[Record], str]) -> dict[str, int]:
    return dict(Counter(key(r) for r in records))


def penalty_summary(penalties: list[Record]) -> dict[str, Any]:
    paid = [p for p in penalties if p.get("status") == "paid"]
    pending = [p for p in penalties if p.get("status") == "pending"]
    total_amount = sum(as_number(p.get("amount")) for p in penalties)
    paid_amount = sum(as_number(p.get("amount")) for p in paid)
    return {
        "totalPenalties": len(penalties),
        "paidPenalties": len(paid),
        "pendingPenalties": len(pending),
        "totalAmount": round(total_amount, 2),
        "paidAmount": round(paid_amount, 2),
        "pendingAmount": round(sum(as_number(p.get("amount")) for p in pending), 2),
        "collectionRate": percent(paid_amount, total_amount),
    }


def revenue_by_type(penalties: list[Record]) -> list[dict[str, Any]]:
    totals: dict[str, dict[str, float]] = {}
    for penalty in penalties:
        row = totals.setdefault(penalty_type(penalty), {"count": 0, "amount": 0.0, "paid": 0.0})
        amount = as_number(penalty.get("amount"))
        row["count"] += 1
        row["amount"] += amount
        if penalty.get("status") == "paid":
            row["paid"] += amount
    return [
        {
            "type": kind,
            "count": int(row["count"]),
            "totalAmount": round(row["amount"], 2),
            "paidAmount": round(row["paid"], 2),
            "collectionRate": percent(row["paid"], row["amount"]),
        }
        for kind, row in totals.items()
    ]


def points_by_type(rewards: list[Record]) -> list[dict[str, Any]]:
    totals: dict[str, list[float]] = {}
    for reward in rewards:
        row = totals.setdefault(str(reward.get("type") or "other"), [0, 0])
        row[0] += 1
        row[1] += as_number(reward.get("points"))
    return [
        {"type": kind, "count": count, "points": points, "averagePoints": round(points / count)}
        for kind, (count, points) in totals.items()
    ]


def training_completion(citizens: list[Record], modules: tuple[str, ...]) -> dict[str, Any]:
    """Completion summary plus how many citizens finished each module."""
    trained = sum(1 for c in citizens if as_mapping(c.get("trainingStatus")).get("completed"))
    module_stats = dict.fromkeys(modules, 0)
    for citizen in citizens:
        done = as_mapping(citizen.get("trainingStatus")).get("completedModules")
        for module in done if isinstance(done, list) else []:
            if module in module_stats:
                module_stats[module] += 1
    return {
        "summary": {
            "totalCitizens": len(citizens),
            "trainedCitizens": trained,
            "completionRate": percent(trained, len(citizens)),
            "untrainedCitizens": len(citizens) - trained,
        },
        "moduleStats": module_stats,
    }


def daily_intake(facilities: list[Record], days: int) -> list[dict[str, Any]]:
    """Tonnage received per day over the last days days, oldest first, by waste type.

    Built from each facility's intakeHistory; days without intake are zero.
    """
    today = utc_now().date()
    rows: dict[str, dict[str, Any]] = {}
    for offset in range(days - 1, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        rows[day] = {
            "date": day,
            **{f"{t}Waste": 0.0 for t in WASTE_TYPES},
            "totalWaste": 0.0,
            "totalIntakes": 0,
        }
    for facility in facilities:
        for entry in as_records(facility.get("intakeHistory")):
            stamp = parse_timestamp(entry.get("receivedAt"))
            row = rows.get(stamp.date().isoformat()) if stamp else None
            if row is None:
                continue
            quantity = as_number(entry.get("quantity"))
            waste_type = entry.get("wasteType")
            if waste_type in WASTE_TYPES:
                row[f"{waste_type}Waste"] += quantity
            row["totalWaste"] += quantity
            row["totalIntakes"] += 1
    return list(rows.values())
