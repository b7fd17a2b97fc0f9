"""Derived status labels and ratings.

None of these values are stored; list and detail endpoints compute them
from the numeric fields of each record on every read. Stored records can
hold anything (Firestore has no schema), so readers go through
as_number(), as_mapping() and as_records().
"""

from typing import Any

# Citizens trained by a champion that count as a 100% training rate.
CHAMPION_TRAINING_TARGET = 50

WORKER_TRAINING_PHASES = ("phase1", "phase2", "phase3")


def as_number(value: Any) -> float:
    """value when it is an int or float (bools excluded), else 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def as_mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_records(value: Any) -> list[dict[str, Any]]:
    """The dict entries of a stored list; anything else is skipped."""
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def compliance_status(score: float) -> str:
    """Label a 0-100 segregation compliance score."""
    if score >= 80:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Fair"
    return "Poor"


def is_compliant(score: float) -> bool:
    return score >= 70


def citizen_compliance_score(citizen: dict[str, Any]) -> float:
    return as_number(as_mapping(citizen.get("segregationCompliance")).get("score"))


def citizen_training_progress(citizen: dict[str, Any]) -> str:
    """Completed, In Progress (enrolled in at least one module) or Not Started."""
    training = as_mapping(citizen.get("trainingStatus"))
    if training.get("completed"):
        return "Completed"
    if training.get("modules"):
        return "In Progress"
    return "Not Started"


def worker_training_progress(worker: dict[str, Any]) -> str:
    """Completed when all three phases have a start date, In Progress when some do."""
    phases = as_mapping(worker.get("trainingPhases"))
    started = sum(1 for p in WORKER_TRAINING_PHASES if phases.get(p) is not None)
    if started == len(WORKER_TRAINING_PHASES):
        return "Completed"
    if started > 0:
        return "In Progress"
    return "Not Started"


def safety_gear_percentage(worker: dict[str, Any]) -> float:
    gear = as_mapping(worker.get("safetyGear"))
    if not gear:
        return 0.0
    return sum(1 for v in gear.values() if v) / len(gear) * 100


def safety_gear_status(worker: dict[str, Any]) -> str:
    percentage = safety_gear_percentage(worker)
    if percentage == 100:
        return "Complete"
    if percentage >= 80:
        return "Good"
    if percentage >= 60:
        return "Fair"
    return "Poor"


def attendance_rate(attendance: Any) -> int:
    """Percentage of attendance records marked present, rounded."""
    attendance = as_records(attendance)
    if not attendance:
        return 0
    present = sum(1 for a in attendance if a.get("status") == "present")
    return round(present / len(attendance) * 100)


def champion_performance_score(metrics: Any) -> float:
    """Mean of report-resolution rate and training rate, both 0-100.

    The training rate saturates at CHAMPION_TRAINING_TARGET citizens trained.
    """
    metrics = as_mapping(metrics)
    total_reports = as_number(metrics.get("totalReports"))
    resolved_reports = as_number(metrics.get("resolvedReports"))
    citizens_trained = as_number(metrics.get("citizensTrained"))
    resolution_rate = resolved_reports / total_reports * 100 if total_reports > 0 else 0.0
    training_rate = (
        min(100.0, citizens_trained / CHAMPION_TRAINING_TARGET * 100)
        if citizens_trained > 0
        else 0.0
    )
    return (resolution_rate + training_rate) / 2


def champion_performance_rating(metrics: Any) -> str:
    score = champion_performance_score(metrics)
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Very Good"
    if score >= 70:
        return "Good"
    return "Needs Improvement"


def utilization(current_load: float, capacity: float) -> float:
    """Load as a percentage of capacity, one decimal place; 0 when capacity is unset."""
    if not capacity:
        return 0.0
    return round(current_load / capacity * 100, 1)


def efficiency_band(efficiency: float) -> str:
    if efficiency >= 90:
        return "high"
    if efficiency >= 70:
        return "medium"
    return "low"


def ulb_compliance_band(score: float) -> str:
    if score >= 90:
        return "high"
    if score >= 75:
        return "medium"
    return "low"
