"""Waste workers and green champions: registration, training, gear, reporting and ratings."""

from httpx import AsyncClient

from wastems.infrastructure.firebase.collections import (
    COLLECTION_CITIZENS,
    COLLECTION_GREEN_CHAMPIONS,
    COLLECTION_SAFETY_GEAR_REQUESTS,
    COLLECTION_WASTE_WORKERS,
)
from wastems.infrastructure.firebase.repositories import DocumentRepository

ADDRESS = {"street": "Ward Office", "city": "Mumbai", "pincode": "400001", "state": "Maharashtra"}


def worker_payload(employee_id: str = "EMP001", role: str = "collector") -> dict:
    return {
        "personalInfo": {
            "name": "Ravi Kumar",
            "phone": "9876500000",
            "dateOfBirth": "1985-01-01",
            "gender": "male",
            "emergencyContact": "9876500001",
        },
        "employeeId": employee_id,
        "area": "Ward A",
        "role": role,
        "address": ADDRESS,
        "ulbId": "MMC001",
    }


def champion_payload() -> dict:
    return {
        "personalInfo": {
            "name": "Meera Iyer",
            "phone": "9876511111",
            "dateOfBirth": "1992-03-03",
            "gender": "female",
            "email": "meera@example.com",
        },
        "areaAssigned": "Ward B",
        "address": ADDRESS,
        "ulbId": "MMC001",
    }


async def test_register_worker_and_reject_duplicate_employee_id(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post("/api/workers/register", json=worker_payload(), headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["worker"]["employeeId"] == "EMP001"

    duplicate = await client.post("/api/workers/register", json=worker_payload(), headers=admin_headers)
    assert duplicate.status_code == 400


async def test_register_worker_requires_ulb_admin(client: AsyncClient, make_user) -> None:
    _, headers = await make_user("supervisor")
    response = await client.post("/api/workers/register", json=worker_payload(), headers=headers)
    assert response.status_code == 403


async def test_worker_list_is_decorated_and_filterable_by_role(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    await client.post("/api/workers/register", json=worker_payload("EMP001"), headers=admin_headers)
    await client.post(
        "/api/workers/register", json=worker_payload("EMP002", "driver"), headers=admin_headers
    )
    response = await client.get("/api/workers?filter=driver", headers=admin_headers)
    workers = response.json()["data"]["workers"]
    assert [w["employeeId"] for w in workers] == ["EMP002"]
    assert workers[0]["trainingProgress"] == "Not Started"
    assert workers[0]["safetyGearStatus"] == "Poor"

    alias = await client.get("/api/workers/list?search=emp001", headers=admin_headers)
    assert alias.json()["data"]["pagination"]["total"] == 1


async def test_attendance_once_per_day_and_performance(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post("/api/workers/register", json=worker_payload(), headers=admin_headers)
    worker_id = created.json()["worker"]["id"]
    body = {"workerId": worker_id, "date": "2026-01-05", "checkIn": "08:00", "status": "present"}

    first = await client.put("/api/workers/attendance", json=body, headers=admin_headers)
    assert first.status_code == 200
    second = await client.put("/api/workers/attendance", json=body, headers=admin_headers)
    assert second.status_code == 400

    absent = {**body, "date": "2026-01-06", "status": "absent"}
    assert (await client.put("/api/workers/attendance", json=absent, headers=admin_headers)).status_code == 200

    performance = await client.get(f"/api/workers/performance/{worker_id}", headers=admin_headers)
    data = performance.json()["data"]
    assert data["attendanceRate"] == 50
    assert data["totalDaysWorked"] == 1
    assert data["safetyGearPercentage"] == 0


async def test_champion_register_area_and_performance(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/green-champions/register", json=champion_payload(), headers=admin_headers
    )
    assert response.status_code == 201
    champion_id = response.json()["champion"]["id"]

    await client.put(
        f"/api/green-champions/{champion_id}",
        json={"performanceMetrics": {"totalReports": 10, "resolvedReports": 10, "citizensTrained": 50}},
        headers=admin_headers,
    )

    area = await client.get("/api/green-champions/area/Ward B", headers=admin_headers)
    champions = area.json()["data"]["champions"]
    assert [c["id"] for c in champions] == [champion_id]
    assert champions[0]["performanceRating"] == "Excellent"

    performance = await client.get(
        f"/api/green-champions/performance/{champion_id}", headers=admin_headers
    )
    data = performance.json()["data"]
    assert data["performanceScore"] == 100
    assert data["detailedStats"]["totalReports"] == 0


async def test_champion_rating_needs_improvement_without_activity(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post("/api/green-champions", json=champion_payload(), headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["data"]["performanceRating"] == "Needs Improvement"


async def _register_worker(client: AsyncClient, headers: dict[str, str]) -> str:
    response = await client.post("/api/workers/register", json=worker_payload(), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["worker"]["id"]


async def test_worker_detail_is_self_or_ulb_admin(
    client: AsyncClient, admin_headers: dict[str, str], make_user, store
) -> None:
    worker_user_id, worker_headers = await make_user("worker")
    await DocumentRepository(store, COLLECTION_WASTE_WORKERS).create(
        worker_payload("EMP100"), document_id=worker_user_id
    )
    other_id = await _register_worker(client, admin_headers)
    _, supervisor_headers = await make_user("supervisor")

    assert (await client.get(f"/api/workers/{worker_user_id}", headers=worker_headers)).status_code == 200
    assert (await client.get(f"/api/workers/{other_id}", headers=worker_headers)).status_code == 403
    assert (await client.get(f"/api/workers/{other_id}", headers=supervisor_headers)).status_code == 403
    assert (await client.get(f"/api/workers/{other_id}", headers=admin_headers)).status_code == 200
    assert (await client.get("/api/workers", headers=supervisor_headers)).status_code == 200


async def test_training_phase_enrol_then_complete(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    worker_id = await _register_worker(client, admin_headers)

    invalid = await client.post(
        "/api/workers/training/phase/phase9", json={"workerId": worker_id}, headers=admin_headers
    )
    assert invalid.status_code == 400
    assert invalid.json()["error"]["message"] == "Invalid training phase"

    not_enrolled = await client.put(
        "/api/workers/training/complete",
        json={"workerId": worker_id, "phase": "phase1", "score": 80},
        headers=admin_headers,
    )
    assert not_enrolled.status_code == 400
    assert not_enrolled.json()["error"]["message"] == "Not enrolled in phase1"

    enrolled = await client.post(
        "/api/workers/training/phase/phase1", json={"workerId": worker_id}, headers=admin_headers
    )
    assert enrolled.status_code == 200
    assert enrolled.json()["data"]["phase1"] is not None
    again = await client.post(
        "/api/workers/training/phase/phase1", json={"workerId": worker_id}, headers=admin_headers
    )
    assert again.json()["error"]["message"] == "Already enrolled in phase1"

    completed = await client.put(
        "/api/workers/training/complete",
        json={"workerId": worker_id, "phase": "phase1", "score": 80},
        headers=admin_headers,
    )
    assert completed.status_code == 200
    assert completed.json()["data"] == {"completedPhases": ["phase1"], "score": 80}

    worker = (await client.get(f"/api/workers/{worker_id}", headers=admin_headers)).json()["data"]
    assert worker["trainingProgress"] == "In Progress"
    assert worker["trainingScores"] == {"phase1": 80}


async def test_safety_gear_request_and_issue(
    client: AsyncClient, admin_headers: dict[str, str], make_user, store
) -> None:
    worker_user_id, worker_headers = await make_user("worker")
    await DocumentRepository(store, COLLECTION_WASTE_WORKERS).create(
        {**worker_payload("EMP100"), "safetyGear": {"helmet": False, "gloves": False,
         "uniform": False, "boots": False, "mask": False}},
        document_id=worker_user_id,
    )

    rejected = await client.post(
        "/api/workers/safety-gear/request", json={"equipment": ["jetpack"]}, headers=worker_headers
    )
    assert rejected.status_code == 400

    requested = await client.post(
        "/api/workers/safety-gear/request",
        json={"equipment": ["helmet", "gloves"], "reason": "worn out"},
        headers=worker_headers,
    )
    assert requested.status_code == 200
    request_id = requested.json()["data"]["requestId"]

    # workers cannot hand out gear to themselves
    forbidden = await client.put(
        "/api/workers/safety-gear/issue",
        json={"workerId": worker_user_id, "equipment": ["helmet"]},
        headers=worker_headers,
    )
    assert forbidden.status_code == 403

    issued = await client.put(
        "/api/workers/safety-gear/issue",
        json={"workerId": worker_user_id, "equipment": ["helmet", "gloves"]},
        headers=admin_headers,
    )
    assert issued.status_code == 200
    assert issued.json()["data"]["requestsClosed"] == 1
    assert issued.json()["data"]["safetyGearStatus"] == "Poor"

    status = await client.get(
        f"/api/workers/safety-gear/status/{worker_user_id}", headers=worker_headers
    )
    data = status.json()["data"]
    assert data["helmet"] is True and data["mask"] is False
    assert data["percentage"] == 40

    request = await DocumentRepository(store, COLLECTION_SAFETY_GEAR_REQUESTS).get_or_404(request_id)
    assert request["status"] == "issued"


async def test_champion_monitoring_report_counts_toward_metrics(
    client: AsyncClient, make_user, store
) -> None:
    champion_user_id, champion_headers = await make_user("champion")
    champions = DocumentRepository(store, COLLECTION_GREEN_CHAMPIONS)
    await champions.create(
        {**champion_payload(), "performanceMetrics": {"totalReports": 0}},
        document_id=champion_user_id,
    )
    report = {
        "area": "Ward B",
        "issueType": "dumping",
        "description": "Garbage dumped near the park",
        "priority": "high",
    }
    created = await client.post(
        "/api/green-champions/monitoring/report", json=report, headers=champion_headers
    )
    assert created.status_code == 201
    assert created.json()["data"]["status"] == "open"

    invalid = await client.post(
        "/api/green-champions/monitoring/report",
        json={**report, "issueType": "noise"},
        headers=champion_headers,
    )
    assert invalid.status_code == 400

    champion = await champions.get_or_404(champion_user_id)
    assert champion["performanceMetrics"]["totalReports"] == 1

    dashboard = await client.get(
        "/api/green-champions/monitoring/dashboard?area=Ward B", headers=champion_headers
    )
    summary = dashboard.json()["data"]
    assert summary["summary"]["totalReports"] == 1
    assert summary["summary"]["pendingReports"] == 1
    assert summary["reportsByType"] == {"dumping": 1}
    assert summary["reportsByPriority"] == {"high": 1}

    elsewhere = await client.get(
        "/api/green-champions/monitoring/dashboard?area=Ward Z", headers=champion_headers
    )
    assert elsewhere.json()["data"]["summary"]["totalReports"] == 0


async def test_champion_reports_citizen_violation(
    client: AsyncClient, make_user, store
) -> None:
    _, champion_headers = await make_user("champion")
    citizens = DocumentRepository(store, COLLECTION_CITIZENS)
    citizen = await citizens.create({
        "personalInfo": {"name": "Priya Sharma", "phone": "9876543210"},
        "aadhaar": "123456789012",
        "address": ADDRESS,
        "ulbId": "MMC001",
        "segregationCompliance": {"score": 50, "violations": []},
    })
    response = await client.put(
        "/api/green-champions/violations/report",
        json={
            "citizenId": citizen["id"],
            "violationType": "illegal_dumping",
            "description": "Dumped mixed waste on the street",
        },
        headers=champion_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["penaltyAmount"] == 500

    updated = await citizens.get_or_404(citizen["id"])
    [entry] = updated["segregationCompliance"]["violations"]
    assert entry["violationType"] == "illegal_dumping"
    assert entry["violationId"] == response.json()["data"]["violationId"]
    assert updated["segregationCompliance"]["score"] == 50


async def test_training_schedule_requires_area_type_and_date(
    client: AsyncClient, make_user
) -> None:
    _, champion_headers = await make_user("champion")
    missing = await client.post(
        "/api/green-champions/training/schedule", json={"area": "Ward B"}, headers=champion_headers
    )
    assert missing.status_code == 400
    assert missing.json()["error"]["message"] == "Area, training type, and scheduled date are required"

    scheduled = await client.post(
        "/api/green-champions/training/schedule",
        json={
            "area": "Ward B",
            "trainingType": "segregation_basics",
            "scheduledDate": "2026-11-01T10:00:00Z",
        },
        headers=champion_headers,
    )
    assert scheduled.status_code == 201
    assert scheduled.json()["data"]["status"] == "scheduled"
