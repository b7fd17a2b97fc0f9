"""ULB records, compliance reports, analytics aggregates and generic CRUD rules."""

from httpx import AsyncClient

from wastems.infrastructure.firebase.collections import COLLECTION_BULK_GENERATORS, COLLECTION_HOUSEHOLDS
from wastems.shared.utils import utc_now


async def test_seeded_ulb_has_compliance_band(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.get("/api/ulb/MMC001", headers=admin_headers)
    assert response.status_code == 200
    ulb = response.json()["data"]
    assert ulb["code"] == "MMC001"
    assert ulb["complianceBand"] == "low"


async def test_update_waste_management_status_merges(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.put(
        "/api/ulb/MMC001/waste-management-status",
        json={"segregationCompliance": 92},
        headers=admin_headers,
    )
    assert response.status_code == 200
    ulb = response.json()["data"]
    assert ulb["wasteManagementStatus"]["segregationCompliance"] == 92
    assert ulb["wasteManagementStatus"]["totalWard"] == 24
    assert ulb["complianceBand"] == "high"


async def test_update_policies_rejects_empty_body(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.put("/api/ulb/MMC001/policies", json={}, headers=admin_headers)
    assert response.status_code == 400


async def test_ulb_facilities(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.get("/api/ulb/MMC001/facilities", headers=admin_headers)
    data = response.json()["data"]
    assert data["total"] == 3
    assert {f["id"] for f in data["facilities"]} == {"FAC001", "FAC002", "FAC003"}


async def test_ulb_create_is_admin_only(
    client: AsyncClient, admin_headers: dict[str, str], make_user
) -> None:
    payload = {"name": "Pune Municipal Corporation", "code": "PMC001", "state": "Maharashtra", "district": "Pune"}
    _, ulb_admin = await make_user("ulb_admin")
    assert (await client.post("/api/ulb", json=payload, headers=ulb_admin)).status_code == 403
    created = await client.post("/api/ulb", json=payload, headers=admin_headers)
    assert created.status_code == 201
    assert created.json()["data"]["isActive"] is True

    listing = await client.get("/api/ulb?search=pune", headers=ulb_admin)
    assert [u["code"] for u in listing.json()["data"]["ulbs"]] == ["PMC001"]


async def test_update_with_no_known_fields_returns_400(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.put("/api/ulb/MMC001", json={"unknownField": 1}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No updatable fields provided"


async def test_update_missing_document_returns_404(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.put("/api/ulb/NOPE", json={"name": "Nowhere Town"}, headers=admin_headers)
    assert response.status_code == 404


async def test_delete_is_admin_only_and_404_when_missing(
    client: AsyncClient, admin_headers: dict[str, str], make_user
) -> None:
    _, ulb_admin = await make_user("ulb_admin")
    assert (await client.delete("/api/facilities/FAC003", headers=ulb_admin)).status_code == 403
    assert (await client.delete("/api/facilities/FAC003", headers=admin_headers)).status_code == 200
    assert (await client.delete("/api/facilities/FAC003", headers=admin_headers)).status_code == 404


async def test_analytics_overview_and_utilization(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    overview = await client.get("/api/analytics/overview", headers=admin_headers)
    counts = overview.json()["data"]["counts"]
    assert counts["facilities"] == 3
    assert counts["ulbs"] == 1
    assert counts["citizens"] == 0

    utilization = await client.get("/api/analytics/facilities/utilization", headers=admin_headers)
    data = utilization.json()["data"]
    assert data["totalCapacity"] == 1700
    assert data["totalLoad"] == 1200
    assert data["overallUtilization"] == 70.6


async def test_analytics_compliance_distribution(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.get("/api/analytics/segregation/compliance", headers=admin_headers)
    data = response.json()["data"]
    assert data["totalCitizens"] == 0
    assert data["distribution"] == {"Excellent": 0, "Good": 0, "Fair": 0, "Poor": 0}


async def test_compliance_report_rates_and_recommendations(
    client: AsyncClient, admin_headers: dict[str, str], store
) -> None:
    households = store.collection(COLLECTION_HOUSEHOLDS)
    for doc_id, score in (("H1", 90), ("H2", 40), ("H3", "n/a")):
        await households.document(doc_id).set(
            {"ulbId": "MMC001", "complianceScore": score, "createdAt": utc_now()}
        )
    await store.collection(COLLECTION_BULK_GENERATORS).document("B1").set(
        {"ulbId": "MMC001", "complianceStatus": "compliant", "createdAt": utc_now()}
    )

    response = await client.get(
        "/api/ulb/compliance/report/MMC001?period=weekly", headers=admin_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ulb"]["code"] == "MMC001"
    assert data["period"]["type"] == "weekly"
    assert data["compliance"]["householdComplianceRate"] == 33.33
    assert data["compliance"]["bulkGeneratorComplianceRate"] == 100.0
    assert [r["type"] for r in data["recommendations"]] == ["household_compliance"]


async def test_compliance_report_rejects_unknown_period_and_ulb(
    client: AsyncClient, admin_headers: dict[str, str], make_user
) -> None:
    bad_period = await client.get(
        "/api/ulb/compliance/report/MMC001?period=daily", headers=admin_headers
    )
    assert bad_period.status_code == 400
    missing = await client.get("/api/ulb/compliance/report/NOPE", headers=admin_headers)
    assert missing.status_code == 404

    _, supervisor_headers = await make_user("supervisor")
    denied = await client.get("/api/ulb/compliance/report/MMC001", headers=supervisor_headers)
    assert denied.status_code == 403


async def test_daily_waste_from_facility_intake(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    intake = {"facilityId": "FAC001", "source": "Ward A", "quality": "good"}
    await client.put(
        "/api/facilities/intake", json={**intake, "wasteType": "wet", "quantity": 40}, headers=admin_headers
    )
    await client.put(
        "/api/facilities/intake", json={**intake, "wasteType": "dry", "quantity": 10}, headers=admin_headers
    )

    response = await client.get("/api/analytics/waste-generation/daily?days=7", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["dailyData"]) == 7
    today = data["dailyData"][-1]
    assert today["wetWaste"] == 40
    assert today["dryWaste"] == 10
    assert today["totalIntakes"] == 2
    assert data["summary"]["totalWaste"] == 50
    assert data["wasteDistribution"]["hazardousWaste"] == 0

    too_long = await client.get("/api/analytics/waste-generation/daily?days=400", headers=admin_headers)
    assert too_long.status_code == 400


async def test_training_completion_counts_modules(
    client: AsyncClient, admin_headers: dict[str, str], store
) -> None:
    citizens = store.collection("citizens")
    await citizens.document("C1").set(
        {"trainingStatus": {"completed": True, "completedModules": ["basic", "advanced", "certification"]}}
    )
    await citizens.document("C2").set({"trainingStatus": {"completedModules": ["basic"]}})
    await citizens.document("C3").set({"trainingStatus": None})

    response = await client.get("/api/analytics/citizen-training/completion", headers=admin_headers)
    data = response.json()["data"]
    assert data["summary"] == {
        "totalCitizens": 3,
        "trainedCitizens": 1,
        "completionRate": 33.33,
        "untrainedCitizens": 2,
    }
    assert data["moduleStats"] == {"basic": 2, "advanced": 1, "certification": 1}
