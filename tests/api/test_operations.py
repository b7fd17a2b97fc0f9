"""Households, segregation, vehicles, facilities and monitoring reports."""

from httpx import AsyncClient

ADDRESS = {"street": "5 Link Road", "city": "Mumbai", "pincode": "400050", "state": "Maharashtra"}
LOCATION = {"lat": 19.05, "lng": 72.83}


async def test_guidelines_are_public(client: AsyncClient) -> None:
    response = await client.get("/api/waste/segregation/guidelines")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["wetWaste"]["binColor"] == "Green"
    assert data["hazardousWaste"]["binColor"] == "Red"


async def test_violation_lowers_household_score_with_floor(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post(
        "/api/waste/households",
        json={"address": ADDRESS, "residentCount": 4, "ulbId": "MMC001"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    household_id = created.json()["data"]["id"]
    assert created.json()["data"]["complianceScore"] == 100

    report = {
        "householdId": household_id,
        "citizenId": "citizen-1",
        "violationType": "non_segregation",
        "description": "Mixed waste in green bin",
        "location": LOCATION,
    }
    response = await client.post("/api/waste/segregation/violation", json=report, headers=admin_headers)
    assert response.status_code == 201
    violation = response.json()["data"]
    assert violation["reportedBy"] == "admin"
    assert violation["status"] == "pending"

    household = await client.get(f"/api/waste/households/{household_id}", headers=admin_headers)
    assert household.json()["data"]["complianceScore"] == 90

    await client.put(
        f"/api/waste/households/{household_id}", json={"complianceScore": 5}, headers=admin_headers
    )
    await client.post("/api/waste/segregation/violation", json=report, headers=admin_headers)
    household = await client.get(f"/api/waste/households/{household_id}", headers=admin_headers)
    assert household.json()["data"]["complianceScore"] == 0


async def test_violation_without_citizen_returns_400(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post(
        "/api/waste/households",
        json={"address": ADDRESS, "residentCount": 2, "ulbId": "MMC001"},
        headers=admin_headers,
    )
    response = await client.post(
        "/api/waste/segregation/violation",
        json={
            "householdId": created.json()["data"]["id"],
            "violationType": "illegal_dumping",
            "description": "Dumped on the street",
            "location": LOCATION,
        },
        headers=admin_headers,
    )
    assert response.status_code == 400


async def test_bulk_generator_crud(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    created = await client.post(
        "/api/waste/bulk-generators",
        json={"name": "Hotel Sagar", "type": "hotel", "address": ADDRESS, "ulbId": "MMC001"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    listing = await client.get("/api/waste/bulk-generators?filter=hotel", headers=admin_headers)
    assert listing.json()["data"]["bulkGenerators"][0]["name"] == "Hotel Sagar"


async def test_vehicle_status_update(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    created = await client.post(
        "/api/collection/vehicles",
        json={"vehicleNumber": "MH01AB1234", "type": "truck", "capacity": 5, "ulbId": "MMC001"},
        headers=admin_headers,
    )
    vehicle_id = created.json()["data"]["id"]
    assert created.json()["data"]["status"] == "active"

    response = await client.put(
        f"/api/collection/vehicles/{vehicle_id}/status",
        json={"status": "maintenance", "fuelLevel": 40},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "maintenance"
    assert response.json()["data"]["fuelLevel"] == 40

    invalid = await client.put(
        f"/api/collection/vehicles/{vehicle_id}/status",
        json={"status": "broken"},
        headers=admin_headers,
    )
    assert invalid.status_code == 400


async def test_seeded_facilities_are_decorated_and_filterable(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.get("/api/facilities?filter=wte", headers=admin_headers)
    facilities = response.json()["data"]["facilities"]
    assert [f["id"] for f in facilities] == ["FAC002"]
    assert facilities[0]["utilization"] == 80.0
    assert facilities[0]["efficiencyBand"] == "high"

    active = await client.get("/api/facilities?filter=active", headers=admin_headers)
    assert active.json()["data"]["pagination"]["total"] == 3


async def test_facility_capacity_and_intake(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    capacity = await client.get("/api/facilities/capacity/FAC001", headers=admin_headers)
    data = capacity.json()["data"]
    assert data["availableCapacity"] == 350
    assert data["utilization"] == 65.0

    intake = {"facilityId": "FAC001", "wasteType": "wet", "source": "Ward A", "quality": "good"}
    over = await client.put("/api/facilities/intake", json={**intake, "quantity": 400}, headers=admin_headers)
    assert over.status_code == 400

    ok = await client.put("/api/facilities/intake", json={**intake, "quantity": 100}, headers=admin_headers)
    assert ok.status_code == 200
    assert ok.json()["data"]["currentLoad"] == 750
    assert len(ok.json()["data"]["intakeHistory"]) == 1


async def test_any_user_can_file_report_but_only_staff_resolve(
    client: AsyncClient, admin_headers: dict[str, str], make_user
) -> None:
    citizen_id, citizen = await make_user("citizen")
    created = await client.post(
        "/api/monitoring/reports",
        json={"area": "Ward C", "issueType": "dumping", "description": "Garbage pile"},
        headers=citizen,
    )
    assert created.status_code == 201
    report = created.json()["data"]
    assert report["reporterId"] == citizen_id
    assert report["status"] == "open"
    assert report["priority"] == "medium"

    forbidden = await client.put(
        f"/api/monitoring/reports/{report['id']}/resolve", json={}, headers=citizen
    )
    assert forbidden.status_code == 403

    resolved = await client.put(
        f"/api/monitoring/reports/{report['id']}/resolve",
        json={"resolution": "Cleared"},
        headers=admin_headers,
    )
    assert resolved.status_code == 200
    assert resolved.json()["data"]["status"] == "resolved"
    assert resolved.json()["data"]["resolvedBy"] == "admin"

    again = await client.put(
        f"/api/monitoring/reports/{report['id']}/resolve", json={}, headers=admin_headers
    )
    assert again.status_code == 400
