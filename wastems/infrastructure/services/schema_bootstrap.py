"""Collection field table, presence validation and idempotent startup seeding.

Firestore has no schema, so the required/optional field table below is the
only record of what each collection holds. validate_document() enforces the
required half on every create. SchemaBootstrapService seeds the admin
account and a small set of reference documents; every seed is guarded by an
existence read so restarts never overwrite data, with one exception: the
admin password is reset to the default when it no longer verifies (unless
ADMIN_AUTO_REPAIR=false).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from wastems.core.config import Settings, get_settings
from wastems.domain.exceptions import ValidationException
from wastems.infrastructure.firebase.client import DocumentStore
from wastems.infrastructure.firebase.collections import (
    COLLECTION_BULK_GENERATORS,
    COLLECTION_CITIZENS,
    COLLECTION_CLEANING_EVENTS,
    COLLECTION_COLLECTION_VEHICLES,
    COLLECTION_GREEN_CHAMPIONS,
    COLLECTION_HOUSEHOLDS,
    COLLECTION_INCENTIVE_REWARDS,
    COLLECTION_KIT_ORDERS,
    COLLECTION_MONITORING_REPORTS,
    COLLECTION_PENALTIES,
    COLLECTION_SEGREGATION_VIOLATIONS,
    COLLECTION_TRAINING_ENROLLMENTS,
    COLLECTION_ULBS,
    COLLECTION_USERS,
    COLLECTION_WASTE_FACILITIES,
    COLLECTION_WASTE_GUIDELINES,
    COLLECTION_WASTE_WORKERS,
)
from wastems.infrastructure.security.password import get_password_hash, verify_password
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

ADMIN_DOCUMENT_ID = "admin"
SAMPLE_ULB_ID = "MMC001"
GUIDELINES_DOCUMENT_ID = "segregation"


@dataclass(frozen=True)
class CollectionSchema:
    required: tuple[str, ...]
    optional: tuple[str, ...] = ()

    @property
    def fields(self) -> tuple[str, ...]:
        return self.required + self.optional


COLLECTION_SCHEMAS: dict[str, CollectionSchema] = {
    COLLECTION_USERS: CollectionSchema(
        ("email", "role", "name"),
        ("password", "isActive", "permissions", "profile", "lastLogin"),
    ),
    COLLECTION_CITIZENS: CollectionSchema(
        ("personalInfo", "aadhaar", "address"),
        ("trainingStatus", "kitsReceived", "segregationCompliance", "rewardPoints", "penaltyHistory"),
    ),
    COLLECTION_WASTE_WORKERS: CollectionSchema(
        ("personalInfo", "area", "role"),
        ("trainingPhases", "safetyGear", "attendance", "performanceRating"),
    ),
    COLLECTION_GREEN_CHAMPIONS: CollectionSchema(
        ("areaAssigned", "personalInfo"),
        ("citizensUnderSupervision", "trainingsConducted", "violationsReported", "performanceMetrics"),
    ),
    COLLECTION_HOUSEHOLDS: CollectionSchema(
        ("address", "residentCount", "ulbId"),
        ("segregationStatus", "collectionSchedule", "complianceScore"),
    ),
    COLLECTION_BULK_GENERATORS: CollectionSchema(
        ("name", "type", "address", "ulbId"),
        ("wasteGeneration", "complianceStatus", "penaltyHistory"),
    ),
    COLLECTION_WASTE_FACILITIES: CollectionSchema(
        ("name", "type", "location", "capacity", "ulbId"),
        ("currentLoad", "efficiency", "status", "manager"),
    ),
    COLLECTION_COLLECTION_VEHICLES: CollectionSchema(
        ("vehicleNumber", "type", "capacity", "ulbId"),
        ("driver", "route", "status", "location", "fuelEfficiency"),
    ),
    COLLECTION_TRAINING_ENROLLMENTS: CollectionSchema(
        ("citizenId", "module", "status"),
        ("enrolledAt", "completedAt", "score", "certificate"),
    ),
    COLLECTION_SEGREGATION_VIOLATIONS: CollectionSchema(
        ("citizenId", "violationType", "reportedBy"),
        ("description", "evidence", "penaltyAmount", "status"),
    ),
    COLLECTION_MONITORING_REPORTS: CollectionSchema(
        ("reporterId", "area", "issueType"),
        ("description", "photos", "location", "status", "resolvedAt"),
    ),
    COLLECTION_CLEANING_EVENTS: CollectionSchema(
        ("name", "date", "area", "organizer"),
        ("description", "participants", "status", "photos"),
    ),
    COLLECTION_KIT_ORDERS: CollectionSchema(
        ("citizenId", "kitType", "quantity"),
        ("status", "deliveryAddress", "orderedAt", "deliveredAt"),
    ),
    COLLECTION_INCENTIVE_REWARDS: CollectionSchema(
        ("citizenId", "type", "points"),
        ("description", "awardedAt", "redeemedAt", "status"),
    ),
    COLLECTION_PENALTIES: CollectionSchema(
        ("citizenId", "type", "amount"),
        ("description", "imposedAt", "paidAt", "status"),
    ),
    COLLECTION_ULBS: CollectionSchema(
        ("name", "code", "state", "district"),
        ("address", "contact", "wasteManagementStatus", "policies"),
    ),
}


def get_collection_schemas() -> dict[str, dict[str, list[str]]]:
    """Return {collection: {"required": [...], "optional": [...]}}."""
    return {
        name: {"required": list(schema.required), "optional": list(schema.optional)}
        for name, schema in COLLECTION_SCHEMAS.items()
    }


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def validate_document(collection: str, data: dict[str, Any]) -> bool:
    """Check that every required field of collection is present in data.

    Presence only: absent, None and "" are missing; empty dicts, empty lists,
    0 and False are present. Types and optional fields are not checked.

    Raises:
        ValueError: collection is not in the table.
        ValidationException: one or more required fields are missing (all are listed).
    """
    schema = COLLECTION_SCHEMAS.get(collection)
    if schema is None:
        raise ValueError(f"Unknown collection: {collection}")
    missing = [f for f in schema.required if _is_missing(data.get(f))]
    if missing:
        raise ValidationException(
            "Validation errors: "
            + ", ".join(f"Missing required field: {f}" for f in missing),
            details={"collection": collection, "missing_fields": missing},
        )
    return True


def _sample_ulb() -> dict[str, Any]:
    now = utc_now()
    return {
        "name": "Mumbai Municipal Corporation",
        "code": SAMPLE_ULB_ID,
        "state": "Maharashtra",
        "district": "Mumbai",
        "address": {
            "street": "CST Road",
            "city": "Mumbai",
            "pincode": "400001",
            "state": "Maharashtra",
        },
        "contact": {
            "phone": "+91-22-22620800",
            "email": "info@mumbaimunicipal.gov.in",
            "website": "https://www.mumbaimunicipal.gov.in",
        },
        "wasteManagementStatus": {
            "totalWard": 24,
            "activeWards": 24,
            "totalPopulation": 12478447,
            "wasteGeneratedPerDay": 7000,  # tons
            "segregationCompliance": 65,
            "lastUpdated": now,
        },
        "policies": {
            "segregationMandatory": True,
            "penaltyAmount": 500,
            "incentiveAmount": 100,
            "trainingRequired": True,
        },
        "isActive": True,
        "createdAt": now,
        "updatedAt": now,
    }


def _waste_guidelines() -> dict[str, Any]:
    return {
        "wetWaste": {
            "name": "Wet Waste (Organic)",
            "description": "Biodegradable organic waste that can be composted",
            "examples": [
                "Food scraps", "Vegetable peels", "Fruit waste", "Tea leaves",
                "Coffee grounds", "Eggshells", "Garden waste",
            ],
            "binColor": "Green",
            "treatmentMethod": "Composting/Biomethanization",
            "doNotInclude": ["Plastic bags", "Metal items", "Glass", "Sanitary waste"],
        },
        "dryWaste": {
            "name": "Dry Waste (Recyclable)",
            "description": "Non-biodegradable waste that can be recycled",
            "examples": [
                "Paper", "Cardboard", "Plastic bottles", "Metal cans",
                "Glass bottles", "Fabric", "Electronics",
            ],
            "binColor": "Blue",
            "treatmentMethod": "Recycling",
            "doNotInclude": ["Food waste", "Liquid waste", "Hazardous materials"],
        },
        "hazardousWaste": {
            "name": "Hazardous Waste",
            "description": "Dangerous waste that requires special handling",
            "examples": [
                "Batteries", "Medicines", "Paints", "Pesticides",
                "Sanitary napkins", "Diapers", "Cigarette butts",
            ],
            "binColor": "Red",
            "treatmentMethod": "Special Treatment/Incineration",
            "doNotInclude": ["Regular household waste", "Food waste", "Recyclable materials"],
        },
        "lastUpdated": utc_now(),
    }


def _sample_facilities() -> dict[str, dict[str, Any]]:
    # (id, name, type, site, capacity t/day, current load, efficiency, manager, contact)
    rows = [
        ("FAC001", "Mumbai Biomethanization Plant", "biomethanization", "Deonar, Mumbai",
         1000, 650, 85, "Dr. Rajesh Kumar", "+91-9876543210"),
        ("FAC002", "Mumbai Waste-to-Energy Plant", "wte", "Mulund, Mumbai",
         500, 400, 90, "Ms. Priya Sharma", "+91-9876543211"),
        ("FAC003", "Mumbai Recycling Center", "recycling", "Bhandup, Mumbai",
         200, 150, 75, "Mr. Amit Patel", "+91-9876543212"),
    ]
    now = utc_now()
    return {
        fid: {
            "name": name,
            "type": ftype,
            "location": {"lat": 19.0760, "lng": 72.8777, "address": site},
            "capacity": capacity,
            "currentLoad": load,
            "efficiency": efficiency,
            "ulbId": SAMPLE_ULB_ID,
            "status": "active",
            "manager": manager,
            "contact": contact,
            "createdAt": now,
        }
        for fid, name, ftype, site, capacity, load, efficiency, manager, contact in rows
    }


class SchemaBootstrapService:
    """Seeds the admin account and reference documents at startup."""

    def __init__(self, store: DocumentStore, settings: Settings | None = None) -> None:
        self._store = store
        self._settings = settings or get_settings()

    async def initialize_schema(self) -> bool:
        """Run every seed step in order.

        Failures are logged and swallowed so the server still starts; the
        missing seeds are written on the next restart.

        Returns:
            True when every step completed.
        """
        logger.info("Initializing database schema")
        try:
            await self.initialize_admin_user()
            await self.initialize_sample_ulb()
            await self.initialize_waste_guidelines()
            await self.initialize_sample_facilities()
        except Exception:
            logger.exception("Schema initialization failed; continuing startup")
            return False
        logger.info("Database schema initialized")
        return True

    async def initialize_admin_user(self) -> None:
        """Create users/admin, or repair its password if it no longer verifies."""
        ref = self._store.collection(COLLECTION_USERS).document(ADMIN_DOCUMENT_ID)
        snapshot = await ref.get()
        default_password = self._settings.admin_default_password.get_secret_value()

        if snapshot is None:
            now = utc_now()
            await ref.set({
                "email": self._settings.admin_email,
                "password": await asyncio.to_thread(get_password_hash, default_password),
                "role": "admin",
                "name": "System Administrator",
                "isActive": True,
                "permissions": ["all"],
                "createdAt": now,
                "updatedAt": now,
            })
            logger.info("Admin user created")
            return

        current_hash = snapshot.to_dict().get("password")
        try:
            needs_repair = not current_hash or not await asyncio.to_thread(
                verify_password, default_password, current_hash
            )
        except Exception:
            needs_repair = True

        if not needs_repair:
            return
        if not self._settings.admin_auto_repair:
            logger.info("Admin password differs from default; auto-repair disabled")
            return
        await ref.update({
            "password": await asyncio.to_thread(get_password_hash, default_password),
            "updatedAt": utc_now(),
            "isActive": True,
            "role": "admin",
        })
        logger.warning("Admin password auto-repaired to default (set ADMIN_AUTO_REPAIR=false to disable)")

    async def initialize_sample_ulb(self) -> None:
        ref = self._store.collection(COLLECTION_ULBS).document(SAMPLE_ULB_ID)
        if await ref.get() is None:
            await ref.set(_sample_ulb())
            logger.info("Sample ULB created")

    async def initialize_waste_guidelines(self) -> None:
        ref = self._store.collection(COLLECTION_WASTE_GUIDELINES).document(GUIDELINES_DOCUMENT_ID)
        if await ref.get() is None:
            await ref.set(_waste_guidelines())
            logger.info("Waste guidelines created")

    async def initialize_sample_facilities(self) -> None:
        collection = self._store.collection(COLLECTION_WASTE_FACILITIES)
        created = 0
        for facility_id, data in _sample_facilities().items():
            ref = collection.document(facility_id)
            if await ref.get() is None:
                await ref.set(data)
                created += 1
        if created:
            logger.info("Sample facilities created: %d", created)
