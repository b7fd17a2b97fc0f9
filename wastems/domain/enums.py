"""Domain enumerations for the waste-management API.

Enums represent fixed sets of domain values (roles, training modules, statuses).
"""

from enum import Enum


class UserRole(str, Enum):
    """Account role; gates routes via require_roles."""

    ADMIN = "admin"
    ULB_ADMIN = "ulb_admin"
    SUPERVISOR = "supervisor"
    CITIZEN = "citizen"
    WORKER = "worker"
    CHAMPION = "champion"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]


class TrainingModule(str, Enum):
    """Citizen segregation-training modules, in order."""

    BASIC = "basic"
    ADVANCED = "advanced"
    CERTIFICATION = "certification"


class WorkerTrainingPhase(str, Enum):
    """Waste-worker training phases."""

    PHASE1 = "phase1"
    PHASE2 = "phase2"
    PHASE3 = "phase3"


class WorkerRole(str, Enum):
    COLLECTOR = "collector"
    SUPERVISOR = "supervisor"
    DRIVER = "driver"
    FACILITY_OPERATOR = "facility_operator"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    LATE = "late"


class FacilityType(str, Enum):
    BIOMETHANIZATION = "biomethanization"
    WTE = "wte"
    RECYCLING = "recycling"
    COMPOSTING = "composting"


class FacilityStatus(str, Enum):
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class VehicleStatus(str, Enum):
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
