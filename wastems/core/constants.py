"""Core constants: role groups and default permissions.

Single source of truth for which roles may call which routes and for the
permission list a newly registered account receives.
"""

from wastems.domain.enums import UserRole

ADMIN = UserRole.ADMIN.value
ULB_ADMIN = UserRole.ULB_ADMIN.value
SUPERVISOR = UserRole.SUPERVISOR.value

# Role allow-lists used with require_roles
ADMIN_ONLY: tuple[str, ...] = (ADMIN,)
ULB_ADMIN_OR_ABOVE: tuple[str, ...] = (ADMIN, ULB_ADMIN)
SUPERVISOR_OR_ABOVE: tuple[str, ...] = (ADMIN, ULB_ADMIN, SUPERVISOR)
ANY_ROLE: tuple[str, ...] = tuple(UserRole.values())

DEFAULT_PERMISSIONS: dict[str, list[str]] = {
    UserRole.ADMIN.value: ["all"],
    UserRole.ULB_ADMIN.value: ["citizens", "workers", "facilities", "collection", "monitoring", "analytics"],
    UserRole.SUPERVISOR.value: ["citizens", "workers", "monitoring"],
    UserRole.CITIZEN.value: ["profile", "training", "reports"],
    UserRole.WORKER.value: ["profile", "schedule", "attendance"],
    UserRole.CHAMPION.value: ["monitoring", "reports", "citizens"],
}


def default_permissions(role: str) -> list[str]:
    """Permissions granted to a new account with role (empty for unknown roles)."""
    return list(DEFAULT_PERMISSIONS.get(role, []))
