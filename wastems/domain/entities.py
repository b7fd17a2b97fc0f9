"""Domain entities shared across layers."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AuthenticatedUser:
    """The caller of a protected route: token claims merged with the stored user record.

    Stored values win over claims, so a role change takes effect before the
    token expires.
    """

    id: str
    email: str
    role: str
    name: str = ""
    permissions: list[str] = field(default_factory=list)

    @classmethod
    def from_claims_and_record(
        cls, claims: dict[str, Any], user_id: str, record: dict[str, Any]
    ) -> "AuthenticatedUser":
        merged = {**claims, **record}
        return cls(
            id=user_id,
            email=merged.get("email", ""),
            role=merged.get("role", ""),
            name=merged.get("name", ""),
            permissions=list(merged.get("permissions") or []),
        )

    def has_role(self, *roles: str) -> bool:
        return self.role in roles

    def to_public_dict(self) -> dict[str, Any]:
        """User fields safe to return to clients (no password hash)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "permissions": self.permissions,
        }
