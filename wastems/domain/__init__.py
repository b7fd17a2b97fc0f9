"""Domain layer: enums, exceptions, entities and derived ratings.

No dependencies on infrastructure or presentation.
"""

from wastems.domain.entities import AuthenticatedUser
from wastems.domain.enums import TrainingModule, UserRole, WorkerTrainingPhase
from wastems.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DocumentStoreException,
    ResourceNotFoundException,
    ValidationException,
    WasteMSException,
)

__all__ = [
    "AuthenticatedUser",
    "AuthenticationException",
    "AuthorizationException",
    "DocumentStoreException",
    "ResourceNotFoundException",
    "TrainingModule",
    "UserRole",
    "ValidationException",
    "WasteMSException",
    "WorkerTrainingPhase",
]
