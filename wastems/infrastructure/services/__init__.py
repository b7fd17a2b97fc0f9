"""Infrastructure services (startup seeding and document validation)."""

from wastems.infrastructure.services.schema_bootstrap import (
    SchemaBootstrapService,
    get_collection_schemas,
    validate_document,
)

__all__ = [
    "SchemaBootstrapService",
    "get_collection_schemas",
    "validate_document",
]
