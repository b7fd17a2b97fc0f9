"""Seed the admin account and reference documents once, outside the server.

Usage:
    python -m scripts.init_schema
Uses the same DATABASE_BACKEND and credentials as the API.
"""

import asyncio
import sys

from wastems.core.config import get_settings
from wastems.infrastructure.firebase import (
    close_document_store,
    get_document_store,
    init_document_store,
)
from wastems.infrastructure.services import SchemaBootstrapService
from wastems.shared.logging_setup import setup_logging


async def main() -> None:
    setup_logging()
    settings = get_settings()
    if not init_document_store():
        print("Document store could not be initialized", file=sys.stderr)
        sys.exit(1)
    try:
        ok = await SchemaBootstrapService(get_document_store(), settings).initialize_schema()
    finally:
        await close_document_store()
    if not ok:
        print("Schema initialization failed; see log", file=sys.stderr)
        sys.exit(1)
    print("Schema initialized")


if __name__ == "__main__":
    asyncio.run(main())
