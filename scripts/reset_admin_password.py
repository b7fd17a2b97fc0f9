"""Force the seeded admin account back to the default password.

Usage:
    python -m scripts.reset_admin_password
Runs regardless of ADMIN_AUTO_REPAIR and reactivates the account.
"""

import asyncio
import sys

from wastems.core.config import get_settings
from wastems.infrastructure.firebase import (
    close_document_store,
    get_document_store,
    init_document_store,
)
from wastems.infrastructure.firebase.collections import COLLECTION_USERS
from wastems.infrastructure.security.password import get_password_hash
from wastems.infrastructure.services.schema_bootstrap import ADMIN_DOCUMENT_ID
from wastems.shared.utils import utc_now


async def main() -> None:
    """Reset users/admin to ADMIN_DEFAULT_PASSWORD."""
    settings = get_settings()
    if not init_document_store():
        print("Document store could not be initialized", file=sys.stderr)
        sys.exit(1)
    try:
        ref = get_document_store().collection(COLLECTION_USERS).document(ADMIN_DOCUMENT_ID)
        if await ref.get() is None:
            print("Admin user not found; run scripts.init_schema first", file=sys.stderr)
            sys.exit(1)
        password = settings.admin_default_password.get_secret_value()
        await ref.update({
            "password": await asyncio.to_thread(get_password_hash, password),
            "isActive": True,
            "role": "admin",
            "updatedAt": utc_now(),
        })
    finally:
        await close_document_store()
    print(f"Admin password reset for {settings.admin_email}")


if __name__ == "__main__":
    asyncio.run(main())
