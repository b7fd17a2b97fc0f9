"""Document ID generation."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_id() -> str:
    """Return a new CUID2 for a document created without an explicit ID.

    Seeded documents (users/admin, ulbs/MMC001, FAC001..) use fixed IDs instead.
    """
    return str(_next_cuid())
