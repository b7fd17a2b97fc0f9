"""Shared helpers: datetime, id generation, list querying, logging setup.

Used by domain, infrastructure and API layers. No business logic.
"""
