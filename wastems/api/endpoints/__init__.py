"""Endpoint modules, one router per domain."""
