"""HTTP API: routers, dependencies and endpoints."""
