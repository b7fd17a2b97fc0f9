"""API request schemas (pydantic). Attributes are snake_case; JSON is camelCase."""
