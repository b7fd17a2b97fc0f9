"""Application-wide rate limit: 100 requests per 15 minutes per client address."""

from httpx import AsyncClient


async def test_101st_request_in_window_is_rate_limited(client: AsyncClient) -> None:
    for i in range(100):
        response = await client.get("/api/health")
        assert response.status_code == 200, f"request {i + 1} was limited"

    response = await client.get("/api/health")
    assert response.status_code == 429
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "RATE_LIMITED"
    assert body["error"]["message"] == "Too many requests from this IP, please try again later."
