"""Unit tests for the Firestore REST value codec and client (httpx MockTransport)."""

import json
from datetime import UTC, datetime
from unittest.mock import MagicMock

import httpx
import pytest

from wastems.domain.enums import UserRole
from wastems.domain.exceptions import DocumentStoreException
from wastems.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentNotFoundError,
    FirestoreRESTClient,
)
from wastems.infrastructure.firebase._rest_encoding import decode_value, encode_fields, encode_value

PREFIX = "https://firestore.googleapis.com/v1/projects/demo/databases/(default)/documents"


def test_encode_value_types() -> None:
    assert encode_value(None) == {"nullValue": None}
    assert encode_value(True) == {"booleanValue": True}
    assert encode_value(3) == {"integerValue": "3"}
    assert encode_value(2.5) == {"doubleValue": 2.5}
    assert encode_value(UserRole.ADMIN) == {"stringValue": "admin"}
    assert encode_value(datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)) == {
        "timestampValue": "2026-01-02T03:04:05.000000Z"
    }
    assert encode_value(["a"]) == {"arrayValue": {"values": [{"stringValue": "a"}]}}
    assert encode_fields({"m": {"k": 1}}) == {
        "fields": {"m": {"mapValue": {"fields": {"k": {"integerValue": "1"}}}}}
    }


def test_decode_value_handles_nanosecond_timestamps_and_geopoints() -> None:
    value = decode_value({"timestampValue": "2026-01-02T03:04:05.123456789Z"})
    assert value == datetime(2026, 1, 2, 3, 4, 5, 123456, tzinfo=UTC)
    point = decode_value({"geoPointValue": {"latitude": 19.1, "longitude": 72.8}})
    assert point == {"lat": 19.1, "lng": 72.8}


def make_client(handler) -> FirestoreRESTClient:
    credentials = MagicMock(valid=True, token="test-token")
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirestoreRESTClient("demo", credentials, http_client=http)


async def test_get_decodes_document_and_sends_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"name": f"{PREFIX}/users/admin", "fields": {"role": {"stringValue": "admin"}}},
        )

    client = make_client(handler)
    snapshot = await client.collection("users").document("admin").get()
    assert snapshot.id == "admin"
    assert snapshot.to_dict() == {"role": "admin"}
    assert seen[0].headers["Authorization"] == "Bearer test-token"


async def test_get_missing_document_returns_none() -> None:
    client = make_client(lambda request: httpx.Response(404))
    assert await client.collection("users").document("nobody").get() is None


async def test_update_sends_mask_and_existence_precondition() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = make_client(handler)
    await client.collection("users").document("admin").update({"isActive": True})
    params = seen[0].url.params
    assert seen[0].method == "PATCH"
    assert params.get_list("updateMask.fieldPaths") == ["isActive"]
    assert params["currentDocument.exists"] == "true"


async def test_update_missing_document_raises() -> None:
    client = make_client(lambda request: httpx.Response(404))
    with pytest.raises(DocumentNotFoundError):
        await client.collection("users").document("nobody").update({"x": 1})


async def test_create_conflict_raises_document_exists() -> None:
    client = make_client(lambda request: httpx.Response(409))
    with pytest.raises(DocumentExistsError):
        await client.collection("users").create("admin", {"role": "admin"})


async def test_server_error_raises_document_store_exception() -> None:
    client = make_client(lambda request: httpx.Response(503))
    with pytest.raises(DocumentStoreException):
        await client.collection("users").document("admin").get()


async def test_query_builds_composite_filter_and_order() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json=[
                {"document": {"name": f"{PREFIX}/citizens/c1", "fields": {"n": {"integerValue": "1"}}}},
                {"readTime": "2026-01-01T00:00:00Z"},
            ],
        )

    client = make_client(handler)
    query = (
        client.collection("citizens")
        .where("address.city", "==", "Pune")
        .where("rewardPoints", ">=", 10)
        .order_by("createdAt", "desc")
        .limit(5)
    )
    results = [s async for s in query.stream()]
    assert [s.id for s in results] == ["c1"]

    structured = bodies[0]["structuredQuery"]
    assert structured["from"] == [{"collectionId": "citizens"}]
    composite = structured["where"]["compositeFilter"]
    assert composite["op"] == "AND"
    assert [f["fieldFilter"]["op"] for f in composite["filters"]] == ["EQUAL", "GREATER_THAN_OR_EQUAL"]
    assert structured["orderBy"][0]["direction"] == "DESCENDING"
    assert structured["limit"] == 5


async def test_collection_stream_follows_page_tokens() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if "pageToken" not in request.url.params:
            return httpx.Response(
                200,
                json={"documents": [{"name": f"{PREFIX}/ulbs/a"}], "nextPageToken": "next"},
            )
        return httpx.Response(200, json={"documents": [{"name": f"{PREFIX}/ulbs/b"}]})

    client = make_client(handler)
    assert [s.id async for s in client.collection("ulbs").stream()] == ["a", "b"]
