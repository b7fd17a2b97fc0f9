"""Unit tests for the in-memory document store and DocumentRepository."""

import pytest

from wastems.domain.exceptions import ResourceNotFoundException, ValidationException
from wastems.infrastructure.firebase._rest_client import DocumentExistsError, DocumentNotFoundError
from wastems.infrastructure.firebase.memory import InMemoryDocumentStore
from wastems.infrastructure.firebase.repositories import DocumentRepository


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


async def test_set_get_update_delete(store: InMemoryDocumentStore) -> None:
    ref = store.collection("things").document("a")
    assert await ref.get() is None
    await ref.set({"n": 1, "nested": {"x": 1}})
    await ref.update({"n": 2})
    snapshot = await ref.get()
    assert snapshot.id == "a"
    assert snapshot.to_dict() == {"n": 2, "nested": {"x": 1}}
    await ref.delete()
    assert await ref.get() is None


async def test_returned_data_is_a_copy(store: InMemoryDocumentStore) -> None:
    ref = store.collection("things").document("a")
    await ref.set({"tags": ["x"]})
    (await ref.get()).to_dict()["tags"].append("y")
    assert (await ref.get()).to_dict() == {"tags": ["x"]}


async def test_update_missing_document_raises(store: InMemoryDocumentStore) -> None:
    with pytest.raises(DocumentNotFoundError):
        await store.collection("things").document("missing").update({"n": 1})


async def test_create_existing_id_raises(store: InMemoryDocumentStore) -> None:
    coll = store.collection("things")
    await coll.create("a", {"n": 1})
    with pytest.raises(DocumentExistsError):
        await coll.create("a", {"n": 2})


async def test_where_order_by_limit(store: InMemoryDocumentStore) -> None:
    coll = store.collection("things")
    for doc_id, area, score in [("a", "north", 3), ("b", "north", 1), ("c", "south", 2), ("d", "north", 2)]:
        await coll.create(doc_id, {"area": area, "score": score})
    await coll.create("e", {"area": "north"})

    query = coll.where("area", "==", "north").order_by("score", "desc").limit(2)
    assert [s.id async for s in query.stream()] == ["a", "d"]

    # Documents without the ordered field are left out, as in Firestore.
    ordered = [s.id async for s in coll.where("area", "==", "north").order_by("score").stream()]
    assert ordered == ["b", "d", "a"]

    ranged = coll.where("score", ">=", 2).where("area", "in", ["south"])
    assert [s.id async for s in ranged.stream()] == ["c"]


async def test_unsupported_operator_is_rejected(store: InMemoryDocumentStore) -> None:
    with pytest.raises(ValueError):
        store.collection("things").where("n", "~=", 1)


async def test_repository_create_validates_and_stamps(store: InMemoryDocumentStore) -> None:
    repo = DocumentRepository(store, "kit_orders", "Order")
    with pytest.raises(ValidationException):
        await repo.create({"citizenId": "c1"})

    record = await repo.create({"citizenId": "c1", "kitType": "basic", "quantity": 1})
    assert record["id"]
    assert record["createdAt"] == record["updatedAt"]
    assert await repo.exists(record["id"])

    updated = await repo.update(record["id"], {"status": "shipped"})
    assert updated["status"] == "shipped"
    assert updated["updatedAt"] >= record["updatedAt"]
    assert await repo.count() == 1
    assert await repo.find_one("kitType", "basic") == updated


async def test_repository_missing_documents_raise_not_found(store: InMemoryDocumentStore) -> None:
    repo = DocumentRepository(store, "kit_orders", "Order")
    with pytest.raises(ResourceNotFoundException):
        await repo.get_or_404("nope")
    with pytest.raises(ResourceNotFoundException):
        await repo.update("nope", {"status": "x"})
    with pytest.raises(ResourceNotFoundException):
        await repo.delete("nope")
