"""Tests for batch operations of DocumentManager."""

import asyncio
import json

import pytest

from conftest import StubConnection, json_response, meta_body
from document_operations import (
    BatchPartialFailureError,
    ConflictError,
    DocumentManager,
    DocumentMeta,
    DocumentOperationConfig,
    InvalidArgumentError,
    InvalidKeyError,
    NotFoundError,
    OperationStatus,
    PayloadSink,
    with_return_new,
    with_return_old,
    with_silent,
)

CONFLICT = {"error": True, "code": 409, "errorNum": 1210, "errorMessage": "unique constraint violated"}


def assert_correlated(result, count):
    """Every index holds exactly one of a real meta or an error."""
    assert len(result.metas) == len(result.errors) == count
    for meta, error in zip(result.metas, result.errors):
        if error is None:
            assert not meta.is_empty
        else:
            assert meta == DocumentMeta()


@pytest.mark.asyncio
async def test_create_documents_with_conflict(edge_manager, stub_connection):
    stub_connection.queue(
        json_response(201, {"edge": meta_body("e1", collection="knows")}),
        json_response(409, CONFLICT),
    )

    result = await edge_manager.create_documents([
        {"_key": "e1", "_from": "persons/a", "_to": "persons/b"},
        {"_key": "e1", "_from": "persons/a", "_to": "persons/c"},
    ])

    assert_correlated(result, 2)
    assert result.metas[0].key == "e1"
    assert result.errors[0] is None
    assert isinstance(result.errors[1], ConflictError)
    assert result.metas[1] == DocumentMeta()
    assert result.status is OperationStatus.PARTIAL
    assert stub_connection.request_count == 2


@pytest.mark.asyncio
async def test_create_documents_all_succeed(collection_manager, stub_connection):
    stub_connection.handler = lambda request: json_response(
        202, meta_body(json.loads(request.body)["_key"])
    )

    result = await collection_manager.create_documents(({"_key": "a"}, {"_key": "b"}, {"_key": "c"}))

    assert [meta.key for meta in result.metas] == ["a", "b", "c"]
    assert result.errors == [None, None, None]
    assert result.status is OperationStatus.SUCCESS
    assert result.success_rate == 100.0
    result.raise_for_failures()


@pytest.mark.asyncio
async def test_create_documents_records_nil_document(collection_manager, stub_connection):
    stub_connection.handler = lambda request: json_response(201, meta_body("a"))

    result = await collection_manager.create_documents([{"_key": "a"}, None])

    assert_correlated(result, 2)
    assert isinstance(result.errors[1], InvalidArgumentError)
    assert stub_connection.request_count == 1


@pytest.mark.asyncio
async def test_create_documents_rejects_non_list(collection_manager, stub_connection):
    with pytest.raises(InvalidArgumentError):
        await collection_manager.create_documents({"_key": "a"})
    with pytest.raises(InvalidArgumentError):
        await collection_manager.create_documents("ab")
    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_empty_batch(collection_manager, stub_connection):
    result = await collection_manager.create_documents([])

    assert result.metas == []
    assert result.errors == []
    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_max_batch_size(stub_connection):
    manager = DocumentManager.for_collection(
        stub_connection, "_system", "users", config=DocumentOperationConfig(max_batch_size=2)
    )

    with pytest.raises(InvalidArgumentError, match="exceeds"):
        await manager.create_documents([{}, {}, {}])
    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_update_documents_extracts_keys(collection_manager, stub_connection):
    stub_connection.handler = lambda request: json_response(200, meta_body(request.path.rsplit("/", 1)[1]))

    result = await collection_manager.update_documents(None, [{"_key": "x", "age": 1}])

    assert result.metas[0].key == "x"
    request = stub_connection.requests[0]
    assert request.method == "PATCH"
    assert request.path.endswith("/users/x")


@pytest.mark.asyncio
async def test_update_documents_records_key_extraction_failure(collection_manager, stub_connection):
    stub_connection.handler = lambda request: json_response(200, meta_body("x"))

    result = await collection_manager.update_documents(None, [{"age": 1}, {"_key": "x"}, 7])

    assert_correlated(result, 3)
    assert isinstance(result.errors[0], InvalidArgumentError)
    assert result.errors[1] is None
    assert isinstance(result.errors[2], InvalidArgumentError)
    assert stub_connection.request_count == 1


@pytest.mark.asyncio
async def test_update_documents_with_invalid_extracted_key(collection_manager, stub_connection):
    result = await collection_manager.update_documents(None, [{"_key": "a/b"}])

    assert isinstance(result.errors[0], InvalidKeyError)
    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_key_count_mismatch_sends_no_request(collection_manager, stub_connection):
    with pytest.raises(InvalidArgumentError, match="expected 2 keys, got 3"):
        await collection_manager.update_documents(["a", "b", "c"], [{}, {}])
    with pytest.raises(InvalidArgumentError):
        await collection_manager.replace_documents(["a"], [{}, {}])

    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_invalid_explicit_key_sends_no_request(collection_manager, stub_connection):
    with pytest.raises(InvalidKeyError):
        await collection_manager.update_documents(["a", "bad key"], [{}, {}])
    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_replace_documents_with_explicit_keys(collection_manager, stub_connection):
    stub_connection.handler = lambda request: json_response(201, meta_body(request.path.rsplit("/", 1)[1]))

    result = await collection_manager.replace_documents(["a", "b"], [{"v": 1}, {"v": 2}])

    assert [meta.key for meta in result.metas] == ["a", "b"]
    assert [r.method for r in stub_connection.requests] == ["PUT", "PUT"]
    assert [json.loads(r.body) for r in stub_connection.requests] == [{"v": 1}, {"v": 2}]


@pytest.mark.asyncio
async def test_remove_documents_partial_failure(collection_manager, stub_connection):
    stub_connection.queue(
        json_response(200, meta_body("a")),
        json_response(404, {"error": True, "errorNum": 1202, "errorMessage": "document not found"}),
        json_response(202, meta_body("c")),
    )

    result = await collection_manager.remove_documents(["a", "ghost", "c"])

    assert_correlated(result, 3)
    assert isinstance(result.errors[1], NotFoundError)
    assert [r.method for r in stub_connection.requests] == ["DELETE"] * 3

    with pytest.raises(BatchPartialFailureError) as exc_info:
        result.raise_for_failures()
    assert exc_info.value.failed_indices == [1]
    assert exc_info.value.successful_count == 2


@pytest.mark.asyncio
async def test_remove_documents_rejects_non_list(collection_manager, stub_connection):
    with pytest.raises(InvalidArgumentError):
        await collection_manager.remove_documents("abc")
    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_silent_batch_collapses(collection_manager, stub_connection):
    stub_connection.queue(json_response(202), json_response(409, CONFLICT))

    result = await collection_manager.create_documents(
        [{"_key": "a"}, {"_key": "a"}], options=[with_silent()]
    )

    assert result is None
    assert stub_connection.request_count == 2
    assert all(r.query == {"silent": "true"} for r in stub_connection.requests)


@pytest.mark.asyncio
async def test_list_sinks_receive_per_item_payloads(collection_manager, stub_connection):
    stub_connection.queue(
        json_response(200, dict(meta_body("a"), old={"v": 1}, new={"v": 2})),
        json_response(404, {"error": True, "errorNum": 1202}),
    )

    old_docs = [None, None]
    new_docs = [PayloadSink(), PayloadSink()]
    result = await collection_manager.update_documents(
        ["a", "b"], [{"v": 2}, {"v": 3}], options=[with_return_old(old_docs), with_return_new(new_docs)]
    )

    assert result.errors[0] is None
    assert old_docs == [{"v": 1}, None]
    assert new_docs[0].value == {"v": 2}
    assert not new_docs[1].received


@pytest.mark.asyncio
async def test_list_sink_length_mismatch(collection_manager, stub_connection):
    with pytest.raises(InvalidArgumentError, match="List sink"):
        await collection_manager.create_documents([{}, {}], options=[with_return_new([None])])
    assert stub_connection.request_count == 0


@pytest.mark.asyncio
async def test_batch_records_timing(collection_manager, stub_connection):
    stub_connection.handler = lambda request: json_response(201, meta_body("a"))

    await collection_manager.create_documents([{"_key": "a"}])

    stats = collection_manager.get_operation_stats("create_documents")
    assert stats.total_operations == 1
    history = collection_manager.get_timing_history()
    assert history[0].metadata["item_count"] == 1
    assert history[0].metadata["failed_count"] == 0


@pytest.mark.asyncio
async def test_cancellation_abandons_remaining_items():
    calls = []

    class CancellingConnection(StubConnection):
        async def do(self, request):
            calls.append(request)
            if len(calls) == 2:
                raise asyncio.CancelledError()
            return json_response(201, meta_body("a"))

    manager = DocumentManager.for_collection(CancellingConnection(), "_system", "users")

    with pytest.raises(asyncio.CancelledError):
        await manager.create_documents([{"_key": "a"}, {"_key": "b"}, {"_key": "c"}])
    assert len(calls) == 2
