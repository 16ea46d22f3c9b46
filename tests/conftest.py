"""Shared fixtures for document and index operation tests.

StubConnection stands in for the HTTP transport: it records every request it
is given and answers from a scripted handler, so tests can assert both on the
decoded results and on exactly what was sent.
"""

import json
from typing import Any, Callable, List, Optional

import pytest

from connection_management.connection import Connection, Request, Response
from document_operations import DocumentManager


def json_response(status_code: int, body: Any = None) -> Response:
    """Response with a JSON body (or an empty body when body is None)."""
    content = b"" if body is None else json.dumps(body).encode("utf-8")
    return Response(status_code, content, {"Content-Type": "application/json"})


def meta_body(key: str, collection: str = "users", rev: str = "_rev1", **extra: Any) -> dict:
    body = {"_id": f"{collection}/{key}", "_key": key, "_rev": rev}
    body.update(extra)
    return body


class StubConnection(Connection):
    """Connection answering requests from a handler and recording them."""

    def __init__(self, handler: Optional[Callable[[Request], Response]] = None):
        self.handler = handler
        self.requests: List[Request] = []
        self.queued: List[Response] = []
        self.closed = False

    @property
    def request_count(self) -> int:
        return len(self.requests)

    def queue(self, *responses: Response) -> "StubConnection":
        self.queued.extend(responses)
        return self

    async def do(self, request: Request) -> Response:
        self.requests.append(request)
        if self.queued:
            return self.queued.pop(0)
        if self.handler is None:
            raise AssertionError(f"Unexpected request {request!r}")
        return self.handler(request)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def stub_connection() -> StubConnection:
    """Stub transport with no scripted responses."""
    return StubConnection()


@pytest.fixture
def collection_manager(stub_connection: StubConnection) -> DocumentManager:
    """Manager for the plain collection 'users' in database '_system'."""
    return DocumentManager.for_collection(stub_connection, "_system", "users")


@pytest.fixture
def edge_manager(stub_connection: StubConnection) -> DocumentManager:
    """Manager for the edge collection 'knows' of graph 'social'."""
    return DocumentManager.for_edge_collection(stub_connection, "_system", "social", "knows")
