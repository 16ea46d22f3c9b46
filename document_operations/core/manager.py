"""
Core Document Manager

Provides the primary interface for document operations on one collection:
reading, creating, updating, replacing and removing single documents, and
applying the same operations to ordered batches of documents with per-item
result correlation.

Typical usage from external projects:

    from document_operations import DocumentManager, PayloadSink, with_return_new

    manager = DocumentManager.for_collection(connection, "_system", "users")

    new_doc = PayloadSink()
    meta = await manager.create_document({"_key": "alice", "age": 31},
                                         options=[with_return_new(new_doc)])

    result = await manager.update_documents(None, [{"_key": "alice", "age": 32}])
    for meta, error in zip(result.metas, result.errors):
        ...
"""

import logging
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple
from urllib.parse import quote

from arango_ops_exceptions import ArangoOpsError, DecodeError, InvalidArgumentError
from connection_management.connection import Connection, Request, Response
from document_operations.document_ops_config import DocumentOperationConfig
from document_operations.core.context import ContextSettings, extract_context_settings
from document_operations.core.validator import extract_key, validate_key
from document_operations.models.entities import (
    BatchItemResult,
    BatchOperationResult,
    DocumentMeta,
)
from document_operations.models.sinks import PayloadSink, as_sink
from document_operations.utils.timing import OperationStats, OperationTiming, PerformanceTimer

logger = logging.getLogger(__name__)


class _Verb(NamedTuple):
    name: str
    method: str
    addresses_key: bool
    body_name: Optional[str]
    returns_old: bool
    returns_new: bool
    ok_primary: int
    ok_secondary: Optional[int]

    def accepted(self, settings: ContextSettings) -> Tuple[int, ...]:
        if self.ok_secondary is None:
            return (200, 201, 202)
        return settings.ok_status(self.ok_primary, self.ok_secondary)


_CREATE = _Verb("create", "POST", False, "document", False, True, 201, 202)
_UPDATE = _Verb("update", "PATCH", True, "update", True, True, 200, None)
_REPLACE = _Verb("replace", "PUT", True, "document", True, True, 201, 202)
_REMOVE = _Verb("remove", "DELETE", True, None, True, False, 200, 202)


class DocumentManager:
    """
    Asynchronous document operations for a single collection.

    Single-document methods return DocumentMeta and raise on failure.
    Batch methods return a BatchOperationResult with one entry per input
    item, or None when the call ran in silent mode. Batch methods raise only
    for structural problems detected before any request is sent.

    Items of a batch are processed one after the other in input order.
    """

    def __init__(
        self,
        connection: Connection,
        collection_path: str,
        collection_name: str,
        envelope: str = "",
        config: Optional[DocumentOperationConfig] = None
    ):
        """
        Initialize DocumentManager with injected dependencies.

        Args:
            connection: Transport used for every request
            collection_path: Path of the collection's document endpoint,
                             relative to the server endpoint
            collection_name: Collection name, used in log messages
            envelope: Name of the response field holding the document
                      ("edge", "vertex"), or "" when it is the whole body
            config: Manager configuration. If None, uses default settings.
        """
        self._connection = connection
        self._path = collection_path.strip("/")
        self._collection_name = collection_name
        self._envelope = envelope
        self._config = config or DocumentOperationConfig()
        self._timer = PerformanceTimer(enabled=self._config.enable_timing)

        logger.debug(
            f"DocumentManager initialized for '{collection_name}' at /{self._path} "
            f"(envelope={envelope or '<body>'})"
        )

    @classmethod
    def for_collection(
        cls,
        connection: Connection,
        database: str,
        collection_name: str,
        config: Optional[DocumentOperationConfig] = None
    ) -> "DocumentManager":
        """Manager for a plain document collection."""
        path = f"_db/{_escape(database)}/_api/document/{_escape(collection_name)}"
        return cls(connection, path, collection_name, envelope="", config=config)

    @classmethod
    def for_edge_collection(
        cls,
        connection: Connection,
        database: str,
        graph_name: str,
        collection_name: str,
        config: Optional[DocumentOperationConfig] = None
    ) -> "DocumentManager":
        """Manager for an edge collection of a named graph."""
        path = (
            f"_db/{_escape(database)}/_api/gharial/{_escape(graph_name)}"
            f"/edge/{_escape(collection_name)}"
        )
        return cls(connection, path, collection_name, envelope="edge", config=config)

    @classmethod
    def for_vertex_collection(
        cls,
        connection: Connection,
        database: str,
        graph_name: str,
        collection_name: str,
        config: Optional[DocumentOperationConfig] = None
    ) -> "DocumentManager":
        """Manager for a vertex collection of a named graph."""
        path = (
            f"_db/{_escape(database)}/_api/gharial/{_escape(graph_name)}"
            f"/vertex/{_escape(collection_name)}"
        )
        return cls(connection, path, collection_name, envelope="vertex", config=config)

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def collection_path(self) -> str:
        return self._path

    @property
    def envelope(self) -> str:
        return self._envelope

    # ------------------------------------------------------------------
    # Single documents
    # ------------------------------------------------------------------

    async def read_document(self, key: str, result: Any = None) -> DocumentMeta:
        """
        Read a single document.

        Args:
            key: Key of the document
            result: Optional sink (PayloadSink or dict) receiving the document

        Returns:
            Metadata of the document

        Raises:
            InvalidKeyError: If key is malformed
            NotFoundError: If no document exists with this key
            DecodeError: If the response cannot be decoded. When only the
                         result could not be decoded, the error's meta holds
                         the document metadata.
        """
        validate_key(key)
        sink = as_sink(result) if result is not None else None
        if isinstance(sink, list):
            raise InvalidArgumentError("A list can only be used as sink of a batch operation")

        request = self._connection.new_request("GET", self._document_path(key))
        logger.debug(f"[read_document] GET /{request.path}")
        response = await self._connection.do(request)
        response.check_status(200)

        meta = self._parse_meta(response)
        if sink is not None:
            try:
                response.parse_body(self._envelope, sink)
            except DecodeError as e:
                e.meta = meta
                raise
        return meta

    async def create_document(self, document: Any, options: Optional[Sequence[Any]] = None) -> DocumentMeta:
        """
        Create a single document.

        A "_key" in the document is used as key of the new document, otherwise
        the server generates one. Pass with_return_new() to receive the stored
        document and with_overwrite_mode() to control key collisions.

        Raises:
            InvalidArgumentError: If document is None
            ConflictError: If the key already exists or a unique index is violated
            DecodeError: If the response cannot be decoded
        """
        return await self._execute(_CREATE, None, document, self._settings(options))

    async def update_document(self, key: str, update: Any, options: Optional[Sequence[Any]] = None) -> DocumentMeta:
        """
        Partially update a single document.

        Pass with_return_old() / with_return_new() to receive the document
        before / after the update.

        Raises:
            InvalidKeyError: If key is malformed
            InvalidArgumentError: If update is None
            NotFoundError: If no document exists with this key
            DecodeError: If the response cannot be decoded
        """
        return await self._execute(_UPDATE, key, update, self._settings(options))

    async def replace_document(self, key: str, document: Any, options: Optional[Sequence[Any]] = None) -> DocumentMeta:
        """
        Replace a single document.

        Raises:
            InvalidKeyError: If key is malformed
            InvalidArgumentError: If document is None
            NotFoundError: If no document exists with this key
            DecodeError: If the response cannot be decoded
        """
        return await self._execute(_REPLACE, key, document, self._settings(options))

    async def remove_document(self, key: str, options: Optional[Sequence[Any]] = None) -> DocumentMeta:
        """
        Remove a single document.

        Pass with_return_old() to receive the removed document.

        Raises:
            InvalidKeyError: If key is malformed
            NotFoundError: If no document exists with this key
            DecodeError: If the response cannot be decoded
        """
        return await self._execute(_REMOVE, key, None, self._settings(options))

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def create_documents(
        self,
        documents: Sequence[Any],
        options: Optional[Sequence[Any]] = None
    ) -> Optional[BatchOperationResult]:
        """
        Create multiple documents.

        A failing document (for example a ConflictError on a duplicate key) is
        recorded at its index and does not stop the others. Sinks passed as
        lists to with_return_new() must have one slot per document.

        Returns:
            Per-item results in input order, or None in silent mode

        Raises:
            InvalidArgumentError: If documents is not a list or tuple, or a list
                                  sink has the wrong length. No request is sent.
        """
        return await self._run_batch(_CREATE, "create_documents", None, documents, options)

    async def update_documents(
        self,
        keys: Optional[Sequence[str]],
        updates: Sequence[Any],
        options: Optional[Sequence[Any]] = None
    ) -> Optional[BatchOperationResult]:
        """
        Update multiple documents.

        When keys is None the key of every update is taken from the update
        itself (see extract_key); an update without a usable key is recorded
        as a failure at its index and no request is sent for it.

        Returns:
            Per-item results in input order, or None in silent mode

        Raises:
            InvalidArgumentError: If updates is not a list or tuple, the number
                                  of keys differs from the number of updates or
                                  a list sink has the wrong length
            InvalidKeyError: If any explicit key is malformed
        """
        return await self._run_batch(_UPDATE, "update_documents", keys, updates, options)

    async def replace_documents(
        self,
        keys: Optional[Sequence[str]],
        documents: Sequence[Any],
        options: Optional[Sequence[Any]] = None
    ) -> Optional[BatchOperationResult]:
        """
        Replace multiple documents. Keys follow the same rules as update_documents().

        Returns:
            Per-item results in input order, or None in silent mode
        """
        return await self._run_batch(_REPLACE, "replace_documents", keys, documents, options)

    async def remove_documents(
        self,
        keys: Sequence[str],
        options: Optional[Sequence[Any]] = None
    ) -> Optional[BatchOperationResult]:
        """
        Remove multiple documents.

        Returns:
            Per-item results in input order, or None in silent mode

        Raises:
            InvalidArgumentError: If keys is not a list or tuple
            InvalidKeyError: If any key is malformed. No request is sent.
        """
        _require_sequence(keys, "keys")
        return await self._run_batch(_REMOVE, "remove_documents", keys, [None] * len(keys), options)

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def get_timing_history(self) -> List[OperationTiming]:
        return self._timer.get_timing_history()

    def get_operation_stats(self, operation_name: str) -> Optional[OperationStats]:
        return self._timer.get_operation_stats(operation_name)

    def clear_timing_history(self) -> None:
        self._timer.clear_history()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _settings(self, options: Optional[Sequence[Any]]) -> ContextSettings:
        return extract_context_settings(options, self._config.default_wait_for_sync)

    def _document_path(self, key: str) -> str:
        return f"{self._path}/{_escape(key)}"

    def _parse_meta(self, response: Response) -> DocumentMeta:
        meta_sink = PayloadSink(DocumentMeta)
        response.parse_body(self._envelope, meta_sink)
        return meta_sink.value

    def _prepare(self, verb: _Verb, key: Optional[str], body: Any, settings: ContextSettings) -> Request:
        """Validate the inputs of one operation and build its request."""
        if verb.addresses_key:
            validate_key(key)
        if verb.body_name is not None and body is None:
            raise InvalidArgumentError(f"{verb.body_name} nil")
        if settings.has_list_sink:
            raise InvalidArgumentError("A list can only be used as sink of a batch operation")

        path = self._document_path(key) if verb.addresses_key else self._path
        request = self._connection.new_request(verb.method, path)
        if verb.body_name is not None:
            request.set_body(body)
        settings.apply_to(request)
        return request

    async def _exchange(self, verb: _Verb, request: Request, settings: ContextSettings) -> DocumentMeta:
        """Send a prepared request and decode its response."""
        logger.debug(f"[{verb.name}] {request.method} /{request.path} params={request.query}")
        response = await self._connection.do(request)
        response.check_status(*verb.accepted(settings))

        if settings.silent:
            return DocumentMeta()

        meta = self._parse_meta(response)
        try:
            if verb.returns_old and settings.return_old is not None:
                response.parse_body("old", settings.return_old)
            if verb.returns_new and settings.return_new is not None:
                response.parse_body("new", settings.return_new)
        except DecodeError as e:
            e.meta = meta
            raise
        return meta

    async def _execute(self, verb: _Verb, key: Optional[str], body: Any, settings: ContextSettings) -> DocumentMeta:
        request = self._prepare(verb, key, body, settings)
        return await self._exchange(verb, request, settings)

    async def _run_batch(
        self,
        verb: _Verb,
        operation_name: str,
        keys: Optional[Sequence[str]],
        items: Sequence[Any],
        options: Optional[Sequence[Any]]
    ) -> Optional[BatchOperationResult]:
        _require_sequence(items, "documents" if verb.body_name == "document" else "updates")
        count = len(items)
        self._config.check_batch_size(count)

        if keys is not None:
            _require_sequence(keys, "keys")
            if len(keys) != count:
                raise InvalidArgumentError(f"expected {count} keys, got {len(keys)}")
            for key in keys:
                validate_key(key)

        settings = self._settings(options)
        for sink in (settings.return_old, settings.return_new):
            if isinstance(sink, list) and len(sink) != count:
                raise InvalidArgumentError(
                    f"List sink must have {count} entries, got {len(sink)}"
                )

        results: List[BatchItemResult] = []
        silent = False

        async with self._timer.time_operation(
            operation_name=operation_name,
            metadata={"collection_name": self._collection_name, "item_count": count}
        ) as timing:
            for index, item in enumerate(items):
                item_settings = settings.for_item(index)
                try:
                    if keys is not None:
                        key = keys[index]
                    elif verb.addresses_key:
                        key = extract_key(item)
                    else:
                        key = None
                    request = self._prepare(verb, key, item, item_settings)
                except ArangoOpsError as e:
                    logger.warning(f"[{operation_name}] Item {index} rejected: {e}")
                    results.append(BatchItemResult.failure(index, e))
                    continue

                if item_settings.silent:
                    silent = True

                try:
                    meta = await self._exchange(verb, request, item_settings)
                except ArangoOpsError as e:
                    logger.warning(f"[{operation_name}] Item {index} failed: {e}")
                    results.append(BatchItemResult.failure(index, e))
                else:
                    results.append(BatchItemResult.success(index, meta))

            if silent:
                logger.info(
                    f"[{operation_name}] Processed {count} documents in collection "
                    f"'{self._collection_name}' (silent)"
                )
                return None

            result = BatchOperationResult(operation=operation_name, items=results)
            timing.metadata["failed_count"] = result.failed_count
            logger.info(
                f"[{operation_name}] {result.successful_count}/{count} documents succeeded "
                f"in collection '{self._collection_name}'"
            )
            return result


def _escape(segment: str) -> str:
    """Percent-encode a path segment, including '/'."""
    return quote(segment, safe="")


def _require_sequence(value: Any, name: str) -> None:
    if not isinstance(value, (list, tuple)):
        raise InvalidArgumentError(
            f"{name} data must be a list or tuple, got {type(value).__name__}"
        )
