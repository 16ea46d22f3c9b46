"""
Index Accessor

Wraps an index descriptor fetched from the server with typed accessors and
remote removal.

Typical usage from external projects:

    from index_operations import Index

    index = Index.from_descriptor(raw_descriptor, connection, "_system")
    print(index.name, index.type, index.fields)
    await index.remove()
"""

import logging
from typing import Any, List, Mapping, Union
from urllib.parse import quote

from pydantic import ValidationError

from arango_ops_exceptions import InvalidArgumentError
from connection_management.connection import Connection
from index_operations.models.entities import IndexDescriptor, IndexType

logger = logging.getLogger(__name__)


class Index:
    """
    A single index of a single collection.

    Instances are never mutated. remove() deletes the index on the server and
    leaves this object unchanged.
    """

    def __init__(self, descriptor: IndexDescriptor, connection: Connection, database: str):
        if connection is None:
            raise InvalidArgumentError("connection is nil")
        self._descriptor = descriptor
        self._connection = connection
        self._database = database

    @classmethod
    def from_descriptor(
        cls,
        data: Union[IndexDescriptor, Mapping[str, Any]],
        connection: Connection,
        database: str
    ) -> "Index":
        """
        Build an Index from a server-provided descriptor.

        Raises:
            InvalidArgumentError: If the id is empty or not of the form
                                  "collection/name", or the type is unknown
        """
        if isinstance(data, IndexDescriptor):
            return cls(data, connection, database)
        try:
            descriptor = IndexDescriptor.model_validate(data)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise InvalidArgumentError(f"Invalid index descriptor: {messages}") from e
        return cls(descriptor, connection, database)

    @property
    def descriptor(self) -> IndexDescriptor:
        return self._descriptor

    @property
    def id(self) -> str:
        return self._descriptor.id

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def collection_name(self) -> str:
        return self._descriptor.collection_name

    @property
    def type(self) -> IndexType:
        return self._descriptor.type

    @property
    def fields(self) -> List[str]:
        return list(self._descriptor.fields)

    @property
    def is_unique(self) -> bool:
        return bool(self._descriptor.unique)

    @property
    def is_sparse(self) -> bool:
        return bool(self._descriptor.sparse)

    @property
    def is_deduplicate(self) -> bool:
        return bool(self._descriptor.deduplicate)

    @property
    def is_geo_json(self) -> bool:
        """GeoJSON flag of a geo index; False for every other type."""
        return bool(self._descriptor.geo_json)

    @property
    def min_length(self) -> int:
        """Minimum word length of a fulltext index; 0 for every other type."""
        return self._descriptor.min_length

    async def remove(self) -> None:
        """
        Remove the index from the server.

        Raises:
            NotFoundError: If the index does not exist
        """
        collection, name = self.id.split("/")
        path = (
            f"_db/{quote(self._database, safe='')}/_api/index/"
            f"{quote(collection, safe='')}/{quote(name, safe='')}"
        )
        request = self._connection.new_request("DELETE", path)
        response = await self._connection.do(request)
        response.check_status(200)
        logger.info(f"[remove] Index '{self.id}' removed")

    def __repr__(self) -> str:
        return f"Index(id={self.id!r}, type={self.type.value!r}, fields={self.fields!r})"
