"""
Arango Client

This module provides the main client interface, wiring settings, the HTTP
connection and the document and index operation modules together.
"""

from typing import Any, Mapping, Optional, Union
import logging
from pathlib import Path

from config import ArangoSettings, load_settings
from arango_ops_exceptions import ConfigurationError
from connection_management import Connection, HTTPConnection
from document_operations import DocumentManager, DocumentOperationConfig
from index_operations import Index, IndexDescriptor

# Logger setup
logger = logging.getLogger(__name__)

_PACKAGE_LOGGERS = (
    "client",
    "connection_management",
    "document_operations",
    "index_operations",
)


class ArangoClient:
    """
    Main client interface for document and index operations.

    Usage:
        async with ArangoClient("config.yaml") as client:
            users = client.collection("users")
            meta = await users.create_document({"_key": "alice"})
    """

    def __init__(
        self,
        config: Optional[Union[ArangoSettings, str, Path]] = None,
        connection: Optional[Connection] = None
    ):
        """
        Initialize the client.

        Args:
            config: Either an ArangoSettings object or a path to a config YAML file.
                   If None, default configuration will be used.
            connection: Transport to use instead of an HTTPConnection built
                        from the connection settings
        """
        # Load configuration
        if config is None:
            self.config = load_settings()
        elif isinstance(config, (str, Path)):
            self.config = load_settings(str(config))
        elif isinstance(config, ArangoSettings):
            self.config = config
        else:
            raise ConfigurationError("Invalid configuration type. Expected ArangoSettings, str, Path, or None.")

        self._configure_logging()

        self._connection = connection or HTTPConnection(self.config.connection)
        self._document_config = DocumentOperationConfig(
            default_wait_for_sync=self.config.documents.default_wait_for_sync,
            enable_timing=self.config.documents.enable_timing
        )

        logger.info(f"ArangoClient initialized (database '{self.config.connection.database}')")

    def _configure_logging(self) -> None:
        level = logging.getLevelName(self.config.monitoring.log_level.upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown log level '{self.config.monitoring.log_level}'")
        for name in _PACKAGE_LOGGERS:
            logging.getLogger(name).setLevel(level)

    @property
    def connection(self) -> Connection:
        return self._connection

    def _database(self, database: Optional[str]) -> str:
        return database or self.config.connection.database

    def collection(self, name: str, database: Optional[str] = None) -> DocumentManager:
        """Document operations on a plain collection."""
        return DocumentManager.for_collection(
            self._connection, self._database(database), name, config=self._document_config
        )

    def edge_collection(self, graph_name: str, name: str, database: Optional[str] = None) -> DocumentManager:
        """Document operations on an edge collection of a named graph."""
        return DocumentManager.for_edge_collection(
            self._connection, self._database(database), graph_name, name, config=self._document_config
        )

    def vertex_collection(self, graph_name: str, name: str, database: Optional[str] = None) -> DocumentManager:
        """Document operations on a vertex collection of a named graph."""
        return DocumentManager.for_vertex_collection(
            self._connection, self._database(database), graph_name, name, config=self._document_config
        )

    def index(
        self,
        descriptor: Union[IndexDescriptor, Mapping[str, Any]],
        database: Optional[str] = None
    ) -> Index:
        """Wrap a server-provided index descriptor."""
        return Index.from_descriptor(descriptor, self._connection, self._database(database))

    async def close(self) -> None:
        """Close the client and release all resources"""
        await self._connection.aclose()
        logger.info("ArangoClient connection closed")

    async def __aenter__(self) -> "ArangoClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
