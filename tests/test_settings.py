"""Tests for settings loading and the client facade."""

import logging

import pytest
import yaml

from arango_ops_exceptions import ConfigurationError
from client import ArangoClient
from config import ArangoSettings, load_settings
from conftest import StubConnection, json_response, meta_body
from document_operations import DocumentOperationConfig


def test_defaults():
    settings = ArangoSettings()

    assert settings.connection.endpoint == "http://localhost:8529"
    assert settings.connection.database == "_system"
    assert settings.documents.default_wait_for_sync is None
    assert settings.monitoring.log_level == "INFO"


def test_load_from_yaml(tmp_path):
    path = tmp_path / "arango.yaml"
    path.write_text(yaml.safe_dump({
        "connection": {"endpoint": "http://db:8529", "database": "shop", "retry_count": 5},
        "documents": {"default_wait_for_sync": True},
    }))

    settings = load_settings(str(path))

    assert settings.connection.endpoint == "http://db:8529"
    assert settings.connection.database == "shop"
    assert settings.connection.retry_count == 5
    assert settings.documents.default_wait_for_sync is True


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "out.yaml"
    settings = ArangoSettings()
    settings.connection.database = "shop"

    settings.to_yaml(path)

    assert ArangoSettings.from_yaml(path).connection.database == "shop"


def test_missing_file_falls_back_to_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "missing.yaml"))
    assert settings.connection.database == "_system"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ARANGO_CONNECTION__DATABASE", "from_env")
    assert ArangoSettings().connection.database == "from_env"


def test_document_config_from_dict():
    config = DocumentOperationConfig.from_dict({"default_wait_for_sync": False, "unknown": 1})

    assert config.default_wait_for_sync is False
    assert config.to_dict()["max_batch_size"] == 0


def test_document_config_rejects_negative_batch_size():
    with pytest.raises(ValueError):
        DocumentOperationConfig(max_batch_size=-1)


def test_client_rejects_invalid_config():
    with pytest.raises(ConfigurationError):
        ArangoClient(config=42)


def test_client_rejects_unknown_log_level():
    settings = ArangoSettings()
    settings.monitoring.log_level = "LOUD"
    with pytest.raises(ConfigurationError):
        ArangoClient(config=settings, connection=StubConnection())


def test_client_applies_log_level():
    settings = ArangoSettings()
    settings.monitoring.log_level = "debug"

    ArangoClient(config=settings, connection=StubConnection())

    assert logging.getLogger("document_operations").level == logging.DEBUG


@pytest.mark.asyncio
async def test_client_builds_managers_for_default_database():
    settings = ArangoSettings()
    settings.connection.database = "shop"
    settings.documents.default_wait_for_sync = True
    connection = StubConnection().queue(json_response(201, meta_body("a")))

    async with ArangoClient(config=settings, connection=connection) as client:
        users = client.collection("users")
        await users.create_document({"_key": "a"})
        knows = client.edge_collection("social", "knows", database="other")
        index = client.index({"id": "users/1", "type": "persistent", "fields": ["a"]})

    assert connection.requests[0].path == "_db/shop/_api/document/users"
    assert connection.requests[0].query == {"waitForSync": "true"}
    assert knows.collection_path == "_db/other/_api/gharial/social/edge/knows"
    assert index.collection_name == "users"
    assert connection.closed
