"""
Pydantic Settings for Arango Operations

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import Optional, Union
from pathlib import Path
import os

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_yaml import to_yaml_file


class ConnectionSettings(BaseSettings):
    """
    Connection settings for reaching the database server over HTTP.

    These settings control how the transport talks to the server, including:
    - Server endpoint and the database addressed by relative paths
    - Basic authentication credentials
    - Request timeout and TLS verification
    - Retry behavior for transport-level failures (connect/read errors)
    """
    endpoint: str = Field("http://localhost:8529",
                          description="Base URL of the database server")
    database: str = Field("_system",
                          description="Database used when a call does not name one")
    username: str = Field("root",
                          description="Username for basic authentication")
    password: str = Field("",
                          description="Password for basic authentication")
    timeout: float = Field(60.0,
                           description="Request timeout in seconds")
    verify_tls: bool = Field(True,
                             description="Whether to verify the server certificate for https endpoints")
    retry_count: int = Field(3,
                             description="Number of attempts for requests failing at the transport level")
    retry_interval: float = Field(0.5,
                                  description="Time in seconds to wait between transport retry attempts")

    class Config:
        env_prefix = "ARANGO_"
        case_sensitive = False


class DocumentSettings(BaseSettings):
    """
    Defaults for document operations.

    - default_wait_for_sync: applied when a call does not pass with_wait_for_sync;
      None leaves durability to the collection's own setting
    - enable_timing: whether batch operations are timed and recorded
    """
    default_wait_for_sync: Optional[bool] = Field(None,
                                                  description="Wait-for-sync value used when a call does not set one")
    enable_timing: bool = Field(True,
                                description="Whether to time batch operations")

    class Config:
        env_prefix = "ARANGO_DOCUMENT_"
        case_sensitive = False


class MonitoringSettings(BaseSettings):
    """
    Monitoring settings for the package loggers.
    """
    log_level: str = Field("INFO",
                           description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    class Config:
        env_prefix = "ARANGO_"
        case_sensitive = False


class ArangoSettings(BaseSettings):
    """
    Main settings class that consolidates all configuration categories.

    Usage:
        # Load from environment variables and defaults
        settings = ArangoSettings()

        # Load from YAML file
        settings = ArangoSettings.from_yaml('config.yaml')

        # Access nested settings
        endpoint = settings.connection.endpoint
        wait = settings.documents.default_wait_for_sync
    """
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings,
                                           description="Connection settings for the database server")
    documents: DocumentSettings = Field(default_factory=DocumentSettings,
                                        description="Document operation defaults")
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings,
                                           description="Logging settings")

    class Config:
        env_prefix = "ARANGO_"
        case_sensitive = False
        env_nested_delimiter = "__"

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "ArangoSettings":
        """Load settings from YAML file"""
        import yaml
        with open(yaml_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, yaml_file: Union[str, Path]) -> None:
        """Write settings to a YAML file that from_yaml can read back"""
        to_yaml_file(Path(yaml_file), self)


def load_settings(config_path: Optional[str] = None) -> ArangoSettings:
    """
    Load settings from file and/or environment variables.

    - If config_path is provided and exists, loads settings from the YAML file
    - Otherwise, creates a new settings instance with values from environment variables

    Args:
        config_path: Path to YAML configuration file. If None or file doesn't exist,
                    falls back to environment variables and default values.

    Returns:
        ArangoSettings object with loaded configuration
    """
    if config_path and os.path.exists(config_path):
        return ArangoSettings.from_yaml(config_path)
    return ArangoSettings()
