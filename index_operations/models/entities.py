"""
Index Entities

Pydantic models for index descriptors as returned by the server.

Typical usage:
    from index_operations import IndexDescriptor, IndexType

    descriptor = IndexDescriptor.model_validate(
        {"id": "users/123", "type": "hash", "fields": ["email"], "unique": True}
    )
    if descriptor.type == IndexType.HASH:
        print(descriptor.fields)
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class IndexType(str, Enum):
    """
    Enumeration of index types.

    The server reports geo indexes as "geo", "geo1" or "geo2"; all three are
    read as GEO.
    """
    PRIMARY = "primary"
    FULLTEXT = "fulltext"
    HASH = "hash"
    SKIPLIST = "skiplist"
    PERSISTENT = "persistent"
    GEO = "geo"


_TYPE_ALIASES = {"geo1": IndexType.GEO, "geo2": IndexType.GEO}


class IndexDescriptor(BaseModel):
    """
    Read-only description of one index.

    Attributes:
        id: Index id of the form "<collection>/<name>"
        type: Index type
        fields: Names of the fields covered by the index
        unique: Whether the index is unique (hash, skiplist, persistent)
        sparse: Whether the index is sparse (hash, skiplist, persistent)
        deduplicate: Whether array values are deduplicated (hash, skiplist)
        geo_json: Whether coordinates are read as [longitude, latitude] (geo)
        min_length: Minimum word length indexed (fulltext)
    """
    id: str
    type: IndexType
    fields: List[str] = Field(default_factory=list)
    unique: Optional[bool] = None
    sparse: Optional[bool] = None
    deduplicate: Optional[bool] = None
    geo_json: Optional[bool] = Field(None, alias="geoJson")
    min_length: int = Field(0, alias="minLength")

    class Config:
        populate_by_name = True
        frozen = True
        extra = "ignore"

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v:
            raise ValueError("id is empty")
        parts = v.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError("id must be `collection/name`")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return _TYPE_ALIASES.get(v, v)
        return v

    @property
    def collection_name(self) -> str:
        return self.id.split("/")[0]

    @property
    def name(self) -> str:
        return self.id.split("/")[1]
