"""
Request Body Models - Educational Documentation
================================================

WHY ARE THESE MODELS PERMISSIVE?
--------------------------------
Every field is typed `Any` and optional. FastAPI would otherwise reject a
wrong shape (e.g. `"members": "a"` instead of `["a"]`) with a generic 422
before our code runs. Keeping the models permissive lets the keyspace
validators raise a ValidationError with a precise message ("Members must be
a string array") that the client can show to the operator as-is.

The models still give us:
- camelCase aliases matching the browser client (`connectionId`, `previewLimit`)
- OpenAPI documentation of every accepted field
- one place that turns (connectionId, db) into a SessionTarget

Unknown fields are ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from redis_web_manager.core.exceptions import ValidationError
from redis_web_manager.keyspace.models import SessionTarget
from redis_web_manager.keyspace.validators import parse_db

__all__ = [
    "ConnectionProfileRequest",
    "ConnectionScopedRequest",
    "HashFieldRequest",
    "HllElementsRequest",
    "HllMergeRequest",
    "KeyRequest",
    "KeysRequest",
    "ListIndexRequest",
    "ListPushRequest",
    "ListRemoveRequest",
    "RenameRequest",
    "SetMembersRequest",
    "SetValueRequest",
    "ValueRequest",
]

# ============================================================================
# BASE MODELS
# ============================================================================


class PermissiveModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ConnectionScopedRequest(PermissiveModel):
    """Base for every business request: which connection, which database."""

    connection_id: Any = Field(default=None, alias="connectionId")
    db: Any = Field(default=None, description="Database override (non-negative integer)")

    def target(self) -> SessionTarget:
        """
        Raises:
            ValidationError: missing connection id or malformed db index
        """
        if not isinstance(self.connection_id, str) or not self.connection_id:
            raise ValidationError("Connection ID is required", field="connectionId")
        return SessionTarget(connection_id=self.connection_id, db=parse_db(self.db))


class KeyRequest(ConnectionScopedRequest):
    key: Any = None


# ============================================================================
# CONNECTIONS
# ============================================================================


class ConnectionProfileRequest(PermissiveModel):
    """Create / update body. On update an omitted password keeps the saved one."""

    name: Any = None
    host: Any = None
    port: Any = None
    password: Any = None
    db: Any = None


# ============================================================================
# BROWSING
# ============================================================================


class KeysRequest(ConnectionScopedRequest):
    pattern: Any = Field(default="*", description="SCAN MATCH pattern")


class ValueRequest(KeyRequest):
    preview_limit: Any = Field(default=None, alias="previewLimit")
    cursor: Any = Field(default="0", description="Hash/set resume token")
    start: Any = Field(default=0, description="List window offset")


# ============================================================================
# MUTATIONS
# ============================================================================


class SetValueRequest(KeyRequest):
    type: Any = None
    value: Any = None
    ttl: Any = None


class RenameRequest(ConnectionScopedRequest):
    old_key: Any = Field(default=None, alias="oldKey")
    new_key: Any = Field(default=None, alias="newKey")


class HashFieldRequest(KeyRequest):
    field: Any = None
    value: Any = None
    ttl: Any = None


class ListPushRequest(KeyRequest):
    values: Any = None
    direction: Any = "right"
    ttl: Any = None


class ListIndexRequest(KeyRequest):
    index: Any = None
    value: Any = None


class ListRemoveRequest(KeyRequest):
    value: Any = None
    count: Any = 0


class SetMembersRequest(KeyRequest):
    members: Any = None
    ttl: Any = None


class HllElementsRequest(KeyRequest):
    elements: Any = None
    ttl: Any = None


class HllMergeRequest(ConnectionScopedRequest):
    destination_key: Any = Field(default=None, alias="destinationKey")
    source_keys: Any = Field(default=None, alias="sourceKeys")
    ttl: Any = None
