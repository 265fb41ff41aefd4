"""
Unit Tests for Core Exceptions

Tests for the RedisManagerError hierarchy.
"""

import pytest
from redis.exceptions import ResponseError

from redis_web_manager.core.exceptions import (
    BackendCommandError,
    BackendUnreachableError,
    ConnectionNotFoundError,
    ConnectionRegistryError,
    KeyRequiredError,
    ProfileStoreError,
    RedisManagerError,
    ValidationError,
)

@pytest.mark.unit
class TestRedisManagerError:
    """Test the base exception class."""

    def test_base_error_creation(self):
        error = RedisManagerError("Test message")
        assert str(error) == "Test message"
        assert error.message == "Test message"
        assert error.details == {}

    def test_details_are_copied(self):
        details = {"key": "value"}
        error = RedisManagerError("Test", details=details)
        details["key"] = "changed"

        assert error.details == {"key": "value"}

    def test_to_dict(self):
        error = BackendCommandError("WRONGTYPE", details={"key": "k"})

        assert error.to_dict() == {
            "error_type": "BackendCommandError",
            "message": "WRONGTYPE",
            "details": {"key": "k"},
        }

    def test_from_exception_wraps_original(self):
        original = ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")
        error = BackendCommandError.from_exception(original, key="user:1")

        assert isinstance(error, BackendCommandError)
        assert error.message == str(original)
        assert error.details["original_error"] == "ResponseError"
        assert error.details["key"] == "user:1"

    def test_repr_includes_details(self):
        error = RedisManagerError("Test", details={"a": 1})
        assert "details=" in repr(error)

@pytest.mark.unit
class TestExceptionHierarchy:
    def test_connection_errors_share_base(self):
        assert issubclass(ConnectionNotFoundError, ConnectionRegistryError)
        assert issubclass(BackendUnreachableError, ConnectionRegistryError)
        assert issubclass(ConnectionRegistryError, RedisManagerError)

    def test_every_error_is_a_redis_manager_error(self):
        for cls in (BackendCommandError, ProfileStoreError, ValidationError, KeyRequiredError):
            assert issubclass(cls, RedisManagerError)

@pytest.mark.unit
class TestValidationErrors:
    def test_field_recorded_in_details(self):
        error = ValidationError("Members must be a string array", field="members")

        assert error.details == {"field": "members"}

    def test_key_required_defaults(self):
        error = KeyRequiredError()

        assert error.message == "Key is required"
        assert error.details["field"] == "key"
        assert isinstance(error, ValidationError)
